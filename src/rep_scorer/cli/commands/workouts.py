"""Workout commands: log-set, summary."""

import json
from dataclasses import replace
from datetime import datetime, timezone
from typing import Annotated, Optional

import typer

from ...core.errors import STORE_ERROR_MESSAGES, WORKOUT_NOT_FOUND, describe_error
from ...core.exercises import UnknownExerciseError, parse
from ...core.feedback import classify
from ...core.models import Exercise, Workout
from ...core.rewards import calculate_summary, finalize_workout
from ...core.scoring import SetScorer, group_sets_by_exercise, overall_score_for
from ...io.codec import ValidationError, encode_workout
from .. import views
from ..app import ConfigOption, DataDirOption, JsonOption, app, get_scoring, get_store
from .scoring import ExerciseOption, read_set_readings, score_readings


@app.command("log-set")
def log_set(
    workout_id: Annotated[str, typer.Argument(help="Workout id (created on first use)")],
    rom: Annotated[
        str,
        typer.Option("--rom", "-r", help="Per-rep ROM readings, e.g. '60,80,100'"),
    ],
    x_tilt: Annotated[
        Optional[str],
        typer.Option("--x-tilt", "-x", help="Per-rep x-axis tilt magnitudes"),
    ] = None,
    z_tilt: Annotated[
        Optional[str],
        typer.Option("--z-tilt", "-z", help="Per-rep z-axis tilt magnitudes"),
    ] = None,
    exercise: ExerciseOption = "bench-press",
    weight: Annotated[
        float,
        typer.Option("--weight", "-w", help="Load in kg"),
    ] = 0.0,
    height_cm: Annotated[
        Optional[float],
        typer.Option("--height-cm", help="Treat ROM readings as cm and score them against this height"),
    ] = None,
    avg_rep_time: Annotated[
        float,
        typer.Option("--avg-rep-time", help="Average seconds per rep"),
    ] = 0.0,
    vertical_accel: Annotated[
        float,
        typer.Option("--vertical-accel", help="Peak vertical acceleration for the set"),
    ] = 0.0,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Workout name (used when the workout is new)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Free-text notes for the set"),
    ] = None,
    data_dir: DataDirOption = None,
    config_path: ConfigOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Score a set and record it under a workout.

    The workout's exercise / set counts and overall score are recomputed
    after every logged set.
    """
    if weight < 0:
        views.print_error("Weight must be non-negative")
        raise typer.Exit(1)

    thresholds, _ = get_scoring(config_path)
    store = get_store(data_dir)

    try:
        kind = parse(exercise)
        rom_values, x_values, z_values = read_set_readings(rom, x_tilt, z_tilt)
        store.init()
        workout = store.get_workout(workout_id)
        existing_sets = store.load_sets(workout_id)
    except (ValidationError, UnknownExerciseError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if workout is None:
        workout = Workout(
            id=workout_id,
            date=datetime.now(timezone.utc).isoformat(),
            name=name or workout_id,
        )
    elif workout.finalized or workout.rewards_awarded:
        views.print_error(f"Workout {workout_id} is already finalized.")
        raise typer.Exit(1)

    exercise_id = kind.canonical
    set_number = 1 + sum(1 for s in existing_sets if s.exercise_id == exercise_id)

    scorer = SetScorer()
    score_readings(scorer, rom_values, x_values, z_values, height_cm, kind)
    workout_set = scorer.finalize(
        set_id=f"{exercise_id}_set_{set_number}",
        exercise_id=exercise_id,
        workout_id=workout_id,
        set_number=set_number,
        avg_rep_time=avg_rep_time,
        vertical_accel=vertical_accel,
        weight=weight,
        notes=notes,
    )

    store.append_set(workout_set)
    store.save_exercise(Exercise(
        id=exercise_id,
        workout_id=workout_id,
        type=kind,
        total_sets=set_number,
        weight=weight,
    ))

    grouped = group_sets_by_exercise(store.load_exercises(workout_id), store.load_sets(workout_id))
    workout = replace(
        workout,
        total_exercises=len(grouped),
        total_sets=sum(len(e.sets) for e in grouped),
        overall_score=overall_score_for(grouped),
    )
    store.save_workout(workout)

    tier = classify(workout_set.workout_score, thresholds)
    if json_out:
        print(json.dumps({
            "workout": encode_workout(workout),
            "set_id": workout_set.id,
            "workout_score": round(workout_set.workout_score, 4),
            "feedback": tier.name,
        }, indent=2))
        return

    views.print_set_result(workout_set, tier)
    views.print_success(
        f"Logged {kind.display_name} set {set_number} to {workout_id} "
        f"(overall {workout.overall_score:.1f})"
    )


@app.command()
def summary(
    workout_id: Annotated[str, typer.Argument(help="Workout id")],
    finalize: Annotated[
        bool,
        typer.Option("--finalize", "-f", help="Award XP / coins if eligible (only once per workout)"),
    ] = False,
    data_dir: DataDirOption = None,
    config_path: ConfigOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show per-exercise scores, overall score and rewards for a workout.
    """
    _, policy = get_scoring(config_path)
    store = get_store(data_dir)

    try:
        workout, exercises = store.load_workout_details(workout_id)
    except KeyError as e:
        views.print_error(describe_error(e.args[0], STORE_ERROR_MESSAGES))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    eligible = False
    already_finalized = workout.finalized
    if finalize:
        outcome = finalize_workout(workout, exercises, policy)
        workout, workout_summary, eligible = outcome.workout, outcome.summary, outcome.eligible
        if not already_finalized:
            store.save_workout(workout)
    else:
        workout_summary = calculate_summary(workout, exercises, policy)

    if json_out:
        print(json.dumps({
            "workout_id": workout.id,
            "exercises": [
                {
                    "id": e.exercise.id,
                    "type": e.exercise.type.canonical,
                    "sets": len(e.sets),
                    "avg_workout_score": e.avg_workout_score,
                }
                for e in exercises
            ],
            "overall_score": round(workout.overall_score, 4),
            "total_xp": workout_summary.total_xp,
            "total_coins": workout_summary.total_coins,
            "rewards_awarded": workout.rewards_awarded,
            "finalized": workout.finalized,
            "awarded_now": eligible,
        }, indent=2))
        return

    views.print_workout_summary(workout, exercises, workout_summary)
    if finalize:
        if eligible:
            views.print_success(
                f"Awarded {workout_summary.total_xp} XP and {workout_summary.total_coins} coins."
            )
        elif already_finalized:
            views.print_info("This workout was already finalized; rewards are decided only once.")
        else:
            views.print_warning(
                f"Overall score below {policy.reward_threshold:.0f}; no rewards for this workout."
            )
    if store.skipped:
        views.print_warning(f"{len(store.skipped)} stored record(s) could not be read.")
