"""Scoring commands: exercises, score-set."""

import json
from typing import Annotated, Optional

import typer

from ...core.exercises import EXERCISE_CATALOG, ExerciseKind, UnknownExerciseError, parse
from ...core.feedback import classify
from ...core.scoring import SetScorer, rom_score
from ...io.codec import ValidationError, parse_readings
from .. import views
from ..app import ConfigOption, JsonOption, app, get_scoring

ExerciseOption = Annotated[
    str,
    typer.Option("--exercise", "-e", help="Exercise id, e.g. bench-press, squat"),
]


def read_set_readings(
    rom: str,
    x_tilt: str | None,
    z_tilt: str | None,
) -> tuple[list[float], list[float], list[float]]:
    """
    Parse the three per-rep channels and check they line up.

    Tilt channels may be omitted (all zeros) but otherwise need one reading
    per ROM reading.

    Raises:
        ValidationError: On unparseable or mismatched readings
    """
    rom_values = parse_readings(rom)
    if not rom_values:
        raise ValidationError("At least one ROM reading is required")
    channels = []
    for label, text in (("x-tilt", x_tilt), ("z-tilt", z_tilt)):
        values = parse_readings(text)
        if not values:
            values = [0.0] * len(rom_values)
        elif len(values) != len(rom_values):
            raise ValidationError(
                f"Got {len(values)} {label} readings for {len(rom_values)} reps"
            )
        channels.append(values)
    return rom_values, channels[0], channels[1]


def score_readings(
    scorer: SetScorer,
    rom_values: list[float],
    x_values: list[float],
    z_values: list[float],
    height_cm: float | None,
    kind: ExerciseKind,
) -> list[float]:
    """Feed every rep into the scorer; returns the per-rep feedback scores."""
    rep_scores = []
    for rom_value, x, z in zip(rom_values, x_values, z_values):
        if height_cm is not None:
            rom_value = rom_score(rom_value, height_cm, kind)
        rep_scores.append(scorer.add_rep(rom_value, x, z))
    return rep_scores


@app.command()
def exercises(json_out: JsonOption = False) -> None:
    """
    List the supported exercises and their ROM factors.
    """
    if json_out:
        print(json.dumps([
            {"id": k.canonical, "name": k.display_name, "rom_factor": k.rom_factor}
            for k in EXERCISE_CATALOG
        ], indent=2))
        return

    views.console.print(views.format_catalog_table())


@app.command("score-set")
def score_set(
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
    height_cm: Annotated[
        Optional[float],
        typer.Option("--height-cm", help="Treat ROM readings as cm and score them against this height"),
    ] = None,
    config_path: ConfigOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Score one set from its per-rep readings.

    Prints the finalized ROM and tilt averages, the composite set score
    and the feedback tier.
    """
    thresholds, _ = get_scoring(config_path)

    try:
        rom_values, x_values, z_values = read_set_readings(rom, x_tilt, z_tilt)
        kind = parse(exercise)
        scorer = SetScorer()
        rep_scores = score_readings(scorer, rom_values, x_values, z_values, height_cm, kind)
    except (ValidationError, UnknownExerciseError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    workout_set = scorer.finalize(
        set_id="set_1",
        exercise_id=kind.canonical,
        workout_id="",
        set_number=1,
    )
    tier = classify(workout_set.workout_score, thresholds)

    if json_out:
        print(json.dumps({
            "exercise": kind.canonical,
            "reps": workout_set.reps,
            "rom_score": round(workout_set.rom_score, 4),
            "x_tilt_score": round(workout_set.x_tilt_score, 4),
            "z_tilt_score": round(workout_set.z_tilt_score, 4),
            "workout_score": round(workout_set.workout_score, 4),
            "feedback": tier.name,
            "rep_feedback": [classify(s, thresholds).name for s in rep_scores],
        }, indent=2))
        return

    views.print_set_result(workout_set, tier)
