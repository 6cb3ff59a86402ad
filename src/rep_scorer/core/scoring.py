"""
Pure score computation and aggregation functions.

Per-rep values are averaged into per-set channel scores (see averager.py),
per-set composites are averaged into a per-exercise score, and per-exercise
scores are averaged into the workout's overall score.  Every average of an
empty input is 0, never an error.
"""

import math
from typing import Iterable, Sequence

from .averager import RepAverager
from .config import (
    FEEDBACK_ROM_WEIGHT,
    ROM_MAX_VALUE,
    SCORE_MAX,
    SCORE_MIN,
    TILT_MAX_VALUE,
    clamp,
)
from .exercises import ExerciseKind
from .models import Exercise, ExerciseWithSets, WorkoutSet


def average(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for an empty input."""
    total = 0.0
    count = 0
    for v in values:
        total += v
        count += 1
    return total / count if count else 0.0


# =============================================================================
# Per-rep / per-set scores
# =============================================================================


def rom_score(estimated_rom_cm: float, height_cm: float, kind: ExerciseKind) -> float:
    """
    Score one rep's range of motion against the exercise's full ROM.

    full_rom = height_cm × rom_factor
    score    = clip(estimated_rom_cm / full_rom × 100, 0, 100)

    Args:
        estimated_rom_cm: Displacement measured for the rep
        height_cm: User height
        kind: Exercise being performed

    Returns:
        ROM score (0 to 100); 0 when height is unknown
    """
    if height_cm <= 0:
        return 0.0
    full_rom = height_cm * kind.rom_factor
    return clamp(estimated_rom_cm / full_rom * SCORE_MAX, SCORE_MIN, SCORE_MAX)


def tilt_penalty(tilt: float, max_value: float = TILT_MAX_VALUE) -> float:
    """Penalty percentage for one tilt reading (sign ignored)."""
    return min(abs(tilt) / max_value * SCORE_MAX, SCORE_MAX)


def set_workout_score(rom: float, x_tilt: float, z_tilt: float) -> float:
    """
    Composite quality score for a set.

    score = (rom + (100 - |x_tilt|) + (100 - |z_tilt|)) / 3, clipped to [0, 100]
    """
    raw = (rom + (SCORE_MAX - abs(x_tilt)) + (SCORE_MAX - abs(z_tilt))) / 3
    return clamp(raw, SCORE_MIN, SCORE_MAX)


def rep_feedback_score(rom: float, x_tilt: float, z_tilt: float) -> float:
    """
    Score used to pick the live feedback tier after a single rep.

    ROM counts double: (2·rom + (100 - |x|) + (100 - |z|)) / 4
    """
    raw = (
        FEEDBACK_ROM_WEIGHT * rom + (SCORE_MAX - abs(x_tilt)) + (SCORE_MAX - abs(z_tilt))
    ) / (FEEDBACK_ROM_WEIGHT + 2)
    return clamp(raw, SCORE_MIN, SCORE_MAX)


class SetScorer:
    """
    Channel averagers for the set in progress.

    Holds one RepAverager for ROM and one inverted averager per tilt axis.
    Call add_rep() for every detected rep, live_score() to peek, and
    finalize() once at the end of the set.
    """

    def __init__(
        self,
        rom_max: float = ROM_MAX_VALUE,
        tilt_max: float = TILT_MAX_VALUE,
    ):
        self.tilt_max = tilt_max
        self.rom = RepAverager(max_value=rom_max)
        self.x_tilt = RepAverager(max_value=tilt_max, invert_score=True)
        self.z_tilt = RepAverager(max_value=tilt_max, invert_score=True)

    @property
    def reps(self) -> int:
        return self.rom.count

    def add_rep(self, rom: float, x_tilt: float = 0.0, z_tilt: float = 0.0) -> float:
        """
        Record one rep.

        Tilt readings may be signed (left / right); only the magnitude counts.

        Returns:
            The rep's own feedback score (see rep_feedback_score)
        """
        self.rom.add(rom)
        self.x_tilt.add(abs(x_tilt))
        self.z_tilt.add(abs(z_tilt))
        return rep_feedback_score(
            clamp(rom, SCORE_MIN, self.rom.max_value),
            tilt_penalty(x_tilt, self.tilt_max),
            tilt_penalty(z_tilt, self.tilt_max),
        )

    def live_score(self) -> float:
        """Composite score of the reps so far (does not reset anything)."""
        return set_workout_score(
            self.rom.get_current_average(),
            self.x_tilt.get_current_average(),
            self.z_tilt.get_current_average(),
        )

    def finalize(
        self,
        set_id: str,
        exercise_id: str,
        workout_id: str,
        set_number: int,
        avg_rep_time: float = 0.0,
        vertical_accel: float = 0.0,
        weight: float = 0.0,
        notes: str | None = None,
    ) -> WorkoutSet:
        """Close the set: finalize every channel and build its WorkoutSet."""
        reps = self.reps
        rom = self.rom.finalize_and_get_average()
        x_tilt = self.x_tilt.finalize_and_get_average()
        z_tilt = self.z_tilt.finalize_and_get_average()
        return WorkoutSet(
            id=set_id,
            exercise_id=exercise_id,
            workout_id=workout_id,
            set_number=set_number,
            reps=reps,
            rom_score=rom,
            x_tilt_score=x_tilt,
            z_tilt_score=z_tilt,
            workout_score=set_workout_score(rom, x_tilt, z_tilt),
            avg_rep_time=avg_rep_time,
            vertical_accel=vertical_accel,
            weight=weight,
            notes=notes,
        )


# =============================================================================
# Aggregation
# =============================================================================


def exercise_average_score(sets: Sequence[WorkoutSet]) -> float:
    """Unweighted mean of workout_score over an exercise's sets (full precision)."""
    return average(s.workout_score for s in sets)


def build_exercise_with_sets(exercise: Exercise, sets: Sequence[WorkoutSet]) -> ExerciseWithSets:
    """Pair an exercise with its sets and the display score (halves round up)."""
    avg = exercise_average_score(sets)
    return ExerciseWithSets(
        exercise=exercise,
        sets=list(sets),
        avg_workout_score=int(clamp(math.floor(avg + 0.5), SCORE_MIN, SCORE_MAX)),
    )


def workout_overall_score(exercise_scores: Iterable[float]) -> float:
    """Unweighted mean of per-exercise scores (not rounded)."""
    return average(exercise_scores)


def overall_score_for(exercises: Sequence[ExerciseWithSets]) -> float:
    """Overall score of a workout from full-precision per-exercise averages."""
    return workout_overall_score(exercise_average_score(e.sets) for e in exercises)


def group_sets_by_exercise(
    exercises: Sequence[Exercise],
    sets: Sequence[WorkoutSet],
) -> list[ExerciseWithSets]:
    """
    Attach each exercise's recorded sets to it.

    Sets keep their recorded order.  Exercises with no sets are left out.

    Args:
        exercises: Exercises of one workout, in session order
        sets: All sets of the same workout

    Returns:
        List of ExerciseWithSets, one per exercise that has sets
    """
    by_exercise: dict[str, list[WorkoutSet]] = {}
    for s in sets:
        by_exercise.setdefault(s.exercise_id, []).append(s)

    result: list[ExerciseWithSets] = []
    for exercise in exercises:
        exercise_sets = by_exercise.get(exercise.id)
        if exercise_sets:
            result.append(build_exercise_with_sets(exercise, exercise_sets))
    return result
