"""
Record codec for workout data.

Handles conversion between dataclasses and the loosely-typed key/value
records used at the persistence boundary (camelCase keys, JSON values).

Decoding is deliberately forgiving: numbers may arrive as ints, floats or
numeric strings, and records written by older app versions may lack
fields.  Only an empty plan is a hard validation error; everything else
falls back to a default value or, for missing id fields, to None.
"""

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Literal, Mapping, TypeVar

from ..core.errors import (
    INVALID_PLAN_JSON,
    INVALID_RECORD,
    MISSING_IDENTITY,
    NO_VALID_PLAN_ITEMS,
)
from ..core.exercises import ExerciseKind, try_parse
from ..core.models import (
    Exercise,
    Workout,
    WorkoutPlan,
    WorkoutPlanItem,
    WorkoutSet,
    WorkoutTemplate,
)

T = TypeVar("T")

RecordKind = Literal["template", "workout", "exercise", "set"]


class ValidationError(Exception):
    """Raised when data validation fails."""

    def __init__(self, message: str, code: str = INVALID_RECORD):
        super().__init__(message)
        self.code = code


class PlanValidationError(ValidationError):
    """Raised when a plan has no usable items or its JSON is malformed."""

    pass


class UnknownExercisePolicy(Enum):
    """What a decoder does with an exercise id it cannot parse."""

    DROP = "drop"        # skip the record (plan items)
    DEFAULT = "default"  # substitute DEFAULT_EXERCISE (exercise records)


DEFAULT_EXERCISE = ExerciseKind.BENCH_PRESS


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Tagged outcome of decoding one record: either a value or an error code."""

    value: T | None = None
    error: str | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "DecodeResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str, message: str) -> "DecodeResult[T]":
        return cls(error=error, message=message)


# =============================================================================
# Total coercion helpers (never raise)
# =============================================================================


def _finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def coerce_int(value: Any, default: int = 0) -> int:
    """
    Coerce an int, float or numeric string to int.

    Floats (and float strings such as "2.7") truncate toward zero.
    Booleans, None, non-finite numbers and unparseable strings give default.
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if _finite(value) else default
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            f = float(text)
        except ValueError:
            return default
        return int(f) if _finite(f) else default
    return default


def coerce_float(value: Any, default: float = 0.0) -> float:
    """Coerce an int, float or numeric string to float; default otherwise."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        f = float(value)
    elif isinstance(value, str):
        try:
            f = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return f if _finite(f) else default


def parse_int_text(value: Any, default: int = 0) -> int:
    """Stringify then parse as an integer ("3" → 3, "3.5" → default)."""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def parse_float_text(value: Any, default: float = 0.0) -> float:
    """Stringify then parse as a float; non-finite results give default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(str(value).strip())
    except ValueError:
        return default
    return f if _finite(f) else default


def coerce_str(value: Any) -> str | None:
    """Return value if it is a string, else None."""
    return value if isinstance(value, str) else None


def _resolve_exercise(raw: Any, policy: UnknownExercisePolicy) -> ExerciseKind | None:
    kind = try_parse(raw)
    if kind is None and policy is UnknownExercisePolicy.DEFAULT:
        return DEFAULT_EXERCISE
    return kind


# =============================================================================
# Plans and templates
# =============================================================================


def plan_item_to_dict(item: WorkoutPlanItem) -> dict[str, Any]:
    """Convert WorkoutPlanItem to a plan record entry."""
    return {
        "exercise": item.exercise.canonical,
        "sets": item.sets,
        "weight": item.weight,
    }


def dict_to_plan_item(
    data: Any,
    on_unknown_exercise: UnknownExercisePolicy = UnknownExercisePolicy.DROP,
) -> WorkoutPlanItem | None:
    """
    Convert one plan record entry to a WorkoutPlanItem.

    sets is coerced to int and floored at 1; weight is coerced to float,
    defaulting to 0 and never negative.

    Returns:
        WorkoutPlanItem, or None if the entry is unusable
    """
    if not isinstance(data, Mapping):
        return None
    kind = _resolve_exercise(data.get("exercise"), on_unknown_exercise)
    if kind is None:
        return None
    sets = max(coerce_int(data.get("sets"), default=1), 1)
    weight = max(coerce_float(data.get("weight"), default=0.0), 0.0)
    return WorkoutPlanItem(exercise=kind, sets=sets, weight=weight)


def encode_plan(plan: WorkoutPlan) -> list[dict[str, Any]]:
    """Convert a WorkoutPlan to its list-of-records form."""
    return [plan_item_to_dict(item) for item in plan.items]


def decode_plan(
    items: Any,
    on_unknown_exercise: UnknownExercisePolicy = UnknownExercisePolicy.DROP,
) -> WorkoutPlan:
    """
    Convert a list of plan records to a WorkoutPlan.

    Entries naming an unknown exercise are dropped (with the default
    policy).  A plan that keeps at least one entry is accepted.

    Args:
        items: List of plan item records
        on_unknown_exercise: What to do with unparseable exercise ids

    Returns:
        WorkoutPlan with at least one item

    Raises:
        PlanValidationError: If no valid plan items remain
    """
    raw_items = items if isinstance(items, list) else []
    plan_items = []
    for raw in raw_items:
        item = dict_to_plan_item(raw, on_unknown_exercise)
        if item is not None:
            plan_items.append(item)

    if not plan_items:
        raise PlanValidationError("Invalid plan: no valid plan items", code=NO_VALID_PLAN_ITEMS)
    return WorkoutPlan(items=plan_items)


def encode_template(template: WorkoutTemplate) -> dict[str, Any]:
    """Convert WorkoutTemplate to a persisted record."""
    d: dict[str, Any] = {
        "id": template.id,
        "name": template.name,
        "plan": encode_plan(template.plan),
    }
    if template.created_at is not None:
        d["createdAt"] = template.created_at
    return d


def decode_template(data: Mapping[str, Any]) -> WorkoutTemplate:
    """
    Convert a persisted record to a WorkoutTemplate.

    Raises:
        PlanValidationError: If the record's plan has no valid items
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"Template record must be an object, got {type(data).__name__}")
    return WorkoutTemplate(
        id=coerce_str(data.get("id")) or "",
        name=coerce_str(data.get("name")) or "",
        plan=decode_plan(data.get("plan")),
        created_at=coerce_str(data.get("createdAt")),
    )


def plan_to_json(plan: WorkoutPlan) -> str:
    """
    Serialize a plan to a standalone JSON text blob.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps({"items": encode_plan(plan)}, separators=(",", ":"))


def plan_from_json(text: str) -> WorkoutPlan:
    """
    Deserialize a plan text blob.

    Accepts {"items": [...]} or a bare list of plan items.

    Raises:
        PlanValidationError: If the JSON is invalid or holds no valid items
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise PlanValidationError(f"Invalid plan JSON: {e}", code=INVALID_PLAN_JSON) from e

    items = data.get("items") if isinstance(data, dict) else data
    return decode_plan(items)


# =============================================================================
# Exercises, sets, workouts
# =============================================================================


def encode_exercise(exercise: Exercise) -> dict[str, Any]:
    """Convert Exercise to a persisted record."""
    d: dict[str, Any] = {
        "id": exercise.id,
        "workoutId": exercise.workout_id,
        "type": exercise.type.canonical,
        "totalSets": exercise.total_sets,
        "weight": exercise.weight,
    }
    if exercise.notes is not None:
        d["notes"] = exercise.notes
    return d


def decode_exercise(
    data: Mapping[str, Any],
    on_unknown_exercise: UnknownExercisePolicy = UnknownExercisePolicy.DEFAULT,
) -> Exercise | None:
    """
    Convert a persisted record to an Exercise.

    An unknown or missing type becomes BENCH_PRESS (with the default
    policy); numeric fields default to 0.

    Returns:
        Exercise, or None if id / workoutId is missing
    """
    if not isinstance(data, Mapping):
        return None
    exercise_id = coerce_str(data.get("id"))
    workout_id = coerce_str(data.get("workoutId"))
    if exercise_id is None or workout_id is None:
        return None

    kind = _resolve_exercise(data.get("type"), on_unknown_exercise)
    if kind is None:
        return None

    return Exercise(
        id=exercise_id,
        workout_id=workout_id,
        type=kind,
        total_sets=coerce_int(data.get("totalSets")),
        weight=coerce_float(data.get("weight")),
        notes=coerce_str(data.get("notes")),
    )


def encode_workout_set(workout_set: WorkoutSet) -> dict[str, Any]:
    """Convert WorkoutSet to a persisted record."""
    d: dict[str, Any] = {
        "id": workout_set.id,
        "exerciseId": workout_set.exercise_id,
        "workoutId": workout_set.workout_id,
        "setNumber": workout_set.set_number,
        "reps": workout_set.reps,
        "romScore": workout_set.rom_score,
        "xTiltScore": workout_set.x_tilt_score,
        "zTiltScore": workout_set.z_tilt_score,
        "workoutScore": workout_set.workout_score,
        "avgRepTime": workout_set.avg_rep_time,
        "verticalAccel": workout_set.vertical_accel,
        "weight": workout_set.weight,
    }
    if workout_set.notes is not None:
        d["notes"] = workout_set.notes
    return d


def decode_workout_set(data: Mapping[str, Any]) -> WorkoutSet | None:
    """
    Convert a persisted record to a WorkoutSet.

    Every numeric field is read by stringifying and parsing it, defaulting
    to 0 when that fails.

    Returns:
        WorkoutSet, or None if workoutId / exerciseId is missing
    """
    if not isinstance(data, Mapping):
        return None
    workout_id = coerce_str(data.get("workoutId"))
    exercise_id = coerce_str(data.get("exerciseId"))
    if workout_id is None or exercise_id is None:
        return None

    return WorkoutSet(
        id=coerce_str(data.get("id")) or "",
        exercise_id=exercise_id,
        workout_id=workout_id,
        set_number=parse_int_text(data.get("setNumber")),
        reps=parse_int_text(data.get("reps")),
        rom_score=parse_float_text(data.get("romScore")),
        x_tilt_score=parse_float_text(data.get("xTiltScore")),
        z_tilt_score=parse_float_text(data.get("zTiltScore")),
        workout_score=parse_float_text(data.get("workoutScore")),
        avg_rep_time=parse_float_text(data.get("avgRepTime")),
        vertical_accel=parse_float_text(data.get("verticalAccel")),
        weight=parse_float_text(data.get("weight")),
        notes=coerce_str(data.get("notes")),
    )


def encode_workout(workout: Workout) -> dict[str, Any]:
    """Convert Workout to a persisted record."""
    d: dict[str, Any] = {
        "id": workout.id,
        "date": workout.date,
        "name": workout.name,
        "totalExercises": workout.total_exercises,
        "totalSets": workout.total_sets,
        "overallScore": workout.overall_score,
        "rewardsAwarded": workout.rewards_awarded,
        "finalized": workout.finalized,
    }
    if workout.notes is not None:
        d["notes"] = workout.notes
    return d


def decode_workout(data: Mapping[str, Any]) -> Workout:
    """
    Convert a persisted record to a Workout; every field has a default.

    Records written before the finalized flag existed count as finalized
    when their rewards were already awarded.
    """
    if not isinstance(data, Mapping):
        data = {}
    awarded = data.get("rewardsAwarded") is True
    finalized = data.get("finalized") is True
    return Workout(
        id=coerce_str(data.get("id")) or "",
        date=coerce_str(data.get("date")) or "",
        name=coerce_str(data.get("name")) or "",
        total_exercises=coerce_int(data.get("totalExercises")),
        total_sets=coerce_int(data.get("totalSets")),
        overall_score=coerce_float(data.get("overallScore")),
        notes=coerce_str(data.get("notes")),
        rewards_awarded=awarded,
        finalized=finalized or awarded,
    )


# =============================================================================
# Tagged decoding
# =============================================================================


def _decode_template_result(data: Any) -> DecodeResult[WorkoutTemplate]:
    try:
        return DecodeResult.success(decode_template(data))
    except ValidationError as e:
        return DecodeResult.failure(e.code, str(e))


def _optional_result(decoder: Callable[[Any], T | None], label: str) -> Callable[[Any], DecodeResult[T]]:
    def wrapped(data: Any) -> DecodeResult[T]:
        value = decoder(data)
        if value is None:
            return DecodeResult.failure(MISSING_IDENTITY, f"{label} record is missing its id fields")
        return DecodeResult.success(value)

    return wrapped


_DECODERS: dict[str, Callable[[Any], DecodeResult[Any]]] = {
    "template": _decode_template_result,
    "workout": lambda data: DecodeResult.success(decode_workout(data)),
    "exercise": _optional_result(decode_exercise, "Exercise"),
    "set": _optional_result(decode_workout_set, "Set"),
}


def decode_record(kind: RecordKind, data: Any) -> DecodeResult[Any]:
    """
    Decode one persisted record into a tagged result.

    Args:
        kind: "template", "workout", "exercise" or "set"
        data: Raw record

    Returns:
        DecodeResult holding the entity or an error code from core.errors
    """
    try:
        decoder = _DECODERS[kind]
    except KeyError:
        raise ValueError(f"Unknown record kind: {kind!r}") from None
    if not isinstance(data, Mapping):
        return DecodeResult.failure(
            INVALID_RECORD, f"{kind.capitalize()} record must be an object, got {type(data).__name__}"
        )
    return decoder(data)


# =============================================================================
# Command-line input
# =============================================================================


def parse_readings(text: str | None) -> list[float]:
    """
    Parse a comma- or space-separated list of per-rep readings.

    Examples:
        "60, 80, 100"  → [60.0, 80.0, 100.0]
        "-3 4.5"       → [-3.0, 4.5]
        ""             → []

    Raises:
        ValidationError: If any entry is not a finite number
    """
    if text is None or not text.strip():
        return []
    readings: list[float] = []
    for part in text.replace(",", " ").split():
        try:
            value = float(part)
        except ValueError:
            raise ValidationError(f"Invalid reading: '{part}'. Expected a number.") from None
        if not _finite(value):
            raise ValidationError(f"Invalid reading: '{part}'. Expected a finite number.")
        readings.append(value)
    return readings
