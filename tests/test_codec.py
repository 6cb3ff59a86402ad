"""
Tests for the record codec: schema-tolerant decoding of plans, templates,
exercises, sets and workouts.
"""

import json

import pytest

from rep_scorer.core.errors import (
    INVALID_PLAN_JSON,
    INVALID_RECORD,
    MISSING_IDENTITY,
    NO_VALID_PLAN_ITEMS,
)
from rep_scorer.core.exercises import ExerciseKind
from rep_scorer.core.models import (
    Exercise,
    WorkoutPlan,
    WorkoutPlanItem,
    WorkoutSet,
    WorkoutTemplate,
)
from rep_scorer.io.codec import (
    PlanValidationError,
    UnknownExercisePolicy,
    ValidationError,
    coerce_int,
    decode_exercise,
    decode_plan,
    decode_record,
    decode_template,
    decode_workout,
    decode_workout_set,
    dict_to_plan_item,
    encode_exercise,
    encode_template,
    encode_workout_set,
    parse_readings,
    plan_from_json,
    plan_to_json,
)


def _set_record(**overrides):
    record = {
        "id": "squat_set_1",
        "exerciseId": "squat",
        "workoutId": "w1",
        "setNumber": 1,
        "reps": 8,
        "romScore": 82.5,
        "xTiltScore": 4.0,
        "zTiltScore": 6.0,
        "workoutScore": 90.8,
        "avgRepTime": 2.1,
        "verticalAccel": 0.9,
        "weight": 60.0,
    }
    record.update(overrides)
    return record


class TestDecodePlan:
    """Unknown exercises are dropped; only an empty result is an error."""

    def test_single_invalid_item_is_rejected(self):
        with pytest.raises(PlanValidationError) as exc_info:
            decode_plan([{"exercise": "nope"}])
        assert exc_info.value.code == NO_VALID_PLAN_ITEMS

    def test_invalid_items_are_dropped(self):
        plan = decode_plan([
            {"exercise": "nope", "sets": 3},
            {"exercise": "bench-press", "sets": 3, "weight": 60},
        ])
        assert len(plan) == 1
        assert plan.items[0] == WorkoutPlanItem(ExerciseKind.BENCH_PRESS, 3, 60.0)

    def test_empty_list_is_rejected(self):
        with pytest.raises(PlanValidationError):
            decode_plan([])

    def test_non_list_is_rejected(self):
        with pytest.raises(PlanValidationError):
            decode_plan({"exercise": "squat"})

    def test_non_mapping_entries_dropped(self):
        plan = decode_plan(["squat", 3, None, {"exercise": "squat"}])
        assert [i.exercise for i in plan.items] == [ExerciseKind.SQUAT]

    def test_order_preserved(self):
        plan = decode_plan([
            {"exercise": "squat"},
            {"exercise": "lat-pulldown"},
            {"exercise": "bicep-curl"},
        ])
        assert [i.exercise for i in plan.items] == [
            ExerciseKind.SQUAT,
            ExerciseKind.LAT_PULLDOWN,
            ExerciseKind.BICEP_CURL,
        ]

    def test_exercise_name_is_case_insensitive(self):
        item = dict_to_plan_item({"exercise": "Bench_Press"})
        assert item is not None and item.exercise is ExerciseKind.BENCH_PRESS

    def test_default_policy_substitutes_when_asked(self):
        plan = decode_plan([{"exercise": "nope"}], UnknownExercisePolicy.DEFAULT)
        assert plan.items[0].exercise is ExerciseKind.BENCH_PRESS


class TestPlanItemCoercion:
    """sets: int ≥ 1 (default 1); weight: float ≥ 0 (default 0)."""

    @pytest.mark.parametrize("raw,expected", [
        ("3", 3),
        (4, 4),
        (2.7, 2),
        ("2.7", 2),
        (0, 1),
        (-4, 1),
        ("abc", 1),
        (None, 1),
    ])
    def test_sets(self, raw, expected):
        item = dict_to_plan_item({"exercise": "squat", "sets": raw})
        assert item is not None and item.sets == expected

    def test_missing_sets_defaults_to_one(self):
        item = dict_to_plan_item({"exercise": "squat"})
        assert item is not None and item.sets == 1

    @pytest.mark.parametrize("raw,expected", [
        ("12.5", 12.5),
        (20, 20.0),
        (None, 0.0),
        ("heavy", 0.0),
        (-5, 0.0),
    ])
    def test_weight(self, raw, expected):
        item = dict_to_plan_item({"exercise": "squat", "weight": raw})
        assert item is not None and item.weight == pytest.approx(expected)

    def test_bool_is_not_a_number(self):
        assert coerce_int(True, default=7) == 7


class TestTemplates:
    def test_encode_shape(self):
        template = WorkoutTemplate(
            id="t1",
            name="Leg day",
            plan=WorkoutPlan([WorkoutPlanItem(ExerciseKind.SQUAT, 4, 80.0)]),
            created_at="2026-10-18T08:00:00+00:00",
        )
        assert encode_template(template) == {
            "id": "t1",
            "name": "Leg day",
            "plan": [{"exercise": "squat", "sets": 4, "weight": 80.0}],
            "createdAt": "2026-10-18T08:00:00+00:00",
        }

    def test_created_at_omitted_when_unset(self):
        template = WorkoutTemplate(id="t1", name="x", plan=WorkoutPlan([WorkoutPlanItem(ExerciseKind.SQUAT, 1)]))
        assert "createdAt" not in encode_template(template)

    def test_decode_tolerates_missing_fields(self):
        template = decode_template({"plan": [{"exercise": "squat", "sets": "3"}]})
        assert template.id == ""
        assert template.name == ""
        assert template.created_at is None
        assert template.plan.items[0].sets == 3

    def test_decode_drops_unknown_items(self):
        template = decode_template({
            "id": "t2",
            "name": "Mixed",
            "plan": [{"exercise": "deadlift"}, {"exercise": "seated-rows", "sets": 2}],
        })
        assert len(template.plan) == 1

    def test_decode_without_valid_items_fails(self):
        with pytest.raises(PlanValidationError):
            decode_template({"id": "t3", "plan": [{"exercise": "deadlift"}]})

    def test_decode_non_mapping_fails(self):
        with pytest.raises(ValidationError):
            decode_template(["not", "a", "record"])  # type: ignore[arg-type]


class TestPlanBlob:
    def test_blob_shape(self):
        plan = WorkoutPlan([WorkoutPlanItem(ExerciseKind.BICEP_CURL, 3, 12.5)])
        assert json.loads(plan_to_json(plan)) == {
            "items": [{"exercise": "bicep-curl", "sets": 3, "weight": 12.5}]
        }

    def test_blob_decodes_to_same_plan(self):
        plan = WorkoutPlan([
            WorkoutPlanItem(ExerciseKind.SQUAT, 5, 100.0),
            WorkoutPlanItem(ExerciseKind.TRICEP_EXTENSION, 3, 15.0),
        ])
        assert plan_from_json(plan_to_json(plan)) == plan

    def test_bare_list_accepted(self):
        plan = plan_from_json('[{"exercise": "squat", "sets": 2}]')
        assert plan.total_sets == 2

    def test_malformed_json(self):
        with pytest.raises(PlanValidationError) as exc_info:
            plan_from_json("{not json")
        assert exc_info.value.code == INVALID_PLAN_JSON

    def test_blob_without_valid_items(self):
        with pytest.raises(PlanValidationError) as exc_info:
            plan_from_json('{"items": [{"exercise": "yoga"}]}')
        assert exc_info.value.code == NO_VALID_PLAN_ITEMS


class TestDecodeExercise:
    def test_unknown_type_becomes_bench_press(self):
        exercise = decode_exercise({"id": "e", "workoutId": "w", "type": "not-a-real-exercise"})
        assert exercise is not None
        assert exercise.type is ExerciseKind.BENCH_PRESS

    def test_missing_type_becomes_bench_press(self):
        exercise = decode_exercise({"id": "e", "workoutId": "w"})
        assert exercise is not None and exercise.type is ExerciseKind.BENCH_PRESS

    def test_drop_policy_rejects_unknown_type(self):
        assert decode_exercise(
            {"id": "e", "workoutId": "w", "type": "yoga"},
            UnknownExercisePolicy.DROP,
        ) is None

    @pytest.mark.parametrize("record", [
        {"workoutId": "w", "type": "squat"},
        {"id": "e", "type": "squat"},
        {"id": 5, "workoutId": "w", "type": "squat"},
    ])
    def test_missing_identity(self, record):
        assert decode_exercise(record) is None

    def test_numeric_strings(self):
        exercise = decode_exercise({
            "id": "squat", "workoutId": "w", "type": "squat",
            "totalSets": "4", "weight": "22.5",
        })
        assert exercise is not None
        assert exercise.total_sets == 4
        assert exercise.weight == pytest.approx(22.5)

    def test_notes_omitted_when_unset(self):
        record = encode_exercise(Exercise(id="squat", workout_id="w", type=ExerciseKind.SQUAT))
        assert "notes" not in record
        assert record["type"] == "squat"


class TestDecodeWorkoutSet:
    def test_full_record(self):
        s = decode_workout_set(_set_record())
        assert s is not None
        assert (s.exercise_id, s.workout_id, s.set_number, s.reps) == ("squat", "w1", 1, 8)
        assert s.workout_score == pytest.approx(90.8)

    def test_missing_workout_id(self):
        record = _set_record()
        del record["workoutId"]
        assert decode_workout_set(record) is None

    def test_missing_exercise_id(self):
        record = _set_record()
        del record["exerciseId"]
        assert decode_workout_set(record) is None

    def test_numeric_strings_parsed(self):
        s = decode_workout_set(_set_record(reps="12", romScore="75.5"))
        assert s is not None
        assert s.reps == 12
        assert s.rom_score == pytest.approx(75.5)

    def test_unparseable_numbers_default_to_zero(self):
        s = decode_workout_set(_set_record(romScore="abc", setNumber="3.5"))
        assert s is not None
        assert s.rom_score == 0.0
        assert s.set_number == 0

    def test_missing_numbers_default_to_zero(self):
        s = decode_workout_set({"exerciseId": "squat", "workoutId": "w1"})
        assert s is not None
        assert (s.reps, s.workout_score, s.weight) == (0, 0.0, 0.0)

    def test_encode_uses_camel_case(self):
        s = WorkoutSet(id="squat_set_1", exercise_id="squat", workout_id="w1", set_number=1, reps=8)
        record = encode_workout_set(s)
        assert record["exerciseId"] == "squat"
        assert record["setNumber"] == 1
        assert "notes" not in record


class TestDecodeWorkout:
    def test_defaults(self):
        workout = decode_workout({"id": "w1"})
        assert workout.name == ""
        assert workout.overall_score == 0.0
        assert workout.rewards_awarded is False

    def test_awarded_flag_must_be_bool(self):
        assert decode_workout({"id": "w1", "rewardsAwarded": "true"}).rewards_awarded is False
        assert decode_workout({"id": "w1", "rewardsAwarded": True}).rewards_awarded is True

    def test_finalized_flag(self):
        assert decode_workout({"id": "w1", "finalized": True}).finalized is True
        assert decode_workout({"id": "w1"}).finalized is False

    def test_awarded_record_counts_as_finalized(self):
        workout = decode_workout({"id": "w1", "rewardsAwarded": True})
        assert workout.finalized is True

    def test_numeric_strings(self):
        workout = decode_workout({"id": "w1", "totalSets": "6", "overallScore": "72.5"})
        assert workout.total_sets == 6
        assert workout.overall_score == pytest.approx(72.5)


class TestDecodeRecord:
    def test_set_without_identity(self):
        result = decode_record("set", {"id": "x"})
        assert not result.ok
        assert result.error == MISSING_IDENTITY

    def test_template_without_valid_items(self):
        result = decode_record("template", {"id": "t", "plan": []})
        assert not result.ok
        assert result.error == NO_VALID_PLAN_ITEMS

    def test_success_carries_value(self):
        result = decode_record("exercise", {"id": "squat", "workoutId": "w", "type": "squat"})
        assert result.ok
        assert result.value.type is ExerciseKind.SQUAT

    @pytest.mark.parametrize("kind", ["template", "workout", "exercise", "set"])
    def test_non_object_record(self, kind):
        result = decode_record(kind, [1])
        assert not result.ok
        assert result.error == INVALID_RECORD

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            decode_record("profile", {})  # type: ignore[arg-type]


class TestParseReadings:
    def test_commas_and_spaces(self):
        assert parse_readings("60, 80 100") == [60.0, 80.0, 100.0]

    def test_empty(self):
        assert parse_readings("") == []
        assert parse_readings(None) == []

    def test_negative_values(self):
        assert parse_readings("-3,4.5") == [-3.0, 4.5]

    @pytest.mark.parametrize("text", ["60,abc", "nan", "1,inf"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_readings(text)
