"""
Integration tests for the scoring pipeline.

Each test runs a full path: per-rep readings → SetScorer → WorkoutStore →
grouped exercises → overall score → reward payout, or loads the scoring
constants through the YAML config layer.
"""

import json
import warnings
from dataclasses import replace

import pytest

from rep_scorer.core.config import DEFAULT_FEEDBACK_THRESHOLDS, DEFAULT_REWARD_POLICY
from rep_scorer.core.engine.config_loader import load_model_config, load_scoring_config
from rep_scorer.core.exercises import ExerciseKind
from rep_scorer.core.feedback import FeedbackTier, classify
from rep_scorer.core.models import (
    Exercise,
    Workout,
    WorkoutPlan,
    WorkoutPlanItem,
    WorkoutTemplate,
)
from rep_scorer.core.rewards import finalize_workout
from rep_scorer.core.scoring import SetScorer, overall_score_for
from rep_scorer.io.codec import ValidationError
from rep_scorer.io.workout_store import WorkoutStore, get_default_data_dir


# ===========================================================================
# Helpers
# ===========================================================================

def _log_set(store, scorer, workout_id, kind, set_number, readings):
    """Score (rom, x, z) readings as one set and persist it with its exercise."""
    for rom, x, z in readings:
        scorer.add_rep(rom, x, z)
    workout_set = scorer.finalize(
        set_id=f"{kind.canonical}_set_{set_number}",
        exercise_id=kind.canonical,
        workout_id=workout_id,
        set_number=set_number,
    )
    store.append_set(workout_set)
    store.save_exercise(Exercise(
        id=kind.canonical,
        workout_id=workout_id,
        type=kind,
        total_sets=set_number,
    ))
    return workout_set


@pytest.fixture
def store(tmp_path):
    s = WorkoutStore(tmp_path / "data")
    s.init()
    return s


# ===========================================================================
# Scoring pipeline
# ===========================================================================

class TestWorkoutPipeline:

    def test_rom_readings_to_set_score(self, store):
        # ROM {60, 80, 100}, no tilt → rom 80, set (80 + 100 + 100) / 3
        s = _log_set(store, SetScorer(), "w1", ExerciseKind.SQUAT, 1,
                     [(60, 0, 0), (80, 0, 0), (100, 0, 0)])
        assert s.rom_score == pytest.approx(80.0)
        assert s.workout_score == pytest.approx(280 / 3)
        assert classify(s.workout_score) is FeedbackTier.PERFECT

    def test_two_exercises_average_to_overall(self, store):
        # Squat: set scores 80 and 80 → 80.  Bench: 60 → 60.  Overall 70.
        # A flat set of rom r, tilt t on both axes scores (r + 2·(100 − t)) / 3.
        scorer = SetScorer()
        _log_set(store, scorer, "w1", ExerciseKind.SQUAT, 1, [(80, 20, 20)] * 3)
        _log_set(store, scorer, "w1", ExerciseKind.SQUAT, 2, [(60, 10, 10)] * 3)
        _log_set(store, scorer, "w1", ExerciseKind.BENCH_PRESS, 1, [(60, 40, 40)] * 2)
        store.save_workout(Workout(id="w1", date="2026-10-18", name="Mixed"))

        workout, exercises = store.load_workout_details("w1")
        assert [e.exercise.id for e in exercises] == ["squat", "bench-press"]
        assert [e.avg_workout_score for e in exercises] == [80, 60]
        assert overall_score_for(exercises) == pytest.approx(70.0)
        assert workout.name == "Mixed"

    def test_finalize_persists_flag_once(self, store):
        scorer = SetScorer()
        _log_set(store, scorer, "w1", ExerciseKind.LAT_PULLDOWN, 1, [(90, 5, 5)] * 10)
        store.save_workout(Workout(id="w1", date="2026-10-18", name="Pull"))
        workout, exercises = store.load_workout_details("w1")
        workout = replace(workout, overall_score=overall_score_for(exercises))

        first = finalize_workout(workout, exercises)
        assert first.eligible
        assert first.summary.total_xp > 0
        store.save_workout(first.workout)

        reloaded, exercises = store.load_workout_details("w1")
        assert reloaded.rewards_awarded
        assert not finalize_workout(reloaded, exercises).eligible


# ===========================================================================
# WorkoutStore
# ===========================================================================

class TestWorkoutStore:

    def test_init_creates_files(self, tmp_path):
        store = WorkoutStore(tmp_path / "fresh")
        assert not store.exists()
        store.init()
        assert store.exists()
        for name in ("templates.jsonl", "workouts.jsonl", "exercises.jsonl", "sets.jsonl"):
            assert (tmp_path / "fresh" / name).exists()

    def test_template_save_and_load(self, store):
        template = WorkoutTemplate(
            id="t1",
            name="Upper",
            plan=WorkoutPlan([
                WorkoutPlanItem(ExerciseKind.BENCH_PRESS, 4, 70.0),
                WorkoutPlanItem(ExerciseKind.SEATED_ROWS, 3, 50.0),
            ]),
            created_at="2026-10-18T08:00:00+00:00",
        )
        store.save_template(template)
        assert store.load_templates() == [template]
        assert store.get_template("t1") == template
        assert store.get_template("missing") is None

    def test_template_save_replaces_same_id(self, store):
        plan = WorkoutPlan([WorkoutPlanItem(ExerciseKind.SQUAT, 3)])
        store.save_template(WorkoutTemplate(id="t1", name="Old", plan=plan))
        store.save_template(WorkoutTemplate(id="t1", name="New", plan=plan))
        assert [t.name for t in store.load_templates()] == ["New"]

    def test_exercise_upsert_is_per_workout(self, store):
        store.save_exercise(Exercise(id="squat", workout_id="w1", type=ExerciseKind.SQUAT, total_sets=1))
        store.save_exercise(Exercise(id="squat", workout_id="w2", type=ExerciseKind.SQUAT, total_sets=1))
        store.save_exercise(Exercise(id="squat", workout_id="w1", type=ExerciseKind.SQUAT, total_sets=2))
        assert [e.total_sets for e in store.load_exercises("w1")] == [2]
        assert [e.total_sets for e in store.load_exercises("w2")] == [1]

    def test_unreadable_records_are_skipped(self, store):
        with open(store.path_for("set"), "a", encoding="utf-8") as f:
            f.write(json.dumps({"id": "orphan", "reps": 5}) + "\n")
            f.write(json.dumps({"id": "ok", "exerciseId": "squat", "workoutId": "w1"}) + "\n")
        sets = store.load_sets("w1")
        assert [s.id for s in sets] == ["ok"]
        assert len(store.skipped) == 1

    def test_non_object_lines_are_skipped(self, store):
        with open(store.path_for("workout"), "a", encoding="utf-8") as f:
            f.write("[1]\n")
        store.save_workout(Workout(id="w1", date="2026-10-18", name="Legs"))
        store.save_workout(Workout(id="w1", date="2026-10-18", name="Legs", total_sets=3))
        assert [(w.id, w.total_sets) for w in store.load_workouts()] == [("w1", 3)]
        assert len(store.skipped) == 1

    def test_malformed_line_raises(self, store):
        with open(store.path_for("workout"), "a", encoding="utf-8") as f:
            f.write("{broken\n")
        with pytest.raises(ValidationError, match="line 1"):
            store.load_workouts()

    def test_unknown_workout(self, store):
        with pytest.raises(KeyError):
            store.load_workout_details("nope")

    def test_default_data_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REP_SCORER_HOME", str(tmp_path / "home"))
        assert get_default_data_dir() == tmp_path / "home"


# ===========================================================================
# YAML config
# ===========================================================================

class TestScoringConfig:

    def test_bundled_defaults_match_python_defaults(self, tmp_path):
        thresholds, policy = load_scoring_config(tmp_path / "absent.yaml")
        assert thresholds == DEFAULT_FEEDBACK_THRESHOLDS
        assert policy == DEFAULT_REWARD_POLICY

    def test_bundled_yaml_has_sections(self, tmp_path):
        cfg = load_model_config(tmp_path / "absent.yaml")
        assert cfg["feedback"]["perfect"] == 90
        assert cfg["rewards"]["reps_per_coin"] == 5

    def test_user_override_merges(self, tmp_path):
        user = tmp_path / "scoring.yaml"
        user.write_text("feedback:\n  perfect: 95\nrewards:\n  reward_threshold: 60\n", encoding="utf-8")
        thresholds, policy = load_scoring_config(user)
        assert thresholds.perfect == 95
        assert thresholds.excellent == DEFAULT_FEEDBACK_THRESHOLDS.excellent
        assert policy.reward_threshold == 60
        assert policy.reps_per_coin == DEFAULT_REWARD_POLICY.reps_per_coin

    def test_invalid_values_warn_and_fall_back(self, tmp_path):
        user = tmp_path / "scoring.yaml"
        user.write_text("feedback:\n  perfect: 40\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="invalid feedback config"):
            thresholds, _ = load_scoring_config(user)
        assert thresholds == DEFAULT_FEEDBACK_THRESHOLDS

    @pytest.mark.parametrize("text", ["feedback: 5\n", "rewards: [1, 2]\n", "feedback: high\n"])
    def test_non_mapping_section_warns(self, tmp_path, text):
        user = tmp_path / "scoring.yaml"
        user.write_text(text, encoding="utf-8")
        with pytest.warns(UserWarning, match="must be a mapping"):
            thresholds, policy = load_scoring_config(user)
        assert thresholds == DEFAULT_FEEDBACK_THRESHOLDS
        assert policy == DEFAULT_REWARD_POLICY

    def test_unparseable_yaml_warns(self, tmp_path):
        user = tmp_path / "scoring.yaml"
        user.write_text("feedback: [unclosed\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="ignoring config file"):
            thresholds, policy = load_scoring_config(user)
        assert thresholds == DEFAULT_FEEDBACK_THRESHOLDS
        assert policy == DEFAULT_REWARD_POLICY

    def test_env_home_is_used(self, tmp_path, monkeypatch):
        monkeypatch.setenv("REP_SCORER_HOME", str(tmp_path))
        (tmp_path / "scoring.yaml").write_text("rewards:\n  xp_per_rep: 3\n", encoding="utf-8")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            _, policy = load_scoring_config()
        assert policy.xp_per_rep == 3
