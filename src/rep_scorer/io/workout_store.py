"""
JSONL-based storage for templates and recorded workouts.

Handles reading, writing, and managing the record files in the data
directory.  Each file holds one encoded record per line in the same
key/value shape the remote document store uses.
"""

import json
import os
from pathlib import Path
from typing import Any, Iterator

from ..core.errors import WORKOUT_NOT_FOUND
from ..core.models import Exercise, ExerciseWithSets, Workout, WorkoutSet, WorkoutTemplate
from ..core.scoring import group_sets_by_exercise
from .codec import (
    DecodeResult,
    RecordKind,
    ValidationError,
    decode_record,
    encode_exercise,
    encode_template,
    encode_workout,
    encode_workout_set,
)

_FILES: dict[str, str] = {
    "template": "templates.jsonl",
    "workout": "workouts.jsonl",
    "exercise": "exercises.jsonl",
    "set": "sets.jsonl",
}


class WorkoutStore:
    """
    Manages workout data stored as JSONL files in one directory.

    Files:
    - templates.jsonl: saved workout templates
    - workouts.jsonl: one record per finished workout
    - exercises.jsonl: exercises, linked to a workout by workoutId
    - sets.jsonl: completed sets, linked by workoutId and exerciseId

    Records that fail to decode (e.g. missing id fields) are skipped and
    kept in ``skipped`` for the caller to report.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the JSONL files
        """
        self.data_dir = Path(data_dir)
        self.skipped: list[DecodeResult[Any]] = []

    def path_for(self, kind: RecordKind) -> Path:
        return self.data_dir / _FILES[kind]

    def exists(self) -> bool:
        """Check if the data directory has been initialized."""
        return self.path_for("workout").exists()

    def init(self) -> None:
        """
        Create the data directory and empty record files if missing.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for kind in _FILES:
            path = self.path_for(kind)  # type: ignore[arg-type]
            if not path.exists():
                path.touch()

    # ------------------------------------------------------------------
    # Raw JSONL access
    # ------------------------------------------------------------------

    def _iter_raw(self, kind: RecordKind) -> Iterator[Any]:
        path = self.path_for(kind)
        if not path.exists():
            return
        with open(path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValidationError(f"Error parsing {path.name} line {line_num}: {e}") from e
                yield data

    def _load(self, kind: RecordKind) -> list[Any]:
        values = []
        for data in self._iter_raw(kind):
            result = decode_record(kind, data)
            if result.ok:
                values.append(result.value)
            else:
                self.skipped.append(result)
        return values

    def _append(self, kind: RecordKind, record: dict[str, Any]) -> None:
        self.init()
        with open(self.path_for(kind), "a", encoding="utf-8") as f:
            f.write(json.dumps(record, separators=(",", ":")) + "\n")

    def _rewrite(self, kind: RecordKind, records: list[Any]) -> None:
        self.init()
        with open(self.path_for(kind), "w", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record, separators=(",", ":")) + "\n")

    def _upsert(self, kind: RecordKind, record: dict[str, Any], key: tuple[str, ...]) -> None:
        """
        Replace the record whose key fields match, or append it.

        Lines that are not JSON objects never match and are kept as they are.
        """
        records = list(self._iter_raw(kind))
        match = tuple(record.get(k) for k in key)
        for i, existing in enumerate(records):
            if not isinstance(existing, dict):
                continue
            if tuple(existing.get(k) for k in key) == match:
                records[i] = record
                self._rewrite(kind, records)
                return
        self._append(kind, record)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def save_template(self, template: WorkoutTemplate) -> None:
        """Insert or replace a template (matched by id)."""
        self._upsert("template", encode_template(template), ("id",))

    def load_templates(self) -> list[WorkoutTemplate]:
        """Return every template whose plan decodes."""
        return self._load("template")

    def get_template(self, template_id: str) -> WorkoutTemplate | None:
        for template in self.load_templates():
            if template.id == template_id:
                return template
        return None

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def save_workout(self, workout: Workout) -> None:
        """Insert or replace a workout (matched by id)."""
        self._upsert("workout", encode_workout(workout), ("id",))

    def load_workouts(self) -> list[Workout]:
        return self._load("workout")

    def get_workout(self, workout_id: str) -> Workout | None:
        for workout in self.load_workouts():
            if workout.id == workout_id:
                return workout
        return None

    # ------------------------------------------------------------------
    # Exercises and sets
    # ------------------------------------------------------------------

    def save_exercise(self, exercise: Exercise) -> None:
        """Insert or replace an exercise (matched by id within its workout)."""
        self._upsert("exercise", encode_exercise(exercise), ("id", "workoutId"))

    def load_exercises(self, workout_id: str) -> list[Exercise]:
        return [e for e in self._load("exercise") if e.workout_id == workout_id]

    def append_set(self, workout_set: WorkoutSet) -> None:
        """Append a completed set."""
        self._append("set", encode_workout_set(workout_set))

    def load_sets(self, workout_id: str) -> list[WorkoutSet]:
        return [s for s in self._load("set") if s.workout_id == workout_id]

    def load_workout_details(self, workout_id: str) -> tuple[Workout, list[ExerciseWithSets]]:
        """
        Load a workout with its exercises and sets grouped together.

        Raises:
            KeyError: If no workout has the given id
        """
        workout = self.get_workout(workout_id)
        if workout is None:
            raise KeyError(WORKOUT_NOT_FOUND)
        exercises = self.load_exercises(workout_id)
        sets = self.load_sets(workout_id)
        return workout, group_sets_by_exercise(exercises, sets)


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    ``REP_SCORER_HOME`` overrides the default ``~/.rep-scorer``.

    Returns:
        Default data directory path
    """
    home = os.environ.get("REP_SCORER_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".rep-scorer"


def get_default_store() -> WorkoutStore:
    """
    Get a WorkoutStore at the default location.

    Returns:
        WorkoutStore instance
    """
    return WorkoutStore(get_default_data_dir())
