"""
Base types for the exercise catalog.

ExerciseKind is the closed set of exercises the tracker can score.  Each
kind carries its range-of-motion scaling factor (the fraction of the
user's height the bar or handle travels on a full rep) and a canonical
lowercase hyphenated id used in persisted records.
"""

from enum import Enum


class ExerciseKind(Enum):
    """Supported exercises, valued by their ROM factor."""

    BENCH_PRESS = 0.28
    SQUAT = 0.53
    BICEP_CURL = 0.15
    LAT_PULLDOWN = 0.60
    SEATED_ROWS = 0.40
    TRICEP_EXTENSION = 0.18

    @property
    def rom_factor(self) -> float:
        """Fraction of body height covered by one full rep."""
        return self.value

    @property
    def canonical(self) -> str:
        """Storage id, e.g. ``bench-press``."""
        return self.name.lower().replace("_", "-")

    @property
    def display_name(self) -> str:
        """Human label, e.g. ``Bench press``."""
        return self.name.replace("_", " ").lower().capitalize()


class UnknownExerciseError(ValueError):
    """Raised when a string does not name any ExerciseKind."""

    pass
