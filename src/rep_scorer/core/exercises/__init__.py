"""
Exercise catalog for rep-scorer.

Each exercise is an ExerciseKind member carrying its ROM factor and
canonical storage id.
"""

from .base import ExerciseKind, UnknownExerciseError
from .registry import (
    EXERCISE_CATALOG,
    canonical_string,
    display_name,
    parse,
    rom_factor,
    try_parse,
)

__all__ = [
    "ExerciseKind",
    "UnknownExerciseError",
    "EXERCISE_CATALOG",
    "canonical_string",
    "display_name",
    "parse",
    "rom_factor",
    "try_parse",
]
