"""
Exercise catalog lookups.

All supported exercises are the members of ExerciseKind.  Use parse() to
turn a stored or user-typed string back into a kind; it is tolerant of
case and of hyphen / underscore / space separators but never guesses.
"""

from .base import ExerciseKind, UnknownExerciseError

EXERCISE_CATALOG: tuple[ExerciseKind, ...] = tuple(ExerciseKind)

_BY_NAME: dict[str, ExerciseKind] = {kind.name: kind for kind in ExerciseKind}


def rom_factor(kind: ExerciseKind) -> float:
    """Return the ROM scaling factor for the given exercise."""
    return kind.rom_factor


def canonical_string(kind: ExerciseKind) -> str:
    """Return the lowercase hyphenated storage form of the given exercise."""
    return kind.canonical


def display_name(kind: ExerciseKind) -> str:
    """Return the human-readable name of the given exercise."""
    return kind.display_name


def parse(text: str) -> ExerciseKind:
    """
    Parse an exercise id into an ExerciseKind.

    Args:
        text: e.g. "bench-press", "BENCH_PRESS", "Lat pulldown"

    Returns:
        Matching ExerciseKind

    Raises:
        UnknownExerciseError: If text is not a string or names no exercise
    """
    if not isinstance(text, str):
        raise UnknownExerciseError(f"Exercise id must be a string, got {text!r}")
    normalized = text.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return _BY_NAME[normalized]
    except KeyError:
        valid = ", ".join(kind.canonical for kind in EXERCISE_CATALOG)
        raise UnknownExerciseError(
            f"Unknown exercise '{text}'. Valid ids: {valid}"
        ) from None


def try_parse(text: object) -> ExerciseKind | None:
    """Like parse(), but return None instead of raising."""
    try:
        return parse(text)  # type: ignore[arg-type]
    except UnknownExerciseError:
        return None
