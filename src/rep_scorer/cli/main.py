"""
CLI entry point using Typer.

Provides commands for scoring and workout bookkeeping:
- exercises: List supported exercises
- score-set: Score one set from per-rep readings
- template-check: Validate a template file
- add-template / templates: Save and list workout templates
- log-set: Score a set and record it under a workout
- summary: Per-exercise scores, overall score and rewards
"""

from .app import app
from .commands import scoring, templates, workouts  # noqa: F401  (registers commands)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
