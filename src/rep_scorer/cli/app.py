"""Shared Typer app object, shared option types, and store/config utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import FeedbackThresholds, RewardPolicy
from ..core.engine.config_loader import load_scoring_config
from ..io.workout_store import WorkoutStore, get_default_data_dir

# Shared --data-dir option type used across all store-backed commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Directory holding the workout JSONL files"),
]

# Shared --config option type for scoring overrides
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Scoring YAML overriding the bundled thresholds"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="rep-scorer",
    help="Score workout sets from per-rep motion metrics and tally workout rewards.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> WorkoutStore:
    """Get workout store from path or default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return WorkoutStore(data_dir)


def get_scoring(config_path: Path | None) -> tuple[FeedbackThresholds, RewardPolicy]:
    """Load feedback thresholds and reward policy (bundled + user overrides)."""
    return load_scoring_config(config_path)
