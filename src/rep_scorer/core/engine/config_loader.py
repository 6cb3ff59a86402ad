"""
YAML → typed scoring config loader.

Loads scoring constants from scoring.yaml (bundled with the package) and
optionally merges user overrides from ~/.rep-scorer/scoring.yaml.

Usage:
    from rep_scorer.core.engine.config_loader import load_scoring_config
    thresholds, policy = load_scoring_config()

If the bundled YAML cannot be parsed, the Python defaults from config.py
are used (no crash).  If the user override file exists but has parse
errors or invalid values, a warning is emitted and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    DEFAULT_FEEDBACK_THRESHOLDS,
    DEFAULT_REWARD_POLICY,
    FeedbackThresholds,
    RewardPolicy,
)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} when it is missing or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"rep-scorer: ignoring config file {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    """Return cfg[name] if it is a mapping; raise TypeError for anything else but null."""
    section = cfg.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise TypeError(f"section '{name}' must be a mapping, got {type(section).__name__}")
    return section


def _feedback_from_section(section: dict[str, Any]) -> FeedbackThresholds:
    d = DEFAULT_FEEDBACK_THRESHOLDS
    return FeedbackThresholds(
        perfect=float(section.get("perfect", d.perfect)),
        excellent=float(section.get("excellent", d.excellent)),
        great=float(section.get("great", d.great)),
        good=float(section.get("good", d.good)),
    )


def _policy_from_section(section: dict[str, Any]) -> RewardPolicy:
    d = DEFAULT_REWARD_POLICY
    raw_steps = section.get("xp_score_multipliers", d.xp_score_multipliers)
    steps = tuple((float(t), float(m)) for t, m in raw_steps)
    return RewardPolicy(
        xp_per_rep=float(section.get("xp_per_rep", d.xp_per_rep)),
        reps_per_coin=float(section.get("reps_per_coin", d.reps_per_coin)),
        reward_threshold=float(section.get("reward_threshold", d.reward_threshold)),
        base_multiplier=float(section.get("base_multiplier", d.base_multiplier)),
        xp_score_multipliers=steps,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled scoring.yaml, or None if not found."""
    candidate = Path(__file__).parent.parent.parent / "scoring.yaml"
    if candidate.exists():
        return candidate
    try:
        ref = importlib.resources.files("rep_scorer").joinpath("scoring.yaml")
        with importlib.resources.as_file(ref) as p:
            return p if p.exists() else None
    except (ModuleNotFoundError, FileNotFoundError, TypeError):
        return None


def get_user_yaml_path() -> Path | None:
    """Return <data dir>/scoring.yaml if it exists, else None."""
    home = os.environ.get("REP_SCORER_HOME")
    base = Path(home).expanduser() if home else Path.home() / ".rep-scorer"
    p = base / "scoring.yaml"
    return p if p.exists() else None


def load_model_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge scoring configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/rep_scorer/scoring.yaml
    2. User override (``user_path`` or ~/.rep-scorer/scoring.yaml)

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


def load_scoring_config(
    user_path: Path | None = None,
) -> tuple[FeedbackThresholds, RewardPolicy]:
    """
    Build typed feedback thresholds and reward policy from YAML.

    Invalid values (wrong types, non-monotonic thresholds) fall back to the
    defaults for the affected section, with a warning.
    """
    cfg = load_model_config(user_path)

    try:
        thresholds = _feedback_from_section(_section(cfg, "feedback"))
    except (TypeError, ValueError) as exc:
        warnings.warn(f"rep-scorer: invalid feedback config ({exc}); using defaults", stacklevel=2)
        thresholds = DEFAULT_FEEDBACK_THRESHOLDS

    try:
        policy = _policy_from_section(_section(cfg, "rewards"))
    except (TypeError, ValueError) as exc:
        warnings.warn(f"rep-scorer: invalid rewards config ({exc}); using defaults", stacklevel=2)
        policy = DEFAULT_REWARD_POLICY

    return thresholds, policy
