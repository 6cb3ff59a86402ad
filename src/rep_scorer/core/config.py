"""
Configuration constants for the rep-scoring model.

All adjustable parameters are centralized here for easy tuning.
Feedback thresholds and reward constants are grouped into frozen
dataclasses so callers can inject their own values; the module-level
defaults below are what the engine uses when nothing is injected.
"""

from dataclasses import dataclass, field
from typing import Final

# =============================================================================
# PER-REP NORMALIZATION
# =============================================================================

SCORE_MIN: Final[float] = 0.0
SCORE_MAX: Final[float] = 100.0

ROM_MAX_VALUE: Final[float] = 100.0  # ROM readings arrive already scaled to 0-100
TILT_MAX_VALUE: Final[float] = 100.0  # Tilt magnitude that maps to a full penalty

# =============================================================================
# LIVE FEEDBACK TIERS
# =============================================================================

PERFECT_THRESHOLD: Final[float] = 90.0
EXCELLENT_THRESHOLD: Final[float] = 80.0
GREAT_THRESHOLD: Final[float] = 70.0
GOOD_THRESHOLD: Final[float] = 50.0

# Weight of the last rep's ROM score in the per-rep feedback composite
FEEDBACK_ROM_WEIGHT: Final[float] = 2.0

# =============================================================================
# REWARDS
# =============================================================================

XP_PER_REP: Final[float] = 1.0
REPS_PER_COIN: Final[float] = 5.0
REWARD_THRESHOLD: Final[float] = GOOD_THRESHOLD  # overall score needed for a payout

# (minimum score, multiplier) pairs, highest first
XP_SCORE_MULTIPLIERS: Final[tuple[tuple[float, float], ...]] = (
    (90.0, 2.0),
    (80.0, 1.5),
)
XP_BASE_MULTIPLIER: Final[float] = 1.0


@dataclass(frozen=True)
class FeedbackThresholds:
    """Minimum scores that select each feedback tier (anything lower is MISS)."""

    perfect: float = PERFECT_THRESHOLD
    excellent: float = EXCELLENT_THRESHOLD
    great: float = GREAT_THRESHOLD
    good: float = GOOD_THRESHOLD

    def __post_init__(self) -> None:
        ordered = (self.perfect, self.excellent, self.great, self.good)
        if any(hi < lo for hi, lo in zip(ordered, ordered[1:])):
            raise ValueError(
                f"Feedback thresholds must be non-increasing from PERFECT to GOOD, got {ordered}"
            )


@dataclass(frozen=True)
class RewardPolicy:
    """
    Constants for the XP / coin payout of a finished workout.

    xp_score_multipliers is a sequence of (minimum score, multiplier) pairs;
    the first pair whose minimum the average score reaches wins, otherwise
    base_multiplier applies.
    """

    xp_per_rep: float = XP_PER_REP
    reps_per_coin: float = REPS_PER_COIN
    reward_threshold: float = REWARD_THRESHOLD
    base_multiplier: float = XP_BASE_MULTIPLIER
    xp_score_multipliers: tuple[tuple[float, float], ...] = field(
        default=XP_SCORE_MULTIPLIERS
    )

    def __post_init__(self) -> None:
        if self.xp_per_rep < 0:
            raise ValueError("xp_per_rep must be non-negative")
        if self.reps_per_coin <= 0:
            raise ValueError("reps_per_coin must be positive")
        if self.base_multiplier < 0:
            raise ValueError("base_multiplier must be non-negative")

        # Normalise to highest-threshold-first and check the step function
        # never decreases as the score rises.
        steps = tuple(
            sorted(
                ((float(t), float(m)) for t, m in self.xp_score_multipliers),
                key=lambda step: step[0],
                reverse=True,
            )
        )
        multipliers = [m for _, m in steps] + [self.base_multiplier]
        if any(hi < lo for hi, lo in zip(multipliers, multipliers[1:])):
            raise ValueError(
                "xp_score_multipliers must not decrease as the score threshold rises"
            )
        object.__setattr__(self, "xp_score_multipliers", steps)


DEFAULT_FEEDBACK_THRESHOLDS: Final[FeedbackThresholds] = FeedbackThresholds()
DEFAULT_REWARD_POLICY: Final[RewardPolicy] = RewardPolicy()


def clamp(value: float, low: float, high: float) -> float:
    """Clip value into [low, high]."""
    return max(low, min(high, value))
