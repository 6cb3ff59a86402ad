"""
Live feedback tiers.

Maps a finalized score to one of five ordered tiers.  The emphasis value
is a display hint (how large the feedback text is drawn); it plays no part
in any computation.
"""

from enum import Enum

from .config import DEFAULT_FEEDBACK_THRESHOLDS, FeedbackThresholds


class FeedbackTier(Enum):
    """Feedback tiers, best first."""

    PERFECT = ("Perfect!", 1.6)
    EXCELLENT = ("Excellent!", 1.4)
    GREAT = ("Great!", 1.2)
    GOOD = ("Good!", 1.0)
    MISS = ("Miss!", 1.0)

    def __init__(self, label: str, emphasis: float):
        self.label = label
        self.emphasis = emphasis

    @property
    def rank(self) -> int:
        """0 for PERFECT up to 4 for MISS (lower is better)."""
        return list(FeedbackTier).index(self)


def classify(
    score: float,
    thresholds: FeedbackThresholds = DEFAULT_FEEDBACK_THRESHOLDS,
) -> FeedbackTier:
    """
    Pick the feedback tier for a score.

    Args:
        score: Finalized score (nominally 0 to 100)
        thresholds: Minimum score for each tier

    Returns:
        The best tier whose threshold the score reaches, else MISS
    """
    if score >= thresholds.perfect:
        return FeedbackTier.PERFECT
    if score >= thresholds.excellent:
        return FeedbackTier.EXCELLENT
    if score >= thresholds.great:
        return FeedbackTier.GREAT
    if score >= thresholds.good:
        return FeedbackTier.GOOD
    return FeedbackTier.MISS
