"""
Per-rep metric averaging.

A RepAverager collects one metric channel (ROM, x-tilt, z-tilt, ...) for
the set in progress.  Each set owns its own averagers; abandoning a set
just means dropping them without finalizing.
"""

from .config import SCORE_MAX, SCORE_MIN, clamp


class RepAverager:
    """
    Running mean of normalized per-rep values.

    Normal channels clip each reading into [0, max_value].  Inverted
    channels (tilt, where a larger magnitude is worse) convert a reading
    into a penalty percentage: max(value, 0) / max_value * 100, capped at 100.
    """

    def __init__(self, max_value: float = 100.0, invert_score: bool = False):
        if max_value <= 0:
            raise ValueError("max_value must be positive")
        self.max_value = float(max_value)
        self.invert_score = invert_score
        self._total = 0.0
        self._count = 0

    @property
    def count(self) -> int:
        """Number of readings added since the last finalize."""
        return self._count

    def add(self, value: float) -> None:
        """Normalize one reading and add it to the running mean."""
        if self.invert_score:
            processed = min(max(value, 0.0) / self.max_value * SCORE_MAX, SCORE_MAX)
        else:
            processed = clamp(value, SCORE_MIN, self.max_value)
        self._total += processed
        self._count += 1

    def get_current_average(self) -> float:
        """Mean so far, without resetting (live feedback during a set)."""
        if self._count == 0:
            return 0.0
        return self._total / self._count

    def finalize_and_get_average(self) -> float:
        """Mean so far, then reset for the next set."""
        avg = self.get_current_average()
        self._total = 0.0
        self._count = 0
        return avg

    def __repr__(self) -> str:
        return (
            f"RepAverager(max_value={self.max_value}, invert_score={self.invert_score}, "
            f"count={self._count})"
        )
