"""
Data models for rep-scorer.

All core dataclasses representing workout plans, recorded workouts and
their derived summaries.  Score fields are floats nominally in [0, 100];
the range is guaranteed by the producers in scoring.py, not enforced here.
"""

from dataclasses import dataclass, field

from .exercises import ExerciseKind


@dataclass
class WorkoutPlanItem:
    """One exercise in a plan: how many sets at what weight."""

    exercise: ExerciseKind
    sets: int
    weight: float = 0.0

    def __post_init__(self) -> None:
        """Validate plan item data."""
        if self.sets < 1:
            raise ValueError("sets must be at least 1")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")


@dataclass
class WorkoutPlan:
    """
    Ordered list of plan items.

    May be empty when built directly; the codec refuses to decode an empty
    plan, so every persisted plan has at least one item.
    """

    items: list[WorkoutPlanItem] = field(default_factory=list)

    @property
    def total_sets(self) -> int:
        """Sum of planned sets across all items."""
        return sum(item.sets for item in self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class WorkoutTemplate:
    """A named, reusable plan saved by the user."""

    id: str
    name: str
    plan: WorkoutPlan
    created_at: str | None = None  # ISO-8601 timestamp


@dataclass
class Exercise:
    """One exercise instance within one workout session."""

    id: str
    workout_id: str
    type: ExerciseKind
    total_sets: int = 0
    weight: float = 0.0
    notes: str | None = None


@dataclass
class WorkoutSet:
    """
    A single completed set.

    rom_score, x_tilt_score and z_tilt_score are the finalized per-channel
    averages; workout_score is the composite set score.
    """

    id: str
    exercise_id: str
    workout_id: str
    set_number: int = 0
    reps: int = 0
    rom_score: float = 0.0
    x_tilt_score: float = 0.0
    z_tilt_score: float = 0.0
    workout_score: float = 0.0
    avg_rep_time: float = 0.0  # seconds
    vertical_accel: float = 0.0
    weight: float = 0.0
    notes: str | None = None


@dataclass
class ExerciseWithSets:
    """Read-side aggregate: an exercise, its sets and the rounded average score."""

    exercise: Exercise
    sets: list[WorkoutSet]
    avg_workout_score: int


@dataclass
class Workout:
    """
    A completed workout session.

    finalized is set once, when the reward decision is made, whether or
    not anything was paid.  rewards_awarded is set at the same moment when
    the workout qualified.  Neither is cleared afterwards.
    """

    id: str
    date: str
    name: str
    total_exercises: int = 0
    total_sets: int = 0
    overall_score: float = 0.0
    notes: str | None = None
    rewards_awarded: bool = False
    finalized: bool = False


@dataclass(frozen=True)
class WorkoutSummary:
    """Derived payout report for one finalized workout."""

    total_xp: int
    total_coins: int
    avg_score: float = 0.0
