"""
XP / coin payout for finished workouts.

difficulty = Σ reps × (1 + rom_factor)      over every recorded set
xp         = ⌊difficulty × xp_per_rep × multiplier(avg_score)⌋
coins      = ⌊difficulty × avg_score/100 / reps_per_coin⌋

Exercises with a larger ROM factor move the load further per rep and so
earn proportionally more.  The multiplier is a step function of the
workout's overall score taken from RewardPolicy.
"""

import math
from dataclasses import dataclass, replace
from typing import Sequence

from .config import DEFAULT_REWARD_POLICY, SCORE_MAX, SCORE_MIN, RewardPolicy, clamp
from .models import ExerciseWithSets, Workout, WorkoutSummary


@dataclass(frozen=True)
class RewardOutcome:
    """Result of finalizing a workout."""

    workout: Workout
    summary: WorkoutSummary
    eligible: bool


def exercise_difficulty(exercise: ExerciseWithSets) -> float:
    """
    ROM-weighted work for one exercise.

    Only recorded reps count; an exercise whose sets carry no reps earns
    nothing.
    """
    weight = 1.0 + exercise.exercise.type.rom_factor
    return sum(max(s.reps, 0) for s in exercise.sets) * weight


def workout_difficulty(exercises: Sequence[ExerciseWithSets]) -> float:
    """Sum of exercise_difficulty over the workout."""
    return sum(exercise_difficulty(e) for e in exercises)


def score_multiplier(avg_score: float, policy: RewardPolicy = DEFAULT_REWARD_POLICY) -> float:
    """XP multiplier for an overall score (non-decreasing in the score)."""
    for threshold, multiplier in policy.xp_score_multipliers:
        if avg_score >= threshold:
            return multiplier
    return policy.base_multiplier


def calculate_summary(
    workout: Workout,
    exercises: Sequence[ExerciseWithSets],
    policy: RewardPolicy = DEFAULT_REWARD_POLICY,
) -> WorkoutSummary:
    """
    Compute the payout report for a workout.

    Args:
        workout: Finished workout; its overall_score is the average score
        exercises: The workout's exercises with their recorded sets
        policy: Reward constants

    Returns:
        WorkoutSummary with XP, coins and the average score
    """
    avg_score = workout.overall_score
    bounded = clamp(avg_score, SCORE_MIN, SCORE_MAX) if not math.isnan(avg_score) else 0.0
    difficulty = workout_difficulty(exercises)

    total_xp = math.floor(difficulty * policy.xp_per_rep * score_multiplier(bounded, policy))
    total_coins = math.floor(difficulty * (bounded / SCORE_MAX) / policy.reps_per_coin)

    return WorkoutSummary(
        total_xp=int(total_xp),
        total_coins=int(total_coins),
        avg_score=avg_score,
    )


def is_eligible(workout: Workout, policy: RewardPolicy = DEFAULT_REWARD_POLICY) -> bool:
    """True if the reward decision is still open and the workout scored high enough."""
    if workout.finalized or workout.rewards_awarded:
        return False
    return workout.overall_score >= policy.reward_threshold


def finalize_workout(
    workout: Workout,
    exercises: Sequence[ExerciseWithSets],
    policy: RewardPolicy = DEFAULT_REWARD_POLICY,
) -> RewardOutcome:
    """
    Decide the payout for a finished workout.

    The decision is taken once.  The returned workout is a finalized copy,
    with rewards_awarded=True when it was eligible.  A workout that was
    already finalized (or paid out) is returned unchanged and is never
    eligible again.
    """
    summary = calculate_summary(workout, exercises, policy)
    if workout.finalized or workout.rewards_awarded:
        return RewardOutcome(workout=workout, summary=summary, eligible=False)
    eligible = is_eligible(workout, policy)
    workout = replace(workout, finalized=True, rewards_awarded=eligible)
    return RewardOutcome(workout=workout, summary=summary, eligible=eligible)
