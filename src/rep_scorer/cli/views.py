"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of scores, plans and summaries.
"""

from rich.console import Console
from rich.table import Table

from ..core.exercises import EXERCISE_CATALOG
from ..core.feedback import FeedbackTier
from ..core.models import ExerciseWithSets, Workout, WorkoutPlan, WorkoutSet, WorkoutSummary, WorkoutTemplate

console = Console()

_TIER_STYLES: dict[FeedbackTier, str] = {
    FeedbackTier.PERFECT: "bold blue",
    FeedbackTier.EXCELLENT: "bold green",
    FeedbackTier.GREAT: "yellow",
    FeedbackTier.GOOD: "dark_orange",
    FeedbackTier.MISS: "red",
}


def format_tier(tier: FeedbackTier) -> str:
    """Rich markup for a feedback tier label."""
    style = _TIER_STYLES[tier]
    return f"[{style}]{tier.label}[/{style}]"


def format_catalog_table() -> Table:
    """Table of every supported exercise."""
    table = Table(title="Exercises")
    table.add_column("Exercise", style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("ROM factor", justify="right")
    for kind in EXERCISE_CATALOG:
        table.add_row(kind.display_name, kind.canonical, f"{kind.rom_factor:.2f}")
    return table


def format_plan_table(plan: WorkoutPlan, title: str = "Plan") -> Table:
    """
    Create a table showing a workout plan.

    Args:
        plan: Plan to display
        title: Table title

    Returns:
        Rich Table object
    """
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Exercise", style="bold")
    table.add_column("Sets", justify="right")
    table.add_column("Weight", justify="right")
    for i, item in enumerate(plan.items, 1):
        weight = f"{item.weight:.1f} kg" if item.weight > 0 else "-"
        table.add_row(str(i), item.exercise.display_name, str(item.sets), weight)
    return table


def format_templates_table(templates: list[WorkoutTemplate]) -> Table:
    """Table of saved templates."""
    table = Table(title="Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Exercises")
    table.add_column("Sets", justify="right")
    table.add_column("Created", style="dim")
    for t in templates:
        names = ", ".join(item.exercise.display_name for item in t.plan.items)
        table.add_row(t.id, t.name, names, str(t.plan.total_sets), t.created_at or "")
    return table


def format_set_table(sets: list[WorkoutSet], title: str) -> Table:
    """Table of recorded sets with per-channel scores."""
    table = Table(title=title)
    table.add_column("Set", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("ROM", justify="right")
    table.add_column("X tilt", justify="right")
    table.add_column("Z tilt", justify="right")
    table.add_column("Score", justify="right", style="bold")
    for s in sets:
        table.add_row(
            str(s.set_number),
            str(s.reps),
            f"{s.rom_score:.1f}",
            f"{s.x_tilt_score:.1f}",
            f"{s.z_tilt_score:.1f}",
            f"{s.workout_score:.1f}",
        )
    return table


def print_set_result(workout_set: WorkoutSet, tier: FeedbackTier) -> None:
    """Show the outcome of one scored set."""
    console.print()
    console.print(format_set_table([workout_set], title="Set score"))
    console.print(f"Feedback: {format_tier(tier)}")
    console.print()


def print_workout_summary(
    workout: Workout,
    exercises: list[ExerciseWithSets],
    summary: WorkoutSummary,
) -> None:
    """Show a workout's per-exercise scores and payout."""
    console.print()
    console.print(f"[bold]{workout.name or workout.id}[/bold]  [dim]{workout.date}[/dim]")

    table = Table()
    table.add_column("Exercise", style="bold")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Avg score", justify="right")
    for e in exercises:
        table.add_row(
            e.exercise.type.display_name,
            str(len(e.sets)),
            str(sum(s.reps for s in e.sets)),
            str(e.avg_workout_score),
        )
    console.print(table)

    console.print(f"Overall score: [bold]{summary.avg_score:.1f}[/bold]")
    console.print(f"XP: [green]{summary.total_xp}[/green]   Coins: [yellow]{summary.total_coins}[/yellow]")
    if workout.rewards_awarded:
        console.print("[dim]Rewards awarded.[/dim]")
    elif workout.finalized:
        console.print("[dim]Finalized without rewards.[/dim]")
    console.print()


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]{message}[/blue]")
