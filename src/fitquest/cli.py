#!/usr/bin/env python3
"""
FitQuest maintenance CLI.

Admin tooling over JSON exports of profiles, logs and the exercise library.

Usage:
    fitquest level --xp 12500
    fitquest validate-xp --profile profile.json --exercise-logs workouts.json --food-logs food.json
    fitquest validate-xp ... --fix --output fixed_profile.json
    fitquest recompute-muscles --logs workouts.json --library exercises.json --output scores.json
    fitquest streaks --logs workouts.json --reference-date 2024-01-07
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import Settings, get_settings
from .exceptions import ConfigurationError, DataLoadError, DataNotFoundError, ErrorCode, FitQuestError
from .models.exercise import ExerciseMetadata
from .models.gamification import MuscleWindow, UserProfile
from .models.logs import WorkoutLogEntry
from .scoring.leveling import level_from_xp, next_milestone
from .scoring.muscle_load import calculate_time_based_muscle_scores
from .scoring.reconciliation import apply_xp_correction, validate_user_xp
from .scoring.streaks import calculate_streak_bonuses

console = Console()
logger = logging.getLogger(__name__)

_WORKOUT_LOGS = TypeAdapter(List[WorkoutLogEntry])
_EXERCISES = TypeAdapter(List[ExerciseMetadata])


# =============================================================================
# Input / output helpers
# =============================================================================


def _parse_reference_date(value: str) -> datetime:
    """Parse an ISO date or datetime given on the command line."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not an ISO date or datetime: {value}")
    if len(value) == 10:
        # A bare date means the end of that day.
        parsed = parsed.replace(hour=23, minute=59, second=59)
    return parsed


def load_json(path: str) -> Any:
    """Read a JSON export, raising FitQuest errors for missing or broken files."""
    file_path = Path(path)
    if not file_path.exists():
        raise DataNotFoundError(path)
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON in {path}: {e.msg}", path=path, details={"line": e.lineno}) from e


def _validate(adapter: TypeAdapter, data: Any, path: str) -> Any:
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise DataLoadError(
            f"{path} does not match the expected document shape",
            path=path,
            details={"errors": e.error_count(), "first": e.errors()[0]["msg"]},
        ) from e


def load_profile(path: str) -> UserProfile:
    return _validate(TypeAdapter(UserProfile), load_json(path), path)


def load_workout_logs(path: str) -> List[WorkoutLogEntry]:
    return _validate(_WORKOUT_LOGS, _as_list(load_json(path)), path)


def load_exercise_library(path: str) -> Dict[str, ExerciseMetadata]:
    """Load exercises given either as a list or as a mapping keyed by id."""
    exercises = _validate(_EXERCISES, _as_list(load_json(path)), path)
    return {exercise.id: exercise for exercise in exercises}


def _as_list(data: Any) -> List[Any]:
    """Accept a list of documents or a mapping of id -> document."""
    if isinstance(data, dict):
        return [{"id": key, **value} if isinstance(value, dict) else value for key, value in data.items()]
    return data


def write_json(path: str, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
    console.print(f"[green]Wrote {path}[/green]")


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid FITQUEST_* settings: {e.error_count()} error(s)") from e


# =============================================================================
# Commands
# =============================================================================


def cmd_level(args) -> None:
    """Show level information for an XP total."""
    info = level_from_xp(args.xp)
    milestone = next_milestone(info.level)

    text = f"""
[cyan]Total XP:[/cyan]       {args.xp:,.0f}
[cyan]Level:[/cyan]          {info.level} ({info.title})
[cyan]Progress:[/cyan]       {info.progress_percent:.2f}%
[cyan]XP to next:[/cyan]     {info.xp_to_next:,.0f}
[cyan]Next milestone:[/cyan] {milestone if milestone is not None else '-'}
"""
    console.print(Panel(text, title="Level", box=box.ROUNDED))


def cmd_validate_xp(args, settings: Settings) -> None:
    """Compare a profile's stored XP with the total from its logs."""
    if args.fix and not args.output:
        raise FitQuestError("--fix requires --output", code=ErrorCode.VALIDATION_ERROR)

    profile = load_profile(args.profile)
    exercise_logs = _as_list(load_json(args.exercise_logs))
    food_logs = _as_list(load_json(args.food_logs))

    result = validate_user_xp(profile, exercise_logs, food_logs, args.tolerance, settings)

    table = Table(title="XP Validation", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Stored XP", f"{result.stored_xp:,.1f}")
    table.add_row("Calculated XP", f"{result.calculated_xp:,.1f}")
    table.add_row("Discrepancy", f"{result.discrepancy:+,.1f}")
    table.add_row("Valid", "[green]yes[/green]" if result.is_valid else "[red]no[/red]")
    console.print(table)

    if args.fix:
        fixed = apply_xp_correction(profile, result)
        write_json(args.output, fixed.model_dump(by_alias=True, mode="json"))
    elif args.output:
        write_json(args.output, result.model_dump(by_alias=True))


def cmd_recompute_muscles(args, settings: Settings) -> None:
    """Rebuild windowed muscle scores from the workout history."""
    logs = load_workout_logs(args.logs)
    library = load_exercise_library(args.library)
    reference = args.reference_date or datetime.now(timezone.utc)

    scores = calculate_time_based_muscle_scores(logs, library, reference)

    table = Table(title=f"Muscle Scores ({len(scores)} muscles)", box=box.ROUNDED)
    table.add_column("Muscle", style="cyan")
    for window in MuscleWindow:
        table.add_column(window.value, justify="right")
    for muscle in sorted(scores):
        record = scores[muscle]
        table.add_row(muscle, *(f"{record.get(window):.0f}" for window in MuscleWindow))
    console.print(table)

    if args.output:
        write_json(
            args.output,
            {muscle: record.model_dump(by_alias=True, mode="json") for muscle, record in scores.items()},
        )


def cmd_streaks(args, settings: Settings) -> None:
    """Show current streaks and their bonuses."""
    logs = load_workout_logs(args.logs)
    reference = args.reference_date or datetime.now(timezone.utc)
    info = calculate_streak_bonuses(logs, reference, settings)

    text = f"""
[cyan]Daily streak:[/cyan]   {info.daily_streak} days (+{info.daily_bonus} XP)
[cyan]Weekly streak:[/cyan]  {info.weekly_streak} weeks (+{info.weekly_bonus} XP)
[cyan]Longest daily:[/cyan]  {info.longest_daily_streak} days
"""
    console.print(Panel(text, title="Streaks", box=box.ROUNDED))


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="FitQuest - gamification engine maintenance tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fitquest level --xp 12500
  fitquest validate-xp --profile p.json --exercise-logs w.json --food-logs f.json
  fitquest recompute-muscles --logs w.json --library exercises.json --output scores.json
  fitquest streaks --logs w.json --reference-date 2024-01-07
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Level command
    level_p = subparsers.add_parser("level", help="Show level for an XP total")
    level_p.add_argument("--xp", type=float, required=True, help="Total XP")

    # Validate XP command
    validate_p = subparsers.add_parser("validate-xp", help="Check stored XP against the logs")
    validate_p.add_argument("--profile", required=True, help="Profile JSON export")
    validate_p.add_argument("--exercise-logs", required=True, help="Workout logs JSON export")
    validate_p.add_argument("--food-logs", required=True, help="Food logs JSON export")
    validate_p.add_argument("--tolerance", type=float, default=None, help="Allowed XP difference")
    validate_p.add_argument("--fix", action="store_true", help="Write a profile with corrected XP")
    validate_p.add_argument("--output", "-o", help="Output file")

    # Recompute muscles command
    recompute_p = subparsers.add_parser("recompute-muscles", help="Rebuild windowed muscle scores")
    recompute_p.add_argument("--logs", required=True, help="Workout logs JSON export")
    recompute_p.add_argument("--library", required=True, help="Exercise library JSON export")
    recompute_p.add_argument(
        "--reference-date", type=_parse_reference_date, help="Reference date (default: now)"
    )
    recompute_p.add_argument("--output", "-o", help="Output file")

    # Streaks command
    streaks_p = subparsers.add_parser("streaks", help="Show current training streaks")
    streaks_p.add_argument("--logs", required=True, help="Workout logs JSON export")
    streaks_p.add_argument(
        "--reference-date", type=_parse_reference_date, help="Reference date (default: now)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "level":
            cmd_level(args)
            return 0

        settings = _load_settings()
        if args.command == "validate-xp":
            cmd_validate_xp(args, settings)
        elif args.command == "recompute-muscles":
            cmd_recompute_muscles(args, settings)
        elif args.command == "streaks":
            cmd_streaks(args, settings)
    except FitQuestError as e:
        logger.debug("Command failed: %r", e)
        console.print(f"[red]Error ({e.code.value}):[/red] {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
