"""Daily and weekly training streaks and their bonus tiers."""

from datetime import date, datetime, timedelta
from typing import Iterable, Mapping, Optional, Set

from ..config import Settings, get_settings
from ..models.gamification import StreakInfo
from ..models.logs import WorkoutLogEntry
from ..utils.timeutils import calendar_day, week_start_date


def _training_days(logs: Iterable[WorkoutLogEntry], tz_name: Optional[str]) -> Set[date]:
    return {calendar_day(log.timestamp, tz_name) for log in logs}


def _reference_day(reference_date: datetime, tz_name: Optional[str]) -> date:
    if isinstance(reference_date, datetime):
        return calendar_day(reference_date, tz_name)
    return reference_date


def calculate_daily_streak(
    workout_logs: Iterable[WorkoutLogEntry],
    reference_date: datetime,
    tz_name: Optional[str] = None,
) -> int:
    """
    Count consecutive days with at least one workout, ending today.

    Walks backward from the reference day and stops at the first day
    without a workout, so a streak is 0 until today's workout is logged.
    """
    days = _training_days(workout_logs, tz_name)
    day = _reference_day(reference_date, tz_name)
    streak = 0
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_weekly_streak(
    workout_logs: Iterable[WorkoutLogEntry],
    reference_date: datetime,
    week_start: int = 0,
    tz_name: Optional[str] = None,
) -> int:
    """Count consecutive calendar weeks with at least one workout, ending this week."""
    weeks = {week_start_date(day, week_start) for day in _training_days(workout_logs, tz_name)}
    week = week_start_date(_reference_day(reference_date, tz_name), week_start)
    streak = 0
    while week in weeks:
        streak += 1
        week -= timedelta(weeks=1)
    return streak


def longest_daily_streak(
    workout_logs: Iterable[WorkoutLogEntry],
    tz_name: Optional[str] = None,
) -> int:
    """Longest run of consecutive training days anywhere in the history."""
    days = _training_days(workout_logs, tz_name)
    longest = 0
    for day in days:
        if day - timedelta(days=1) in days:
            continue  # not the start of a run
        length = 1
        while day + timedelta(days=length) in days:
            length += 1
        longest = max(longest, length)
    return longest


def streak_bonus(streak: int, bonus_table: Mapping[int, int]) -> int:
    """Bonus of the highest threshold not exceeding the streak, or 0."""
    for threshold in sorted(bonus_table, reverse=True):
        if streak >= threshold:
            return bonus_table[threshold]
    return 0


def calculate_streak_bonuses(
    workout_logs: Iterable[WorkoutLogEntry],
    reference_date: datetime,
    settings: Optional[Settings] = None,
) -> StreakInfo:
    """
    Current daily and weekly streaks with their bonuses.

    Args:
        workout_logs: Workout history (any order)
        reference_date: "Today" for the streak walk
        settings: Scoring settings (bonus tables, week start, timezone)

    Returns:
        StreakInfo; all zeros for an empty history
    """
    settings = settings or get_settings()
    logs = list(workout_logs)
    if not logs:
        return StreakInfo()

    daily = calculate_daily_streak(logs, reference_date, settings.timezone)
    weekly = calculate_weekly_streak(logs, reference_date, settings.week_start, settings.timezone)

    return StreakInfo(
        daily_streak=daily,
        weekly_streak=weekly,
        daily_bonus=streak_bonus(daily, settings.daily_streak_bonuses),
        weekly_bonus=streak_bonus(weekly, settings.weekly_streak_bonuses),
        longest_daily_streak=longest_daily_streak(logs, settings.timezone),
    )
