"""Exercise XP scoring.

Score = base * effort multiplier + novelty + personal best + lagging muscle,
rounded once at the end.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Mapping, Optional

from ..config import Settings, get_settings
from ..models.exercise import ExerciseMetadata
from ..models.gamification import ExerciseScoreBreakdown, LaggingMuscle, UserProfile
from ..models.logs import SetEntry, WorkoutLogEntry
from ..utils.numbers import round_half_up
from ..utils.timeutils import align_to_reference, calendar_day, week_start_date
from .lagging import calculate_lagging_muscle_bonus
from .personal_bests import calculate_personal_best_bonus

logger = logging.getLogger(__name__)


def calculate_set_score(set_entry: SetEntry, settings: Settings) -> float:
    """Raw score of one set; 0 for a set without reps."""
    reps = set_entry.reps or 0
    if reps <= 0:
        return 0.0
    weight = set_entry.weight or 0
    if weight > 0:
        return reps * weight * settings.weight_coefficient
    return reps * settings.bodyweight_coefficient


def calculate_base_score(entry: WorkoutLogEntry, settings: Optional[Settings] = None) -> float:
    """
    Unrounded base score of an entry.

    Sets score ``reps * weight * 0.1`` (or ``reps * 1.0`` without weight).
    When diminishing returns are enabled, sets from the configured set
    number on are scaled down. An entry whose sets contribute nothing falls
    back to ``duration * 10``.
    """
    settings = settings or get_settings()
    start_set = settings.diminishing_returns_start_set

    total = 0.0
    for number, set_entry in enumerate(entry.sets, start=1):
        set_score = calculate_set_score(set_entry, settings)
        if start_set is not None and number >= start_set:
            set_score *= settings.diminishing_returns_multiplier
        total += set_score

    if total > 0:
        return total
    if entry.duration and entry.duration > 0:
        return entry.duration * settings.duration_coefficient
    return 0.0


def effort_multiplier(exercise: Optional[ExerciseMetadata], settings: Optional[Settings] = None) -> float:
    settings = settings or get_settings()
    if exercise is None:
        return 1.0
    return settings.effort_multipliers.get(exercise.normalized_category, 1.0)


def calculate_novelty_bonus(
    entry: WorkoutLogEntry,
    exercise: ExerciseMetadata,
    history: Iterable[WorkoutLogEntry],
    exercise_library: Mapping[str, ExerciseMetadata],
    settings: Optional[Settings] = None,
) -> int:
    """
    Bonus for being the first to train a target muscle this week or today.

    Only history logs strictly earlier than the entry count. A target muscle
    untouched so far this calendar week earns the weekly bonus; otherwise one
    untouched so far today earns the daily bonus.
    """
    settings = settings or get_settings()
    targets = exercise.target_muscles
    if not targets:
        return 0

    tz_name = settings.timezone
    entry_day = calendar_day(entry.timestamp, tz_name)
    entry_week = week_start_date(entry_day, settings.week_start)

    trained_this_week = set()
    trained_today = set()
    for log in history:
        if align_to_reference(log.timestamp, entry.timestamp) >= entry.timestamp:
            continue
        log_day = calendar_day(log.timestamp, tz_name)
        if week_start_date(log_day, settings.week_start) != entry_week:
            continue
        logged = exercise_library.get(log.exercise_id)
        if logged is None:
            continue
        trained_this_week |= logged.target_muscles
        if log_day == entry_day:
            trained_today |= logged.target_muscles

    if targets - trained_this_week:
        return settings.first_of_week_bonus
    if targets - trained_today:
        return settings.first_of_day_bonus
    return 0


def score_workout(
    entry: WorkoutLogEntry,
    exercise: Optional[ExerciseMetadata],
    *,
    history: Iterable[WorkoutLogEntry] = (),
    exercise_library: Optional[Mapping[str, ExerciseMetadata]] = None,
    profile: Optional[UserProfile] = None,
    lagging_muscles: Optional[List[LaggingMuscle]] = None,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
) -> ExerciseScoreBreakdown:
    """
    Score one workout entry.

    Args:
        entry: The entry being logged
        exercise: Its metadata; None scores the bare base score
        history: The user's earlier workout logs (for novelty)
        exercise_library: Metadata used to resolve history muscles; the
            entry's own exercise is always included
        profile: User profile whose personal bests are compared against
        lagging_muscles: Caller-supplied lagging classification
        now: Reference time for personal-best windows (defaults to the entry time)
        settings: Scoring settings

    Returns:
        ExerciseScoreBreakdown whose ``total`` is the XP to persist
    """
    settings = settings or get_settings()
    base = calculate_base_score(entry, settings)
    multiplier = effort_multiplier(exercise, settings)

    novelty = 0
    lagging = 0
    if exercise is not None:
        library = dict(exercise_library or {})
        library.setdefault(exercise.id, exercise)
        novelty = calculate_novelty_bonus(entry, exercise, history, library, settings)
        lagging = calculate_lagging_muscle_bonus(exercise, lagging_muscles or [], settings)

    personal_best = 0
    if profile is not None:
        personal_best = calculate_personal_best_bonus(
            profile.personal_bests,
            entry.exercise_id,
            entry,
            now or entry.timestamp,
            settings,
        )

    total = round_half_up(base * multiplier + novelty + personal_best + lagging)
    logger.debug(
        "Scored %s: base=%.2f x%.2f novelty=%d pb=%d lagging=%d total=%d",
        entry.exercise_id,
        base,
        multiplier,
        novelty,
        personal_best,
        lagging,
        total,
    )

    return ExerciseScoreBreakdown(
        base_score=base,
        effort_multiplier=multiplier,
        novelty_bonus=novelty,
        personal_best_bonus=personal_best,
        lagging_muscle_bonus=lagging,
        total=total,
    )
