"""Time-windowed training load per muscle.

Two ways to maintain ``muscleScores``:

- ``calculate_time_based_muscle_scores`` rebuilds every window from the full
  workout history relative to a reference date. Windows are exact right
  after a rebuild.
- ``add_workout_to_muscle_scores`` folds one new log into the existing
  records. A new log is inside every window, so its score is added to all
  six; older contributions are never expired, which makes the shorter
  windows upper bounds until the next rebuild.

Both paths give every muscle an exercise touches the full, unsplit score of
the log, and both agree on ``lifetime``.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, Mapping, Optional

from ..models.exercise import ExerciseMetadata
from ..models.gamification import WINDOW_DAYS, MuscleScoreRecord, MuscleWindow
from ..models.logs import WorkoutLogEntry
from ..utils.timeutils import align_to_reference, days_between

logger = logging.getLogger(__name__)

MuscleScores = Dict[str, MuscleScoreRecord]


def _earliest(current: Optional[datetime], candidate: datetime) -> datetime:
    if current is None:
        return candidate
    return candidate if align_to_reference(candidate, current) < current else current


def calculate_time_based_muscle_scores(
    workout_logs: Iterable[WorkoutLogEntry],
    exercise_library: Mapping[str, ExerciseMetadata],
    reference_date: datetime,
) -> MuscleScores:
    """
    Rebuild time-windowed muscle scores from the full workout history.

    Args:
        workout_logs: Every workout log of the user
        exercise_library: Exercise metadata keyed by exercise id
        reference_date: "Now" for the window calculations

    Returns:
        Records keyed by normalised muscle name
    """
    totals: Dict[str, Dict[MuscleWindow, float]] = {}
    oldest: Dict[str, Optional[datetime]] = {}
    unknown = 0

    for log in workout_logs:
        exercise = exercise_library.get(log.exercise_id)
        if exercise is None:
            unknown += 1
            continue
        muscles = exercise.muscles
        if not muscles:
            continue

        score = log.score or 0
        # Logs stamped after the reference (clock skew) count as today.
        days_since = max(days_between(log.timestamp, reference_date), 0)

        for muscle in muscles:
            windows = totals.setdefault(muscle, {window: 0.0 for window in MuscleWindow})
            for window, limit in WINDOW_DAYS.items():
                if limit is None or days_since <= limit:
                    windows[window] += score
            oldest[muscle] = _earliest(oldest.get(muscle), log.timestamp)

    if unknown:
        logger.debug("Skipped %d workout logs with unknown exercise ids", unknown)

    return {
        muscle: MuscleScoreRecord(
            today=windows[MuscleWindow.TODAY],
            day3=windows[MuscleWindow.DAY_3],
            day7=windows[MuscleWindow.DAY_7],
            day14=windows[MuscleWindow.DAY_14],
            day30=windows[MuscleWindow.DAY_30],
            lifetime=windows[MuscleWindow.LIFETIME],
            last_calculated=reference_date,
            oldest_relevant_log=oldest.get(muscle),
        )
        for muscle, windows in totals.items()
    }


def add_workout_to_muscle_scores(
    existing_scores: Mapping[str, MuscleScoreRecord],
    exercise: ExerciseMetadata,
    score: float,
    workout_date: datetime,
) -> MuscleScores:
    """
    Add one new workout's score to every window of the muscles it touches.

    This is a pure reducer: the input mapping and its records are left
    unchanged and a new mapping is returned.
    """
    updated: MuscleScores = dict(existing_scores)
    score = score or 0

    for muscle in exercise.muscles:
        record = updated.get(muscle) or MuscleScoreRecord(oldest_relevant_log=workout_date)
        updated[muscle] = record.model_copy(
            update={
                "today": record.today + score,
                "day3": record.day3 + score,
                "day7": record.day7 + score,
                "day14": record.day14 + score,
                "day30": record.day30 + score,
                "lifetime": record.lifetime + score,
                "last_calculated": workout_date,
                "oldest_relevant_log": _earliest(record.oldest_relevant_log, workout_date),
            }
        )
    return updated


def migrate_muscle_scores(
    legacy_scores: Mapping[str, float],
    now: Optional[datetime] = None,
) -> MuscleScores:
    """Convert legacy single-scalar muscle scores to windowed records."""
    return {
        muscle: MuscleScoreRecord.from_legacy(score, now)
        for muscle, score in legacy_scores.items()
    }


def cleanup_expired_scores(
    muscle_scores: Mapping[str, MuscleScoreRecord],
    reference_date: datetime,
) -> MuscleScores:
    """
    Lightweight periodic pass between full rebuilds.

    Zeroes ``today`` and stamps ``lastCalculated``. The multi-day windows
    stay as upper bounds until the next full rebuild recomputes them.
    """
    return {
        muscle: record.model_copy(update={"today": 0.0, "last_calculated": reference_date})
        for muscle, record in muscle_scores.items()
    }


def get_muscle_score(
    muscle_scores: Mapping[str, MuscleScoreRecord],
    muscle: str,
    window: MuscleWindow = MuscleWindow.LIFETIME,
) -> float:
    record = muscle_scores.get(muscle.strip().lower())
    if record is None:
        return 0
    return record.get(window)


def has_worked_muscle(
    muscle_scores: Mapping[str, MuscleScoreRecord],
    muscle: str,
    window: MuscleWindow = MuscleWindow.TODAY,
) -> bool:
    return get_muscle_score(muscle_scores, muscle, window) > 0
