"""Lagging-muscle classification.

Muscles known to the exercise library are checked against the user's
lifetime load and training recency. The result feeds the lagging-muscle
bonus of the exercise scorer and ranks muscles for workout suggestions.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from ..config import Settings, get_settings
from ..models.exercise import ExerciseMetadata
from ..models.gamification import LaggingMuscle, LaggingType, MuscleScoreRecord
from ..models.logs import WorkoutLogEntry
from ..utils.timeutils import align_to_reference, days_between

_PRIORITY_BASE: Dict[LaggingType, int] = {
    LaggingType.NEVER_TRAINED: 1000,
    LaggingType.UNDER_TRAINED: 500,
    LaggingType.NEGLECTED: 100,
}


def last_trained_dates(
    workout_logs: Iterable[WorkoutLogEntry],
    exercise_library: Mapping[str, ExerciseMetadata],
) -> Dict[str, datetime]:
    """Latest workout timestamp per muscle."""
    latest: Dict[str, datetime] = {}
    for log in workout_logs:
        exercise = exercise_library.get(log.exercise_id)
        if exercise is None:
            continue
        for muscle in exercise.muscles:
            current = latest.get(muscle)
            if current is None or align_to_reference(log.timestamp, current) > current:
                latest[muscle] = log.timestamp
    return latest


def classify_muscle(
    score: float,
    days_since_trained: Optional[int],
    settings: Settings,
) -> Optional[LaggingType]:
    """Lagging type for one muscle, or None when it is on track."""
    if score <= 0:
        return LaggingType.NEVER_TRAINED
    if score < settings.under_trained_threshold:
        return LaggingType.UNDER_TRAINED
    if days_since_trained is not None and days_since_trained > settings.neglected_after_days:
        return LaggingType.NEGLECTED
    return None


def analyze_lagging_muscles(
    muscle_scores: Mapping[str, MuscleScoreRecord],
    workout_logs: Iterable[WorkoutLogEntry],
    exercise_library: Mapping[str, ExerciseMetadata],
    reference_date: datetime,
    settings: Optional[Settings] = None,
) -> List[LaggingMuscle]:
    """
    Find the muscles that deserve extra attention.

    Args:
        muscle_scores: Windowed muscle scores from the profile
        workout_logs: Workout history, used for last-trained dates
        exercise_library: Exercise metadata keyed by id; defines the muscle universe
        reference_date: "Now" for recency
        settings: Scoring settings

    Returns:
        Lagging muscles, highest priority first: never trained, then
        under-trained, then neglected, each ordered by days since trained
    """
    settings = settings or get_settings()
    all_muscles = set()
    for exercise in exercise_library.values():
        all_muscles |= exercise.muscles

    last_trained = last_trained_dates(workout_logs, exercise_library)

    lagging = []
    for muscle in sorted(all_muscles):
        record = muscle_scores.get(muscle)
        score = record.lifetime if record is not None else 0
        trained_at = last_trained.get(muscle)
        days_since = (
            max(days_between(trained_at, reference_date), 0) if trained_at is not None else None
        )

        lagging_type = classify_muscle(score, days_since, settings)
        if lagging_type is None:
            continue
        lagging.append(
            LaggingMuscle(
                muscle=muscle,
                lagging_type=lagging_type,
                score=score,
                days_since_trained=days_since,
                priority=_PRIORITY_BASE[lagging_type] + (days_since or 0),
            )
        )

    lagging.sort(
        key=lambda item: (_PRIORITY_BASE[item.lagging_type], item.priority),
        reverse=True,
    )
    return lagging


def calculate_lagging_muscle_bonus(
    exercise: ExerciseMetadata,
    lagging_muscles: Iterable[LaggingMuscle],
    settings: Optional[Settings] = None,
) -> int:
    """Sum of the lagging bonuses of every lagging muscle the exercise touches."""
    settings = settings or get_settings()
    muscles = exercise.muscles
    return sum(
        settings.lagging_muscle_bonuses.get(item.lagging_type.value, 0)
        for item in lagging_muscles or []
        if item.muscle in muscles
    )
