"""XP reconciliation between the profile total and the log history.

Scores are frozen on the log entries at log time, so the true total is the
sum of persisted ``score`` (workouts) and ``xp`` (food) values. Nothing here
re-derives scores from sets or nutrition.
"""

import logging
from typing import Any, Iterable, Optional, Union

from ..config import Settings, get_settings
from ..models.gamification import UserProfile, XPValidationResult
from ..utils.numbers import coerce_number

logger = logging.getLogger(__name__)

ProfileLike = Union[UserProfile, dict, None]


def _points(log: Any, field: str) -> float:
    if isinstance(log, dict):
        raw = log.get(field)
    else:
        raw = getattr(log, field, None)
    number = coerce_number(raw)
    return number if number is not None else 0


def recalculate_total_xp_from_logs(
    exercise_logs: Iterable[Any],
    food_logs: Iterable[Any],
) -> float:
    """
    Sum the persisted XP of every exercise and food log.

    Logs may be models or plain mappings. Missing or invalid values count
    as 0.

    Args:
        exercise_logs: Workout logs carrying ``score``
        food_logs: Food logs carrying ``xp``

    Returns:
        Total XP
    """
    total = sum(_points(log, "score") for log in exercise_logs or [])
    total += sum(_points(log, "xp") for log in food_logs or [])
    return total


def _stored_xp(profile: ProfileLike) -> float:
    if profile is None:
        return 0
    if isinstance(profile, UserProfile):
        return profile.total_xp
    return _points(profile, "totalXP") or _points(profile, "total_xp")


def validate_user_xp(
    profile: ProfileLike,
    exercise_logs: Iterable[Any],
    food_logs: Iterable[Any],
    tolerance: Optional[float] = None,
    settings: Optional[Settings] = None,
) -> XPValidationResult:
    """
    Compare the profile's stored XP with the total recalculated from logs.

    Args:
        profile: User profile (model or mapping); None counts as 0 XP
        exercise_logs: Workout logs
        food_logs: Food logs
        tolerance: Allowed absolute difference; defaults to settings.xp_tolerance
        settings: Scoring settings

    Returns:
        XPValidationResult with ``discrepancy = stored - calculated``
    """
    if tolerance is None:
        tolerance = (settings or get_settings()).xp_tolerance

    calculated = recalculate_total_xp_from_logs(exercise_logs, food_logs)
    stored = _stored_xp(profile)
    discrepancy = stored - calculated
    is_valid = abs(discrepancy) <= tolerance

    if not is_valid:
        logger.info(
            "XP drift detected: stored=%s calculated=%s discrepancy=%s",
            stored,
            calculated,
            discrepancy,
        )

    return XPValidationResult(
        is_valid=is_valid,
        calculated_xp=calculated,
        stored_xp=stored,
        discrepancy=discrepancy,
    )


def apply_xp_correction(profile: UserProfile, validation: XPValidationResult) -> UserProfile:
    """Return a copy of the profile with its total set to the recalculated XP.

    Correction is always an explicit caller decision; a valid result leaves
    the profile unchanged.
    """
    if validation.is_valid:
        return profile
    return profile.model_copy(update={"total_xp": validation.calculated_xp})
