"""Scoring engine: XP, levels, streaks, personal bests and muscle load."""

from .exercise import calculate_base_score, calculate_novelty_bonus, effort_multiplier, score_workout
from .food import (
    calculate_daily_food_xp,
    calculate_daily_totals,
    calculate_food_base_xp,
    calculate_food_xp,
    calculate_macro_goal_bonus,
    calculate_micronutrient_bonus,
    calculate_unique_food_bonus,
    convert_to_grams,
    food_group_multiplier,
    group_food_logs_by_day,
)
from .lagging import analyze_lagging_muscles, calculate_lagging_muscle_bonus
from .leveling import (
    CURVE_VERSION,
    MAX_LEVEL,
    is_milestone,
    level_from_xp,
    next_milestone,
    title_for_level,
    xp_required_for_level,
)
from .muscle_load import (
    add_workout_to_muscle_scores,
    calculate_time_based_muscle_scores,
    cleanup_expired_scores,
    get_muscle_score,
    has_worked_muscle,
    migrate_muscle_scores,
)
from .personal_bests import (
    apply_personal_best,
    best_entry_value,
    calculate_personal_best_bonus,
    rebuild_personal_bests,
    update_personal_bests,
)
from .reconciliation import apply_xp_correction, recalculate_total_xp_from_logs, validate_user_xp
from .streaks import (
    calculate_daily_streak,
    calculate_streak_bonuses,
    calculate_weekly_streak,
    longest_daily_streak,
    streak_bonus,
)

__all__ = [
    "calculate_base_score",
    "calculate_novelty_bonus",
    "effort_multiplier",
    "score_workout",
    "calculate_daily_food_xp",
    "calculate_daily_totals",
    "calculate_food_base_xp",
    "calculate_food_xp",
    "calculate_macro_goal_bonus",
    "calculate_micronutrient_bonus",
    "calculate_unique_food_bonus",
    "convert_to_grams",
    "food_group_multiplier",
    "group_food_logs_by_day",
    "analyze_lagging_muscles",
    "calculate_lagging_muscle_bonus",
    "CURVE_VERSION",
    "MAX_LEVEL",
    "is_milestone",
    "level_from_xp",
    "next_milestone",
    "title_for_level",
    "xp_required_for_level",
    "add_workout_to_muscle_scores",
    "calculate_time_based_muscle_scores",
    "cleanup_expired_scores",
    "get_muscle_score",
    "has_worked_muscle",
    "migrate_muscle_scores",
    "apply_personal_best",
    "best_entry_value",
    "calculate_personal_best_bonus",
    "rebuild_personal_bests",
    "update_personal_bests",
    "apply_xp_correction",
    "recalculate_total_xp_from_logs",
    "validate_user_xp",
    "calculate_daily_streak",
    "calculate_streak_bonuses",
    "calculate_weekly_streak",
    "longest_daily_streak",
    "streak_bonus",
]
