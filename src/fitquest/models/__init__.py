"""Data models exchanged between the engine and its callers."""

from .base import CamelModel, to_camel
from .exercise import ExerciseMetadata, parse_muscle_tokens
from .gamification import (
    WINDOW_DAYS,
    ExercisePersonalBests,
    ExerciseScoreBreakdown,
    LaggingMuscle,
    LaggingType,
    LevelInfo,
    MuscleScoreRecord,
    MuscleWindow,
    PersonalBestRecord,
    PersonalBestType,
    PersonalBestWindow,
    StreakInfo,
    UserProfile,
    XPValidationResult,
)
from .logs import FoodLogEntry, SetEntry, WorkoutLogEntry
from .nutrition import (
    MICRONUTRIENTS,
    AltMeasure,
    DailyTotals,
    FoodXPBreakdown,
    MicronutrientInfo,
    NutritionFacts,
    NutritionGoals,
    normalize_nutrition,
)

__all__ = [
    "CamelModel",
    "to_camel",
    "ExerciseMetadata",
    "parse_muscle_tokens",
    "WINDOW_DAYS",
    "ExercisePersonalBests",
    "ExerciseScoreBreakdown",
    "LaggingMuscle",
    "LaggingType",
    "LevelInfo",
    "MuscleScoreRecord",
    "MuscleWindow",
    "PersonalBestRecord",
    "PersonalBestType",
    "PersonalBestWindow",
    "StreakInfo",
    "UserProfile",
    "XPValidationResult",
    "FoodLogEntry",
    "SetEntry",
    "WorkoutLogEntry",
    "MICRONUTRIENTS",
    "AltMeasure",
    "DailyTotals",
    "FoodXPBreakdown",
    "MicronutrientInfo",
    "NutritionFacts",
    "NutritionGoals",
    "normalize_nutrition",
]
