"""Configuration settings for the FitQuest scoring engine."""

from functools import lru_cache
from typing import Dict, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Scoring coefficients and bonus tables loaded from environment variables.

    Every value can be overridden with a ``FITQUEST_`` prefixed variable
    (dict-valued settings take JSON), e.g. ``FITQUEST_CALORIE_COEFFICIENT=3``.
    """

    # Exercise scoring
    weight_coefficient: float = 0.1
    bodyweight_coefficient: float = 1.0
    duration_coefficient: float = 10.0
    effort_multipliers: Dict[str, float] = {
        "compound": 1.5,
        "cardio": 1.2,
        "isolation": 1.0,
        "core": 1.0,
    }
    first_of_day_bonus: int = 40
    first_of_week_bonus: int = 75
    diminishing_returns_start_set: Optional[int] = None  # 1-based set number, None disables
    diminishing_returns_multiplier: float = 0.5

    # Lagging muscles
    lagging_muscle_bonuses: Dict[str, int] = {
        "never_trained": 100,
        "under_trained": 50,
        "neglected": 25,
    }
    under_trained_threshold: float = 100.0
    neglected_after_days: int = 14

    # Personal bests
    personal_best_bonuses: Dict[str, int] = {
        "current": 50,
        "quarter": 150,
        "year": 200,
        "all_time": 300,
    }
    personal_best_window_days: Dict[str, int] = {
        "current": 30,
        "quarter": 90,
        "year": 365,
    }
    weight_unit: str = "lbs"

    # Food scoring
    calorie_coefficient: float = 2.0
    food_group_multipliers: Dict[int, float] = {
        0: 1.0,  # Catch-all / unclassified
        1: 1.0,  # Dairy
        2: 1.0,  # Animal products
        3: 1.5,  # Fruits
        4: 1.5,  # Vegetables
        5: 1.0,  # Grains
        6: 1.0,  # Fats & oils
        7: 1.5,  # Legumes, nuts & seeds
        8: 1.0,  # Prepared / composite
        9: 1.0,  # Misc / spices
    }
    macro_band_low_percent: float = 80.0
    macro_band_high_percent: float = 120.0
    macro_in_band_bonus: int = 50
    all_macros_bonus: int = 500
    micronutrient_bonus: int = 10
    micronutrient_multi_threshold: int = 5
    micronutrient_multi_bonus: int = 100
    unique_food_bonus: int = 5

    # Streaks
    daily_streak_bonuses: Dict[int, int] = {7: 50, 14: 100, 30: 200, 60: 500, 90: 1000}
    weekly_streak_bonuses: Dict[int, int] = {4: 100, 8: 250, 12: 500}
    week_start: int = 0  # 0 = Monday ... 6 = Sunday

    # Reconciliation
    xp_tolerance: float = 0.5

    # Calendar
    timezone: Optional[str] = None  # IANA name; None keeps timestamps as given

    class Config:
        env_prefix = "FITQUEST_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
