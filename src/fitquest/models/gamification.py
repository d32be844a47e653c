"""Gamification data models for XP, levels, streaks, records and muscle load."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from ..utils.numbers import coerce_number
from .base import CamelModel
from .nutrition import NutritionGoals


class MuscleWindow(str, Enum):
    """Rolling windows tracked per muscle."""
    TODAY = "today"
    DAY_3 = "3day"
    DAY_7 = "7day"
    DAY_14 = "14day"
    DAY_30 = "30day"
    LIFETIME = "lifetime"


# Maximum whole days since a log for it to count toward each window.
WINDOW_DAYS: Dict[MuscleWindow, Optional[int]] = {
    MuscleWindow.TODAY: 0,
    MuscleWindow.DAY_3: 3,
    MuscleWindow.DAY_7: 7,
    MuscleWindow.DAY_14: 14,
    MuscleWindow.DAY_30: 30,
    MuscleWindow.LIFETIME: None,
}

_WINDOW_FIELDS: Dict[MuscleWindow, str] = {
    MuscleWindow.TODAY: "today",
    MuscleWindow.DAY_3: "day3",
    MuscleWindow.DAY_7: "day7",
    MuscleWindow.DAY_14: "day14",
    MuscleWindow.DAY_30: "day30",
    MuscleWindow.LIFETIME: "lifetime",
}


class MuscleScoreRecord(CamelModel):
    """Training load for one muscle across six rolling windows.

    Invariant after a full recompute:
    ``lifetime >= 30day >= 14day >= 7day >= 3day >= today >= 0``.
    Between recomputes the shorter windows are upper bounds, since
    incremental updates cannot expire old contributions.
    """

    today: float = 0
    day3: float = Field(default=0, alias="3day")
    day7: float = Field(default=0, alias="7day")
    day14: float = Field(default=0, alias="14day")
    day30: float = Field(default=0, alias="30day")
    lifetime: float = 0
    last_calculated: Optional[datetime] = None
    oldest_relevant_log: Optional[datetime] = None

    @classmethod
    def from_legacy(cls, value: Any, now: Optional[datetime] = None) -> "MuscleScoreRecord":
        """Convert a legacy single-scalar muscle score.

        The old scalar has no time information, so it can only be lifetime.
        """
        number = coerce_number(value)
        return cls(lifetime=number or 0, last_calculated=now)

    def get(self, window: MuscleWindow) -> float:
        return getattr(self, _WINDOW_FIELDS[MuscleWindow(window)])

    def windows(self) -> Dict[str, float]:
        return {window.value: self.get(window) for window in MuscleWindow}

    @property
    def windows_ordered(self) -> bool:
        """Whether the nested-window invariant holds."""
        return (
            self.lifetime >= self.day30 >= self.day14 >= self.day7
            >= self.day3 >= self.today >= 0
        )


class PersonalBestType(str, Enum):
    """How a personal best is measured."""
    ONE_REP_MAX = "1rm"
    REPS = "reps"
    DURATION = "duration"
    PACE = "pace"

    @property
    def lower_is_better(self) -> bool:
        return self is PersonalBestType.PACE


class PersonalBestWindow(str, Enum):
    """Windows over which personal bests are kept."""
    CURRENT = "current"
    QUARTER = "quarter"
    YEAR = "year"
    ALL_TIME = "all_time"


class PersonalBestRecord(CamelModel):
    """Best value achieved within one window."""

    value: float = Field(..., description="Best value (1RM, reps, minutes, min per distance unit)")
    type: PersonalBestType = Field(..., description="Measurement type")
    unit: str = Field(default="", description="Unit of measurement")
    date: datetime = Field(..., description="When the record was set")

    def is_beaten_by(self, value: float) -> bool:
        """Whether ``value`` strictly improves on this record."""
        if self.type.lower_is_better:
            return value < self.value
        return value > self.value


class ExercisePersonalBests(CamelModel):
    """Personal bests for one exercise across the four windows."""

    current: Optional[PersonalBestRecord] = None
    quarter: Optional[PersonalBestRecord] = None
    year: Optional[PersonalBestRecord] = None
    all_time: Optional[PersonalBestRecord] = Field(default=None, alias="allTime")

    def get(self, window: PersonalBestWindow) -> Optional[PersonalBestRecord]:
        return getattr(self, PersonalBestWindow(window).value)

    @property
    def established_type(self) -> Optional[PersonalBestType]:
        """Measurement type of the exercise, once any record exists."""
        for window in PersonalBestWindow:
            record = self.get(window)
            if record is not None:
                return record.type
        return None


class UserProfile(CamelModel):
    """The gamification slice of a user profile document.

    Unrelated profile fields are preserved so a loaded profile can be written
    back without losing data.
    """

    model_config = {**CamelModel.model_config, "extra": "allow"}

    total_xp: float = Field(default=0, alias="totalXP")
    muscle_scores: Dict[str, MuscleScoreRecord] = Field(default_factory=dict)
    personal_bests: Dict[str, ExercisePersonalBests] = Field(default_factory=dict)
    goals: Optional[NutritionGoals] = None

    @field_validator("total_xp", mode="before")
    @classmethod
    def _lenient_total(cls, value: Any) -> float:
        number = coerce_number(value)
        return number if number is not None else 0

    @field_validator("muscle_scores", mode="before")
    @classmethod
    def _migrate_legacy_scores(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return {} if value is None else value
        return {
            muscle: MuscleScoreRecord.from_legacy(score) if not isinstance(score, (dict, MuscleScoreRecord)) else score
            for muscle, score in value.items()
        }


class LevelInfo(CamelModel):
    """Information about a user's level."""

    level: int = Field(..., description="Current level")
    title: str = Field(..., description="Title for the current level")
    current_level_xp: int = Field(..., alias="currentLevelXP", description="Total XP threshold of the current level")
    next_level_xp: int = Field(..., alias="nextLevelXP", description="Total XP threshold of the next level")
    xp_to_next: float = Field(..., description="XP still needed to reach the next level")
    xp_in_level: float = Field(..., description="XP earned within the current level")
    progress_percent: float = Field(..., description="Progress to next level (0-100)")


class StreakInfo(CamelModel):
    """Current training streaks and their bonuses."""

    daily_streak: int = Field(default=0, description="Consecutive days with a workout")
    weekly_streak: int = Field(default=0, description="Consecutive weeks with a workout")
    daily_bonus: int = Field(default=0, description="Bonus for the daily streak tier")
    weekly_bonus: int = Field(default=0, description="Bonus for the weekly streak tier")
    longest_daily_streak: int = Field(default=0, description="Longest daily streak in the history")


class ExerciseScoreBreakdown(CamelModel):
    """Score for one workout entry with its components."""

    base_score: float = 0
    effort_multiplier: float = 1.0
    novelty_bonus: int = 0
    personal_best_bonus: int = 0
    lagging_muscle_bonus: int = 0
    total: int = 0


class XPValidationResult(CamelModel):
    """Comparison of stored profile XP against the log history."""

    is_valid: bool
    calculated_xp: float = Field(..., alias="calculatedXP")
    stored_xp: float = Field(..., alias="storedXP")
    discrepancy: float = Field(..., description="storedXP - calculatedXP")


class LaggingType(str, Enum):
    """Why a muscle is considered lagging."""
    NEVER_TRAINED = "never_trained"
    UNDER_TRAINED = "under_trained"
    NEGLECTED = "neglected"


class LaggingMuscle(CamelModel):
    """A muscle that earns extra XP when trained."""

    muscle: str
    lagging_type: LaggingType
    score: float = 0
    days_since_trained: Optional[int] = None
    priority: float = 0
