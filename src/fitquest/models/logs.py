"""Workout and food log entries.

Log entries are created once by the logging path and never mutated. Their
``score`` / ``xp`` is computed at log time and persisted with the entry; it is
not recomputed when scoring rules change.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from ..utils.numbers import coerce_number
from ..utils.timeutils import parse_timestamp
from .base import CamelModel


class SetEntry(CamelModel):
    """One set of a rep-based exercise."""

    weight: Optional[float] = Field(None, description="Load used for the set")
    reps: Optional[float] = Field(None, description="Repetitions performed")

    @field_validator("weight", "reps", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> Optional[float]:
        # Form inputs arrive as strings; junk degrades to "absent".
        return coerce_number(value)

    @property
    def is_complete(self) -> bool:
        """Whether the set carries any usable load or reps."""
        return bool(self.weight) or bool(self.reps)


class WorkoutLogEntry(CamelModel):
    """A single logged exercise."""

    id: str = Field(default="", description="Log entry identifier")
    user_id: str = Field(default="", description="Owner of the log")
    exercise_id: str = Field(..., description="Reference to exercise metadata")
    timestamp: datetime = Field(..., description="When the exercise was performed")
    sets: List[SetEntry] = Field(default_factory=list, description="Sets for rep-based exercises")
    duration: Optional[float] = Field(None, description="Duration in minutes")
    distance: Optional[float] = Field(None, description="Distance covered")
    score: float = Field(default=0, description="XP awarded at log time")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _unwrap_timestamp(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("sets", mode="before")
    @classmethod
    def _sets_list(cls, value: Any) -> Any:
        return value if value is not None else []

    @field_validator("duration", "distance", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> Optional[float]:
        return coerce_number(value)

    @field_validator("score", mode="before")
    @classmethod
    def _lenient_score(cls, value: Any) -> float:
        number = coerce_number(value)
        return number if number is not None else 0


class FoodLogEntry(CamelModel):
    """A single logged food portion."""

    id: str = Field(default="", description="Log entry identifier")
    user_id: str = Field(default="", description="Owner of the log")
    food_id: str = Field(..., description="Reference to food metadata")
    timestamp: datetime = Field(..., description="When the food was eaten")
    serving: float = Field(default=1, description="Number of units eaten")
    units: Optional[str] = Field(None, description="Serving unit; defaults to the food's base unit")
    xp: float = Field(default=0, description="XP awarded at log time")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _unwrap_timestamp(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("serving", mode="before")
    @classmethod
    def _lenient_serving(cls, value: Any) -> float:
        number = coerce_number(value)
        return number if number is not None and number > 0 else 1

    @field_validator("xp", mode="before")
    @classmethod
    def _lenient_xp(cls, value: Any) -> float:
        number = coerce_number(value)
        return number if number is not None else 0
