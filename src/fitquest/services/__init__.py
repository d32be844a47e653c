"""Services orchestrating the scoring engine for log events."""

from .base import BaseService
from .progress import (
    FoodLogResult,
    MaintenanceReport,
    ProgressService,
    ProgressSummary,
    WorkoutLogResult,
)

__all__ = [
    "BaseService",
    "FoodLogResult",
    "MaintenanceReport",
    "ProgressService",
    "ProgressSummary",
    "WorkoutLogResult",
]
