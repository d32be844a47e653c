"""
Progress service for the log-writing path.

Handles:
- Scoring a workout or food entry and adding its XP to the profile
- Personal-best and muscle-score updates for the same event
- Level, streak and nutrition summaries
- Periodic maintenance (muscle recompute and XP validation)

The service is pure: it receives the profile and history, and returns updated
copies. Persisting them, and serialising concurrent writes for one user, is
the caller's job.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models.exercise import ExerciseMetadata
from ..models.gamification import (
    ExerciseScoreBreakdown,
    LevelInfo,
    StreakInfo,
    UserProfile,
    XPValidationResult,
)
from ..models.logs import FoodLogEntry, WorkoutLogEntry
from ..models.nutrition import FoodXPBreakdown, NutritionFacts, NutritionGoals
from ..scoring.exercise import score_workout
from ..scoring.food import FoodLookup, calculate_daily_food_xp, calculate_food_xp
from ..scoring.lagging import analyze_lagging_muscles
from ..scoring.leveling import level_from_xp
from ..scoring.muscle_load import add_workout_to_muscle_scores, calculate_time_based_muscle_scores
from ..scoring.personal_bests import update_personal_bests
from ..scoring.reconciliation import validate_user_xp
from ..scoring.streaks import calculate_streak_bonuses
from .base import BaseService


@dataclass
class WorkoutLogResult:
    """Outcome of logging one workout entry."""
    entry: WorkoutLogEntry
    profile: UserProfile
    breakdown: ExerciseScoreBreakdown
    xp_awarded: int
    level_up: bool = False
    new_level: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "entry": self.entry.model_dump(by_alias=True, mode="json"),
            "breakdown": self.breakdown.model_dump(by_alias=True),
            "xpAwarded": self.xp_awarded,
            "levelUp": self.level_up,
            "newLevel": self.new_level,
            "totalXP": self.profile.total_xp,
        }


@dataclass
class FoodLogResult:
    """Outcome of logging one food entry."""
    entry: FoodLogEntry
    profile: UserProfile
    xp_awarded: int
    level_up: bool = False
    new_level: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "entry": self.entry.model_dump(by_alias=True, mode="json"),
            "xpAwarded": self.xp_awarded,
            "levelUp": self.level_up,
            "newLevel": self.new_level,
            "totalXP": self.profile.total_xp,
        }


@dataclass
class ProgressSummary:
    """Level and streak snapshot for display."""
    total_xp: float
    level: LevelInfo
    streaks: StreakInfo

    def to_dict(self) -> dict:
        return {
            "totalXP": self.total_xp,
            "level": self.level.model_dump(by_alias=True),
            "streaks": self.streaks.model_dump(by_alias=True),
        }


@dataclass
class MaintenanceReport:
    """Result of a maintenance pass. XP is validated, never corrected."""
    profile: UserProfile
    validation: XPValidationResult
    muscles_recomputed: int
    reference_date: datetime

    def to_dict(self) -> dict:
        return {
            "validation": self.validation.model_dump(by_alias=True),
            "musclesRecomputed": self.muscles_recomputed,
            "referenceDate": self.reference_date.isoformat(),
        }


class ProgressService(BaseService):
    """Orchestrates scoring and derived-state updates for log events."""

    def _add_xp(self, profile: UserProfile, amount: float, source: str) -> Tuple[UserProfile, bool, Optional[int]]:
        """
        Add XP to a profile copy.

        Returns:
            Tuple of (new_profile, level_up_occurred, new_level)
        """
        old_level = level_from_xp(profile.total_xp).level
        new_xp = profile.total_xp + amount
        new_level = level_from_xp(new_xp).level
        level_up = new_level > old_level

        self.logger.info(f"Added {amount} XP from {source}. Total: {new_xp}")
        if level_up:
            self.logger.info(f"Level up! {old_level} -> {new_level}")

        updated = profile.model_copy(update={"total_xp": new_xp})
        return updated, level_up, new_level if level_up else None

    # =========================================================================
    # Log events
    # =========================================================================

    def log_workout(
        self,
        profile: UserProfile,
        entry: WorkoutLogEntry,
        exercise: Optional[ExerciseMetadata],
        history: Iterable[WorkoutLogEntry] = (),
        exercise_library: Optional[Mapping[str, ExerciseMetadata]] = None,
        now: Optional[datetime] = None,
    ) -> WorkoutLogResult:
        """
        Score a workout entry and fold it into the profile.

        Args:
            profile: Profile before this entry
            entry: The entry being logged
            exercise: Its metadata; None awards nothing
            history: Earlier workout logs of the user
            exercise_library: Metadata keyed by exercise id
            now: Event time (defaults to the entry timestamp)

        Returns:
            WorkoutLogResult with the scored entry and the updated profile
        """
        now = now or entry.timestamp
        history = list(history)

        if exercise is None:
            self.logger.warning(f"No metadata for exercise {entry.exercise_id}; awarding 0 XP")
            breakdown = ExerciseScoreBreakdown()
            return WorkoutLogResult(
                entry=entry.model_copy(update={"score": 0}),
                profile=profile,
                breakdown=breakdown,
                xp_awarded=0,
            )

        library: Dict[str, ExerciseMetadata] = dict(exercise_library or {})
        library.setdefault(exercise.id, exercise)

        lagging = analyze_lagging_muscles(
            profile.muscle_scores, history, library, now, self.settings
        )
        breakdown = score_workout(
            entry,
            exercise,
            history=history,
            exercise_library=library,
            profile=profile,
            lagging_muscles=lagging,
            now=now,
            settings=self.settings,
        )
        xp = breakdown.total

        updated = profile.model_copy(
            update={
                "personal_bests": update_personal_bests(
                    profile.personal_bests, entry.exercise_id, entry, now, self.settings
                ),
                "muscle_scores": add_workout_to_muscle_scores(
                    profile.muscle_scores, exercise, xp, entry.timestamp
                ),
            }
        )
        updated, level_up, new_level = self._add_xp(updated, xp, f"workout {entry.exercise_id}")

        return WorkoutLogResult(
            entry=entry.model_copy(update={"score": xp}),
            profile=updated,
            breakdown=breakdown,
            xp_awarded=xp,
            level_up=level_up,
            new_level=new_level,
        )

    def log_food(
        self,
        profile: UserProfile,
        entry: FoodLogEntry,
        food: Optional[NutritionFacts],
    ) -> FoodLogResult:
        """Score a food entry and add its XP to the profile."""
        if food is None:
            self.logger.warning(f"No nutrition data for food {entry.food_id}; awarding 0 XP")
            return FoodLogResult(entry=entry.model_copy(update={"xp": 0}), profile=profile, xp_awarded=0)

        xp = calculate_food_xp(food, entry.serving, entry.units, self.settings)
        updated, level_up, new_level = self._add_xp(profile, xp, f"food {entry.food_id}")
        return FoodLogResult(
            entry=entry.model_copy(update={"xp": xp}),
            profile=updated,
            xp_awarded=xp,
            level_up=level_up,
            new_level=new_level,
        )

    # =========================================================================
    # Summaries
    # =========================================================================

    def daily_nutrition(
        self,
        logs: Iterable[FoodLogEntry],
        food_library: FoodLookup,
        goals: Optional[NutritionGoals] = None,
        day: Optional[date] = None,
    ) -> FoodXPBreakdown:
        """Daily food XP breakdown with the day's nutrition totals."""
        return calculate_daily_food_xp(logs, food_library, goals, day, self.settings)

    def progress_summary(
        self,
        profile: UserProfile,
        workout_logs: Iterable[WorkoutLogEntry],
        now: datetime,
    ) -> ProgressSummary:
        return ProgressSummary(
            total_xp=profile.total_xp,
            level=level_from_xp(profile.total_xp),
            streaks=calculate_streak_bonuses(workout_logs, now, self.settings),
        )

    # =========================================================================
    # Maintenance
    # =========================================================================

    def run_maintenance(
        self,
        profile: UserProfile,
        workout_logs: Iterable[WorkoutLogEntry],
        food_logs: Iterable[Any],
        exercise_library: Mapping[str, ExerciseMetadata],
        now: datetime,
    ) -> MaintenanceReport:
        """
        Recompute muscle scores from scratch and check stored XP.

        Muscles no longer present in the history are dropped. XP drift is
        reported in the validation result and left for an explicit fix.
        """
        workout_logs: List[WorkoutLogEntry] = list(workout_logs)
        muscle_scores = calculate_time_based_muscle_scores(workout_logs, exercise_library, now)
        validation = validate_user_xp(profile, workout_logs, list(food_logs), settings=self.settings)

        if not validation.is_valid:
            self.logger.warning(
                f"Stored XP {validation.stored_xp} differs from logs "
                f"({validation.calculated_xp}) by {validation.discrepancy}"
            )

        return MaintenanceReport(
            profile=profile.model_copy(update={"muscle_scores": muscle_scores}),
            validation=validation,
            muscles_recomputed=len(muscle_scores),
            reference_date=now,
        )
