"""Tests for XP reconciliation."""

from datetime import datetime

from fitquest.models import FoodLogEntry, UserProfile, WorkoutLogEntry
from fitquest.scoring.reconciliation import (
    apply_xp_correction,
    recalculate_total_xp_from_logs,
    validate_user_xp,
)

EXERCISE_LOGS = [{"score": 50}, {"score": 75}]
FOOD_LOGS = [{"xp": 30}]


class TestRecalculateTotal:
    """Tests for summing persisted log XP."""

    def test_sums_scores_and_xp(self):
        assert recalculate_total_xp_from_logs(EXERCISE_LOGS, FOOD_LOGS) == 155

    def test_empty(self):
        assert recalculate_total_xp_from_logs([], []) == 0
        assert recalculate_total_xp_from_logs(None, None) == 0

    def test_invalid_values_count_as_zero(self):
        logs = [{"score": "abc"}, {"score": None}, {}, {"score": float("nan")}, {"score": "20"}]
        assert recalculate_total_xp_from_logs(logs, [{"xp": float("inf")}]) == 20

    def test_accepts_models(self):
        workouts = [WorkoutLogEntry(exercise_id="bench", timestamp=datetime(2024, 1, 1), score=40)]
        foods = [FoodLogEntry(food_id="apple", timestamp=datetime(2024, 1, 1), xp=12)]
        assert recalculate_total_xp_from_logs(workouts, foods) == 52


class TestValidateUserXP:
    """Tests for comparing stored XP against the logs."""

    def test_drift_detected(self):
        """Stored 200 vs calculated 155 -> invalid, discrepancy 45."""
        result = validate_user_xp(UserProfile(total_xp=200), EXERCISE_LOGS, FOOD_LOGS)
        assert result.is_valid is False
        assert result.calculated_xp == 155
        assert result.stored_xp == 200
        assert result.discrepancy == 45

    def test_matching_total(self):
        assert validate_user_xp(UserProfile(total_xp=155), EXERCISE_LOGS, FOOD_LOGS).is_valid

    def test_within_tolerance(self):
        assert validate_user_xp(UserProfile(total_xp=155.3), EXERCISE_LOGS, FOOD_LOGS).is_valid
        assert not validate_user_xp(UserProfile(total_xp=156), EXERCISE_LOGS, FOOD_LOGS).is_valid

    def test_custom_tolerance(self):
        result = validate_user_xp(UserProfile(total_xp=200), EXERCISE_LOGS, FOOD_LOGS, tolerance=50)
        assert result.is_valid

    def test_missing_profile_stores_zero(self):
        result = validate_user_xp(None, EXERCISE_LOGS, FOOD_LOGS)
        assert result.stored_xp == 0
        assert result.discrepancy == -155
        assert result.is_valid is False

    def test_missing_profile_no_logs_is_valid(self):
        assert validate_user_xp(None, [], []).is_valid

    def test_profile_mapping(self):
        result = validate_user_xp({"totalXP": "155"}, EXERCISE_LOGS, FOOD_LOGS)
        assert result.stored_xp == 155
        assert result.is_valid

    def test_camel_case_dump(self):
        result = validate_user_xp(UserProfile(total_xp=200), EXERCISE_LOGS, FOOD_LOGS)
        dumped = result.model_dump(by_alias=True)
        assert dumped["isValid"] is False
        assert dumped["calculatedXP"] == 155


class TestApplyCorrection:
    """Tests for the explicit XP fix."""

    def test_sets_recalculated_total(self):
        profile = UserProfile(total_xp=200)
        result = validate_user_xp(profile, EXERCISE_LOGS, FOOD_LOGS)
        fixed = apply_xp_correction(profile, result)
        assert fixed.total_xp == 155
        assert profile.total_xp == 200

    def test_valid_profile_unchanged(self):
        profile = UserProfile(total_xp=155)
        result = validate_user_xp(profile, EXERCISE_LOGS, FOOD_LOGS)
        assert apply_xp_correction(profile, result) is profile

    def test_validation_never_corrects(self):
        profile = UserProfile(total_xp=200)
        validate_user_xp(profile, EXERCISE_LOGS, FOOD_LOGS)
        assert profile.total_xp == 200
