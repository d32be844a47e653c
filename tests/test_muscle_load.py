"""Tests for time-windowed muscle scores."""

from datetime import timedelta

import pytest

from fitquest.models import ExerciseMetadata, MuscleScoreRecord, MuscleWindow
from fitquest.scoring.muscle_load import (
    add_workout_to_muscle_scores,
    calculate_time_based_muscle_scores,
    cleanup_expired_scores,
    get_muscle_score,
    has_worked_muscle,
    migrate_muscle_scores,
)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def history(make_workout, days_ago):
    """Workouts spread across every window, oldest first."""
    return [
        make_workout("bench", days_ago(60), sets=[(100, 5)], score=10),
        make_workout("bench", days_ago(20), sets=[(100, 5)], score=30),
        make_workout("squat", days_ago(5), sets=[(200, 5)], score=50),
        make_workout("bench", days_ago(0), sets=[(100, 10)], score=100),
    ]


class TestFullRecompute:
    """Tests for rebuilding muscle scores from the whole history."""

    def test_window_totals(self, history, exercise_library, reference_date):
        scores = calculate_time_based_muscle_scores(history, exercise_library, reference_date)

        pecs = scores["pectorals"]
        assert pecs.today == 100
        assert pecs.day3 == 100
        assert pecs.day7 == 100
        assert pecs.day14 == 100
        assert pecs.day30 == 130
        assert pecs.lifetime == 140

        quads = scores["quads"]
        assert quads.today == 0
        assert quads.day3 == 0
        assert quads.day7 == 50
        assert quads.lifetime == 50

    def test_secondary_muscles_get_full_score(self, history, exercise_library, reference_date):
        scores = calculate_time_based_muscle_scores(history, exercise_library, reference_date)
        assert scores["triceps"].lifetime == 140
        assert scores["hamstrings"].lifetime == 50

    def test_windows_ordered(self, history, exercise_library, reference_date):
        scores = calculate_time_based_muscle_scores(history, exercise_library, reference_date)
        assert all(record.windows_ordered for record in scores.values())

    def test_idempotent(self, history, exercise_library, reference_date):
        first = calculate_time_based_muscle_scores(history, exercise_library, reference_date)
        second = calculate_time_based_muscle_scores(history, exercise_library, reference_date)
        assert first == second

    def test_stamps_and_oldest_log(self, history, exercise_library, reference_date, days_ago):
        scores = calculate_time_based_muscle_scores(history, exercise_library, reference_date)
        assert scores["pectorals"].last_calculated == reference_date
        assert scores["pectorals"].oldest_relevant_log == days_ago(60)

    def test_unknown_exercises_skipped(self, make_workout, exercise_library, reference_date):
        logs = [make_workout("mystery", reference_date, sets=[(10, 10)], score=99)]
        assert calculate_time_based_muscle_scores(logs, exercise_library, reference_date) == {}

    def test_muscle_listed_twice_counted_once(self, make_workout, reference_date):
        library = {
            "dip": ExerciseMetadata(id="dip", target="Triceps", secondaryMuscles=["triceps", "pectorals"])
        }
        logs = [make_workout("dip", reference_date, sets=[(None, 10)], score=20)]
        scores = calculate_time_based_muscle_scores(logs, library, reference_date)
        assert scores["triceps"].lifetime == 20

    def test_future_logs_count_as_today(self, make_workout, exercise_library, reference_date):
        logs = [make_workout("squat", reference_date + timedelta(hours=2), score=15)]
        scores = calculate_time_based_muscle_scores(logs, exercise_library, reference_date)
        assert scores["quads"].today == 15

    def test_empty_history(self, exercise_library, reference_date):
        assert calculate_time_based_muscle_scores([], exercise_library, reference_date) == {}


class TestIncrementalUpdate:
    """Tests for folding one new workout into existing scores."""

    def test_adds_to_every_window(self, bench, reference_date):
        scores = add_workout_to_muscle_scores({}, bench, 50, reference_date)
        assert scores["pectorals"].windows() == {
            "today": 50,
            "3day": 50,
            "7day": 50,
            "14day": 50,
            "30day": 50,
            "lifetime": 50,
        }

    def test_lifetime_matches_full_recompute(self, history, exercise_library, reference_date):
        incremental = {}
        for log in history:
            incremental = add_workout_to_muscle_scores(
                incremental, exercise_library[log.exercise_id], log.score, log.timestamp
            )
        full = calculate_time_based_muscle_scores(history, exercise_library, reference_date)

        assert set(incremental) == set(full)
        for muscle, record in full.items():
            assert incremental[muscle].lifetime == record.lifetime
            for window in MuscleWindow:
                assert incremental[muscle].get(window) >= record.get(window)

    def test_input_not_mutated(self, bench, reference_date):
        existing = {"pectorals": MuscleScoreRecord(lifetime=10)}
        add_workout_to_muscle_scores(existing, bench, 50, reference_date)
        assert existing["pectorals"].lifetime == 10
        assert "triceps" not in existing

    def test_keeps_oldest_log(self, bench, reference_date, days_ago):
        existing = {"pectorals": MuscleScoreRecord(lifetime=10, oldest_relevant_log=days_ago(30))}
        scores = add_workout_to_muscle_scores(existing, bench, 5, reference_date)
        assert scores["pectorals"].oldest_relevant_log == days_ago(30)
        assert scores["triceps"].oldest_relevant_log == reference_date


class TestMaintenanceHelpers:
    """Tests for migration, cleanup and lookups."""

    def test_migrate_legacy(self, reference_date):
        migrated = migrate_muscle_scores({"biceps": 250, "calves": "junk"}, reference_date)
        assert migrated["biceps"].lifetime == 250
        assert migrated["biceps"].today == 0
        assert migrated["biceps"].last_calculated == reference_date
        assert migrated["calves"].lifetime == 0

    def test_cleanup_zeroes_today(self, reference_date):
        scores = {"biceps": MuscleScoreRecord(today=5, day3=5, day7=5, day14=5, day30=5, lifetime=5)}
        cleaned = cleanup_expired_scores(scores, reference_date)
        assert cleaned["biceps"].today == 0
        assert cleaned["biceps"].day3 == 5
        assert cleaned["biceps"].last_calculated == reference_date
        assert scores["biceps"].today == 5

    def test_lookups(self):
        scores = {"biceps": MuscleScoreRecord(today=0, day7=20, lifetime=80)}
        assert get_muscle_score(scores, " Biceps ") == 80
        assert get_muscle_score(scores, "biceps", MuscleWindow.DAY_7) == 20
        assert get_muscle_score(scores, "quads") == 0
        assert not has_worked_muscle(scores, "biceps")
        assert has_worked_muscle(scores, "biceps", MuscleWindow.DAY_7)
