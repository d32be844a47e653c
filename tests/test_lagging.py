"""Tests for lagging-muscle classification."""

import pytest

from fitquest.models import ExerciseMetadata, LaggingType, MuscleScoreRecord
from fitquest.scoring.lagging import (
    analyze_lagging_muscles,
    calculate_lagging_muscle_bonus,
    classify_muscle,
    last_trained_dates,
)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def library(squat):
    return {
        "bench": ExerciseMetadata(id="bench", target="pectorals", secondaryMuscles=["triceps"]),
        "raise": ExerciseMetadata(id="raise", target="delts"),
        "squat": squat,
    }


@pytest.fixture
def muscle_scores():
    return {
        "pectorals": MuscleScoreRecord(lifetime=500),
        "triceps": MuscleScoreRecord(lifetime=50),
        "delts": MuscleScoreRecord(lifetime=400),
    }


@pytest.fixture
def logs(make_workout, days_ago):
    return [
        make_workout("bench", days_ago(2), score=50),
        make_workout("raise", days_ago(20), score=40),
    ]


class TestClassifyMuscle:
    """Tests for the per-muscle rule."""

    def test_rules(self, settings):
        assert classify_muscle(0, None, settings) is LaggingType.NEVER_TRAINED
        assert classify_muscle(99, 1, settings) is LaggingType.UNDER_TRAINED
        assert classify_muscle(100, 15, settings) is LaggingType.NEGLECTED
        assert classify_muscle(100, 14, settings) is None
        assert classify_muscle(500, None, settings) is None


class TestAnalyzeLaggingMuscles:
    """Tests for the full classification."""

    def test_classification(self, muscle_scores, logs, library, reference_date, settings):
        result = analyze_lagging_muscles(muscle_scores, logs, library, reference_date, settings)
        by_muscle = {item.muscle: item for item in result}

        assert "pectorals" not in by_muscle
        assert by_muscle["triceps"].lagging_type is LaggingType.UNDER_TRAINED
        assert by_muscle["triceps"].days_since_trained == 2
        assert by_muscle["delts"].lagging_type is LaggingType.NEGLECTED
        assert by_muscle["delts"].days_since_trained == 20
        for muscle in ("quads", "glutes", "hamstrings"):
            assert by_muscle[muscle].lagging_type is LaggingType.NEVER_TRAINED
            assert by_muscle[muscle].days_since_trained is None

    def test_priority_order(self, muscle_scores, logs, library, reference_date, settings):
        result = analyze_lagging_muscles(muscle_scores, logs, library, reference_date, settings)
        order = [item.lagging_type for item in result]

        assert order[:3] == [LaggingType.NEVER_TRAINED] * 3
        assert order[3:] == [LaggingType.UNDER_TRAINED, LaggingType.NEGLECTED]
        assert result[3].priority == 502
        assert result[4].priority == 120

    def test_empty_library(self, muscle_scores, logs, reference_date, settings):
        assert analyze_lagging_muscles(muscle_scores, logs, {}, reference_date, settings) == []

    def test_last_trained_dates(self, logs, library, days_ago):
        dates = last_trained_dates(logs, library)
        assert dates["pectorals"] == days_ago(2)
        assert dates["delts"] == days_ago(20)
        assert "quads" not in dates


class TestLaggingBonus:
    """Tests for the bonus an exercise earns from lagging muscles."""

    def test_bonus_for_touched_muscles(self, muscle_scores, logs, library, reference_date, settings):
        lagging = analyze_lagging_muscles(muscle_scores, logs, library, reference_date, settings)
        assert calculate_lagging_muscle_bonus(library["bench"], lagging, settings) == 50
        assert calculate_lagging_muscle_bonus(library["squat"], lagging, settings) == 300
        assert calculate_lagging_muscle_bonus(library["raise"], lagging, settings) == 25

    def test_no_lagging_muscles(self, library, settings):
        assert calculate_lagging_muscle_bonus(library["bench"], [], settings) == 0
