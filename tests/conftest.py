"""Shared fixtures for the FitQuest test suite."""

from datetime import datetime, timedelta

import pytest

from fitquest.config import Settings
from fitquest.models import (
    AltMeasure,
    ExerciseMetadata,
    FoodLogEntry,
    NutritionFacts,
    SetEntry,
    WorkoutLogEntry,
)


# ============================================================================
# Settings and dates
# ============================================================================

@pytest.fixture
def settings():
    """Default scoring settings."""
    return Settings()


@pytest.fixture
def reference_date():
    """Sunday 2024-01-07 at noon; the week runs Monday 1st to Sunday 7th."""
    return datetime(2024, 1, 7, 12, 0)


# ============================================================================
# Exercise library
# ============================================================================

@pytest.fixture
def bench():
    return ExerciseMetadata(
        id="bench",
        name="Barbell Bench Press",
        target="pectorals",
        secondaryMuscles=["triceps", "delts"],
        category="compound",
        equipment="barbell",
    )


@pytest.fixture
def squat():
    return ExerciseMetadata(
        id="squat",
        name="Barbell Squat",
        target="quads",
        secondaryMuscles="glutes, hamstrings",
        category="compound",
        equipment="barbell",
    )


@pytest.fixture
def curl():
    return ExerciseMetadata(
        id="curl",
        name="Dumbbell Curl",
        target="biceps",
        secondaryMuscles=["forearms"],
        category="isolation",
        equipment="dumbbell",
    )


@pytest.fixture
def run():
    return ExerciseMetadata(
        id="run",
        name="Run",
        target="cardiovascular system",
        category="cardio",
    )


@pytest.fixture
def exercise_library(bench, squat, curl, run):
    return {exercise.id: exercise for exercise in (bench, squat, curl, run)}


@pytest.fixture
def make_workout():
    """Factory for workout log entries."""

    def _make(exercise_id, timestamp, sets=None, duration=None, distance=None, score=0):
        return WorkoutLogEntry(
            exercise_id=exercise_id,
            timestamp=timestamp,
            sets=[SetEntry(weight=w, reps=r) for w, r in (sets or [])],
            duration=duration,
            distance=distance,
            score=score,
        )

    return _make


# ============================================================================
# Foods
# ============================================================================

@pytest.fixture
def apple():
    return NutritionFacts(
        food_id="apple",
        name="Apple",
        calories=95,
        protein=0.5,
        carbs=25,
        fat=0.3,
        fiber=4.4,
        nutrients={401: 8.4, 306: 195},
        food_group=3,
        serving_weight_grams=182,
        serving_qty=1,
        serving_unit="medium",
        alt_measures=[AltMeasure(measure="cup", qty=1, serving_weight=125)],
    )


@pytest.fixture
def chicken():
    return NutritionFacts(
        food_id="chicken",
        name="Chicken Breast",
        calories=165,
        protein=31,
        carbs=0,
        fat=3.6,
        food_group=2,
        serving_weight_grams=100,
        serving_unit="serving",
    )


@pytest.fixture
def protein_bar():
    return NutritionFacts(food_id="bar", name="Protein Bar", calories=200, protein=20, carbs=22, fat=7)


@pytest.fixture
def bread():
    """Nutrition given for a two-slice portion."""
    return NutritionFacts(
        food_id="bread",
        name="Whole Wheat Bread",
        calories=200,
        protein=8,
        carbs=36,
        fat=2,
        food_group=5,
        serving_weight_grams=60,
        serving_qty=2,
        serving_unit="slice",
    )


@pytest.fixture
def food_library(apple, chicken, protein_bar):
    return {food.food_id: food for food in (apple, chicken, protein_bar)}


@pytest.fixture
def make_food_log():
    """Factory for food log entries."""

    def _make(food_id, timestamp, serving=1, units=None, xp=0):
        return FoodLogEntry(food_id=food_id, timestamp=timestamp, serving=serving, units=units, xp=xp)

    return _make


@pytest.fixture
def days_ago(reference_date):
    """Timestamp N days before the reference date."""

    def _days_ago(days, hours=0):
        return reference_date - timedelta(days=days, hours=hours)

    return _days_ago
