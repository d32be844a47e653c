"""Tests for document models and nutrition normalisation."""

from datetime import datetime, timezone

from fitquest.models import (
    ExerciseMetadata,
    ExercisePersonalBests,
    FoodLogEntry,
    MuscleScoreRecord,
    PersonalBestType,
    UserProfile,
    WorkoutLogEntry,
    normalize_nutrition,
    parse_muscle_tokens,
)


class TestLogEntries:
    """Tests for workout and food log documents."""

    def test_workout_from_firestore_document(self):
        entry = WorkoutLogEntry.model_validate(
            {
                "id": "log1",
                "userId": "u1",
                "exerciseId": "bench",
                "timestamp": {"seconds": 1704067200, "nanoseconds": 0},
                "sets": [{"weight": "100", "reps": "abc"}, {"weight": 50, "reps": 8}],
                "score": "12",
            }
        )
        assert entry.timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert entry.sets[0].weight == 100.0
        assert entry.sets[0].reps is None
        assert entry.sets[1].is_complete
        assert entry.score == 12

    def test_workout_iso_timestamp_and_null_sets(self):
        entry = WorkoutLogEntry.model_validate(
            {"exerciseId": "run", "timestamp": "2024-01-01T08:00:00", "sets": None, "duration": "30"}
        )
        assert entry.sets == []
        assert entry.duration == 30
        assert entry.score == 0

    def test_workout_dumps_camel_case(self):
        entry = WorkoutLogEntry(exercise_id="bench", timestamp=datetime(2024, 1, 1))
        assert "exerciseId" in entry.model_dump(by_alias=True)

    def test_food_log_serving_defaults(self):
        entry = FoodLogEntry.model_validate({"foodId": "apple", "timestamp": "2024-01-01T08:00:00", "serving": -2})
        assert entry.serving == 1
        assert entry.xp == 0


class TestExerciseMetadata:
    """Tests for muscle normalisation."""

    def test_tokens(self):
        assert parse_muscle_tokens("Pectorals, Serratus Anterior,") == {"pectorals", "serratus anterior"}
        assert parse_muscle_tokens(["Triceps", "delts, traps"]) == {"triceps", "delts", "traps"}
        assert parse_muscle_tokens(None) == frozenset()

    def test_muscle_sets(self):
        exercise = ExerciseMetadata.model_validate(
            {"id": "bench", "target": "Pectorals", "secondaryMuscles": "Triceps, Pectorals", "category": "Compound"}
        )
        assert exercise.target_muscles == {"pectorals"}
        assert exercise.secondary_muscle_set == {"triceps", "pectorals"}
        assert exercise.muscles == {"pectorals", "triceps"}
        assert exercise.normalized_category == "compound"


class TestUserProfile:
    """Tests for the profile document."""

    def test_legacy_scores_migrated(self):
        profile = UserProfile.model_validate(
            {
                "totalXP": "1500",
                "muscleScores": {
                    "biceps": 120,
                    "quads": {"today": 5, "3day": 5, "7day": 5, "14day": 5, "30day": 5, "lifetime": 5},
                },
                "displayName": "Sam",
            }
        )
        assert profile.total_xp == 1500
        assert profile.muscle_scores["biceps"].lifetime == 120
        assert profile.muscle_scores["biceps"].today == 0
        assert profile.muscle_scores["quads"].day3 == 5

    def test_unknown_fields_round_trip(self):
        profile = UserProfile.model_validate({"totalXP": 10, "displayName": "Sam"})
        dumped = profile.model_dump(by_alias=True)
        assert dumped["displayName"] == "Sam"
        assert dumped["totalXP"] == 10

    def test_personal_bests_aliases(self):
        profile = UserProfile.model_validate(
            {
                "personalBests": {
                    "bench": {"allTime": {"value": 200, "type": "1rm", "unit": "lbs", "date": "2024-01-01T00:00:00"}}
                }
            }
        )
        bests = profile.personal_bests["bench"]
        assert bests.all_time.value == 200
        assert bests.established_type is PersonalBestType.ONE_REP_MAX

    def test_bad_total_is_zero(self):
        assert UserProfile.model_validate({"totalXP": "lots"}).total_xp == 0


class TestGamificationRecords:
    """Tests for record helpers."""

    def test_muscle_record_aliases(self):
        dumped = MuscleScoreRecord(day3=2).model_dump(by_alias=True)
        assert dumped["3day"] == 2
        assert "lastCalculated" in dumped

    def test_windows_ordered(self):
        assert MuscleScoreRecord(today=1, day3=1, day7=2, day14=2, day30=3, lifetime=3).windows_ordered
        assert not MuscleScoreRecord(today=5, lifetime=3).windows_ordered

    def test_pace_lower_is_better(self):
        assert PersonalBestType.PACE.lower_is_better
        assert not PersonalBestType.ONE_REP_MAX.lower_is_better

    def test_empty_bests_have_no_type(self):
        assert ExercisePersonalBests().established_type is None


class TestNormalizeNutrition:
    """Tests for the food document boundary."""

    def test_nutritionix_shape(self):
        facts = normalize_nutrition(
            {
                "id": "apple",
                "food_name": "Apple",
                "serving_weight_grams": 182,
                "serving_unit": "medium",
                "alt_measures": [{"measure": "cup", "qty": 1, "serving_weight": 125}],
                "nutritionix_data": {
                    "nf_calories": 95,
                    "nf_protein": "0.5",
                    "nf_total_carbohydrate": 25,
                    "full_nutrients": [{"attr_id": 401, "value": 8.4}, {"attr_id": "bad"}],
                    "tags": {"food_group": 3},
                },
            }
        )
        assert facts.food_id == "apple"
        assert facts.name == "Apple"
        assert facts.calories == 95
        assert facts.protein == 0.5
        assert facts.carbs == 25
        assert facts.nutrients == {401: 8.4}
        assert facts.food_group == 3
        assert facts.is_classified
        assert facts.serving_weight_grams == 182
        assert facts.alt_measures[0].measure == "cup"

    def test_flat_shape(self):
        facts = normalize_nutrition({"label": "Protein Bar", "calories": 200, "protein": 20, "fat": 7})
        assert facts.name == "Protein Bar"
        assert facts.calories == 200
        assert facts.food_group is None
        assert not facts.is_classified
        assert facts.serving_weight_grams == 1

    def test_zero_calories_kept(self):
        facts = normalize_nutrition({"name": "Water", "nutritionix_data": {"nf_calories": 0, "calories": 250}})
        assert facts.calories == 0

    def test_invalid_group_ignored(self):
        facts = normalize_nutrition({"name": "X", "tags": {"food_group": 12}})
        assert facts.food_group is None

    def test_catch_all_group_unclassified(self):
        facts = normalize_nutrition({"name": "X", "tags": {"food_group": 0}})
        assert facts.food_group == 0
        assert not facts.is_classified
