"""Nutrition data models.

Food documents arrive in several shapes: a ``nutritionix_data`` payload, a
``nutrition`` payload, or flat fields on the food itself, with ``nf_``
prefixed or plain macro names. ``normalize_nutrition`` is the one place that
knows about those shapes; everything downstream works on ``NutritionFacts``.
"""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from ..utils.numbers import coerce_number
from .base import CamelModel


class MicronutrientInfo(BaseModel):
    """A tracked micronutrient and its recommended daily value."""

    attr_id: int
    label: str
    unit: str
    rdv: Optional[float] = None


# FDA daily values for adults and children 4+, keyed by nutrient attribute id.
MICRONUTRIENTS: List[MicronutrientInfo] = [
    MicronutrientInfo(attr_id=301, label="Calcium", unit="mg", rdv=1300),
    MicronutrientInfo(attr_id=303, label="Iron", unit="mg", rdv=18),
    MicronutrientInfo(attr_id=306, label="Potassium", unit="mg", rdv=4700),
    MicronutrientInfo(attr_id=401, label="Vitamin C", unit="mg", rdv=90),
    MicronutrientInfo(attr_id=328, label="Vitamin D", unit="IU", rdv=800),
    MicronutrientInfo(attr_id=324, label="Vitamin D", unit="mcg", rdv=20),
    MicronutrientInfo(attr_id=430, label="Vitamin K", unit="mcg", rdv=120),
    MicronutrientInfo(attr_id=418, label="Vitamin B12", unit="mcg", rdv=2.4),
    MicronutrientInfo(attr_id=404, label="Thiamin (B1)", unit="mg", rdv=1.2),
    MicronutrientInfo(attr_id=405, label="Riboflavin (B2)", unit="mg", rdv=1.3),
    MicronutrientInfo(attr_id=406, label="Niacin (B3)", unit="mg", rdv=16),
    MicronutrientInfo(attr_id=415, label="Vitamin B6", unit="mg", rdv=1.7),
    MicronutrientInfo(attr_id=417, label="Folate (B9)", unit="mcg", rdv=400),
    MicronutrientInfo(attr_id=320, label="Vitamin A", unit="IU", rdv=5000),
    MicronutrientInfo(attr_id=318, label="Vitamin A", unit="IU", rdv=5000),
    MicronutrientInfo(attr_id=851, label="Vitamin A (RAE)", unit="mcg", rdv=900),
    MicronutrientInfo(attr_id=573, label="Retinol", unit="mcg", rdv=None),
    MicronutrientInfo(attr_id=578, label="Vitamin E", unit="mg", rdv=15),
    MicronutrientInfo(attr_id=309, label="Zinc", unit="mg", rdv=11),
    MicronutrientInfo(attr_id=312, label="Copper", unit="mg", rdv=0.9),
    MicronutrientInfo(attr_id=315, label="Manganese", unit="mg", rdv=2.3),
    MicronutrientInfo(attr_id=317, label="Selenium", unit="mcg", rdv=55),
    MicronutrientInfo(attr_id=421, label="Choline", unit="mg", rdv=550),
]


class AltMeasure(BaseModel):
    """Alternative serving measure (e.g. "cup", "slice")."""

    measure: str
    qty: float = 1
    serving_weight: float = 0


class NutritionFacts(BaseModel):
    """Canonical nutrition record for the reference portion of a food.

    The macros cover ``serving_qty`` x ``serving_unit``, weighing
    ``serving_weight_grams`` in total.
    """

    food_id: str = ""
    name: str = ""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    nutrients: Dict[int, float] = Field(default_factory=dict)
    food_group: Optional[int] = None
    serving_weight_grams: float = 1
    serving_qty: float = 1
    serving_unit: Optional[str] = None
    alt_measures: List[AltMeasure] = Field(default_factory=list)

    @property
    def is_classified(self) -> bool:
        """Whether the food carries a real food group (codes 1-9)."""
        return self.food_group is not None and self.food_group != 0


def _first_number(data: Mapping[str, Any], *keys: str) -> float:
    for key in keys:
        number = coerce_number(data.get(key))
        if number is not None:
            return number
    return 0.0


def _positive_or(value: Any, default: float) -> float:
    number = coerce_number(value)
    return number if number is not None and number > 0 else default


def _food_group(data: Mapping[str, Any], food: Mapping[str, Any]) -> Optional[int]:
    for source in (data, food):
        tags = source.get("tags")
        if isinstance(tags, Mapping):
            number = coerce_number(tags.get("food_group"))
            if number is not None and number.is_integer() and 0 <= number <= 9:
                return int(number)
    return None


def normalize_nutrition(food: Mapping[str, Any]) -> NutritionFacts:
    """Build ``NutritionFacts`` from any of the stored food document shapes.

    Missing or malformed values become zero rather than raising.
    """
    payload = food.get("nutritionix_data") or food.get("nutrition") or food
    if not isinstance(payload, Mapping):
        payload = food

    nutrients: Dict[int, float] = {}
    for item in payload.get("full_nutrients") or []:
        if not isinstance(item, Mapping):
            continue
        attr_id = coerce_number(item.get("attr_id"))
        value = coerce_number(item.get("value"))
        if attr_id is None or value is None:
            continue
        nutrients[int(attr_id)] = nutrients.get(int(attr_id), 0.0) + value

    alt_measures = []
    for item in food.get("alt_measures") or payload.get("alt_measures") or []:
        if isinstance(item, Mapping) and item.get("measure"):
            alt_measures.append(
                AltMeasure(
                    measure=str(item["measure"]),
                    qty=_positive_or(item.get("qty"), 1),
                    serving_weight=coerce_number(item.get("serving_weight")) or 0,
                )
            )

    name = food.get("food_name") or food.get("label") or food.get("name") or payload.get("food_name") or ""

    return NutritionFacts(
        food_id=str(food.get("id") or ""),
        name=str(name),
        calories=_first_number(payload, "nf_calories", "calories"),
        protein=_first_number(payload, "nf_protein", "protein"),
        carbs=_first_number(payload, "nf_total_carbohydrate", "carbs"),
        fat=_first_number(payload, "nf_total_fat", "fat"),
        fiber=_first_number(payload, "nf_dietary_fiber", "fiber"),
        nutrients=nutrients,
        food_group=_food_group(payload, food),
        serving_weight_grams=_positive_or(
            food.get("serving_weight_grams") or payload.get("serving_weight_grams"), 1
        ),
        serving_qty=_positive_or(food.get("serving_qty") or payload.get("serving_qty"), 1),
        serving_unit=food.get("serving_unit") or payload.get("serving_unit"),
        alt_measures=alt_measures,
    )


class NutritionGoals(CamelModel):
    """User's daily macro goals."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class DailyTotals(BaseModel):
    """Summed nutrition for one calendar day of food logs."""

    calories: float = 0
    fat: float = 0
    carbs: float = 0
    protein: float = 0
    fiber: float = 0
    micronutrients: Dict[int, float] = Field(
        default_factory=dict, description="Totals keyed by nutrient attribute id"
    )


class FoodXPBreakdown(CamelModel):
    """Daily food XP with its components, for display and debugging."""

    day: Optional[date] = None
    total_xp: int = Field(default=0, alias="totalXP")
    base_xp: int = Field(default=0, alias="baseXP")
    food_group_bonus: int = 0
    unique_food_bonus: int = 0
    macro_goal_bonus: int = 0
    micronutrient_bonus: int = 0
    totals: DailyTotals = Field(default_factory=DailyTotals)
