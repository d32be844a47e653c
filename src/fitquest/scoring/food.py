"""Food XP and daily nutrition aggregation.

Per-item XP is ``calories * 2`` for the eaten portion, boosted by 50% for
fruits, vegetables and legumes/nuts/seeds. The daily total adds bonuses for
variety (distinct foods), for macros landing near their goals and for
micronutrients reaching their recommended daily value.
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..config import Settings, get_settings
from ..models.logs import FoodLogEntry
from ..models.nutrition import (
    MICRONUTRIENTS,
    DailyTotals,
    FoodXPBreakdown,
    NutritionFacts,
    NutritionGoals,
)
from ..utils.numbers import round_half_up
from ..utils.timeutils import calendar_day

logger = logging.getLogger(__name__)

FoodLookup = Union[Mapping[str, NutritionFacts], Callable[[str], Optional[NutritionFacts]]]

MACROS = ("calories", "protein", "carbs", "fat")


def _resolve(food_lookup: FoodLookup, food_id: str) -> Optional[NutritionFacts]:
    if callable(food_lookup):
        return food_lookup(food_id)
    return food_lookup.get(food_id)


def convert_to_grams(facts: Optional[NutritionFacts], qty: float, unit: Optional[str]) -> float:
    """
    Convert a quantity in some unit to grams of the food.

    Args:
        facts: Food nutrition record (None gives 0)
        qty: Quantity in ``unit``
        unit: "g", the food's serving unit, or one of its alt measures

    Returns:
        Weight in grams; unknown units are treated as the base serving unit
    """
    if facts is None:
        return 0.0
    if unit == "g":
        return qty
    per_base_unit = facts.serving_weight_grams / (facts.serving_qty or 1)
    if unit == facts.serving_unit:
        return per_base_unit * qty
    for alt in facts.alt_measures:
        if alt.measure == unit:
            return alt.serving_weight / (alt.qty or 1) * qty
    return per_base_unit * qty


def serving_factor(facts: NutritionFacts, serving: float = 1, units: Optional[str] = None) -> float:
    """Fraction of the food's reference portion that a logged portion amounts to.

    ``serving`` is a quantity in ``units``, which defaults to the food's own
    serving unit. It is converted through grams, so "1 slice" of a food whose
    nutrition covers "2 slices" is half the reference portion.
    """
    if facts.serving_weight_grams <= 0:
        return serving
    grams = convert_to_grams(facts, serving, units or facts.serving_unit)
    return grams / facts.serving_weight_grams


def calculate_food_base_xp(
    facts: NutritionFacts,
    serving: float = 1,
    units: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> int:
    """Base XP: calories in the eaten portion times the calorie coefficient."""
    settings = settings or get_settings()
    calories = facts.calories * serving_factor(facts, serving, units)
    return round_half_up(calories * settings.calorie_coefficient)


def food_group_multiplier(facts: NutritionFacts, settings: Optional[Settings] = None) -> float:
    """Multiplier for the food's group; unclassified and unknown groups get 1.0."""
    settings = settings or get_settings()
    if facts.food_group is None:
        return 1.0
    return settings.food_group_multipliers.get(facts.food_group, 1.0)


def calculate_food_xp(
    facts: NutritionFacts,
    serving: float = 1,
    units: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> int:
    """XP awarded for logging one food item."""
    settings = settings or get_settings()
    base = calculate_food_base_xp(facts, serving, units, settings)
    return round_half_up(base * food_group_multiplier(facts, settings))


def calculate_daily_totals(logs: Iterable[FoodLogEntry], food_lookup: FoodLookup) -> DailyTotals:
    """
    Sum macros and tracked micronutrients over a set of food logs.

    Args:
        logs: Food logs (usually one day's worth)
        food_lookup: Mapping or callable from food id to NutritionFacts

    Returns:
        DailyTotals with micronutrients keyed by attribute id; logs whose food
        cannot be resolved are skipped
    """
    totals = {"calories": 0.0, "fat": 0.0, "carbs": 0.0, "protein": 0.0, "fiber": 0.0}
    micronutrients: Dict[int, float] = {}

    for log in logs:
        facts = _resolve(food_lookup, log.food_id)
        if facts is None:
            continue
        factor = serving_factor(facts, log.serving, log.units)
        for macro in totals:
            totals[macro] += getattr(facts, macro) * factor
        for info in MICRONUTRIENTS:
            value = facts.nutrients.get(info.attr_id, 0) * factor
            if value > 0:
                micronutrients[info.attr_id] = micronutrients.get(info.attr_id, 0.0) + value

    return DailyTotals(micronutrients=micronutrients, **totals)


def _in_band(total: float, goal: float, settings: Settings) -> bool:
    percentage = total * 100 / goal
    return settings.macro_band_low_percent <= percentage <= settings.macro_band_high_percent


def calculate_macro_goal_bonus(
    totals: DailyTotals,
    goals: Optional[NutritionGoals],
    settings: Optional[Settings] = None,
) -> int:
    """
    Bonus for macros landing within 80-120% of their goals.

    Each macro with a positive goal inside the band earns +50. When all four
    macros have a positive goal and are inside the band, a flat +500 is
    added on top.
    """
    settings = settings or get_settings()
    if goals is None:
        return 0

    bonus = 0
    in_band = 0
    for macro in MACROS:
        goal = getattr(goals, macro) or 0
        if goal <= 0:
            continue
        if _in_band(getattr(totals, macro), goal, settings):
            bonus += settings.macro_in_band_bonus
            in_band += 1

    if in_band == len(MACROS):
        bonus += settings.all_macros_bonus
    return bonus


def calculate_micronutrient_bonus(totals: DailyTotals, settings: Optional[Settings] = None) -> int:
    """+10 per micronutrient at or above its daily value, +100 once five are met."""
    settings = settings or get_settings()
    met = 0
    for info in MICRONUTRIENTS:
        if info.rdv and totals.micronutrients.get(info.attr_id, 0) >= info.rdv:
            met += 1

    bonus = met * settings.micronutrient_bonus
    if met >= settings.micronutrient_multi_threshold:
        bonus += settings.micronutrient_multi_bonus
    return bonus


def unique_food_key(facts: NutritionFacts) -> str:
    """Identity of a food for the variety bonus."""
    name = facts.name.strip().lower()
    if not facts.is_classified:
        return name
    return f"{facts.food_group}_{name}"


def calculate_unique_food_bonus(
    logs: Iterable[FoodLogEntry],
    food_lookup: FoodLookup,
    settings: Optional[Settings] = None,
) -> int:
    """+5 per distinct food eaten."""
    settings = settings or get_settings()
    keys = set()
    for log in logs:
        facts = _resolve(food_lookup, log.food_id)
        if facts is not None:
            keys.add(unique_food_key(facts))
    return len(keys) * settings.unique_food_bonus


def group_food_logs_by_day(
    logs: Iterable[FoodLogEntry],
    tz_name: Optional[str] = None,
) -> Dict[date, List[FoodLogEntry]]:
    """Bucket food logs by local calendar day."""
    by_day: Dict[date, List[FoodLogEntry]] = defaultdict(list)
    for log in logs:
        by_day[calendar_day(log.timestamp, tz_name)].append(log)
    return dict(by_day)


def calculate_daily_food_xp(
    logs: Iterable[FoodLogEntry],
    food_lookup: FoodLookup,
    goals: Optional[NutritionGoals] = None,
    day: Optional[date] = None,
    settings: Optional[Settings] = None,
) -> FoodXPBreakdown:
    """
    Total food XP for one day with its breakdown.

    Args:
        logs: Food logs; when ``day`` is given only logs on that day count
        food_lookup: Mapping or callable from food id to NutritionFacts
        goals: User's daily macro goals (None disables the macro bonus)
        day: Calendar day to score
        settings: Scoring settings

    Returns:
        FoodXPBreakdown with the component bonuses and the day's totals
    """
    settings = settings or get_settings()
    logs = list(logs)
    if day is not None:
        logs = [log for log in logs if calendar_day(log.timestamp, settings.timezone) == day]

    base_xp = 0
    group_bonus = 0
    unknown = 0
    for log in logs:
        facts = _resolve(food_lookup, log.food_id)
        if facts is None:
            unknown += 1
            continue
        item_base = calculate_food_base_xp(facts, log.serving, log.units, settings)
        base_xp += item_base
        group_bonus += round_half_up(item_base * (food_group_multiplier(facts, settings) - 1))

    if unknown:
        logger.debug("Skipped %d food logs with unknown food ids", unknown)

    totals = calculate_daily_totals(logs, food_lookup)
    unique_bonus = calculate_unique_food_bonus(logs, food_lookup, settings)
    macro_bonus = calculate_macro_goal_bonus(totals, goals, settings)
    micro_bonus = calculate_micronutrient_bonus(totals, settings)

    return FoodXPBreakdown(
        day=day,
        total_xp=base_xp + group_bonus + unique_bonus + macro_bonus + micro_bonus,
        base_xp=base_xp,
        food_group_bonus=group_bonus,
        unique_food_bonus=unique_bonus,
        macro_goal_bonus=macro_bonus,
        micronutrient_bonus=micro_bonus,
        totals=totals,
    )
