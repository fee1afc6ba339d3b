"""
Macro calculator for daily calorie and macronutrient targets.

Targets are derived from body metrics with the Mifflin-St Jeor equation:

    BMR (male)         = 10 * weight_kg + 6.25 * height_cm - 5 * age + 5
    BMR (female/other) = 10 * weight_kg + 6.25 * height_cm - 5 * age - 161

BMR is multiplied by an activity factor (TDEE) and then adjusted for the
user's goal (20% deficit, 10% surplus or maintenance). Macros split as
2 g protein per kg bodyweight, 25% of calories from fat and the remainder
from carbohydrates.

Enum values are the labels shown in the app, so rows stored in
``macro_goals`` round-trip unchanged.
"""
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Type, TypeVar, Union

from application.exceptions import InvalidMacroInputError

# Energy per gram
KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9

PROTEIN_GRAMS_PER_KG = 2
FAT_SHARE_OF_CALORIES = 0.25


class Gender(str, Enum):
    MAN = "Man"
    WOMAN = "Kvinna"
    OTHER = "Annat"


class ActivityLevel(str, Enum):
    SEDENTARY = "Stillasittande"
    LOW = "Låg (1-2 pass/vecka)"
    MODERATE = "Medel (3-4 pass/vecka)"
    HIGH = "Hög (5-6 pass/vecka)"
    VERY_HIGH = "Väldigt hög (2 pass per dag / idrottare)"

    @property
    def factor(self) -> float:
        return ACTIVITY_FACTORS[self]


class Goal(str, Enum):
    LOSE_WEIGHT = "Gå ner i vikt"
    BUILD_MUSCLE = "Bygga muskler"
    MAINTAIN = "Behålla formen"

    @property
    def adjustment(self) -> float:
        return GOAL_ADJUSTMENTS[self]


ACTIVITY_FACTORS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LOW: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.725,
    ActivityLevel.VERY_HIGH: 1.9,
}

GOAL_ADJUSTMENTS = {
    Goal.LOSE_WEIGHT: 0.8,
    Goal.BUILD_MUSCLE: 1.1,
    Goal.MAINTAIN: 1.0,
}


@dataclass(frozen=True)
class MacroTargets:
    """Daily targets. All values are whole numbers."""
    calories: int
    protein: int
    carbs: int
    fat: int
    bmr: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value: Union[E, str]) -> E:
    """
    Resolve an enum member from a member, its label, or its name.

    Names are matched case-insensitively so API clients and the CLI can
    send ``"moderate"`` instead of ``"Medel (3-4 pass/vecka)"``.

    Raises:
        InvalidMacroInputError: If the value matches nothing
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        for member in enum_cls:
            if text == member.value or text.upper() == member.name:
                return member
    valid = ", ".join(m.value for m in enum_cls)
    raise InvalidMacroInputError(
        f"Invalid {enum_cls.__name__} '{value}'. Must be one of: {valid}"
    )


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching what users expect."""
    return int(math.floor(value + 0.5))


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: Union[Gender, str]) -> float:
    """Basal metabolic rate (kcal/day) via Mifflin-St Jeor."""
    gender = parse_enum(Gender, gender)
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if gender is Gender.MAN:
        return base + 5
    return base - 161


def calculate_macros(
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: Union[Gender, str],
    activity_level: Union[ActivityLevel, str],
    goal: Union[Goal, str],
) -> MacroTargets:
    """
    Compute daily calorie and macro targets.

    Args:
        weight_kg: Body weight in kilograms
        height_cm: Height in centimetres
        age: Age in years
        gender: Gender (member, label or name)
        activity_level: One of the five activity levels
        goal: One of the three goals

    Returns:
        MacroTargets with calories, protein, carbs, fat and bmr

    Raises:
        InvalidMacroInputError: If a metric is not positive, a label is
            unknown, or the metrics produce a non-positive BMR
    """
    for field_name, value in (("weight_kg", weight_kg), ("height_cm", height_cm), ("age", age)):
        if value is None or value <= 0:
            raise InvalidMacroInputError(f"{field_name} must be positive, got {value}")

    activity_level = parse_enum(ActivityLevel, activity_level)
    goal = parse_enum(Goal, goal)

    bmr = calculate_bmr(weight_kg, height_cm, age, gender)
    if bmr <= 0:
        raise InvalidMacroInputError(
            f"Body metrics produce a non-positive BMR ({bmr:.1f} kcal)"
        )

    calories = bmr * activity_level.factor * goal.adjustment

    protein = weight_kg * PROTEIN_GRAMS_PER_KG
    fat = calories * FAT_SHARE_OF_CALORIES / KCAL_PER_GRAM_FAT
    carbs = (
        calories - protein * KCAL_PER_GRAM_PROTEIN - fat * KCAL_PER_GRAM_FAT
    ) / KCAL_PER_GRAM_CARBS

    return MacroTargets(
        calories=round_half_up(calories),
        protein=round_half_up(protein),
        carbs=max(0, round_half_up(carbs)),
        fat=round_half_up(fat),
        bmr=round_half_up(bmr),
    )


def calculate_nutrition(product: Any, quantity_grams: float) -> Dict[str, int]:
    """
    Scale per-100 g nutrient values to a quantity.

    Args:
        product: Object or dict with calories, protein, carbs and fat per 100 g
        quantity_grams: Portion size in grams

    Returns:
        Dict with rounded calories, protein, carbs and fat for the portion
    """
    def _get(name: str) -> float:
        if isinstance(product, dict):
            return product.get(name) or 0
        return getattr(product, name, 0) or 0

    return {
        name: round_half_up(_get(name) * quantity_grams / 100)
        for name in ("calories", "protein", "carbs", "fat")
    }
