"""
Nutrition service: daily and per-meal aggregation, meal logging and macro goals.

Sums are computed by backend RPCs; this service shapes their rows into
response objects, translates meal types between the English values stored
in the database and the Swedish labels the app shows, and wires the macro
calculator into goal saving.

Every meal and meal item operation takes the acting user. A meal owned by
someone else is reported as RecordNotFoundError, the same as a missing one.
"""
import logging
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
from starlette.concurrency import run_in_threadpool

from application.exceptions import RecordNotFoundError
from application.ports import FoodProduct, NutritionRepository
from backend.core.macro_calculator import (
    ActivityLevel,
    Gender,
    Goal,
    MacroTargets,
    calculate_macros,
    calculate_nutrition,
    parse_enum,
)

logger = logging.getLogger(__name__)

MEAL_TYPES_SV = {
    "breakfast": "frukost",
    "lunch": "lunch",
    "dinner": "middag",
    "snack": "mellanmål",
}
MEAL_TYPES_EN = {sv: en for en, sv in MEAL_TYPES_SV.items()}


def meal_type_to_swedish(meal_type: str) -> str:
    return MEAL_TYPES_SV.get(meal_type, meal_type)


def meal_type_to_english(meal_type: str) -> str:
    lowered = meal_type.lower()
    return MEAL_TYPES_EN.get(lowered, lowered)


def _num(row: Dict[str, Any], key: str) -> float:
    return row.get(key) or 0


@dataclass
class DailyTotals:
    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fat: float = 0

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> "DailyTotals":
        row = row or {}
        return cls(
            total_calories=_num(row, "total_calories"),
            total_protein=_num(row, "total_protein"),
            total_carbs=_num(row, "total_carbs"),
            total_fat=_num(row, "total_fat"),
        )


@dataclass
class MealEntry:
    id: str
    product_name: str
    quantity_grams: float
    calories_total: float = 0
    protein_total: float = 0
    carbs_total: float = 0
    fat_total: float = 0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "MealEntry":
        return cls(
            id=str(row.get("id", "")),
            product_name=row.get("product_name") or "",
            quantity_grams=_num(row, "quantity_grams"),
            calories_total=_num(row, "calories_total"),
            protein_total=_num(row, "protein_total"),
            carbs_total=_num(row, "carbs_total"),
            fat_total=_num(row, "fat_total"),
        )


@dataclass
class MealLog:
    """Totals and entries for one meal type on one day."""
    meal_type: str
    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fat: float = 0
    entries: List[MealEntry] = field(default_factory=list)


@dataclass
class DailySummary:
    date: str
    totals: DailyTotals
    meals: List[MealLog]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MealsSummary:
    """Totals of the meals logged on one day, with the meals themselves."""
    date: str
    total_calories: float = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fat: float = 0
    meals: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_meals(cls, day: str, meals: List[Dict[str, Any]]) -> "MealsSummary":
        return cls(
            date=day,
            total_calories=sum(_num(m, "total_calories") for m in meals),
            total_protein=sum(_num(m, "total_protein") for m in meals),
            total_carbs=sum(_num(m, "total_carbs") for m in meals),
            total_fat=sum(_num(m, "total_fat") for m in meals),
            meals=meals,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MacroProfile:
    """Body metrics and preferences the macro targets are computed from."""
    weight_kg: float
    height_cm: float
    age: int
    gender: str
    activity_level: str
    goal: str


class NutritionService:
    """
    Business logic for nutrition logging.

    Usage:
        service = NutritionService(nutrition_repo)
        summary = service.get_daily_summary(user_id, date(2026, 10, 19))
    """

    def __init__(
        self,
        nutrition_repo: NutritionRepository,
        *,
        webhook_url: Optional[str] = None,
        webhook_timeout: float = 10.0,
        today: Callable[[], date] = date.today,
    ):
        """
        Args:
            nutrition_repo: Repository for nutrition data (injected)
            webhook_url: Optional URL notified when macro goals are saved
            webhook_timeout: Webhook request timeout in seconds
            today: Clock used when no date is given
        """
        self._repo = nutrition_repo
        self._webhook_url = webhook_url
        self._webhook_timeout = webhook_timeout
        self._today = today

    def _day(self, day: Optional[date]) -> str:
        return (day or self._today()).isoformat()

    # -------------------------------------------------------------------------
    # Aggregations
    # -------------------------------------------------------------------------

    def get_daily_totals(self, user_id: str, day: Optional[date] = None) -> DailyTotals:
        rows = self._repo.get_daily_totals(user_id, self._day(day))
        return DailyTotals.from_row(rows[0] if rows else None)

    def get_meal_logs(self, user_id: str, day: Optional[date] = None) -> List[MealLog]:
        """
        Per-meal totals and entries for a day.

        Entries are fetched with one RPC per meal type present in the totals.
        """
        day_str = self._day(day)
        meal_logs = []
        for meal in self._repo.get_meal_totals(user_id, day_str):
            meal_type = meal.get("meal_type") or ""
            entries = self._repo.get_meal_entries(user_id, day_str, meal_type)
            meal_logs.append(MealLog(
                meal_type=meal_type_to_swedish(meal_type),
                total_calories=_num(meal, "total_calories"),
                total_protein=_num(meal, "total_protein"),
                total_carbs=_num(meal, "total_carbs"),
                total_fat=_num(meal, "total_fat"),
                entries=[MealEntry.from_row(e) for e in entries],
            ))
        return meal_logs

    def get_meal_entries(self, user_id: str, meal_type: str, day: Optional[date] = None) -> List[MealEntry]:
        """Entries of one meal type; accepts Swedish or English meal types."""
        rows = self._repo.get_meal_entries(user_id, self._day(day), meal_type_to_english(meal_type))
        return [MealEntry.from_row(r) for r in rows]

    def get_daily_summary(self, user_id: str, day: Optional[date] = None) -> DailySummary:
        day = day or self._today()
        return DailySummary(
            date=day.isoformat(),
            totals=self.get_daily_totals(user_id, day),
            meals=self.get_meal_logs(user_id, day),
        )

    def get_meals_by_date(self, user_id: str, day: Optional[date] = None) -> List[Dict[str, Any]]:
        return self._repo.get_meals_by_date(user_id, self._day(day))

    def get_daily_nutrition_summary(self, user_id: str, day: Optional[date] = None) -> MealsSummary:
        """Sum the stored meal totals of the user's meals on a day."""
        day_str = self._day(day)
        return MealsSummary.from_meals(day_str, self._repo.get_meals_by_date(user_id, day_str))

    # -------------------------------------------------------------------------
    # Meals
    # -------------------------------------------------------------------------

    def get_meal_with_items(self, user_id: str, meal_id: str) -> Dict[str, Any]:
        """
        Get one of the user's meals with its items under ``items``.

        Raises:
            RecordNotFoundError: If the meal does not exist or is not the user's
        """
        meal = self._require_meal(user_id, meal_id)
        return {**meal, "items": self._repo.get_meal_items(meal_id)}

    def create_meal(self, user_id: str, name: str, day: Optional[date] = None) -> Dict[str, Any]:
        name = name.strip()
        if not name:
            raise ValueError("Meal name must not be empty")
        return self._repo.create_meal(user_id, name, self._day(day))

    def add_food_to_meal(
        self,
        user_id: str,
        meal_id: str,
        product: FoodProduct,
        quantity_grams: float,
    ) -> Dict[str, Any]:
        """
        Log a product in one of the user's meals.

        The item stores per-100 g values; the returned dict also carries the
        portion's nutrition under ``nutrition``.

        Raises:
            RecordNotFoundError: If the meal does not exist or is not the user's
        """
        _require_positive_quantity(quantity_grams)
        self._require_meal(user_id, meal_id)
        item = self._repo.add_meal_item({
            "meal_id": meal_id,
            "product_name": product.name,
            "brand": product.brand,
            "quantity_grams": quantity_grams,
            "energy_kcal_100g": product.calories,
            "protein_100g": product.protein,
            "fat_100g": product.fat,
            "carbs_100g": product.carbs,
            "image_url": product.image_url,
        })
        return {**item, "nutrition": calculate_nutrition(product, quantity_grams)}

    def update_meal_item_quantity(self, user_id: str, item_id: str, quantity_grams: float) -> None:
        _require_positive_quantity(quantity_grams)
        item = self._require_item(user_id, item_id)
        if not self._repo.update_meal_item_quantity(item["meal_id"], item_id, quantity_grams):
            raise RecordNotFoundError(f"Meal item '{item_id}' not found")

    def update_meal_name(self, user_id: str, meal_id: str, name: str) -> None:
        name = name.strip()
        if not name:
            raise ValueError("Meal name must not be empty")
        if not self._repo.update_meal_name(user_id, meal_id, name):
            raise RecordNotFoundError(f"Meal '{meal_id}' not found")

    def delete_meal_item(self, user_id: str, item_id: str) -> None:
        item = self._require_item(user_id, item_id)
        if not self._repo.delete_meal_item(item["meal_id"], item_id):
            raise RecordNotFoundError(f"Meal item '{item_id}' not found")

    def delete_meal(self, user_id: str, meal_id: str) -> None:
        if not self._repo.delete_meal(user_id, meal_id):
            raise RecordNotFoundError(f"Meal '{meal_id}' not found")

    def _require_meal(self, user_id: str, meal_id: str) -> Dict[str, Any]:
        meal = self._repo.get_meal(user_id, meal_id)
        if meal is None:
            raise RecordNotFoundError(f"Meal '{meal_id}' not found")
        return meal

    def _require_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        # Items carry no owner; ownership is that of the parent meal
        item = self._repo.get_meal_item(item_id)
        if item is None or self._repo.get_meal(user_id, str(item["meal_id"])) is None:
            raise RecordNotFoundError(f"Meal item '{item_id}' not found")
        return item

    # -------------------------------------------------------------------------
    # Macro Goals
    # -------------------------------------------------------------------------

    async def save_macro_goals(
        self,
        user_id: str,
        profile: MacroProfile,
        *,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Compute targets for a profile, store them, and notify the webhook.

        Raises:
            InvalidMacroInputError: If the profile is invalid
            GatewayError: If the insert fails
        """
        targets = calculate_macros(
            profile.weight_kg,
            profile.height_cm,
            profile.age,
            profile.gender,
            profile.activity_level,
            profile.goal,
        )
        row = {
            "user_id": user_id,
            "weight_kg": profile.weight_kg,
            "height_cm": profile.height_cm,
            "gender": parse_enum(Gender, profile.gender).value,
            "age": profile.age,
            "activity_level": parse_enum(ActivityLevel, profile.activity_level).value,
            "goal": parse_enum(Goal, profile.goal).value,
            "calculated_calories": targets.calories,
            "calculated_protein": targets.protein,
            "calculated_carbs": targets.carbs,
            "calculated_fat": targets.fat,
        }
        saved = await run_in_threadpool(self._repo.save_macro_goals, row)

        await self._notify_webhook(user_id, row, targets, email=email)
        return saved

    def get_latest_macro_goals(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self._repo.get_latest_macro_goals(user_id)

    async def _notify_webhook(
        self,
        user_id: str,
        row: Dict[str, Any],
        targets: MacroTargets,
        *,
        email: Optional[str] = None,
    ) -> None:
        """Post saved goals to the configured webhook. Failures are logged only."""
        if not self._webhook_url:
            return

        payload = {
            **row,
            "userId": user_id,
            "email": email,
            "bmr": targets.bmr,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        payload.pop("user_id", None)

        try:
            async with httpx.AsyncClient(timeout=self._webhook_timeout) as client:
                response = await client.post(self._webhook_url, json=payload)
            if response.status_code >= 400:
                logger.error(f"Macro goals webhook error: {response.status_code} - {response.text}")
            else:
                logger.info("Macro goals webhook delivered")
        except httpx.HTTPError as e:
            logger.error(f"Error sending macro goals webhook: {e}")


def _require_positive_quantity(quantity_grams: float) -> None:
    if quantity_grams is None or quantity_grams <= 0:
        raise ValueError(f"quantity_grams must be positive, got {quantity_grams}")
