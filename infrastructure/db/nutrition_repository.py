"""
Supabase Nutrition Repository Implementation.

Implements the NutritionRepository protocol on top of the SupabaseGateway.
Daily and per-meal sums are computed by stored procedures that take the
user explicitly. Meal queries filter on user_id themselves: the service role
key bypasses row level security.
"""
from typing import Optional, List, Dict, Any
import logging

from infrastructure.db.gateway import SupabaseGateway

logger = logging.getLogger(__name__)


class SupabaseNutritionRepository:
    """
    Supabase implementation of NutritionRepository.

    Tables: meals, meal_items, macro_goals.
    RPCs: get_daily_totals, get_meal_totals, get_meal_entries.
    """

    def __init__(self, gateway: SupabaseGateway):
        """
        Initialize with the data gateway.

        Args:
            gateway: SupabaseGateway instance (injected)
        """
        self._gateway = gateway

    # -------------------------------------------------------------------------
    # Aggregations
    # -------------------------------------------------------------------------

    def get_daily_totals(self, user_id: str, day: str) -> List[Dict[str, Any]]:
        data = self._gateway.rpc(
            "get_daily_totals", {"p_user": user_id, "p_date": day}
        ).unwrap()
        return _as_rows(data)

    def get_meal_totals(self, user_id: str, day: str) -> List[Dict[str, Any]]:
        data = self._gateway.rpc(
            "get_meal_totals", {"p_user": user_id, "p_date": day}
        ).unwrap()
        return _as_rows(data)

    def get_meal_entries(
        self,
        user_id: str,
        day: str,
        meal_type: str,
    ) -> List[Dict[str, Any]]:
        data = self._gateway.rpc(
            "get_meal_entries",
            {"p_user": user_id, "p_date": day, "p_meal": meal_type},
        ).unwrap()
        return _as_rows(data)

    def get_meals_by_date(self, user_id: str, day: str) -> List[Dict[str, Any]]:
        return self._gateway.select(
            "meals",
            eq={"user_id": user_id, "log_date": day},
            order="created_at",
            desc=True,
        ).unwrap() or []

    # -------------------------------------------------------------------------
    # Meals
    # -------------------------------------------------------------------------

    def get_meal(self, user_id: str, meal_id: str) -> Optional[Dict[str, Any]]:
        return self._gateway.select(
            "meals",
            eq={"id": meal_id, "user_id": user_id},
            maybe_single=True,
        ).unwrap()

    def get_meal_items(self, meal_id: str) -> List[Dict[str, Any]]:
        return self._gateway.select(
            "meal_items",
            eq={"meal_id": meal_id},
            order="created_at",
        ).unwrap() or []

    def get_meal_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        return self._gateway.select(
            "meal_items",
            eq={"id": item_id},
            maybe_single=True,
        ).unwrap()

    def create_meal(self, user_id: str, name: str, day: str) -> Dict[str, Any]:
        return self._gateway.insert(
            "meals",
            {
                "user_id": user_id,
                "name": name,
                "total_calories": 0,
                "total_protein": 0,
                "total_carbs": 0,
                "total_fat": 0,
                "log_date": day,
            },
            single=True,
        ).unwrap()

    def add_meal_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return self._gateway.insert("meal_items", item, single=True).unwrap()

    def update_meal_item_quantity(self, meal_id: str, item_id: str, quantity_grams: float) -> bool:
        rows = self._gateway.update(
            "meal_items",
            {"quantity_grams": quantity_grams},
            eq={"id": item_id, "meal_id": meal_id},
        ).unwrap()
        return bool(rows)

    def update_meal_name(self, user_id: str, meal_id: str, name: str) -> bool:
        rows = self._gateway.update(
            "meals", {"name": name}, eq={"id": meal_id, "user_id": user_id}
        ).unwrap()
        return bool(rows)

    def delete_meal_item(self, meal_id: str, item_id: str) -> bool:
        rows = self._gateway.delete(
            "meal_items", eq={"id": item_id, "meal_id": meal_id}
        ).unwrap()
        return bool(rows)

    def delete_meal(self, user_id: str, meal_id: str) -> bool:
        rows = self._gateway.delete(
            "meals", eq={"id": meal_id, "user_id": user_id}
        ).unwrap()
        if rows:
            logger.info(f"Deleted meal {meal_id} for user {user_id}")
        return bool(rows)

    # -------------------------------------------------------------------------
    # Macro Goals
    # -------------------------------------------------------------------------

    def save_macro_goals(self, row: Dict[str, Any]) -> Dict[str, Any]:
        saved = self._gateway.insert("macro_goals", row, single=True).unwrap()
        logger.info(f"Saved macro goals for user {row.get('user_id')}")
        return saved

    def get_latest_macro_goals(self, user_id: str) -> Optional[Dict[str, Any]]:
        # Queried directly: the get_latest_macro_goals RPC resolves the user
        # from auth.uid(), which is empty under the service role key
        return self._gateway.select(
            "macro_goals",
            eq={"user_id": user_id},
            order="created_at",
            desc=True,
            maybe_single=True,
        ).unwrap()


def _as_rows(data: Any) -> List[Dict[str, Any]]:
    """Normalize RPC output (None, a single row, or a set) to a list of rows."""
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)
