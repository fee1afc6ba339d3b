"""
Nutrition Repository Interface (Port).

This module defines the abstract interface for nutrition logging data:
meals, meal items, macro goals and the backend aggregation RPCs that
sum logged food per day and per meal.
"""
from typing import Protocol, Optional, List, Dict, Any


class NutritionRepository(Protocol):
    """
    Abstract interface for nutrition data access.

    Aggregations (daily totals, per-meal totals) are computed by the
    backend; implementations only forward the queries. Meal reads and
    writes are scoped by owner: a meal of another user behaves as if it
    did not exist.
    """

    # -------------------------------------------------------------------------
    # Aggregations
    # -------------------------------------------------------------------------

    def get_daily_totals(self, user_id: str, day: str) -> List[Dict[str, Any]]:
        """
        Sum of all logged food for a day.

        Args:
            user_id: User ID
            day: ISO date (YYYY-MM-DD)

        Returns:
            Zero or one row with total_calories, total_protein,
            total_carbs and total_fat
        """
        ...

    def get_meal_totals(self, user_id: str, day: str) -> List[Dict[str, Any]]:
        """
        Per-meal-type totals for a day.

        Returns:
            Rows with meal_type (English) and the four totals
        """
        ...

    def get_meal_entries(
        self,
        user_id: str,
        day: str,
        meal_type: str,
    ) -> List[Dict[str, Any]]:
        """
        Logged entries for one meal type on a day.

        Args:
            meal_type: English meal type (breakfast, lunch, dinner, snack)

        Returns:
            Rows with id, product_name, quantity_grams and *_total values
        """
        ...

    def get_meals_by_date(self, user_id: str, day: str) -> List[Dict[str, Any]]:
        """Get all meals the user logged on a date, newest first."""
        ...

    # -------------------------------------------------------------------------
    # Meals
    # -------------------------------------------------------------------------

    def get_meal(self, user_id: str, meal_id: str) -> Optional[Dict[str, Any]]:
        """Get a meal row if it belongs to the user, None otherwise."""
        ...

    def get_meal_items(self, meal_id: str) -> List[Dict[str, Any]]:
        """Get the items of a meal in the order they were added."""
        ...

    def get_meal_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        """Get a single meal item (including its meal_id), or None."""
        ...

    def create_meal(self, user_id: str, name: str, day: str) -> Dict[str, Any]:
        """Insert an empty meal and return it."""
        ...

    def add_meal_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a meal item and return it."""
        ...

    def update_meal_item_quantity(self, meal_id: str, item_id: str, quantity_grams: float) -> bool:
        """
        Change the quantity of an item of the given meal.

        Returns:
            True if a row was updated
        """
        ...

    def update_meal_name(self, user_id: str, meal_id: str, name: str) -> bool:
        """
        Rename one of the user's meals.

        Returns:
            True if a row was updated
        """
        ...

    def delete_meal_item(self, meal_id: str, item_id: str) -> bool:
        """Delete an item of the given meal. Returns True if a row was deleted."""
        ...

    def delete_meal(self, user_id: str, meal_id: str) -> bool:
        """Delete one of the user's meals and (by cascade) its items."""
        ...

    # -------------------------------------------------------------------------
    # Macro Goals
    # -------------------------------------------------------------------------

    def save_macro_goals(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a macro goals row and return it."""
        ...

    def get_latest_macro_goals(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the most recently saved macro goals, or None."""
        ...
