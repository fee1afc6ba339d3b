"""
Tests for the Supabase repository implementations.

The gateway is mocked, so these verify which tables, filters and RPC
parameters each repository sends, and that gateway errors propagate.
"""
import pytest
from unittest.mock import Mock

from application.exceptions import GatewayError
from infrastructure.db import (
    GatewayResult,
    SupabaseExerciseCatalogRepository,
    SupabaseFoodRepository,
    SupabaseNutritionRepository,
    SupabaseWeightRepository,
    SupabaseWorkoutLogRepository,
)
from infrastructure.db.workout_log_repository import WORKOUT_HISTORY_COLUMNS

# All tests in this module are pure logic tests with mocks - mark as unit
pytestmark = pytest.mark.unit


def mock_gateway(data=None, error=None):
    gateway = Mock()
    result = GatewayResult(data=data, error=error)
    for method in ("select", "insert", "update", "delete", "rpc"):
        getattr(gateway, method).return_value = result
    return gateway


class TestExerciseCatalogRepository:
    def test_list_orders_by_name(self):
        gateway = mock_gateway(data=[{"id": "1", "name": "Bänkpress"}])
        rows = SupabaseExerciseCatalogRepository(gateway).list_exercises()

        gateway.select.assert_called_once_with("ovningar", order="name")
        assert rows == [{"id": "1", "name": "Bänkpress"}]

    def test_list_handles_null(self):
        assert SupabaseExerciseCatalogRepository(mock_gateway(data=None)).list_exercises() == []

    def test_get_exercise(self):
        gateway = mock_gateway(data={"id": "1"})
        assert SupabaseExerciseCatalogRepository(gateway).get_exercise("1") == {"id": "1"}
        gateway.select.assert_called_once_with("ovningar", eq={"id": "1"}, maybe_single=True)

    def test_errors_propagate(self):
        gateway = mock_gateway(error=GatewayError("down"))
        with pytest.raises(GatewayError):
            SupabaseExerciseCatalogRepository(gateway).list_exercises()


class TestWorkoutLogRepository:
    def test_create_workout_log(self):
        gateway = mock_gateway(data={"id": "w1"})

        row = SupabaseWorkoutLogRepository(gateway).create_workout_log(
            "user-1", name="Push", log_date="2026-10-19"
        )

        gateway.insert.assert_called_once_with(
            "workout_logs",
            {"user_id": "user-1", "date": "2026-10-19", "name": "Push"},
            single=True,
        )
        assert row == {"id": "w1"}

    def test_create_exercise_log(self):
        gateway = mock_gateway(data={"id": "e1"})
        SupabaseWorkoutLogRepository(gateway).create_exercise_log("w1", exercise_id="ex-1", rest_time=90)
        gateway.insert.assert_called_once_with(
            "exercise_logs",
            {"workout_id": "w1", "exercise_id": "ex-1", "rest_time": 90},
            single=True,
        )

    def test_empty_set_batch_skips_insert(self):
        gateway = mock_gateway()
        assert SupabaseWorkoutLogRepository(gateway).create_set_logs([]) == []
        gateway.insert.assert_not_called()

    def test_set_batch_is_one_insert(self):
        rows = [{"set_number": 1}, {"set_number": 2}]
        gateway = mock_gateway(data=rows)
        assert SupabaseWorkoutLogRepository(gateway).create_set_logs(rows) == rows
        gateway.insert.assert_called_once_with("set_logs", rows)

    def test_history_selects_nested_logs_newest_first(self):
        gateway = mock_gateway(data=[])

        SupabaseWorkoutLogRepository(gateway).list_workout_logs(
            "user-1", start_date="2026-10-01", end_date=None
        )

        gateway.select.assert_called_once_with(
            "workout_logs",
            WORKOUT_HISTORY_COLUMNS,
            eq={"user_id": "user-1"},
            gte={"date": "2026-10-01"},
            lte=None,
            order=["date", "created_at"],
            desc=True,
        )
        assert "set_logs" in WORKOUT_HISTORY_COLUMNS

    def test_get_workout_filters_on_owner(self):
        gateway = mock_gateway(data=None)

        assert SupabaseWorkoutLogRepository(gateway).get_workout_log("user-2", "w1") is None
        assert gateway.select.call_args.kwargs["eq"] == {"id": "w1", "user_id": "user-2"}

    def test_delete_workout_filters_on_owner(self):
        gateway = mock_gateway(data=[])

        assert SupabaseWorkoutLogRepository(gateway).delete_workout_log("user-2", "w1") is False
        gateway.delete.assert_called_once_with("workout_logs", eq={"id": "w1", "user_id": "user-2"})


class TestNutritionRepository:
    def test_daily_totals_rpc(self):
        gateway = mock_gateway(data={"total_calories": 1800})

        rows = SupabaseNutritionRepository(gateway).get_daily_totals("user-1", "2026-10-19")

        gateway.rpc.assert_called_once_with("get_daily_totals", {"p_user": "user-1", "p_date": "2026-10-19"})
        assert rows == [{"total_calories": 1800}]

    def test_meal_entries_rpc(self):
        gateway = mock_gateway(data=None)

        rows = SupabaseNutritionRepository(gateway).get_meal_entries("user-1", "2026-10-19", "dinner")

        gateway.rpc.assert_called_once_with(
            "get_meal_entries", {"p_user": "user-1", "p_date": "2026-10-19", "p_meal": "dinner"}
        )
        assert rows == []

    def test_meals_by_date_newest_first(self):
        gateway = mock_gateway(data=[])
        SupabaseNutritionRepository(gateway).get_meals_by_date("user-1", "2026-10-19")
        gateway.select.assert_called_once_with(
            "meals",
            eq={"user_id": "user-1", "log_date": "2026-10-19"},
            order="created_at",
            desc=True,
        )

    def test_create_meal_starts_with_zero_totals(self):
        gateway = mock_gateway(data={"id": "m1"})
        SupabaseNutritionRepository(gateway).create_meal("user-1", "Lunch", "2026-10-19")

        row = gateway.insert.call_args.args[1]
        assert row["total_calories"] == 0
        assert row["log_date"] == "2026-10-19"

    def test_latest_macro_goals_selects_newest(self):
        gateway = mock_gateway(data={"id": "g1"})

        assert SupabaseNutritionRepository(gateway).get_latest_macro_goals("user-1") == {"id": "g1"}
        kwargs = gateway.select.call_args.kwargs
        assert kwargs["eq"] == {"user_id": "user-1"}
        assert kwargs["desc"] is True
        assert kwargs["maybe_single"] is True

    def test_delete_error_propagates(self):
        gateway = mock_gateway(error=GatewayError("denied", code="42501"))
        with pytest.raises(GatewayError):
            SupabaseNutritionRepository(gateway).delete_meal("user-1", "m1")

    def test_get_meal_filters_on_owner(self):
        gateway = mock_gateway(data=None)

        assert SupabaseNutritionRepository(gateway).get_meal("user-1", "m1") is None
        gateway.select.assert_called_once_with(
            "meals", eq={"id": "m1", "user_id": "user-1"}, maybe_single=True
        )

    def test_get_meal_items_in_insert_order(self):
        gateway = mock_gateway(data=[{"id": "i1"}])

        assert SupabaseNutritionRepository(gateway).get_meal_items("m1") == [{"id": "i1"}]
        gateway.select.assert_called_once_with("meal_items", eq={"meal_id": "m1"}, order="created_at")

    def test_rename_filters_on_owner(self):
        gateway = mock_gateway(data=[])

        assert SupabaseNutritionRepository(gateway).update_meal_name("user-2", "m1", "Kapad") is False
        gateway.update.assert_called_once_with(
            "meals", {"name": "Kapad"}, eq={"id": "m1", "user_id": "user-2"}
        )

    def test_delete_meal_filters_on_owner(self):
        gateway = mock_gateway(data=[{"id": "m1"}])

        assert SupabaseNutritionRepository(gateway).delete_meal("user-1", "m1") is True
        gateway.delete.assert_called_once_with("meals", eq={"id": "m1", "user_id": "user-1"})

    def test_item_writes_filter_on_parent_meal(self):
        gateway = mock_gateway(data=[{"id": "i1"}])
        repo = SupabaseNutritionRepository(gateway)

        assert repo.update_meal_item_quantity("m1", "i1", 80) is True
        assert repo.delete_meal_item("m1", "i1") is True
        gateway.update.assert_called_once_with(
            "meal_items", {"quantity_grams": 80}, eq={"id": "i1", "meal_id": "m1"}
        )
        gateway.delete.assert_called_once_with("meal_items", eq={"id": "i1", "meal_id": "m1"})


class TestFoodRepository:
    ROW = {
        "id": 12,
        "name": "Kvarg",
        "brand": "Arla",
        "kcal_per_100g": 63,
        "protein_per_100g": 11,
        "fat_per_100g": 0.2,
        "carbs_per_100g": 3.6,
    }

    def test_search_escapes_wildcards(self):
        gateway = mock_gateway(data=[self.ROW])

        products = SupabaseFoodRepository(gateway).search_local("100%_kvarg", limit=5)

        gateway.select.assert_called_once_with(
            "food_database", ilike={"name": "%100\\%\\_kvarg%"}, limit=5
        )
        assert products[0].name == "Kvarg"
        assert products[0].calories == 63
        assert products[0].off_id == "12"

    def test_barcode_miss(self):
        assert SupabaseFoodRepository(mock_gateway(data=None)).get_by_barcode("123") is None

    def test_barcode_hit(self):
        gateway = mock_gateway(data=self.ROW)
        assert SupabaseFoodRepository(gateway).get_by_barcode("123").brand == "Arla"
        gateway.select.assert_called_once_with("food_database", eq={"barcode": "123"}, maybe_single=True)


class TestWeightRepository:
    def test_list_since_oldest_first(self):
        gateway = mock_gateway(data=[{"id": "w1"}])

        rows = SupabaseWeightRepository(gateway).list_weights("user-1", since="2026-09-21")

        gateway.select.assert_called_once_with(
            "weight_tracking",
            eq={"user_id": "user-1"},
            gte={"date": "2026-09-21"},
            order="date",
        )
        assert rows == [{"id": "w1"}]

    def test_latest_is_newest_date(self):
        gateway = mock_gateway(data=None)

        assert SupabaseWeightRepository(gateway).get_latest_weight("user-1") is None
        kwargs = gateway.select.call_args.kwargs
        assert kwargs["order"] == "date"
        assert kwargs["desc"] is True
        assert kwargs["maybe_single"] is True

    def test_insert(self):
        gateway = mock_gateway(data={"id": "w1"})

        SupabaseWeightRepository(gateway).insert_weight("user-1", "2026-10-19", 82.4)

        gateway.insert.assert_called_once_with(
            "weight_tracking",
            {"user_id": "user-1", "date": "2026-10-19", "weight_kg": 82.4},
            single=True,
        )

    def test_writes_filter_on_owner(self):
        gateway = mock_gateway(data=[])
        repo = SupabaseWeightRepository(gateway)

        assert repo.update_weight("user-2", "w1", {"weight_kg": 40}) is False
        assert repo.delete_weight("user-2", "w1") is False
        gateway.update.assert_called_once_with(
            "weight_tracking", {"weight_kg": 40}, eq={"id": "w1", "user_id": "user-2"}
        )
        gateway.delete.assert_called_once_with("weight_tracking", eq={"id": "w1", "user_id": "user-2"})
