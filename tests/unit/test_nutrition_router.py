"""
Unit tests for the nutrition router.

Tests the nutrition endpoints with fake repositories:
- Macro calculation and goal storage
- Daily summaries
- Meal and meal item CRUD
- Authenticated food search and barcode lookup
"""

import pytest
from fastapi.testclient import TestClient
from tenacity import wait_none

from api.deps import (
    get_current_user,
    get_food_search_service,
    get_nutrition_repo,
    get_settings,
)
from backend.core.food_search_service import FoodSearchService
from backend.main import create_app
from backend.settings import Settings
from tests.fakes import OATS, FakeFoodDatabaseClient, FakeFoodRepository, FakeNutritionRepository
from tests.fakes.conftest import override_dependency


TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"

PROFILE = {
    "weight_kg": 80,
    "height_cm": 180,
    "age": 30,
    "gender": "Man",
    "activity_level": "Medel (3-4 pass/vecka)",
    "goal": "Bygga muskler",
}


async def mock_get_current_user() -> str:
    return TEST_USER_ID


@pytest.fixture
def app():
    settings = Settings(environment="test", _env_file=None)
    app = create_app(settings=settings)
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_settings] = lambda: settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def repo(app):
    return override_dependency(app, get_nutrition_repo, FakeNutritionRepository())


@pytest.fixture
def food_client():
    return FakeFoodDatabaseClient([OATS], barcodes={"7310130008217": OATS})


@pytest.fixture
def client(app, repo, food_client):
    def food_search_service():
        return FoodSearchService(FakeFoodRepository(), food_client, backoff=wait_none())

    override_dependency(app, get_food_search_service, food_search_service)
    return TestClient(app)


@pytest.mark.unit
class TestMacroEndpoints:
    def test_calculate_worked_example(self, client):
        response = client.post("/nutrition/macros/calculate", json=PROFILE)

        assert response.status_code == 200
        assert response.json() == {"calories": 3035, "protein": 160, "carbs": 409, "fat": 84, "bmr": 1780}

    def test_calculate_rejects_unknown_label(self, client):
        response = client.post("/nutrition/macros/calculate", json={**PROFILE, "goal": "Bli stark"})

        assert response.status_code == 400
        assert response.json()["error"] == "Vänligen fyll i alla obligatoriska fält"

    def test_calculate_rejects_non_positive_weight(self, client):
        response = client.post("/nutrition/macros/calculate", json={**PROFILE, "weight_kg": 0})
        assert response.status_code == 422

    def test_save_and_fetch_goals(self, client, repo):
        response = client.post("/nutrition/goals", json={**PROFILE, "email": "a@example.com"})

        assert response.status_code == 200
        assert response.json()["calculated_calories"] == 3035
        assert repo.macro_goals[0]["user_id"] == TEST_USER_ID

        latest = client.get("/nutrition/goals/latest")
        assert latest.json()["id"] == response.json()["id"]

    def test_latest_goals_404_when_missing(self, client):
        assert client.get("/nutrition/goals/latest").status_code == 404


@pytest.mark.unit
class TestSummaries:
    def test_daily_summary(self, client, repo):
        repo.seed_daily_totals(TEST_USER_ID, "2026-10-01", {"total_calories": 2100, "total_protein": 150})
        repo.seed_meal(
            TEST_USER_ID, "2026-10-01", "snack",
            {"total_calories": 200},
            [{"id": "e1", "product_name": "Banan", "quantity_grams": 120}],
        )

        response = client.get("/nutrition/daily", params={"date": "2026-10-01"})

        body = response.json()
        assert body["date"] == "2026-10-01"
        assert body["totals"]["total_calories"] == 2100
        assert body["meals"][0]["meal_type"] == "mellanmål"
        assert body["meals"][0]["entries"][0]["product_name"] == "Banan"

    def test_meals_summary(self, client, repo):
        meal = client.post("/nutrition/meals", json={"name": "Lunch", "date": "2026-10-01"}).json()
        repo.meals[meal["id"]]["total_calories"] = 640

        body = client.get("/nutrition/daily/meals", params={"date": "2026-10-01"}).json()

        assert body["date"] == "2026-10-01"
        assert body["total_calories"] == 640
        assert [m["id"] for m in body["meals"]] == [meal["id"]]

    def test_meals_summary_empty(self, client):
        body = client.get("/nutrition/daily/meals", params={"date": "2026-10-01"}).json()
        assert body["total_calories"] == 0
        assert body["meals"] == []

    def test_meal_entries_by_swedish_type(self, client, repo):
        repo.seed_meal(
            TEST_USER_ID, "2026-10-01", "dinner", {},
            [{"id": "e1", "product_name": "Lax", "quantity_grams": 150, "calories_total": 310}],
        )

        response = client.get("/nutrition/daily/entries/middag", params={"date": "2026-10-01"})

        assert response.status_code == 200
        assert response.json()[0]["product_name"] == "Lax"
        assert response.json()[0]["calories_total"] == 310


@pytest.mark.unit
class TestMeals:
    def test_meal_crud(self, client, repo):
        created = client.post("/nutrition/meals", json={"name": "Lunch", "date": "2026-10-19"}).json()
        meal_id = created["id"]

        assert [m["id"] for m in client.get("/nutrition/meals", params={"date": "2026-10-19"}).json()] == [meal_id]

        item = client.post(
            f"/nutrition/meals/{meal_id}/items",
            json={"product": OATS.to_dict(), "quantity_grams": 50},
        ).json()
        assert item["nutrition"]["calories"] == 185

        assert client.patch(f"/nutrition/meals/items/{item['id']}", json={"quantity_grams": 80}).status_code == 200
        assert repo.meal_items[item["id"]]["quantity_grams"] == 80

        assert client.patch(f"/nutrition/meals/{meal_id}", json={"name": "Sen lunch"}).status_code == 200
        meal = client.get(f"/nutrition/meals/{meal_id}").json()
        assert meal["name"] == "Sen lunch"
        assert len(meal["items"]) == 1

        client.delete(f"/nutrition/meals/items/{item['id']}")
        client.delete(f"/nutrition/meals/{meal_id}")
        assert client.get(f"/nutrition/meals/{meal_id}").status_code == 404

    def test_blank_meal_name_is_400(self, client):
        response = client.post("/nutrition/meals", json={"name": "   "})
        assert response.status_code == 400

    def test_unknown_meal_is_404(self, client):
        response = client.get("/nutrition/meals/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "Hittades inte."

    def test_non_positive_quantity_is_422(self, client):
        response = client.post(
            "/nutrition/meals/meal-1/items",
            json={"product": OATS.to_dict(), "quantity_grams": 0},
        )
        assert response.status_code == 422


@pytest.mark.unit
class TestMealOwnership:
    """A meal is only visible and writable for the user who created it."""

    @pytest.fixture
    def owned(self, client, repo):
        meal = client.post("/nutrition/meals", json={"name": "Lunch", "date": "2026-10-19"}).json()
        item = client.post(
            f"/nutrition/meals/{meal['id']}/items",
            json={"product": OATS.to_dict(), "quantity_grams": 50},
        ).json()
        return meal, item

    @pytest.fixture
    def as_other_user(self, app):
        async def other_user() -> str:
            return OTHER_USER_ID

        app.dependency_overrides[get_current_user] = other_user

    def test_other_user_cannot_read_rename_or_delete_meal(self, client, repo, owned, as_other_user):
        meal, _ = owned

        assert client.get(f"/nutrition/meals/{meal['id']}").status_code == 404
        assert client.patch(f"/nutrition/meals/{meal['id']}", json={"name": "Kapad"}).status_code == 404
        assert client.delete(f"/nutrition/meals/{meal['id']}").status_code == 404

        assert repo.meals[meal["id"]]["name"] == "Lunch"

    def test_other_user_cannot_touch_items(self, client, repo, owned, as_other_user):
        meal, item = owned

        added = client.post(
            f"/nutrition/meals/{meal['id']}/items",
            json={"product": OATS.to_dict(), "quantity_grams": 999},
        )
        updated = client.patch(f"/nutrition/meals/items/{item['id']}", json={"quantity_grams": 999})
        deleted = client.delete(f"/nutrition/meals/items/{item['id']}")

        assert (added.status_code, updated.status_code, deleted.status_code) == (404, 404, 404)
        assert list(repo.meal_items) == [item["id"]]
        assert repo.meal_items[item["id"]]["quantity_grams"] == 50

    def test_other_user_does_not_see_meals_in_lists(self, client, owned, as_other_user):
        assert client.get("/nutrition/meals", params={"date": "2026-10-19"}).json() == []
        assert client.get("/nutrition/daily/meals", params={"date": "2026-10-19"}).json()["meals"] == []


@pytest.mark.unit
class TestFoodLookup:
    def test_search(self, client):
        response = client.get("/nutrition/foods/search", params={"query": "havre"})

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Havregryn"

    def test_search_requires_query(self, client):
        assert client.get("/nutrition/foods/search").status_code == 422

    def test_barcode_found(self, client):
        response = client.get("/nutrition/foods/barcode/7310130008217")
        assert response.json()["brand"] == "Kungsörnen"

    def test_barcode_unknown_is_404(self, client):
        response = client.get("/nutrition/foods/barcode/0000")

        assert response.status_code == 404
        assert response.json()["error"] == "Produkten hittades inte."


@pytest.mark.unit
class TestAuth:
    def test_calculate_is_public(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        response = TestClient(app).post("/nutrition/macros/calculate", json=PROFILE)
        assert response.status_code == 200

    def test_meals_require_auth(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        assert TestClient(app).get("/nutrition/meals").status_code == 401
