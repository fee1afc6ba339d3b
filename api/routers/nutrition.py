"""
Nutrition router.

This router provides endpoints for:
- Calculating and saving macro goals
- Daily and per-meal nutrition summaries
- Meal and meal item management, scoped to the authenticated user
- Product search and barcode lookup for food logging
"""
from dataclasses import asdict
from datetime import date as date_type
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from api.deps import (
    get_current_user,
    get_food_search_service,
    get_nutrition_service,
)
from application.ports import FoodProduct
from backend.core.food_search_service import FoodSearchService
from backend.core.macro_calculator import calculate_macros
from backend.core.nutrition_service import MacroProfile, NutritionService

router = APIRouter(
    prefix="/nutrition",
    tags=["Nutrition"],
)


# =============================================================================
# Request Models
# =============================================================================


class MacroProfileRequest(BaseModel):
    """Body metrics and preferences for macro calculation."""
    weight_kg: float = Field(..., gt=0, le=500)
    height_cm: float = Field(..., gt=0, le=300)
    age: int = Field(..., gt=0, le=130)
    gender: str = Field(..., description="Man, Kvinna or Annat")
    activity_level: str = Field(..., description="One of the five activity labels")
    goal: str = Field(..., description="Gå ner i vikt, Bygga muskler or Behålla formen")


class SaveMacroGoalsRequest(MacroProfileRequest):
    email: Optional[str] = Field(None, description="Included in the webhook payload")


class CreateMealRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    date: Optional[date_type] = None


class RenameMealRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ProductRequest(BaseModel):
    """Per-100 g product values as returned by the search endpoints."""
    name: str = Field(..., min_length=1)
    brand: str = ""
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    image_url: str = ""
    off_id: Optional[str] = None


class AddMealItemRequest(BaseModel):
    product: ProductRequest
    quantity_grams: float = Field(..., gt=0)


class UpdateMealItemRequest(BaseModel):
    quantity_grams: float = Field(..., gt=0)


# =============================================================================
# Macro Goals
# =============================================================================


@router.post("/macros/calculate")
def calculate_macro_targets(request: MacroProfileRequest) -> Dict[str, Any]:
    """
    Calculate daily calorie and macro targets without saving them.

    Unknown gender, activity or goal labels answer 400.
    """
    targets = calculate_macros(
        request.weight_kg,
        request.height_cm,
        request.age,
        request.gender,
        request.activity_level,
        request.goal,
    )
    return targets.to_dict()


@router.post("/goals")
async def save_macro_goals(
    request: SaveMacroGoalsRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    """Calculate targets for the profile and store them as the user's goals."""
    profile = MacroProfile(**request.model_dump(exclude={"email"}))
    return await service.save_macro_goals(user_id, profile, email=request.email)


@router.get("/goals/latest")
def get_latest_macro_goals(
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    goals = service.get_latest_macro_goals(user_id)
    if goals is None:
        raise HTTPException(status_code=404, detail="No macro goals saved")
    return goals


# =============================================================================
# Summaries
# =============================================================================


@router.get("/daily")
def get_daily_summary(
    date: Optional[date_type] = Query(None, description="Day to summarize (default: today)"),
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    """Totals for the day plus per-meal totals and entries."""
    return service.get_daily_summary(user_id, date).to_dict()


@router.get("/daily/meals")
def get_daily_nutrition_summary_for_meals(
    date: Optional[date_type] = Query(None),
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    """Totals of the meals logged on the day, with the meals themselves."""
    return service.get_daily_nutrition_summary(user_id, date).to_dict()


@router.get("/daily/entries/{meal_type}")
def get_meal_entries(
    meal_type: str,
    date: Optional[date_type] = Query(None),
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> List[Dict[str, Any]]:
    """Entries logged for one meal type (Swedish or English name) on a day."""
    return [asdict(e) for e in service.get_meal_entries(user_id, meal_type, date)]


# =============================================================================
# Meals
# =============================================================================


@router.get("/meals")
def list_meals(
    date: Optional[date_type] = Query(None),
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> List[Dict[str, Any]]:
    return service.get_meals_by_date(user_id, date)


@router.post("/meals")
def create_meal(
    request: CreateMealRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    try:
        return service.create_meal(user_id, request.name, request.date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/meals/{meal_id}")
def get_meal(
    meal_id: str,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    return service.get_meal_with_items(user_id, meal_id)


@router.patch("/meals/{meal_id}")
def rename_meal(
    meal_id: str,
    request: RenameMealRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    try:
        service.update_meal_name(user_id, meal_id, request.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@router.delete("/meals/{meal_id}")
def delete_meal(
    meal_id: str,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    service.delete_meal(user_id, meal_id)
    return {"success": True}


@router.post("/meals/{meal_id}/items")
def add_meal_item(
    meal_id: str,
    request: AddMealItemRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    """Log a product portion in a meal; the response includes the portion's nutrition."""
    product = FoodProduct(**request.product.model_dump())
    return service.add_food_to_meal(user_id, meal_id, product, request.quantity_grams)


@router.patch("/meals/items/{item_id}")
def update_meal_item(
    item_id: str,
    request: UpdateMealItemRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    service.update_meal_item_quantity(user_id, item_id, request.quantity_grams)
    return {"success": True}


@router.delete("/meals/items/{item_id}")
def delete_meal_item(
    item_id: str,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
) -> Dict[str, Any]:
    service.delete_meal_item(user_id, item_id)
    return {"success": True}


# =============================================================================
# Food Lookup
# =============================================================================


@router.get("/foods/search")
async def search_foods(
    query: str = Query(..., min_length=1, description="Product name"),
    user_id: str = Depends(get_current_user),
    service: FoodSearchService = Depends(get_food_search_service),
) -> List[Dict[str, Any]]:
    """Search the local food table, then Open Food Facts. Results are cached for a few minutes."""
    products = await service.search_products_by_name(query)
    return [p.to_dict() for p in products]


@router.get("/foods/barcode/{barcode}")
async def lookup_barcode(
    barcode: str,
    user_id: str = Depends(get_current_user),
    service: FoodSearchService = Depends(get_food_search_service),
) -> Dict[str, Any]:
    product = await service.lookup_product_by_barcode(barcode)
    return product.to_dict()
