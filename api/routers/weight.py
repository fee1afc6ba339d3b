"""
Body weight router.

Endpoints for the weight log and its chart:
- Entries for a time range (4w, 6m, 1y) with the change over the range
- The latest entry, used to prefill the weight and macro forms
- Logging, editing and deleting entries (one per date)
"""
from datetime import date as date_type
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from api.deps import get_current_user, get_weight_service
from backend.core.weight_service import WeightService

router = APIRouter(
    prefix="/weight",
    tags=["Weight"],
)


class LogWeightRequest(BaseModel):
    """Request model for logging a weight (defaults to today)."""
    weight_kg: float = Field(..., description="Body weight in kg")
    date: Optional[date_type] = None


class UpdateWeightRequest(BaseModel):
    """Request model for editing an entry; omit date to keep it."""
    weight_kg: float = Field(..., description="Body weight in kg")
    date: Optional[date_type] = None


@router.get("")
def get_weight_history(
    time_range: Literal["4w", "6m", "1y"] = Query("4w", alias="range", description="Chart range"),
    user_id: str = Depends(get_current_user),
    service: WeightService = Depends(get_weight_service),
) -> Dict[str, Any]:
    """Entries in the range, oldest first, and the change in kg over it."""
    return service.get_weight_history(user_id, time_range).to_dict()


@router.get("/latest")
def get_latest_weight(
    user_id: str = Depends(get_current_user),
    service: WeightService = Depends(get_weight_service),
) -> Dict[str, Any]:
    """Most recent entry; 404 if the user has never logged a weight."""
    return service.get_last_weight(user_id)


@router.post("")
def log_weight(
    request: LogWeightRequest,
    user_id: str = Depends(get_current_user),
    service: WeightService = Depends(get_weight_service),
) -> Dict[str, Any]:
    """Log a weight, replacing any entry already logged for that date."""
    return service.log_weight(user_id, request.weight_kg, request.date)


@router.patch("/{entry_id}")
def update_weight(
    request: UpdateWeightRequest,
    entry_id: str = Path(..., min_length=1, max_length=100),
    user_id: str = Depends(get_current_user),
    service: WeightService = Depends(get_weight_service),
) -> Dict[str, Any]:
    """Change an entry's weight and optionally move it to another date."""
    return service.update_weight_entry(user_id, entry_id, request.weight_kg, request.date)


@router.delete("/{entry_id}")
def delete_weight(
    entry_id: str = Path(..., min_length=1, max_length=100),
    user_id: str = Depends(get_current_user),
    service: WeightService = Depends(get_weight_service),
) -> Dict[str, Any]:
    """Delete an entry."""
    service.delete_weight_entry(user_id, entry_id)
    return {"success": True}
