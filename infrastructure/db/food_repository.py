"""
Supabase Food Repository Implementation.

Implements the FoodRepository protocol against the locally curated
``food_database`` table, which is consulted before Open Food Facts.
"""
from typing import Optional, List, Dict, Any
import logging

from application.ports.food_repository import FoodProduct
from infrastructure.db.gateway import SupabaseGateway

logger = logging.getLogger(__name__)

FOOD_TABLE = "food_database"


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input is matched literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def row_to_product(row: Dict[str, Any]) -> FoodProduct:
    """Map a food_database row to a FoodProduct."""
    return FoodProduct(
        name=row.get("name") or "",
        brand=row.get("brand") or "",
        calories=row.get("kcal_per_100g") or 0,
        protein=row.get("protein_per_100g") or 0,
        fat=row.get("fat_per_100g") or 0,
        carbs=row.get("carbs_per_100g") or 0,
        image_url=row.get("image_url") or "",
        off_id=str(row["id"]) if row.get("id") is not None else None,
    )


class SupabaseFoodRepository:
    """
    Supabase implementation of FoodRepository.
    """

    def __init__(self, gateway: SupabaseGateway):
        """
        Initialize with the data gateway.

        Args:
            gateway: SupabaseGateway instance (injected)
        """
        self._gateway = gateway

    def search_local(self, query: str, *, limit: int = 10) -> List[FoodProduct]:
        rows = self._gateway.select(
            FOOD_TABLE,
            ilike={"name": f"%{_escape_like(query)}%"},
            limit=limit,
        ).unwrap() or []
        logger.debug(f"Local food search '{query}' matched {len(rows)} rows")
        return [row_to_product(row) for row in rows]

    def get_by_barcode(self, barcode: str) -> Optional[FoodProduct]:
        row = self._gateway.select(
            FOOD_TABLE,
            eq={"barcode": barcode},
            maybe_single=True,
        ).unwrap()
        return row_to_product(row) if row else None
