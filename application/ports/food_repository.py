"""
Food Repository and Food Database Interfaces (Ports).

Two sources answer product lookups: the local ``food_database`` table kept
in Supabase, and the public Open Food Facts API. Both speak FoodProduct.
"""
from dataclasses import dataclass, asdict
from typing import Protocol, Optional, List, Dict, Any


@dataclass
class FoodProduct:
    """A food product with nutrient values per 100 g."""
    name: str
    brand: str = ""
    calories: float = 0
    protein: float = 0
    fat: float = 0
    carbs: float = 0
    sugar: Optional[float] = None
    image_url: str = ""
    off_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dict, omitting an unset off_id."""
        data = asdict(self)
        if data["off_id"] is None:
            del data["off_id"]
        return data


class FoodRepository(Protocol):
    """
    Abstract interface for the locally maintained food table.
    """

    def search_local(self, query: str, *, limit: int = 10) -> List[FoodProduct]:
        """
        Case-insensitive substring search on product name.

        Args:
            query: Search text
            limit: Maximum products to return

        Returns:
            Matching products (possibly empty)
        """
        ...

    def get_by_barcode(self, barcode: str) -> Optional[FoodProduct]:
        """
        Exact barcode lookup.

        Returns:
            The product, or None if the barcode is unknown locally
        """
        ...


class FoodDatabaseClient(Protocol):
    """
    Abstract interface for the public food database (Open Food Facts).

    Implementations raise FoodDatabaseUnavailable on timeouts/connection
    failures and FoodDatabaseError on non-OK upstream responses.
    """

    async def search_products(self, query: str, *, page_size: int = 10) -> List[FoodProduct]:
        """
        Search products by free text.

        Returns:
            Products with complete nutrient data (possibly empty)

        Raises:
            ProductNotFoundError: When upstream returns no products at all
        """
        ...

    async def get_product(self, barcode: str) -> Optional[FoodProduct]:
        """
        Look a product up by barcode.

        Returns:
            The product, or None when upstream reports no match
        """
        ...
