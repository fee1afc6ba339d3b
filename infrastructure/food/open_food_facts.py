"""
HTTP client for the Open Food Facts public API.

Handles free-text product search and barcode lookup, and normalizes the raw
product payloads into FoodProduct (nutrients per 100 g).
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from application.exceptions import (
    FoodDatabaseError,
    FoodDatabaseTimeout,
    FoodDatabaseUnavailable,
    ProductNotFoundError,
)
from application.ports.food_repository import FoodProduct

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://world.openfoodfacts.org"
DEFAULT_USER_AGENT = "HeavyGym - API - Version 1.0 - https://heavygym.app"


def _number(value: Any) -> Optional[float]:
    """Parse a nutrient value; Open Food Facts sometimes sends strings."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _kcal(nutrients: Dict[str, Any]) -> Optional[float]:
    return _number(nutrients.get("energy-kcal_100g")) or _number(nutrients.get("energy-kcal"))


def _non_negative_int(value: Optional[float]) -> int:
    return max(0, int(round(value or 0)))


def normalize_search_product(product: Dict[str, Any]) -> Optional[FoodProduct]:
    """
    Normalize a product from a search response.

    Products without a name or without kcal/protein/fat/carbs are dropped,
    as are products whose rounded calories are not positive.

    Returns:
        The FoodProduct, or None if the product is incomplete
    """
    nutrients = product.get("nutriments") or {}
    kcal = _kcal(nutrients)
    protein = _number(nutrients.get("proteins_100g"))
    fat = _number(nutrients.get("fat_100g"))
    carbs = _number(nutrients.get("carbohydrates_100g"))

    if not product.get("product_name") or None in (kcal, protein, fat, carbs):
        return None

    off_id = product.get("id") or product.get("code")
    normalized = FoodProduct(
        name=product.get("product_name") or "Okänd produkt",
        brand=product.get("brands") or "Okänt varumärke",
        calories=_non_negative_int(kcal),
        protein=_non_negative_int(protein),
        fat=_non_negative_int(fat),
        carbs=_non_negative_int(carbs),
        sugar=_non_negative_int(_number(nutrients.get("sugars_100g"))),
        image_url=product.get("image_url") or "",
        off_id=str(off_id) if off_id else None,
    )
    if normalized.calories <= 0:
        return None
    return normalized


def normalize_barcode_product(product: Dict[str, Any]) -> FoodProduct:
    """
    Normalize a product from a barcode lookup.

    Missing values fall back to 0 and placeholder names; values are not rounded.
    """
    nutrients = product.get("nutriments") or {}
    return FoodProduct(
        name=product.get("product_name") or "Unknown Product",
        brand=product.get("brands") or "Unknown Brand",
        calories=_kcal(nutrients) or 0,
        protein=_number(nutrients.get("proteins_100g")) or 0,
        fat=_number(nutrients.get("fat_100g")) or 0,
        carbs=_number(nutrients.get("carbohydrates_100g")) or 0,
        sugar=_number(nutrients.get("sugars_100g")) or 0,
        image_url=product.get("image_url") or "",
    )


class OpenFoodFactsClient:
    """
    HTTP client for Open Food Facts.

    Implements the FoodDatabaseClient protocol.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the API (e.g., "https://world.openfoodfacts.org")
            timeout: Request timeout in seconds
            user_agent: User-Agent header identifying the application
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent}

    async def search_products(self, query: str, *, page_size: int = 10) -> List[FoodProduct]:
        """
        Search products by free text.

        Args:
            query: Search terms
            page_size: Maximum products requested upstream

        Returns:
            Normalized products with complete nutrient data (possibly empty)

        Raises:
            ProductNotFoundError: If upstream returned no products at all
            FoodDatabaseTimeout: If the request timed out
            FoodDatabaseUnavailable: If Open Food Facts is not reachable
            FoodDatabaseError: If Open Food Facts returns an error response
        """
        url = f"{self._base_url}/cgi/search.pl"
        params = {
            "search_terms": query,
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "page_size": page_size,
        }

        data = await self._get_json(url, params=params)

        raw_products = data.get("products") or []
        if not raw_products:
            raise ProductNotFoundError(
                f"No products for '{query}'", user_message="Inga produkter hittades."
            )

        products = []
        for raw in raw_products:
            product = normalize_search_product(raw)
            if product is not None:
                products.append(product)
        return products

    async def get_product(self, barcode: str) -> Optional[FoodProduct]:
        """
        Look a product up by barcode.

        Args:
            barcode: EAN/UPC barcode

        Returns:
            The normalized product, or None if the barcode is unknown

        Raises:
            FoodDatabaseTimeout: If the request timed out
            FoodDatabaseUnavailable: If Open Food Facts is not reachable
            FoodDatabaseError: If Open Food Facts returns an error response
        """
        url = f"{self._base_url}/api/v0/product/{quote(barcode, safe='')}.json"

        data = await self._get_json(url, not_found_ok=True)

        if data.get("status") != 1 or not data.get("product"):
            return None
        return normalize_barcode_product(data["product"])

    async def _get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        not_found_ok: bool = False,
    ) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, headers=self._headers) as client:
                response = await client.get(url, params=params)

        except httpx.TimeoutException as e:
            logger.error(f"Open Food Facts timeout: {e}")
            raise FoodDatabaseTimeout("Open Food Facts request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Open Food Facts unavailable: {e}")
            raise FoodDatabaseUnavailable(
                f"Open Food Facts is not available at {self._base_url}"
            ) from e

        if response.status_code == 404 and not_found_ok:
            return {}

        if response.status_code != 200:
            logger.error(
                f"Open Food Facts API error: {response.status_code} - {response.reason_phrase}"
            )
            raise FoodDatabaseError(
                f"Failed to fetch from Open Food Facts API: {response.reason_phrase}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Open Food Facts returned invalid JSON: {e}")
            raise FoodDatabaseError("Open Food Facts returned invalid JSON", 502) from e

        return data if isinstance(data, dict) else {}
