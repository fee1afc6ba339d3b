"""
External food database adapters.

Usage:
    from infrastructure.food import OpenFoodFactsClient

    client = OpenFoodFactsClient(timeout=5.0)
    products = await client.search_products("havregryn")
"""

from infrastructure.food.open_food_facts import (
    OpenFoodFactsClient,
    normalize_search_product,
    normalize_barcode_product,
)

__all__ = [
    "OpenFoodFactsClient",
    "normalize_search_product",
    "normalize_barcode_product",
]
