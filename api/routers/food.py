"""
Food proxy router.

Public endpoints forwarding product searches and barcode lookups to Open
Food Facts, so browser and mobile clients never call it directly. Every
response carries permissive CORS headers; the app calls these from any origin.

Both endpoints accept the parameter as a query string (GET) or a JSON body
field (POST). Errors are returned as ``{"error": ...}``.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from api.deps import get_food_client
from application.exceptions import (
    FoodDatabaseError,
    FoodDatabaseTimeout,
    ProductNotFoundError,
)
from application.ports import FoodDatabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/functions",
    tags=["Food proxy"],
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

SEARCH_FAILED_MESSAGE = "Ett fel uppstod vid sökning av produktinformation. Försök igen om en stund."
LOOKUP_FAILED_MESSAGE = "Ett fel uppstod vid hämtning av produktinformation."


def _json(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


async def _read_param(request: Request, name: str) -> Optional[str]:
    """Read a parameter from the query string, falling back to a JSON body."""
    value = request.query_params.get(name)
    if not value and request.method == "POST":
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            value = body.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _upstream_error(e: FoodDatabaseError) -> JSONResponse:
    return _json({"error": str(e), "status": e.status_code}, status_code=e.status_code)


# =============================================================================
# Endpoints
# =============================================================================


@router.api_route("/food-search", methods=["GET", "POST", "OPTIONS"])
async def food_search(
    request: Request,
    client: FoodDatabaseClient = Depends(get_food_client),
):
    """
    Search Open Food Facts by product name.

    Returns a list of products with per-100 g nutrients. Products missing
    nutrient data or with no calories are left out.
    """
    if request.method == "OPTIONS":
        return _preflight()

    query = await _read_param(request, "query")
    if not query:
        return _json({"error": "Search query parameter is required"}, status_code=400)

    try:
        products = await client.search_products(query)
    except ProductNotFoundError as e:
        return _json({"error": e.user_message}, status_code=404)
    except FoodDatabaseError as e:
        return _upstream_error(e)
    except FoodDatabaseTimeout as e:
        return _json(
            {"error": e.user_message, "details": str(e)},
            status_code=504,
        )
    except Exception as e:
        logger.exception(f"Food search failed for '{query}': {e}")
        return _json({"error": SEARCH_FAILED_MESSAGE, "details": str(e)}, status_code=500)

    return _json([p.to_dict() for p in products])


@router.api_route("/barcode-lookup", methods=["GET", "POST", "OPTIONS"])
async def barcode_lookup(
    request: Request,
    client: FoodDatabaseClient = Depends(get_food_client),
):
    """
    Look a product up on Open Food Facts by barcode.

    Missing nutrient values are reported as 0.
    """
    if request.method == "OPTIONS":
        return _preflight()

    barcode = await _read_param(request, "barcode")
    if not barcode:
        return _json({"error": "Barcode parameter is required"}, status_code=400)

    try:
        product = await client.get_product(barcode)
    except FoodDatabaseError as e:
        return _upstream_error(e)
    except FoodDatabaseTimeout as e:
        return _json({"error": e.user_message, "details": str(e)}, status_code=504)
    except Exception as e:
        logger.exception(f"Barcode lookup failed for '{barcode}': {e}")
        return _json({"error": LOOKUP_FAILED_MESSAGE}, status_code=500)

    if product is None:
        return _json({"error": "Produkten hittades inte."}, status_code=404)

    result: Dict[str, Any] = product.to_dict()
    return _json(result)
