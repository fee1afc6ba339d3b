"""
Food search service.

Name search checks an in-process TTL cache, then the local food database
table, then Open Food Facts (retried with jittered exponential backoff).
Barcode lookup checks the local table before Open Food Facts.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from starlette.concurrency import run_in_threadpool
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from application.exceptions import (
    FoodDatabaseError,
    FoodDatabaseUnavailable,
    GatewayError,
    ProductNotFoundError,
)
from application.ports import FoodDatabaseClient, FoodProduct, FoodRepository

logger = logging.getLogger(__name__)

# Backoff configuration
BASE_BACKOFF_SECONDS = 0.3
MAX_BACKOFF_SECONDS = 5.0
MAX_JITTER_SECONDS = 0.1


@dataclass
class CacheEntry:
    """Cache entry with TTL support."""

    products: List[FoodProduct]
    created_at: float


def is_retryable_food_error(exception: BaseException) -> bool:
    """
    Transport failures, rate limits and upstream 5xx are retried.
    Other 4xx answers are final.
    """
    if isinstance(exception, FoodDatabaseUnavailable):
        return True
    if isinstance(exception, FoodDatabaseError):
        return exception.status_code == 429 or exception.status_code >= 500
    return False


def default_backoff():
    return wait_exponential(
        multiplier=BASE_BACKOFF_SECONDS, max=MAX_BACKOFF_SECONDS
    ) + wait_random(0, MAX_JITTER_SECONDS)


class FoodSearchService:
    """
    Product search over the local food table and Open Food Facts.

    Usage:
        service = FoodSearchService(food_repo, OpenFoodFactsClient())
        products = await service.search_products_by_name("havregryn")
    """

    CACHE_MAX_SIZE = 500
    LOCAL_RESULT_LIMIT = 10

    def __init__(
        self,
        food_repo: FoodRepository,
        food_client: FoodDatabaseClient,
        *,
        cache_ttl_seconds: float = 300,
        max_attempts: int = 2,
        cache_max_size: int = CACHE_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
        backoff=None,
        cache: Optional[Dict[str, CacheEntry]] = None,
    ):
        """
        Args:
            food_repo: Local food table (injected)
            food_client: Open Food Facts client (injected)
            cache_ttl_seconds: Lifetime of cached search results
            max_attempts: Attempts against Open Food Facts per search
            cache_max_size: Maximum number of cached queries
            clock: Monotonic clock used for cache expiry
            backoff: tenacity wait strategy between attempts
            cache: Shared cache dict, so results outlive a single service instance
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self._repo = food_repo
        self._client = food_client
        self._cache: Dict[str, CacheEntry] = cache if cache is not None else {}
        self._cache_ttl = cache_ttl_seconds
        self._cache_max_size = cache_max_size
        self._max_attempts = max_attempts
        self._clock = clock
        self._backoff = backoff if backoff is not None else default_backoff()

    @staticmethod
    def _cache_key(query: str) -> str:
        return query.strip().lower()

    async def search_products_by_name(self, query: str) -> List[FoodProduct]:
        """
        Search products by name.

        Returns:
            Matching products; empty for a blank query or when nothing matched

        Raises:
            FoodDatabaseUnavailable: If Open Food Facts stayed unreachable
            FoodDatabaseError: If Open Food Facts kept failing
        """
        key = self._cache_key(query or "")
        if not key:
            return []

        cached = self._get_from_cache(key)
        if cached is not None:
            logger.debug(f"Food search cache hit for '{key}'")
            return cached

        local = await self._search_local(query.strip())
        if local:
            self._add_to_cache(key, local)
            return local

        try:
            products = await self._search_remote(query.strip())
        except ProductNotFoundError:
            products = []
        except FoodDatabaseError as e:
            if e.status_code != 404:
                raise
            products = []

        self._add_to_cache(key, products)
        return products

    async def lookup_product_by_barcode(self, barcode: str) -> FoodProduct:
        """
        Look a product up by barcode.

        Raises:
            ProductNotFoundError: If neither source knows the barcode
            FoodDatabaseUnavailable: If Open Food Facts is not reachable
        """
        barcode = (barcode or "").strip()
        if not barcode:
            raise ProductNotFoundError("Empty barcode")

        try:
            local = await run_in_threadpool(self._repo.get_by_barcode, barcode)
        except GatewayError as e:
            logger.warning(f"Local barcode lookup failed, using Open Food Facts: {e}")
            local = None
        if local is not None:
            return local

        product = await self._client.get_product(barcode)
        if product is None:
            raise ProductNotFoundError(f"No product with barcode {barcode}")
        return product

    async def _search_local(self, query: str) -> List[FoodProduct]:
        try:
            return await run_in_threadpool(
                self._repo.search_local, query, limit=self.LOCAL_RESULT_LIMIT
            )
        except GatewayError as e:
            logger.warning(f"Local food search failed, using Open Food Facts: {e}")
            return []

    async def _search_remote(self, query: str) -> List[FoodProduct]:
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_retryable_food_error),
            stop=stop_after_attempt(self._max_attempts),
            wait=self._backoff,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._client.search_products(query)
        return []

    def _get_from_cache(self, key: str) -> Optional[List[FoodProduct]]:
        entry = self._cache.get(key)
        if entry is None:
            return None

        if self._clock() - entry.created_at > self._cache_ttl:
            del self._cache[key]
            return None

        return list(entry.products)

    def _add_to_cache(self, key: str, products: List[FoodProduct]) -> None:
        if len(self._cache) >= self._cache_max_size:
            self._evict_oldest_entries()

        self._cache[key] = CacheEntry(products=list(products), created_at=self._clock())

    def _evict_oldest_entries(self) -> None:
        """Evict expired entries, then the oldest fifth if still full."""
        now = self._clock()
        expired_keys = [
            k for k, v in self._cache.items()
            if now - v.created_at > self._cache_ttl
        ]
        for key in expired_keys:
            del self._cache[key]

        if len(self._cache) >= self._cache_max_size:
            entries = sorted(self._cache.items(), key=lambda x: x[1].created_at)
            for key, _ in entries[:max(1, len(entries) // 5)]:
                del self._cache[key]

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_stats(self) -> dict:
        now = self._clock()
        return {
            "total_entries": len(self._cache),
            "valid_entries": sum(
                1 for entry in self._cache.values()
                if now - entry.created_at <= self._cache_ttl
            ),
            "max_size": self._cache_max_size,
            "ttl_seconds": self._cache_ttl,
        }
