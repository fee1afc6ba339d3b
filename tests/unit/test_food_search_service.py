"""
Unit tests for backend/core/food_search_service.py
"""

import threading

import pytest
from tenacity import wait_none

from application.exceptions import (
    FoodDatabaseError,
    FoodDatabaseTimeout,
    FoodDatabaseUnavailable,
    ProductNotFoundError,
)
from application.ports import FoodProduct
from backend.core.food_search_service import FoodSearchService, is_retryable_food_error
from tests.fakes import OATS, FakeFoodDatabaseClient, FakeFoodRepository


MILK = FoodProduct(name="Mellanmjölk", brand="Arla", calories=46, protein=3.5, fat=1.5, carbs=4.8)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_service(repo=None, client=None, clock=None, **kwargs):
    return FoodSearchService(
        repo or FakeFoodRepository(),
        client or FakeFoodDatabaseClient(),
        clock=clock or FakeClock(),
        backoff=wait_none(),
        **kwargs,
    )


@pytest.mark.unit
class TestRetryClassification:
    @pytest.mark.parametrize("error,expected", [
        (FoodDatabaseUnavailable("down"), True),
        (FoodDatabaseTimeout("slow"), True),
        (FoodDatabaseError("server", 503), True),
        (FoodDatabaseError("rate limited", 429), True),
        (FoodDatabaseError("bad request", 400), False),
        (FoodDatabaseError("not found", 404), False),
        (ProductNotFoundError("none"), False),
        (ValueError("other"), False),
    ])
    def test_is_retryable(self, error, expected):
        assert is_retryable_food_error(error) is expected


@pytest.mark.unit
class TestSearchProductsByName:
    @pytest.mark.asyncio
    async def test_blank_query_returns_empty_without_lookups(self):
        repo = FakeFoodRepository([OATS])
        service = make_service(repo=repo)

        assert await service.search_products_by_name("   ") == []
        assert repo.search_calls == []

    @pytest.mark.asyncio
    async def test_local_results_skip_remote(self):
        client = FakeFoodDatabaseClient([MILK])
        service = make_service(repo=FakeFoodRepository([OATS]), client=client)

        results = await service.search_products_by_name("havre")

        assert results == [OATS]
        assert client.search_calls == []

    @pytest.mark.asyncio
    async def test_falls_back_to_remote(self):
        client = FakeFoodDatabaseClient([MILK])
        service = make_service(client=client)

        assert await service.search_products_by_name("mjölk") == [MILK]
        assert client.search_calls == ["mjölk"]

    @pytest.mark.asyncio
    async def test_local_gateway_error_falls_back_to_remote(self):
        repo = FakeFoodRepository([OATS])
        repo.fail = True
        service = make_service(repo=repo, client=FakeFoodDatabaseClient([MILK]))

        assert await service.search_products_by_name("havre") == [MILK]

    @pytest.mark.asyncio
    async def test_cache_is_keyed_on_trimmed_lower_case_query(self):
        client = FakeFoodDatabaseClient([MILK])
        service = make_service(client=client)

        await service.search_products_by_name("Mjölk")
        await service.search_products_by_name("  mjölk ")

        assert len(client.search_calls) == 1

    @pytest.mark.asyncio
    async def test_cache_expires_after_ttl(self):
        clock = FakeClock()
        client = FakeFoodDatabaseClient([MILK])
        service = make_service(client=client, clock=clock, cache_ttl_seconds=300)

        await service.search_products_by_name("mjölk")
        clock.now += 299
        await service.search_products_by_name("mjölk")
        assert len(client.search_calls) == 1

        clock.now += 2
        await service.search_products_by_name("mjölk")
        assert len(client.search_calls) == 2

    @pytest.mark.asyncio
    async def test_shared_cache_outlives_service_instance(self):
        cache = {}
        client = FakeFoodDatabaseClient([MILK])

        await make_service(client=client, cache=cache).search_products_by_name("mjölk")
        await make_service(client=client, cache=cache).search_products_by_name("mjölk")

        assert len(client.search_calls) == 1

    @pytest.mark.asyncio
    async def test_no_products_returns_empty_list(self):
        service = make_service(client=FakeFoodDatabaseClient([]))
        assert await service.search_products_by_name("xyzzy") == []

    @pytest.mark.asyncio
    async def test_upstream_404_returns_empty_list(self):
        client = FakeFoodDatabaseClient([MILK], errors=[FoodDatabaseError("not found", 404)])
        service = make_service(client=client)
        assert await service.search_products_by_name("mjölk") == []

    @pytest.mark.asyncio
    async def test_transient_error_is_retried(self):
        client = FakeFoodDatabaseClient([MILK], errors=[FoodDatabaseTimeout("slow")])
        service = make_service(client=client, max_attempts=2)

        assert await service.search_products_by_name("mjölk") == [MILK]
        assert len(client.search_calls) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        client = FakeFoodDatabaseClient(
            [MILK],
            errors=[FoodDatabaseUnavailable("down"), FoodDatabaseUnavailable("down")],
        )
        service = make_service(client=client, max_attempts=2)

        with pytest.raises(FoodDatabaseUnavailable):
            await service.search_products_by_name("mjölk")
        assert len(client.search_calls) == 2

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        client = FakeFoodDatabaseClient([MILK], errors=[FoodDatabaseError("bad", 400)])
        service = make_service(client=client, max_attempts=3)

        with pytest.raises(FoodDatabaseError):
            await service.search_products_by_name("mjölk")
        assert len(client.search_calls) == 1

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self):
        client = FakeFoodDatabaseClient([MILK], errors=[FoodDatabaseError("bad", 400)])
        service = make_service(client=client)

        with pytest.raises(FoodDatabaseError):
            await service.search_products_by_name("mjölk")
        assert await service.search_products_by_name("mjölk") == [MILK]

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            make_service(max_attempts=0)


@pytest.mark.unit
class TestCacheEviction:
    @pytest.mark.asyncio
    async def test_cache_never_exceeds_max_size(self):
        clock = FakeClock()
        service = make_service(client=FakeFoodDatabaseClient([MILK]), clock=clock, cache_max_size=5)

        for i in range(12):
            clock.now += 1
            await service.search_products_by_name(f"query {i}")

        assert service.get_cache_stats()["total_entries"] <= 5

    @pytest.mark.asyncio
    async def test_clear_cache(self):
        service = make_service(client=FakeFoodDatabaseClient([MILK]))
        await service.search_products_by_name("mjölk")
        service.clear_cache()
        assert service.get_cache_stats()["total_entries"] == 0


@pytest.mark.unit
class TestLookupByBarcode:
    @pytest.mark.asyncio
    async def test_local_match_skips_remote(self):
        repo = FakeFoodRepository()
        repo.add(OATS, barcode="7310130008217")
        client = FakeFoodDatabaseClient()
        service = make_service(repo=repo, client=client)

        assert await service.lookup_product_by_barcode("7310130008217") == OATS
        assert client.barcode_calls == []

    @pytest.mark.asyncio
    async def test_remote_match(self):
        client = FakeFoodDatabaseClient(barcodes={"7310865004703": MILK})
        service = make_service(client=client)
        assert await service.lookup_product_by_barcode(" 7310865004703 ") == MILK

    @pytest.mark.asyncio
    async def test_unknown_barcode_raises(self):
        service = make_service()
        with pytest.raises(ProductNotFoundError):
            await service.lookup_product_by_barcode("0000000000000")

    @pytest.mark.asyncio
    async def test_empty_barcode_raises(self):
        with pytest.raises(ProductNotFoundError):
            await make_service().lookup_product_by_barcode("")

    @pytest.mark.asyncio
    async def test_local_gateway_error_falls_back_to_remote(self):
        repo = FakeFoodRepository()
        repo.fail = True
        client = FakeFoodDatabaseClient(barcodes={"123": MILK})
        service = make_service(repo=repo, client=client)

        assert await service.lookup_product_by_barcode("123") == MILK


@pytest.mark.unit
class TestLocalLookupsLeaveEventLoop:
    """The local table is queried through the blocking Supabase client."""

    @pytest.mark.asyncio
    async def test_name_search_runs_in_worker_thread(self):
        repo = FakeFoodRepository([OATS])

        await make_service(repo=repo).search_products_by_name("havre")

        assert repo.call_threads
        assert threading.get_ident() not in repo.call_threads

    @pytest.mark.asyncio
    async def test_barcode_lookup_runs_in_worker_thread(self):
        repo = FakeFoodRepository()
        repo.add(OATS, barcode="7310130008217")

        await make_service(repo=repo).lookup_product_by_barcode("7310130008217")

        assert repo.call_threads
        assert threading.get_ident() not in repo.call_threads
