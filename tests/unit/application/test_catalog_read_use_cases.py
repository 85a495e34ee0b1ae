"""
Name: Catalog Read Path Tests (get_product / list_products)

Responsibilities:
  - Cache-aside en lecturas por id (hit evita el store, staleness por TTL)
  - Listado: filtros AND, orden whitelisted con fallback, ventana skip/take
  - currentPage = skip // take + 1
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from techmart.application.usecases import (
    CatalogErrorCode,
    GetProductUseCase,
    ListProductsUseCase,
)
from techmart.crosscutting.exceptions import CacheError
from techmart.domain.cache import product_cache_key
from techmart.domain.value_objects import ProductSearchCriteria
from techmart.infrastructure.cache import InMemoryProductCache, encode_product
from techmart.infrastructure.repositories import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def categories(laptops_category) -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository([laptops_category])


@pytest.fixture
def products(categories) -> InMemoryProductRepository:
    return InMemoryProductRepository(categories=categories)


@pytest.fixture
def cache() -> InMemoryProductCache:
    return InMemoryProductCache(ttl_seconds=60)


# =============================================================================
# get_product
# =============================================================================


class TestGetProduct:
    def test_miss_loads_from_store_and_populates_cache(self, products, cache, make_product):
        created = products.create_product(make_product(name="Laptop"))

        result = GetProductUseCase(products, cache).execute(created.id)

        assert result.error is None
        assert result.product.name == "Laptop"
        assert result.product.category.name == "Laptops"
        assert cache.get(product_cache_key(created.id)).name == "Laptop"

    def test_hit_does_not_touch_store(self, cache, make_product):
        cached = make_product(id=7, name="Cached")
        cache.set(product_cache_key(7), cached)
        store = Mock()

        result = GetProductUseCase(store, cache).execute(7)

        assert result.product.name == "Cached"
        store.get_product.assert_not_called()

    def test_repeated_reads_are_stale_until_invalidated(
        self, products, cache, make_product, fixed_clock
    ):
        created = products.create_product(make_product(name="Original"))
        use_case = GetProductUseCase(products, cache)
        first = use_case.execute(created.id).product

        products.update_product(
            created.id, {"name": "Changed in store"}, updated_at=fixed_clock()
        )
        second = use_case.execute(created.id).product

        assert encode_product(first) == encode_product(second)
        assert second.name == "Original"

        cache.delete(product_cache_key(created.id))
        assert use_case.execute(created.id).product.name == "Changed in store"

    def test_missing_product_is_not_found(self, products, cache):
        result = GetProductUseCase(products, cache).execute(999)

        assert result.product is None
        assert result.error.code == CatalogErrorCode.NOT_FOUND
        assert len(cache) == 0

    def test_inactive_product_is_not_found(self, products, cache, make_product):
        created = products.create_product(make_product(is_active=False))

        result = GetProductUseCase(products, cache).execute(created.id)

        assert result.error.code == CatalogErrorCode.NOT_FOUND

    def test_cache_failure_propagates(self, products):
        broken = Mock()
        broken.get.side_effect = CacheError("redis down")

        with pytest.raises(CacheError):
            GetProductUseCase(products, broken).execute(1)


# =============================================================================
# list_products
# =============================================================================


@pytest.fixture
def priced_catalog(products, make_product):
    for name, price in (("A", "3"), ("B", "7"), ("C", "12"), ("D", "20")):
        products.create_product(make_product(name=name, price=Decimal(price)))
    return products


def _prices(page):
    return [p.price for p in page.items]


class TestListProducts:
    def test_price_range_sorted_descending(self, priced_catalog):
        criteria = ProductSearchCriteria(
            min_price=Decimal("5"),
            max_price=Decimal("15"),
            sort_by="price",
            sort_descending=True,
            skip=0,
            take=10,
        )

        page = ListProductsUseCase(priced_catalog).execute(criteria).page

        assert _prices(page) == [Decimal("12"), Decimal("7")]
        assert page.total_count == 2

    def test_unknown_sort_falls_back_to_name_ascending(self, priced_catalog):
        criteria = ProductSearchCriteria(sort_by="popularity", sort_descending=True)

        page = ListProductsUseCase(priced_catalog).execute(criteria).page

        assert [p.name for p in page.items] == ["A", "B", "C", "D"]

    def test_sort_key_is_case_insensitive(self, priced_catalog):
        criteria = ProductSearchCriteria(sort_by="PRICE", sort_descending=True)

        page = ListProductsUseCase(priced_catalog).execute(criteria).page

        assert _prices(page)[0] == Decimal("20")

    def test_total_count_is_computed_before_window(self, priced_catalog):
        criteria = ProductSearchCriteria(sort_by="price", skip=1, take=2)

        page = ListProductsUseCase(priced_catalog).execute(criteria).page

        assert page.total_count == 4
        assert _prices(page) == [Decimal("7"), Decimal("12")]
        assert page.page_size == 2

    @pytest.mark.parametrize(
        "skip,take,expected_page", [(0, 10, 1), (20, 10, 3), (5, 10, 1), (15, 10, 2)]
    )
    def test_current_page_formula(self, priced_catalog, skip, take, expected_page):
        criteria = ProductSearchCriteria(skip=skip, take=take)

        page = ListProductsUseCase(priced_catalog).execute(criteria).page

        assert page.current_page == expected_page

    def test_search_term_matches_name_or_description(self, products, make_product):
        products.create_product(make_product(name="Gaming Laptop", description="fast"))
        products.create_product(make_product(name="Mouse", description="for Laptop users"))
        products.create_product(make_product(name="Desk", description="wooden"))

        page = ListProductsUseCase(products).execute(
            ProductSearchCriteria(search_term="Laptop")
        ).page

        assert sorted(p.name for p in page.items) == ["Gaming Laptop", "Mouse"]

    def test_excludes_inactive_and_filters_category(self, products, make_product):
        products.create_product(make_product(name="Active", category_id=1))
        products.create_product(make_product(name="Hidden", category_id=1, is_active=False))
        products.create_product(make_product(name="Other", category_id=2))

        page = ListProductsUseCase(products).execute(
            ProductSearchCriteria(category_id=1)
        ).page

        assert [p.name for p in page.items] == ["Active"]
        assert page.total_count == 1

    def test_listing_never_touches_cache(self, priced_catalog, cache):
        ListProductsUseCase(priced_catalog).execute(ProductSearchCriteria())

        assert len(cache) == 0

    @pytest.mark.parametrize("skip,take", [(-1, 10), (0, 0), (0, 101)])
    def test_invalid_window_is_validation_error(self, products, skip, take):
        result = ListProductsUseCase(products, max_take=100).execute(
            ProductSearchCriteria(skip=skip, take=take)
        )

        assert result.page is None
        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR
