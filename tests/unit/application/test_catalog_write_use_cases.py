"""
Name: Catalog Write Path Tests

Responsibilities:
  - Alta de producto (validaciones, categoría existente, sku único)
  - update_stock: sin filtro is_active, invalidación incondicional del cache
  - Edición parcial y baja lógica con invalidación
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import Mock

import pytest

from techmart.application.usecases import (
    CatalogErrorCode,
    CreateProductInput,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    UpdateProductInput,
    UpdateProductUseCase,
    UpdateStockUseCase,
)
from techmart.domain.cache import product_cache_key
from techmart.domain.entities import Category
from techmart.infrastructure.cache import InMemoryProductCache
from techmart.infrastructure.repositories import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
)

pytestmark = pytest.mark.unit


class _Clock:
    """Reloj manual: avanza un minuto por llamada."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


@pytest.fixture
def categories(laptops_category) -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository(
        [laptops_category, Category(id=2, name="Phones")]
    )


@pytest.fixture
def products(categories) -> InMemoryProductRepository:
    return InMemoryProductRepository(categories=categories)


@pytest.fixture
def cache() -> InMemoryProductCache:
    return InMemoryProductCache(ttl_seconds=60)


@pytest.fixture
def clock(fixed_clock):
    return _Clock(fixed_clock())


def _input(**overrides) -> CreateProductInput:
    data = dict(
        name="Laptop Pro",
        price=Decimal("10.00"),
        sku="ABC-1",
        category_id=1,
        stock_quantity=5,
    )
    data.update(overrides)
    return CreateProductInput(**data)


@pytest.fixture
def create(products, categories, clock):
    use_case = CreateProductUseCase(products, categories, clock=clock)

    def _create(**overrides):
        return use_case.execute(_input(**overrides))

    return _create


# =============================================================================
# create_product
# =============================================================================


class TestCreateProduct:
    def test_create_assigns_id_and_timestamps(self, create, fixed_clock):
        result = create()

        product = result.product
        assert result.error is None
        assert product.id is not None
        assert product.created_at == product.updated_at == fixed_clock()
        assert product.image_urls == []
        assert product.attributes == {}
        assert product.is_active
        assert product.category.name == "Laptops"

    def test_duplicate_sku_is_conflict(self, create):
        create()

        result = create(name="Other")

        assert result.product is None
        assert result.error.code == CatalogErrorCode.CONFLICT

    def test_unknown_category_is_validation_error(self, create):
        result = create(category_id=99)

        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR
        assert result.error.message == "Category 99 does not exist."

    def test_field_errors_are_collected(self, create):
        result = create(name=" ", price=Decimal("-1"), stock_quantity=-3)

        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR
        assert len(result.error.errors) == 3

    def test_create_does_not_touch_cache(self, create, cache):
        create()

        assert len(cache) == 0


# =============================================================================
# update_stock
# =============================================================================


class TestUpdateStock:
    def test_stock_update_is_visible_through_cached_read(
        self, create, products, cache, clock
    ):
        created = create().product
        reader = GetProductUseCase(products, cache)
        assert reader.execute(created.id).product.stock_quantity == 5

        result = UpdateStockUseCase(products, cache, clock=clock).execute(created.id, 12)

        assert result.updated is True
        fresh = reader.execute(created.id).product
        assert fresh.stock_quantity == 12
        assert fresh.updated_at > created.updated_at

        stored = products.get_product(created.id, active_only=False)
        assert stored.stock_quantity == 12

    def test_missing_product_returns_not_updated(self, products, cache):
        result = UpdateStockUseCase(products, cache).execute(404, 3)

        assert result.updated is False
        assert result.error.code == CatalogErrorCode.NOT_FOUND

    def test_inactive_products_can_be_corrected(self, create, products, cache):
        created = create().product
        DeleteProductUseCase(products, cache).execute(created.id)

        result = UpdateStockUseCase(products, cache).execute(created.id, 0)

        assert result.updated is True
        assert products.get_product(created.id, active_only=False).stock_quantity == 0

    def test_negative_quantity_is_rejected_without_mutation(self, create, products, cache):
        created = create().product

        result = UpdateStockUseCase(products, cache).execute(created.id, -1)

        assert result.updated is False
        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR
        assert products.get_product(created.id).stock_quantity == 5

    def test_invalidation_is_unconditional(self, create, products):
        created = create().product
        cache = Mock()

        UpdateStockUseCase(products, cache).execute(created.id, 1)

        cache.delete.assert_called_once_with(product_cache_key(created.id))

    def test_only_stock_and_timestamp_are_written(self, cache, fixed_clock):
        store = Mock()
        store.update_stock.return_value = True

        result = UpdateStockUseCase(store, cache, clock=fixed_clock).execute(7, 3)

        assert result.updated is True
        store.update_stock.assert_called_once_with(7, 3, updated_at=fixed_clock())
        store.update_product.assert_not_called()


# =============================================================================
# update_product
# =============================================================================


class TestUpdateProduct:
    def test_partial_update_changes_only_given_fields(
        self, create, products, categories, cache, clock
    ):
        created = create().product
        use_case = UpdateProductUseCase(products, categories, cache, clock=clock)

        result = use_case.execute(
            created.id,
            UpdateProductInput(price=Decimal("15.50"), category_id=2, brand="Acme"),
        )

        product = result.product
        assert result.error is None
        assert product.price == Decimal("15.50")
        assert product.brand == "Acme"
        assert product.category.name == "Phones"
        assert product.name == "Laptop Pro"
        assert product.updated_at > created.updated_at

    def test_update_invalidates_cached_entry(self, create, products, categories, cache):
        created = create().product
        GetProductUseCase(products, cache).execute(created.id)

        UpdateProductUseCase(products, categories, cache).execute(
            created.id, UpdateProductInput(name="Renamed")
        )

        assert cache.get(product_cache_key(created.id)) is None

    def test_sku_taken_by_other_product_is_conflict(
        self, create, products, categories, cache
    ):
        create()
        other = create(sku="XYZ-9").product

        result = UpdateProductUseCase(products, categories, cache).execute(
            other.id, UpdateProductInput(sku="ABC-1")
        )

        assert result.error.code == CatalogErrorCode.CONFLICT

    def test_keeping_own_sku_is_allowed(self, create, products, categories, cache):
        created = create().product

        result = UpdateProductUseCase(products, categories, cache).execute(
            created.id, UpdateProductInput(sku="ABC-1", name="Same SKU")
        )

        assert result.error is None

    def test_explicit_null_clears_optional_fields(
        self, create, products, categories, cache
    ):
        created = create(brand="Acme", weight=Decimal("1.5")).product

        result = UpdateProductUseCase(products, categories, cache).execute(
            created.id, UpdateProductInput(brand=None, weight=None)
        )

        assert result.error is None
        assert result.product.brand is None
        assert result.product.weight is None

    def test_null_on_required_field_is_validation_error(
        self, create, products, categories, cache
    ):
        created = create().product

        result = UpdateProductUseCase(products, categories, cache).execute(
            created.id, UpdateProductInput(name=None, price=None)
        )

        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR
        assert set(result.error.errors) == {
            "name cannot be null.",
            "price cannot be null.",
        }
        assert products.get_product(created.id).name == "Laptop Pro"

    def test_only_changed_columns_are_written(
        self, create, products, categories, cache, fixed_clock
    ):
        created = create().product
        store = Mock(wraps=products)

        UpdateProductUseCase(store, categories, cache, clock=fixed_clock).execute(
            created.id,
            UpdateProductInput(name="Laptop Pro", price=Decimal("11.00")),
        )

        store.update_product.assert_called_once_with(
            created.id, {"price": Decimal("11.00")}, updated_at=fixed_clock()
        )

    def test_missing_product_is_not_found(self, products, categories, cache):
        result = UpdateProductUseCase(products, categories, cache).execute(
            5, UpdateProductInput(name="x")
        )

        assert result.error.code == CatalogErrorCode.NOT_FOUND


# =============================================================================
# delete_product
# =============================================================================


class TestDeleteProduct:
    def test_soft_delete_hides_product_from_reads(self, create, products, cache):
        created = create().product
        reader = GetProductUseCase(products, cache)
        reader.execute(created.id)

        result = DeleteProductUseCase(products, cache).execute(created.id)

        assert result.deleted is True
        assert reader.execute(created.id).error.code == CatalogErrorCode.NOT_FOUND
        assert products.get_product(created.id, active_only=False).is_active is False

    def test_delete_is_idempotent(self, create, products, cache):
        created = create().product
        use_case = DeleteProductUseCase(products, cache)

        assert use_case.execute(created.id).deleted
        assert use_case.execute(created.id).deleted

    def test_missing_product_is_not_found(self, products, cache):
        result = DeleteProductUseCase(products, cache).execute(1)

        assert result.deleted is False
        assert result.error.code == CatalogErrorCode.NOT_FOUND
