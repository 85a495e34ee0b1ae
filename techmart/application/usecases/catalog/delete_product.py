"""
===============================================================================
USE CASE: Delete Product (soft delete)
===============================================================================

Name:
    Delete Product Use Case

Business Goal:
    Retirar un producto del catálogo público sin borrarlo físicamente.

Reglas:
    - is_active = False + updated_at; nunca hard delete.
    - Inexistente -> deleted=False (NOT_FOUND).
    - Idempotente sobre un producto ya inactivo.
    - Invalida "product_{id}" en el cache.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_product_cache_invalidation
from ....domain.cache import ProductCachePort, product_cache_key
from ....domain.repositories import ProductRepository
from .catalog_results import DeleteProductResult, not_found_error


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeleteProductUseCase:
    def __init__(
        self,
        products: ProductRepository,
        cache: ProductCachePort,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._products = products
        self._cache = cache
        self._clock = clock

    def execute(self, product_id: int) -> DeleteProductResult:
        product = self._products.get_product(product_id, active_only=False)
        if product is None:
            return DeleteProductResult(deleted=False, error=not_found_error(product_id))

        if product.is_active:
            updated = self._products.update_product(
                product_id, {"is_active": False}, updated_at=self._clock()
            )
            if updated is None:
                return DeleteProductResult(
                    deleted=False, error=not_found_error(product_id)
                )

        self._cache.delete(product_cache_key(product_id))
        record_product_cache_invalidation()

        logger.info("Producto desactivado", extra={"product_id": product_id})
        return DeleteProductResult(deleted=True)
