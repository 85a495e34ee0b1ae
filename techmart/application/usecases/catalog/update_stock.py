"""
===============================================================================
USE CASE: Update Stock
===============================================================================

Name:
    Update Stock Use Case

Business Goal:
    Reemplazar la cantidad en stock de un producto e invalidar su snapshot
    cacheado.

Reglas:
    - UPDATE por ID SIN filtrar is_active (un producto inactivo también
      puede reponer stock); solo escribe stock_quantity + updated_at.
    - Inexistente -> updated=False, sin mutación ni invalidación.
    - Cantidad negativa -> VALIDATION_ERROR.
    - Éxito -> stock + updated_at, persistir y borrar "product_{id}" siempre.
    - Concurrencia: last-write-wins en el store.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_product_cache_invalidation
from ....domain.cache import ProductCachePort, product_cache_key
from ....domain.repositories import ProductRepository
from .catalog_results import StockUpdateResult, not_found_error, validation_error


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UpdateStockUseCase:
    def __init__(
        self,
        products: ProductRepository,
        cache: ProductCachePort,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._products = products
        self._cache = cache
        self._clock = clock

    def execute(self, product_id: int, quantity: int) -> StockUpdateResult:
        if quantity < 0:
            return StockUpdateResult(
                error=validation_error("Stock quantity cannot be negative.")
            )

        updated = self._products.update_stock(
            product_id, quantity, updated_at=self._clock()
        )
        if not updated:
            return StockUpdateResult(updated=False, error=not_found_error(product_id))

        self._cache.delete(product_cache_key(product_id))
        record_product_cache_invalidation()

        logger.info(
            "Stock actualizado",
            extra={"product_id": product_id, "stock_quantity": quantity},
        )
        return StockUpdateResult(updated=True)
