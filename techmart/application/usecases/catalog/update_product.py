"""
===============================================================================
USE CASE: Update Product
===============================================================================

Name:
    Update Product Use Case

Business Goal:
    Edición parcial de un producto (nombre, descripción, precio, sku,
    categoría, imágenes, peso, marca, atributos, is_active).

Reglas:
    - Solo se aplican los campos informados (UNSET = sin cambio); weight y
      brand aceptan null para borrarse, el resto no.
    - Busca SIN filtrar is_active (permite reactivar un producto).
    - Categoría inexistente -> VALIDATION_ERROR; sku tomado por otro -> CONFLICT.
    - Éxito -> updated_at = ahora, persistir e invalidar "product_{id}".
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from ....crosscutting.exceptions import DuplicateRecordError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_product_cache_invalidation
from ....domain.cache import ProductCachePort, product_cache_key
from ....domain.repositories import CategoryRepository, ProductRepository
from .catalog_results import (
    ProductResult,
    not_found_error,
    sku_conflict_error,
    validation_error,
)
from .product_rules import check_fields, check_references


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

# Campos que admiten null explícito (borrar el valor).
NULLABLE_FIELDS = frozenset({"weight", "brand"})


@dataclass(frozen=True)
class UpdateProductInput:
    name: Optional[str] = UNSET
    description: Optional[str] = UNSET
    price: Optional[Decimal] = UNSET
    sku: Optional[str] = UNSET
    category_id: Optional[int] = UNSET
    image_urls: Optional[List[str]] = UNSET
    weight: Optional[Decimal] = UNSET
    brand: Optional[str] = UNSET
    attributes: Optional[Dict[str, Any]] = UNSET
    is_active: Optional[bool] = UNSET

    def changed_fields(self) -> Dict[str, Any]:
        """Campos informados, incluidos los null explícitos."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


def _null_errors(changes: Dict[str, Any]) -> List[str]:
    return [
        f"{name} cannot be null."
        for name, value in changes.items()
        if value is None and name not in NULLABLE_FIELDS
    ]


class UpdateProductUseCase:
    def __init__(
        self,
        products: ProductRepository,
        categories: CategoryRepository,
        cache: ProductCachePort,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._products = products
        self._categories = categories
        self._cache = cache
        self._clock = clock

    def execute(self, product_id: int, changes: UpdateProductInput) -> ProductResult:
        requested = changes.changed_fields()
        errors = _null_errors(requested) + check_fields(
            name=requested.get("name"),
            sku=requested.get("sku"),
            price=requested.get("price"),
            weight=requested.get("weight"),
        )
        if errors:
            return ProductResult(error=validation_error(*errors))

        product = self._products.get_product(product_id, active_only=False)
        if product is None:
            return ProductResult(error=not_found_error(product_id))

        # Solo se escriben las columnas que realmente cambian.
        to_write = {
            name: value
            for name, value in requested.items()
            if getattr(product, name) != value
        }

        reference_error = check_references(
            products=self._products,
            categories=self._categories,
            category_id=to_write.get("category_id"),
            sku=to_write.get("sku"),
            current_product_id=product.id,
        )
        if reference_error is not None:
            return ProductResult(error=reference_error)

        try:
            updated = self._products.update_product(
                product_id, to_write, updated_at=self._clock()
            )
        except DuplicateRecordError:
            return ProductResult(error=sku_conflict_error(to_write["sku"]))
        if updated is None:
            return ProductResult(error=not_found_error(product_id))

        self._cache.delete(product_cache_key(product_id))
        record_product_cache_invalidation()

        logger.info(
            "Producto actualizado",
            extra={"product_id": product_id, "fields": sorted(to_write)},
        )
        return ProductResult(product=updated)
