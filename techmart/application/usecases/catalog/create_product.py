"""
===============================================================================
USE CASE: Create Product
===============================================================================

Name:
    Create Product Use Case

Business Goal:
    Dar de alta un producto nuevo (activo) y devolverlo con su ID asignado.

Reglas:
    - created_at = updated_at = ahora.
    - image_urls y attributes vacíos por defecto.
    - La categoría debe existir (VALIDATION_ERROR) y el sku estar libre (CONFLICT).
    - No interactúa con el cache (un producto nuevo no puede estar cacheado).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from ....crosscutting.exceptions import DuplicateRecordError
from ....crosscutting.logger import logger
from ....domain.entities import Product
from ....domain.repositories import CategoryRepository, ProductRepository
from .catalog_results import ProductResult, sku_conflict_error, validation_error
from .product_rules import check_fields, check_references


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CreateProductInput:
    name: str
    price: Decimal
    sku: str
    category_id: int
    description: str = ""
    stock_quantity: int = 0
    image_urls: List[str] = field(default_factory=list)
    weight: Optional[Decimal] = None
    brand: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)


class CreateProductUseCase:
    def __init__(
        self,
        products: ProductRepository,
        categories: CategoryRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._products = products
        self._categories = categories
        self._clock = clock

    def execute(self, data: CreateProductInput) -> ProductResult:
        errors = check_fields(
            name=data.name,
            sku=data.sku,
            price=data.price,
            stock_quantity=data.stock_quantity,
            weight=data.weight,
        )
        if errors:
            return ProductResult(error=validation_error(*errors))

        reference_error = check_references(
            products=self._products,
            categories=self._categories,
            category_id=data.category_id,
            sku=data.sku,
        )
        if reference_error is not None:
            return ProductResult(error=reference_error)

        now = self._clock()
        product = Product(
            name=data.name,
            description=data.description or "",
            price=data.price,
            sku=data.sku,
            category_id=data.category_id,
            stock_quantity=data.stock_quantity,
            is_active=True,
            image_urls=list(data.image_urls or []),
            weight=data.weight,
            brand=data.brand,
            attributes=dict(data.attributes or {}),
            created_at=now,
            updated_at=now,
        )

        try:
            created = self._products.create_product(product)
        except DuplicateRecordError:
            return ProductResult(error=sku_conflict_error(data.sku))

        logger.info(
            "Producto creado",
            extra={"product_id": created.id, "sku": created.sku},
        )
        return ProductResult(product=created)
