"""
===============================================================================
USE CASE: List Products (search / filter / sort / paginate)
===============================================================================

Name:
    List Products Use Case

Business Goal:
    Listar productos activos con filtros opcionales, orden y ventana
    skip/take, devolviendo el total del conjunto filtrado.

Reglas:
    - Base: is_active = true. Filtros opcionales combinados con AND.
    - Orden: name (default / fallback ascendente), price, created.
    - total_count se calcula ANTES de paginar.
    - current_page = skip // take + 1.
    - Nunca toca el cache.
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import ProductRepository
from ....domain.value_objects import ProductPage, ProductSearchCriteria
from .catalog_results import ProductPageResult, validation_error


class ListProductsUseCase:
    def __init__(self, products: ProductRepository, *, max_take: int = 100):
        self._products = products
        self._max_take = max_take

    def execute(self, criteria: ProductSearchCriteria) -> ProductPageResult:
        errors = []
        if criteria.skip < 0:
            errors.append("skip must be >= 0.")
        if criteria.take <= 0:
            errors.append("take must be greater than 0.")
        elif criteria.take > self._max_take:
            errors.append(f"take must be <= {self._max_take}.")
        if errors:
            return ProductPageResult(error=validation_error(*errors))

        items, total = self._products.search_products(criteria)
        return ProductPageResult(
            page=ProductPage.build(
                items, total_count=total, skip=criteria.skip, take=criteria.take
            )
        )
