"""
===============================================================================
USE CASE: Get Product (cache-aside)
===============================================================================

Name:
    Get Product Use Case

Business Goal:
    Servir la ficha de un producto activo minimizando lecturas al store.

Flow:
    1) Cache hit en "product_{id}" -> se devuelve sin consultar el store.
    2) Miss -> store (id + is_active); si existe, write-through con TTL.
    3) Inexistente o inactivo -> NOT_FOUND.

Notas:
    - Un hit puede devolver un snapshot viejo (hasta el TTL) si alguien mutó
      el producto sin invalidar; todas las mutaciones de este paquete
      invalidan la clave.
    - Errores del cache se propagan (no hay fallback silencioso al store).
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.metrics import record_product_cache_hit, record_product_cache_miss
from ....domain.cache import ProductCachePort, product_cache_key
from ....domain.repositories import ProductRepository
from .catalog_results import ProductResult, not_found_error


class GetProductUseCase:
    def __init__(self, products: ProductRepository, cache: ProductCachePort):
        self._products = products
        self._cache = cache

    def execute(self, product_id: int) -> ProductResult:
        key = product_cache_key(product_id)

        cached = self._cache.get(key)
        if cached is not None:
            record_product_cache_hit()
            return ProductResult(product=cached)

        record_product_cache_miss()
        product = self._products.get_product(product_id, active_only=True)
        if product is None:
            return ProductResult(error=not_found_error(product_id))

        self._cache.set(key, product)
        return ProductResult(product=product)
