"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/product.py
============================================================
Class: InMemoryProductRepository

Responsibilities:
  - Almacenar productos en memoria (tests / local dev).
  - Ejecutar ProductSearchCriteria con la misma semántica que Postgres:
      - base is_active, filtros AND
      - substring case-sensitive en name OR description
      - orden whitelisted + id ASC como desempate
      - total previo a la ventana skip/take
  - Completar el read-model de categoría al leer.

Collaborators:
  - domain.entities.Product, Category
  - domain.value_objects.ProductSearchCriteria, ProductSortField
  - InMemoryCategoryRepository (opcional, para el read-model)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Lecturas y escrituras trabajan sobre copias: mutar un Product devuelto
    no altera el "store".
  - update_product aplica solo los campos informados; update_stock toca
    stock_quantity + updated_at.
============================================================
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from itertools import count
from threading import Lock
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ....crosscutting.exceptions import DuplicateRecordError
from ....domain.entities import Product
from ....domain.value_objects import ProductSearchCriteria, ProductSortField
from .category import InMemoryCategoryRepository

_MIN_DT = datetime.min.replace(tzinfo=timezone.utc)

_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "price",
        "sku",
        "category_id",
        "stock_quantity",
        "is_active",
        "image_urls",
        "weight",
        "brand",
        "attributes",
    }
)

_SORT_KEYS: Dict[ProductSortField, Callable[[Product], object]] = {
    ProductSortField.NAME: lambda p: p.name,
    ProductSortField.PRICE: lambda p: p.price,
    ProductSortField.CREATED: lambda p: p.created_at or _MIN_DT,
}


class InMemoryProductRepository:
    """Repositorio in-memory, thread-safe, para productos."""

    def __init__(self, categories: InMemoryCategoryRepository | None = None) -> None:
        self._lock = Lock()
        self._products: Dict[int, Product] = {}
        self._ids = count(1)
        self._categories = categories

    # =========================================================
    # Helpers internos
    # =========================================================
    def _snapshot(self, product: Product) -> Product:
        """Copia con el read-model de categoría resuelto."""
        result = copy.deepcopy(product)
        if self._categories is not None:
            result.category = self._categories.get_category(result.category_id)
        return result

    def _sku_taken(self, sku: str, *, exclude_id: int | None = None) -> bool:
        return any(
            p.sku == sku and p.id != exclude_id for p in self._products.values()
        )

    @staticmethod
    def _matches(product: Product, criteria: ProductSearchCriteria) -> bool:
        if not product.is_active:
            return False
        term = criteria.normalized_search_term
        if term and term not in product.name and term not in (product.description or ""):
            return False
        if criteria.category_id is not None and product.category_id != criteria.category_id:
            return False
        if criteria.min_price is not None and product.price < criteria.min_price:
            return False
        if criteria.max_price is not None and product.price > criteria.max_price:
            return False
        return True

    # =========================================================
    # Lectura
    # =========================================================
    def get_product(
        self, product_id: int, *, active_only: bool = True
    ) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
            if product is None or (active_only and not product.is_active):
                return None
            return self._snapshot(product)

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        with self._lock:
            for product in self._products.values():
                if product.sku == sku:
                    return self._snapshot(product)
            return None

    def search_products(
        self, criteria: ProductSearchCriteria
    ) -> Tuple[List[Product], int]:
        with self._lock:
            filtered = [p for p in self._products.values() if self._matches(p, criteria)]
            # Sort estable: id ASC primero y luego el campo pedido.
            filtered.sort(key=lambda p: p.id)
            filtered.sort(
                key=_SORT_KEYS[criteria.sort_field],
                reverse=criteria.effective_descending,
            )
            window = filtered[criteria.skip : criteria.skip + criteria.take]
            return [self._snapshot(p) for p in window], len(filtered)

    # =========================================================
    # Escritura
    # =========================================================
    def create_product(self, product: Product) -> Product:
        with self._lock:
            if self._sku_taken(product.sku):
                raise DuplicateRecordError("SKU already exists")
            stored = copy.deepcopy(product)
            stored.id = next(self._ids)
            stored.category = None
            self._products[stored.id] = stored
            return self._snapshot(stored)

    def update_product(
        self,
        product_id: int,
        changes: Mapping[str, Any],
        *,
        updated_at: datetime,
    ) -> Optional[Product]:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown product columns: {sorted(unknown)}")

        with self._lock:
            stored = self._products.get(product_id)
            if stored is None:
                return None
            if "sku" in changes and self._sku_taken(changes["sku"], exclude_id=product_id):
                raise DuplicateRecordError("SKU already exists")
            for name, value in changes.items():
                setattr(stored, name, copy.deepcopy(value))
            stored.updated_at = updated_at
            return self._snapshot(stored)

    def update_stock(
        self, product_id: int, quantity: int, *, updated_at: datetime
    ) -> bool:
        with self._lock:
            stored = self._products.get(product_id)
            if stored is None:
                return False
            stored.stock_quantity = quantity
            stored.updated_at = updated_at
            return True

    def ping(self) -> bool:
        return True
