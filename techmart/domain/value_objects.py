"""
===============================================================================
TARJETA CRC — domain/value_objects.py
===============================================================================

Módulo:
    Objetos de valor del catálogo (criterios de búsqueda, página de resultados)

Responsabilidades:
    - ProductSortField: resolver la clave de orden pedida por el cliente,
      con fallback silencioso a "name" ascendente.
    - ProductSearchCriteria: filtros + orden + ventana (skip/take) inmutables.
    - ProductPage: resultado paginado con total previo a la paginación.

Colaboradores:
    - application/usecases/catalog/list_products.py
    - infrastructure/repositories (postgres / in_memory) ejecutan los criterios.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from .entities import Product


class ProductSortField(str, Enum):
    """Claves de orden soportadas para listados de productos."""

    NAME = "name"
    PRICE = "price"
    CREATED = "created"

    @classmethod
    def parse(cls, raw: str | None) -> Optional["ProductSortField"]:
        """
        Devuelve el campo reconocido o None.

        Case-insensitive. Valores desconocidos NO son error: None indica que
        se aplica el orden por defecto.
        """
        value = (raw or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        return None


@dataclass(frozen=True, slots=True)
class ProductSearchCriteria:
    """
    Criterios de listado.

    Todos los filtros son opcionales y se combinan con AND sobre la base
    `is_active = true`.
    """

    search_term: Optional[str] = None
    category_id: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort_by: Optional[str] = None
    sort_descending: bool = False
    skip: int = 0
    take: int = 20

    @property
    def sort_field(self) -> ProductSortField:
        """Campo de orden efectivo (name si no se reconoce el pedido)."""
        return ProductSortField.parse(self.sort_by) or ProductSortField.NAME

    @property
    def effective_descending(self) -> bool:
        """
        Dirección efectiva.

        Sin sort_by, o con uno desconocido, el orden es name ASCENDENTE aunque
        se pida descending.
        """
        if ProductSortField.parse(self.sort_by) is None:
            return False
        return self.sort_descending

    @property
    def normalized_search_term(self) -> Optional[str]:
        """search_term vacío equivale a "sin filtro"."""
        return self.search_term if self.search_term else None


@dataclass
class ProductPage:
    """
    Página de productos.

    current_page = skip // take + 1. Sólo coincide con una página "real" cuando
    skip es múltiplo de take; se conserva por compatibilidad con clientes.
    """

    items: List[Product] = field(default_factory=list)
    total_count: int = 0
    page_size: int = 0
    current_page: int = 1

    @classmethod
    def build(
        cls, items: List[Product], *, total_count: int, skip: int, take: int
    ) -> "ProductPage":
        return cls(
            items=list(items),
            total_count=total_count,
            page_size=take,
            current_page=(skip // take) + 1,
        )
