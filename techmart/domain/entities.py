"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Catálogo (Product, Category)

Responsabilidades:
    - Definir las estructuras centrales del catálogo (sin infraestructura).
    - Las mutaciones se expresan como cambios por columna en el repositorio
      (update_product / update_stock), no sobre la entidad.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases/catalog: construyen/consumen estas entidades.
    - infrastructure/cache: serializa snapshots de Product.

Principios:
    - Sin dependencias a DB/Redis/FastAPI.
    - Solo datos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Category:
    """
    Categoría del catálogo.

    Forma un árbol vía parent_category_id. Los ciclos no se validan acá:
    quien da de alta categorías es responsable de no generarlos.
    """

    id: int
    name: str
    parent_category_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------


@dataclass
class Product:
    """
    Producto del catálogo.

    Invariantes (garantizadas por el store):
      - sku único en todo el catálogo.
      - stock_quantity >= 0.

    `id` es None hasta que el store lo asigna al persistir.
    `category` es un read-model opcional (lo completa el repositorio al leer).
    """

    name: str
    price: Decimal
    sku: str
    category_id: int
    description: str = ""
    stock_quantity: int = 0
    is_active: bool = True
    image_urls: List[str] = field(default_factory=list)
    weight: Optional[Decimal] = None
    brand: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[int] = None
    category: Optional[Category] = None
