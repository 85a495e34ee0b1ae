"""
===============================================================================
CATALOG USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Catalog Use Case Results

Business Goal:
    Proveer tipos consistentes de resultados y errores para los casos de uso
    del catálogo (lectura cacheada, listados, alta, stock, edición, baja).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de propagar
      excepciones para fallas esperables (no existe, input inválido, sku
      repetido).
    - Fallas de infraestructura (DatabaseError, CacheError) SÍ se propagan.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Responsibilities:
    - Definir CatalogErrorCode como conjunto estable de categorías de error.
    - Definir CatalogError como contrato mínimo de error.
    - Definir DTOs de resultado por caso de uso.

Collaborators:
    - domain.entities.Product
    - domain.value_objects.ProductPage
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ....domain.entities import Product
from ....domain.value_objects import ProductPage

RESOURCE_PRODUCT = "Producto"
RESOURCE_CATEGORY = "Categoría"


class CatalogErrorCode(str, Enum):
    """
    Códigos:
      - VALIDATION_ERROR: input inválido (stock negativo, categoría inexistente).
      - NOT_FOUND: producto inexistente (o inactivo, según la operación).
      - CONFLICT: sku ya utilizado por otro producto.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class CatalogError:
    code: CatalogErrorCode
    message: str
    resource: str | None = None
    errors: Tuple[str, ...] = ()


@dataclass
class ProductResult:
    """
    Resultado para get/create/update de un producto.

    Contrato:
      - Éxito: product != None y error == None
      - Falla: product == None y error != None
    """

    product: Product | None = None
    error: CatalogError | None = None


@dataclass
class ProductPageResult:
    page: ProductPage | None = None
    error: CatalogError | None = None


@dataclass
class StockUpdateResult:
    """
    Resultado de update_stock.

    updated=False con NOT_FOUND cuando el producto no existe (sin mutación).
    """

    updated: bool = False
    error: CatalogError | None = None


@dataclass
class DeleteProductResult:
    """Resultado de la baja lógica (is_active = False)."""

    deleted: bool = False
    error: CatalogError | None = None


def not_found_error(product_id: int) -> CatalogError:
    return CatalogError(
        code=CatalogErrorCode.NOT_FOUND,
        message=f"Product {product_id} not found.",
        resource=RESOURCE_PRODUCT,
    )


def validation_error(*errors: str) -> CatalogError:
    return CatalogError(
        code=CatalogErrorCode.VALIDATION_ERROR,
        message=errors[0] if len(errors) == 1 else "Invalid product data.",
        errors=tuple(errors),
    )


def sku_conflict_error(sku: str) -> CatalogError:
    return CatalogError(
        code=CatalogErrorCode.CONFLICT,
        message=f"SKU '{sku}' is already in use.",
        resource=RESOURCE_PRODUCT,
    )
