"""
Reglas de datos de producto compartidas por alta y edición.

Los límites replican las restricciones de columna del store (name 200,
sku 50, numeric(18,2)) para devolver VALIDATION_ERROR en lugar de un 500.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from ....domain.repositories import CategoryRepository, ProductRepository
from .catalog_results import CatalogError, sku_conflict_error, validation_error

NAME_MAX_LENGTH = 200
SKU_MAX_LENGTH = 50
PRICE_MAX = Decimal("9999999999999999.99")


def check_fields(
    *,
    name: Optional[str] = None,
    sku: Optional[str] = None,
    price: Optional[Decimal] = None,
    stock_quantity: Optional[int] = None,
    weight: Optional[Decimal] = None,
) -> List[str]:
    """Valida sólo los campos presentes (None = no informado)."""
    errors: List[str] = []

    if name is not None:
        if not name.strip():
            errors.append("Name is required.")
        elif len(name) > NAME_MAX_LENGTH:
            errors.append(f"Name must be at most {NAME_MAX_LENGTH} characters.")

    if sku is not None:
        if not sku.strip():
            errors.append("SKU is required.")
        elif len(sku) > SKU_MAX_LENGTH:
            errors.append(f"SKU must be at most {SKU_MAX_LENGTH} characters.")

    if price is not None and not (Decimal("0") <= price <= PRICE_MAX):
        errors.append("Price must be between 0 and 9999999999999999.99.")

    if stock_quantity is not None and stock_quantity < 0:
        errors.append("Stock quantity cannot be negative.")

    if weight is not None and weight < 0:
        errors.append("Weight cannot be negative.")

    return errors


def check_references(
    *,
    products: ProductRepository,
    categories: CategoryRepository,
    category_id: Optional[int] = None,
    sku: Optional[str] = None,
    current_product_id: Optional[int] = None,
) -> Optional[CatalogError]:
    """Categoría existente y sku libre (excluyendo al propio producto)."""
    if category_id is not None and categories.get_category(category_id) is None:
        return validation_error(f"Category {category_id} does not exist.")

    if sku is not None:
        existing = products.get_product_by_sku(sku)
        if existing is not None and existing.id != current_product_id:
            return sku_conflict_error(sku)

    return None
