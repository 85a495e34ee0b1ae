"""
===============================================================================
TARJETA CRC — schemas/products.py
===============================================================================

Módulo:
    Schemas HTTP para Productos (ficha, listados, alta, edición, stock)

Responsabilidades:
    - DTOs de request/response para endpoints de productos.
    - Validar límites de borde (largos de columnas, precio no negativo).
    - Mapear entidades de dominio -> responses.

Notas:
    - price/weight se serializan como número JSON.
    - Nombres JSON en camelCase (ApiModel).
    - La cantidad de stock NO se valida acá: el caso de uso rechaza negativos.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import Field, PlainSerializer, field_validator

from .....domain.entities import Category, Product
from .....domain.value_objects import ProductPage
from .base import ApiModel

JsonDecimal = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class CategoryRes(ApiModel):
    id: int
    name: str
    parent_category_id: Optional[int] = None

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryRes":
        return cls(
            id=category.id,
            name=category.name,
            parent_category_id=category.parent_category_id,
        )


class ProductRes(ApiModel):
    id: int
    name: str
    description: str
    price: JsonDecimal
    sku: str
    category_id: int
    stock_quantity: int
    is_active: bool
    image_urls: List[str]
    weight: Optional[JsonDecimal] = None
    brand: Optional[str] = None
    attributes: dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategoryRes] = None

    @classmethod
    def from_entity(cls, product: Product) -> "ProductRes":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            sku=product.sku,
            category_id=product.category_id,
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            image_urls=list(product.image_urls),
            weight=product.weight,
            brand=product.brand,
            attributes=dict(product.attributes),
            created_at=product.created_at,
            updated_at=product.updated_at,
            category=(
                CategoryRes.from_entity(product.category) if product.category else None
            ),
        )


class ProductPageRes(ApiModel):
    items: List[ProductRes]
    total_count: int
    page_size: int
    current_page: int

    @classmethod
    def from_page(cls, page: ProductPage) -> "ProductPageRes":
        return cls(
            items=[ProductRes.from_entity(p) for p in page.items],
            total_count=page.total_count,
            page_size=page.page_size,
            current_page=page.current_page,
        )


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------
class CreateProductReq(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=4000)
    price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    sku: str = Field(..., min_length=1, max_length=50)
    category_id: int = Field(..., gt=0)
    stock_quantity: int = Field(default=0, ge=0)
    image_urls: List[str] = Field(default_factory=list)
    weight: Optional[Decimal] = Field(default=None, ge=0, max_digits=18, decimal_places=3)
    brand: Optional[str] = Field(default=None, max_length=100)
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "sku")
    @classmethod
    def strip_required(cls, v: str) -> str:
        return v.strip()


class UpdateProductReq(ApiModel):
    """Edición parcial: solo se aplican los campos enviados."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=4000)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=18, decimal_places=2)
    sku: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category_id: Optional[int] = Field(default=None, gt=0)
    image_urls: Optional[List[str]] = None
    weight: Optional[Decimal] = Field(default=None, ge=0, max_digits=18, decimal_places=3)
    brand: Optional[str] = Field(default=None, max_length=100)
    attributes: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None


class UpdateStockReq(ApiModel):
    quantity: int
