"""
===============================================================================
TARJETA CRC — techmart/interfaces/api/http/routers/products.py
===============================================================================

Name:
    Products Router

Responsibilities:
    - Endpoints HTTP del catálogo (listado, ficha, alta, edición, stock, baja).
    - Enforce de roles (admin / vendor) en mutaciones.
    - Mapeo de CatalogError -> RFC7807.

Collaborators:
    - application.usecases (catálogo)
    - identity.auth_users.require_roles
    - schemas.products
    - container factories
===============================================================================
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from .....application.usecases import (
    CreateProductInput,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    UpdateProductInput,
    UpdateProductUseCase,
    UpdateStockUseCase,
)
from .....container import (
    get_create_product_use_case,
    get_delete_product_use_case,
    get_get_product_use_case,
    get_list_products_use_case,
    get_update_product_use_case,
    get_update_stock_use_case,
)
from .....crosscutting.config import get_settings
from .....domain.value_objects import ProductSearchCriteria
from .....identity.auth_users import require_roles
from .....identity.tokens import TokenClaims
from .....identity.users import CATALOG_MANAGER_ROLES
from ..error_mapping import raise_catalog_error
from ..schemas.products import (
    CreateProductReq,
    ProductPageRes,
    ProductRes,
    UpdateProductReq,
    UpdateStockReq,
)

router = APIRouter(prefix="/products", tags=["products"])
_settings = get_settings()

_require_catalog_manager = require_roles(*CATALOG_MANAGER_ROLES)


# =============================================================================
# Lectura (pública)
# =============================================================================


@router.get("", response_model=ProductPageRes)
def list_products(
    search_term: Optional[str] = Query(default=None, alias="searchTerm", max_length=200),
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    min_price: Optional[Decimal] = Query(default=None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(default=None, alias="maxPrice"),
    sort_by: Optional[str] = Query(default=None, alias="sortBy", max_length=50),
    sort_descending: bool = Query(default=False, alias="sortDescending"),
    skip: int = Query(default=0, ge=0),
    take: int = Query(
        default=_settings.catalog_default_take, ge=1, le=_settings.catalog_max_take
    ),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
):
    criteria = ProductSearchCriteria(
        search_term=search_term,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_descending=sort_descending,
        skip=skip,
        take=take,
    )
    result = use_case.execute(criteria)
    if result.error is not None:
        raise_catalog_error(result.error)
    return ProductPageRes.from_page(result.page)


@router.get("/{product_id}", response_model=ProductRes, name="get_product")
def get_product(
    product_id: int,
    use_case: GetProductUseCase = Depends(get_get_product_use_case),
):
    result = use_case.execute(product_id)
    if result.error is not None:
        raise_catalog_error(result.error, product_id=product_id)
    return ProductRes.from_entity(result.product)


# =============================================================================
# Mutaciones (admin / vendor)
# =============================================================================


@router.post("", response_model=ProductRes, status_code=status.HTTP_201_CREATED)
def create_product(
    req: CreateProductReq,
    request: Request,
    response: Response,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),
    _claims: TokenClaims = Depends(_require_catalog_manager),
):
    result = use_case.execute(
        CreateProductInput(
            name=req.name,
            description=req.description,
            price=req.price,
            sku=req.sku,
            category_id=req.category_id,
            stock_quantity=req.stock_quantity,
            image_urls=req.image_urls,
            weight=req.weight,
            brand=req.brand,
            attributes=req.attributes,
        )
    )
    if result.error is not None:
        raise_catalog_error(result.error)

    product = result.product
    response.headers["Location"] = str(
        request.url_for("get_product", product_id=product.id)
    )
    return ProductRes.from_entity(product)


@router.put("/{product_id}", response_model=ProductRes)
def update_product(
    product_id: int,
    req: UpdateProductReq,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
    _claims: TokenClaims = Depends(_require_catalog_manager),
):
    result = use_case.execute(
        product_id, UpdateProductInput(**req.model_dump(exclude_unset=True))
    )
    if result.error is not None:
        raise_catalog_error(result.error, product_id=product_id)
    return ProductRes.from_entity(result.product)


@router.put("/{product_id}/stock", status_code=status.HTTP_204_NO_CONTENT)
def update_stock(
    product_id: int,
    req: UpdateStockReq,
    use_case: UpdateStockUseCase = Depends(get_update_stock_use_case),
    _claims: TokenClaims = Depends(_require_catalog_manager),
):
    result = use_case.execute(product_id, req.quantity)
    if not result.updated:
        raise_catalog_error(result.error, product_id=product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    use_case: DeleteProductUseCase = Depends(get_delete_product_use_case),
    _claims: TokenClaims = Depends(_require_catalog_manager),
):
    result = use_case.execute(product_id)
    if not result.deleted:
        raise_catalog_error(result.error, product_id=product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
