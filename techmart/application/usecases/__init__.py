"""
Use cases (application layer).

Agrupados por bounded context:
  - auth: registro y login (emisión de tokens)
  - catalog: lectura cacheada, listados y mutaciones de productos
"""

from .auth import (
    AuthError,
    AuthErrorCode,
    AuthResult,
    LoginUserUseCase,
    RegisterUserUseCase,
)
from .catalog import (
    CatalogError,
    CatalogErrorCode,
    CreateProductInput,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    ProductPageResult,
    ProductResult,
    StockUpdateResult,
    UpdateProductInput,
    UpdateProductUseCase,
    UpdateStockUseCase,
)

__all__ = [
    # Auth
    "AuthError",
    "AuthErrorCode",
    "AuthResult",
    "LoginUserUseCase",
    "RegisterUserUseCase",
    # Catalog
    "CatalogError",
    "CatalogErrorCode",
    "CreateProductInput",
    "CreateProductUseCase",
    "DeleteProductUseCase",
    "GetProductUseCase",
    "ListProductsUseCase",
    "ProductPageResult",
    "ProductResult",
    "StockUpdateResult",
    "UpdateProductInput",
    "UpdateProductUseCase",
    "UpdateStockUseCase",
]
