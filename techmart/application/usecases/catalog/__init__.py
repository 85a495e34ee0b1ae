"""Catalog use cases: lectura cacheada, listados y mutaciones de productos."""

from .catalog_results import (
    CatalogError,
    CatalogErrorCode,
    DeleteProductResult,
    ProductPageResult,
    ProductResult,
    StockUpdateResult,
)
from .create_product import CreateProductInput, CreateProductUseCase
from .delete_product import DeleteProductUseCase
from .get_product import GetProductUseCase
from .list_products import ListProductsUseCase
from .update_product import UpdateProductInput, UpdateProductUseCase
from .update_stock import UpdateStockUseCase

__all__ = [
    "CatalogError",
    "CatalogErrorCode",
    "CreateProductInput",
    "CreateProductUseCase",
    "DeleteProductResult",
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
