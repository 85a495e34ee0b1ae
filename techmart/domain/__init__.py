"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Colaboradores:
    - domain.entities: Product, Category
    - domain.value_objects: criterios de búsqueda y página de resultados
    - domain.repositories: puertos de persistencia
    - domain.cache: puerto de cache de productos

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .cache import ProductCachePort, product_cache_key
from .entities import Category, Product
from .repositories import CategoryRepository, ProductRepository, UserRepository
from .value_objects import ProductPage, ProductSearchCriteria, ProductSortField

__all__ = [
    "Category",
    "CategoryRepository",
    "Product",
    "ProductCachePort",
    "ProductPage",
    "ProductRepository",
    "ProductSearchCriteria",
    "ProductSortField",
    "UserRepository",
    "product_cache_key",
]
