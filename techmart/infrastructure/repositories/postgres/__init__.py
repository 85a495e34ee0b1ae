"""
PostgreSQL Repository Implementations.

SQL crudo parametrizado sobre psycopg 3 + psycopg_pool.
"""

from .category import PostgresCategoryRepository
from .product import PostgresProductRepository
from .user import PostgresUserRepository

__all__ = [
    "PostgresCategoryRepository",
    "PostgresProductRepository",
    "PostgresUserRepository",
]
