"""
In-Memory Repository Implementations.

For testing and local development. NOT FOR PRODUCTION.
Data is lost on process restart.
"""

from .category import InMemoryCategoryRepository
from .product import InMemoryProductRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryCategoryRepository",
    "InMemoryProductRepository",
    "InMemoryUserRepository",
]
