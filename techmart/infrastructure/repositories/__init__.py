"""
============================================================
TARJETA CRC
============================================================
Class: techmart.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de repositorios (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorios Postgres (SQL crudo)
- Repositorios InMemory (testing / dev)
============================================================
"""

from .in_memory import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    InMemoryUserRepository,
)
from .postgres import (
    PostgresCategoryRepository,
    PostgresProductRepository,
    PostgresUserRepository,
)

__all__ = [
    # Postgres
    "PostgresCategoryRepository",
    "PostgresProductRepository",
    "PostgresUserRepository",
    # In-memory
    "InMemoryCategoryRepository",
    "InMemoryProductRepository",
    "InMemoryUserRepository",
]
