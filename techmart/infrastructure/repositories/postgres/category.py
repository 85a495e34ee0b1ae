"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/category.py
============================================================
Class: PostgresCategoryRepository

Responsibilities:
- Lectura de categorías (validación de referencias desde el catálogo).

Collaborators:
- domain.entities.Category
- crosscutting.exceptions.DatabaseError
- Tabla: categories
============================================================
"""

from __future__ import annotations

from typing import Optional

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import Category


class PostgresCategoryRepository:
    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    def get_category(self, category_id: int) -> Optional[Category]:
        try:
            with self._get_pool().connection() as conn:
                row = conn.execute(
                    """
                    SELECT id, name, parent_category_id
                    FROM categories
                    WHERE id = %s
                    """,
                    (category_id,),
                ).fetchone()
        except Exception as exc:
            logger.exception(
                "PostgresCategoryRepository: get_category failed",
                extra={"category_id": category_id, "error": str(exc)},
            )
            raise DatabaseError(f"get_category failed: {exc}") from exc

        if not row:
            return None
        return Category(id=row[0], name=row[1], parent_category_id=row[2])
