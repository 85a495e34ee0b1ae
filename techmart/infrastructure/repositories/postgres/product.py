"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/product.py
============================================================
Class: PostgresProductRepository

Responsibilities:
- Implementar acceso a datos de Productos en PostgreSQL (SQL crudo).
- Leer productos con su Categoría (LEFT JOIN, read-model eager).
- Componer queries de catálogo: filtros opcionales (AND), orden whitelisted,
  COUNT sobre el conjunto filtrado y ventana LIMIT/OFFSET.
- Alta de productos; edición parcial (solo columnas informadas) y
  update_stock acotado a stock_quantity + updated_at.

Collaborators:
- domain.entities.Product, Category
- domain.value_objects.ProductSearchCriteria, ProductSortField
- crosscutting.exceptions.DatabaseError / DuplicateRecordError
- psycopg (Jsonb para attributes) / psycopg_pool.ConnectionPool
- Tablas: products, categories

Constraints / Notes:
- Queries siempre parametrizadas; ORDER BY sale de un mapa fijo (no input).
- Búsqueda por substring con LIKE (case-sensitive, como el store) y
  comodines del término escapados.
- Orden determinístico: el campo pedido + id ASC como desempate.
- sku duplicado (uq_products_sku) -> DuplicateRecordError.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from psycopg import errors as pg_errors
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateRecordError
from ....crosscutting.logger import logger
from ....domain.entities import Category, Product
from ....domain.value_objects import ProductSearchCriteria, ProductSortField

_SORT_COLUMNS = {
    ProductSortField.NAME: "p.name",
    ProductSortField.PRICE: "p.price",
    ProductSortField.CREATED: "p.created_at",
}

_UPDATABLE_COLUMNS = (
    "name",
    "description",
    "price",
    "sku",
    "category_id",
    "stock_quantity",
    "is_active",
    "image_urls",
    "weight",
    "brand",
    "attributes",
)


def _adapt(column: str, value: Any) -> object:
    if column == "attributes":
        return Jsonb(dict(value))
    if column == "image_urls":
        return list(value)
    return value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresProductRepository:
    """R: Implementación PostgreSQL del repositorio de Productos."""

    _SELECT_COLUMNS = """
        p.id, p.name, p.description, p.price, p.sku, p.category_id,
        p.stock_quantity, p.is_active, p.image_urls, p.weight, p.brand,
        p.attributes, p.created_at, p.updated_at,
        c.id, c.name, c.parent_category_id
    """

    _FROM = """
        FROM products p
        LEFT JOIN categories c ON c.id = p.category_id
    """

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # R: Pool inyectable para tests; en producción se obtiene por factory global.
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Mapping
    # =========================================================
    @staticmethod
    def _row_to_product(row: tuple) -> Product:
        (
            product_id,
            name,
            description,
            price,
            sku,
            category_id,
            stock_quantity,
            is_active,
            image_urls,
            weight,
            brand,
            attributes,
            created_at,
            updated_at,
            cat_id,
            cat_name,
            cat_parent_id,
        ) = row

        category = (
            Category(id=cat_id, name=cat_name, parent_category_id=cat_parent_id)
            if cat_id is not None
            else None
        )
        return Product(
            id=product_id,
            name=name,
            description=description or "",
            price=price,
            sku=sku,
            category_id=category_id,
            stock_quantity=stock_quantity,
            is_active=is_active,
            image_urls=list(image_urls or []),
            weight=weight,
            brand=brand,
            attributes=dict(attributes or {}),
            created_at=created_at,
            updated_at=updated_at,
            category=category,
        )

    def _fetchone(
        self,
        *,
        query: str,
        params: Iterable[object],
        log_msg: str,
        log_extra: dict[str, object],
    ) -> tuple | None:
        try:
            with self._get_pool().connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except pg_errors.UniqueViolation as exc:
            logger.info(f"{log_msg}: unique violation", extra=log_extra)
            raise DuplicateRecordError("SKU already exists") from exc
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    # =========================================================
    # Lectura
    # =========================================================
    def get_product(
        self, product_id: int, *, active_only: bool = True
    ) -> Optional[Product]:
        where = "p.id = %s"
        if active_only:
            where += " AND p.is_active = TRUE"
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} {self._FROM} WHERE {where}",
            params=(product_id,),
            log_msg="PostgresProductRepository: get_product failed",
            log_extra={"product_id": product_id, "active_only": active_only},
        )
        return self._row_to_product(row) if row else None

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        row = self._fetchone(
            query=f"SELECT {self._SELECT_COLUMNS} {self._FROM} WHERE p.sku = %s",
            params=(sku,),
            log_msg="PostgresProductRepository: get_product_by_sku failed",
            log_extra={"sku": sku},
        )
        return self._row_to_product(row) if row else None

    @staticmethod
    def _build_filters(criteria: ProductSearchCriteria) -> Tuple[str, List[object]]:
        clauses = ["p.is_active = TRUE"]
        params: List[object] = []

        term = criteria.normalized_search_term
        if term:
            pattern = f"%{_escape_like(term)}%"
            clauses.append(
                "(p.name LIKE %s ESCAPE '\\' OR p.description LIKE %s ESCAPE '\\')"
            )
            params.extend([pattern, pattern])

        if criteria.category_id is not None:
            clauses.append("p.category_id = %s")
            params.append(criteria.category_id)

        if criteria.min_price is not None:
            clauses.append("p.price >= %s")
            params.append(criteria.min_price)

        if criteria.max_price is not None:
            clauses.append("p.price <= %s")
            params.append(criteria.max_price)

        return " AND ".join(clauses), params

    def search_products(
        self, criteria: ProductSearchCriteria
    ) -> Tuple[List[Product], int]:
        where, params = self._build_filters(criteria)
        sort_column = _SORT_COLUMNS[criteria.sort_field]
        direction = "DESC" if criteria.effective_descending else "ASC"

        count_query = f"SELECT COUNT(*) FROM products p WHERE {where}"
        page_query = f"""
            SELECT {self._SELECT_COLUMNS}
            {self._FROM}
            WHERE {where}
            ORDER BY {sort_column} {direction}, p.id ASC
            LIMIT %s OFFSET %s
        """

        try:
            with self._get_pool().connection() as conn:
                total = conn.execute(count_query, tuple(params)).fetchone()[0]
                rows = conn.execute(
                    page_query, (*params, criteria.take, criteria.skip)
                ).fetchall()
        except Exception as exc:
            logger.exception(
                "PostgresProductRepository: search_products failed",
                extra={"error": str(exc)},
            )
            raise DatabaseError(f"Product search failed: {exc}") from exc

        return [self._row_to_product(r) for r in rows], int(total)

    # =========================================================
    # Escritura
    # =========================================================
    def create_product(self, product: Product) -> Product:
        row = self._fetchone(
            query="""
                INSERT INTO products (
                    name, description, price, sku, category_id, stock_quantity,
                    is_active, image_urls, weight, brand, attributes,
                    created_at, updated_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                        COALESCE(%s, NOW()), COALESCE(%s, NOW()))
                RETURNING id
            """,
            params=(
                product.name,
                product.description,
                product.price,
                product.sku,
                product.category_id,
                product.stock_quantity,
                product.is_active,
                list(product.image_urls),
                product.weight,
                product.brand,
                Jsonb(product.attributes),
                product.created_at,
                product.updated_at,
            ),
            log_msg="PostgresProductRepository: create_product failed",
            log_extra={"sku": product.sku},
        )
        if not row:
            raise DatabaseError(
                "PostgresProductRepository: create_product failed (no row returned)"
            )

        created = self.get_product(row[0], active_only=False)
        if created is None:
            raise DatabaseError(
                "PostgresProductRepository: created product not readable"
            )
        return created

    def update_product(
        self,
        product_id: int,
        changes: Mapping[str, Any],
        *,
        updated_at: datetime,
    ) -> Optional[Product]:
        unknown = set(changes) - set(_UPDATABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown product columns: {sorted(unknown)}")

        # Orden fijo del whitelist: el SQL no depende del input.
        columns = [c for c in _UPDATABLE_COLUMNS if c in changes]
        assignments = [f"{c} = %s" for c in columns] + ["updated_at = %s"]
        params: List[object] = [_adapt(c, changes[c]) for c in columns]
        params.extend([updated_at, product_id])

        row = self._fetchone(
            query=f"""
                UPDATE products
                SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING id
            """,
            params=params,
            log_msg="PostgresProductRepository: update_product failed",
            log_extra={"product_id": product_id, "columns": columns},
        )
        if not row:
            return None
        return self.get_product(product_id, active_only=False)

    def update_stock(
        self, product_id: int, quantity: int, *, updated_at: datetime
    ) -> bool:
        row = self._fetchone(
            query="""
                UPDATE products
                SET stock_quantity = %s, updated_at = %s
                WHERE id = %s
                RETURNING id
            """,
            params=(quantity, updated_at, product_id),
            log_msg="PostgresProductRepository: update_stock failed",
            log_extra={"product_id": product_id},
        )
        return row is not None

    def ping(self) -> bool:
        """Chequeo trivial de conectividad."""
        try:
            with self._get_pool().connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as exc:
            logger.exception(
                "PostgresProductRepository: ping failed", extra={"error": str(exc)}
            )
            raise DatabaseError(f"Ping failed: {exc}") from exc
