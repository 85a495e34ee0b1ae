"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios (con roles) por email / por id.
  - Crear usuario + roles en UNA transacción.
  - Actualizar campos de perfil (nombres, is_active, last_login_at).
  - Otorgar roles (idempotente).
  - Mapear filas crudas -> entidad `User` y validar `UserRole`.

Collaborators:
  - psycopg_pool.ConnectionPool
  - infrastructure.db.pool.get_pool
  - identity.users.User / UserRole
  - crosscutting.exceptions.DatabaseError / DuplicateRecordError

Constraints / Notes:
  - Retorna None cuando no existe el recurso.
  - Rol persistido desconocido -> DatabaseError (drift de datos).
  - Email duplicado (uq_users_email_lower) -> DuplicateRecordError.
  - SQL parametrizado siempre.
  - Tablas: users, user_roles.
============================================================
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateRecordError
from ....crosscutting.logger import logger
from ....identity.users import User, UserRole

_USER_COLUMNS = """
    u.id, u.email, u.password_hash, u.first_name, u.last_name,
    u.is_active, u.created_at, u.last_login_at,
    COALESCE(
        array_agg(r.role ORDER BY r.role) FILTER (WHERE r.role IS NOT NULL),
        '{}'
    ) AS roles
"""

_USER_FROM = """
    FROM users u
    LEFT JOIN user_roles r ON r.user_id = u.id
"""


class PostgresUserRepository:
    """R: Implementación PostgreSQL del repositorio de usuarios."""

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
    def _row_to_user(row: tuple) -> User:
        (
            user_id,
            email,
            password_hash,
            first_name,
            last_name,
            is_active,
            created_at,
            last_login_at,
            roles,
        ) = row
        try:
            parsed_roles = UserRole.parse_many(roles or [])
        except ValueError as exc:
            raise DatabaseError(f"Invalid user role in database: {roles}") from exc

        return User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            first_name=first_name or "",
            last_name=last_name or "",
            is_active=is_active,
            created_at=created_at,
            last_login_at=last_login_at,
            roles=parsed_roles,
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
        except Exception as exc:
            logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise DatabaseError(f"{log_msg}: {exc}") from exc

    def _select_one(self, where: str, params: Iterable[object], log_msg: str, log_extra):
        row = self._fetchone(
            query=f"""
                SELECT {_USER_COLUMNS}
                {_USER_FROM}
                WHERE {where}
                GROUP BY u.id
            """,
            params=params,
            log_msg=log_msg,
            log_extra=log_extra,
        )
        return self._row_to_user(row) if row else None

    # =========================================================
    # Lectura
    # =========================================================
    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._select_one(
            "lower(u.email) = lower(%s)",
            (email,),
            "PostgresUserRepository: get_user_by_email failed",
            {"email": email},
        )

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return self._select_one(
            "u.id = %s",
            (user_id,),
            "PostgresUserRepository: get_user_by_id failed",
            {"user_id": str(user_id)},
        )

    # =========================================================
    # Escritura
    # =========================================================
    def create_user(self, user: User) -> User:
        """Inserta usuario + roles atómicamente y devuelve el registro persistido."""
        log_extra = {"user_id": str(user.id), "email": user.email}
        try:
            with self._get_pool().connection() as conn:
                with conn.transaction():
                    conn.execute(
                        """
                        INSERT INTO users (
                            id, email, password_hash, first_name, last_name,
                            is_active, created_at, last_login_at
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, COALESCE(%s, NOW()), %s)
                        """,
                        (
                            user.id,
                            user.email,
                            user.password_hash,
                            user.first_name,
                            user.last_name,
                            user.is_active,
                            user.created_at,
                            user.last_login_at,
                        ),
                    )
                    with conn.cursor() as cur:
                        cur.executemany(
                            "INSERT INTO user_roles (user_id, role) VALUES (%s, %s)",
                            [(user.id, role.value) for role in sorted(user.roles)],
                        )
        except pg_errors.UniqueViolation as exc:
            logger.info("PostgresUserRepository: duplicate email", extra=log_extra)
            raise DuplicateRecordError("Email already registered") from exc
        except Exception as exc:
            logger.exception(
                "PostgresUserRepository: create_user failed",
                extra={**log_extra, "error": str(exc)},
            )
            raise DatabaseError(f"PostgresUserRepository: create_user failed: {exc}") from exc

        created = self.get_user_by_id(user.id)
        if created is None:
            raise DatabaseError(
                "PostgresUserRepository: create_user failed (no row returned)"
            )
        return created

    def update_user(self, user: User) -> Optional[User]:
        row = self._fetchone(
            query="""
                UPDATE users
                SET first_name = %s,
                    last_name = %s,
                    is_active = %s,
                    last_login_at = %s
                WHERE id = %s
                RETURNING id
            """,
            params=(
                user.first_name,
                user.last_name,
                user.is_active,
                user.last_login_at,
                user.id,
            ),
            log_msg="PostgresUserRepository: update_user failed",
            log_extra={"user_id": str(user.id)},
        )
        return self.get_user_by_id(user.id) if row else None

    def add_role(self, user_id: UUID, role: UserRole) -> Optional[User]:
        # Sin fila devuelta: rol ya presente (ON CONFLICT) o usuario inexistente.
        self._fetchone(
            query="""
                INSERT INTO user_roles (user_id, role)
                SELECT id, %s FROM users WHERE id = %s
                ON CONFLICT (user_id, role) DO NOTHING
                RETURNING user_id
            """,
            params=(role.value, user_id),
            log_msg="PostgresUserRepository: add_role failed",
            log_extra={"user_id": str(user_id), "role": role.value},
        )
        return self.get_user_by_id(user_id)
