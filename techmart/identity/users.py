"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario (identidad)

Responsabilidades:
    - Definir el enum de roles (admin / vendor / customer).
    - Definir el dataclass User usado por registro, login y emisión de tokens.
    - Definir la vista pública (UserView) que sí puede salir por la API.

Colaboradores:
    - identity/credential_store.py: crea/actualiza/verifica usuarios.
    - identity/tokens.py: serializa id/email/roles en el JWT.
    - infrastructure/repositories/*/user.py: mapea filas -> User.

Notas:
    - Este módulo NO contiene lógica de negocio: solo "shapes" de datos.
    - password_hash nunca forma parte de UserView.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Iterable
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados."""

    ADMIN = "Admin"
    VENDOR = "Vendor"
    CUSTOMER = "Customer"

    @classmethod
    def parse_many(cls, values: Iterable[str]) -> FrozenSet["UserRole"]:
        """Convierte strings a roles; valores desconocidos -> ValueError."""
        return frozenset(cls(str(v)) for v in values)


DEFAULT_ROLE: UserRole = UserRole.CUSTOMER

# Roles habilitados para mutar el catálogo.
CATALOG_MANAGER_ROLES: FrozenSet[UserRole] = frozenset(
    {UserRole.ADMIN, UserRole.VENDOR}
)


@dataclass(frozen=True, slots=True)
class User:
    """Registro de identidad."""

    id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    is_active: bool = True
    created_at: datetime | None = None
    last_login_at: datetime | None = None
    roles: FrozenSet[UserRole] = field(default_factory=frozenset)

    def has_any_role(self, roles: Iterable[UserRole]) -> bool:
        return bool(self.roles & frozenset(roles))

    def with_last_login(self, at: datetime) -> "User":
        return replace(self, last_login_at=at)

    def with_role(self, role: UserRole) -> "User":
        return replace(self, roles=self.roles | {role})


@dataclass(frozen=True, slots=True)
class UserView:
    """Proyección pública del usuario (sin hash ni flags internos)."""

    id: UUID
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )


def normalize_email(email: str | None) -> str:
    """Emails se comparan/persisten trim + lower (unicidad case-insensitive)."""
    return (email or "").strip().lower()
