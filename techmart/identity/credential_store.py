"""
===============================================================================
TARJETA CRC — identity/credential_store.py
===============================================================================

Módulo:
    Credential Store (usuarios + hash de password + roles)

Responsabilidades:
    - Buscar usuarios por email normalizado.
    - Crear usuarios validando la política de password y hasheando (Argon2).
    - Verificar passwords contra el hash almacenado.
    - Persistir el último login y otorgar roles.

Colaboradores:
    - domain.repositories.UserRepository: persistencia (Postgres / in-memory).
    - identity.passwords: hash/verify + PasswordPolicy.
    - application.usecases.auth: register/login.
    - scripts/create_admin.py: bootstrap de admins/vendors (add_role).

Notas:
    - La unicidad de email la garantiza el store (índice único); acá solo se
      chequea antes para dar un error limpio.
    - Errores de política se devuelven como lista, NO como excepción.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional
from uuid import UUID, uuid4

from ..domain.repositories import UserRepository
from .passwords import PasswordPolicy, hash_password, verify_password
from .users import DEFAULT_ROLE, User, UserRole, normalize_email


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CreateUserResult:
    user: Optional[User] = None
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.user is not None and not self.errors


class CredentialStore:
    """Fachada de identidad sobre UserRepository."""

    def __init__(
        self,
        repository: UserRepository,
        policy: PasswordPolicy | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._repo = repository
        self._policy = policy or PasswordPolicy()
        self._clock = clock

    def find_by_email(self, email: str) -> Optional[User]:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self._repo.get_user_by_email(normalized)

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        return self._repo.get_user_by_id(user_id)

    def create(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        roles: Iterable[UserRole] = (DEFAULT_ROLE,),
    ) -> CreateUserResult:
        """Valida y persiste un usuario nuevo (usuario + roles en una sola mutación)."""
        normalized = normalize_email(email)
        errors: List[str] = []
        if not normalized or "@" not in normalized:
            errors.append("Email is invalid.")
        errors.extend(self._policy.validate(password))
        if errors:
            return CreateUserResult(errors=errors)

        user = User(
            id=uuid4(),
            email=normalized,
            password_hash=hash_password(password),
            first_name=(first_name or "").strip(),
            last_name=(last_name or "").strip(),
            is_active=True,
            created_at=self._clock(),
            roles=frozenset(roles),
        )
        return CreateUserResult(user=self._repo.create_user(user))

    def check_password(self, user: User, password: str) -> bool:
        if not user.password_hash:
            return False
        return verify_password(password or "", user.password_hash)

    def update(self, user: User) -> Optional[User]:
        return self._repo.update_user(user)

    def record_login(self, user: User) -> User:
        """Persiste last_login_at = ahora y devuelve el usuario actualizado."""
        updated = user.with_last_login(self._clock())
        return self._repo.update_user(updated) or updated

    def add_role(self, user_id: UUID, role: UserRole) -> Optional[User]:
        return self._repo.add_role(user_id, role)
