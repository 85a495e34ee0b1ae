"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev).
  - Replicar la unicidad case-insensitive de email del store real.
  - Crear usuario + roles como una sola operación.

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - User es inmutable (frozen): las "actualizaciones" reemplazan la entrada.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from threading import Lock
from typing import Dict, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateRecordError
from ....identity.users import User, UserRole


class InMemoryUserRepository:
    """Repositorio in-memory, thread-safe, para usuarios."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def _find_by_email(self, email: str) -> Optional[User]:
        key = (email or "").lower()
        return next((u for u in self._users.values() if u.email.lower() == key), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._find_by_email(email)

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def create_user(self, user: User) -> User:
        with self._lock:
            if self._find_by_email(user.email) is not None:
                raise DuplicateRecordError("Email already registered")
            self._users[user.id] = user
            return user

    def update_user(self, user: User) -> Optional[User]:
        with self._lock:
            current = self._users.get(user.id)
            if current is None:
                return None
            updated = replace(
                current,
                first_name=user.first_name,
                last_name=user.last_name,
                is_active=user.is_active,
                last_login_at=user.last_login_at,
            )
            self._users[user.id] = updated
            return updated

    def add_role(self, user_id: UUID, role: UserRole) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = current.with_role(role)
            self._users[user_id] = updated
            return updated
