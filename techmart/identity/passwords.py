"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Passwords (hash Argon2 + política mínima)

Responsabilidades:
    - Hashear/verificar passwords (Argon2).
    - Evaluar la política de passwords y devolver TODAS las violaciones.

Colaboradores:
    - argon2-cffi: PasswordHasher.
    - identity/credential_store.py: usa hash/verify/policy al crear y al loguear.

Notas:
    - La política se evalúa completa (no corta en la primera falla) para que
      el cliente reciba la lista entera de errores.
    - Nunca loguear el password ni el hash.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hashea un password usando Argon2."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verifica password vs hash almacenado (hash corrupto -> False)."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


@dataclass(frozen=True, slots=True)
class PasswordPolicy:
    """Reglas mínimas: largo, dígito, minúscula y mayúscula."""

    min_length: int = 8
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True

    def validate(self, password: str | None) -> List[str]:
        """Retorna la lista de violaciones (vacía si el password es válido)."""
        value = password or ""
        errors: List[str] = []

        if len(value) < self.min_length:
            errors.append(
                f"Password must be at least {self.min_length} characters."
            )
        if self.require_digit and not any(ch.isdigit() for ch in value):
            errors.append("Password must contain at least one digit.")
        if self.require_lowercase and not any(ch.islower() for ch in value):
            errors.append("Password must contain at least one lowercase letter.")
        if self.require_uppercase and not any(ch.isupper() for ch in value):
            errors.append("Password must contain at least one uppercase letter.")

        return errors
