"""
===============================================================================
AUTH USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Auth Use Case Results

Business Goal:
    Tipos consistentes para registro y login: token emitido + vista pública
    del usuario, o un error tipado.

Why (Context / Intención):
    - Los errores esperables (email duplicado, política, credenciales) NO son
      excepciones: se devuelven y el router los mapea a HTTP.
    - Login usa un único INVALID_CREDENTIALS para usuario inexistente,
      inactivo o password incorrecto (no filtra qué emails existen).

Collaborators:
    - identity.tokens.IssuedToken
    - identity.users.UserView
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from ....identity.tokens import IssuedToken
from ....identity.users import UserView


class AuthErrorCode(str, Enum):
    """
    Códigos:
      - DUPLICATE_EMAIL: ya existe un usuario con ese email (400).
      - REGISTRATION_REJECTED: violaciones de política; ver `errors` (400).
      - INVALID_CREDENTIALS: login fallido, forma única (401).
    """

    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    REGISTRATION_REJECTED = "REGISTRATION_REJECTED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


@dataclass(frozen=True)
class AuthError:
    code: AuthErrorCode
    message: str
    errors: Tuple[str, ...] = ()


@dataclass
class AuthResult:
    """
    Contrato:
      - Éxito: token != None, user != None, error == None
      - Falla: token == None, user == None, error != None
    """

    token: IssuedToken | None = None
    user: UserView | None = None
    error: AuthError | None = None
