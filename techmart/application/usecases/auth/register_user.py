"""
===============================================================================
USE CASE: Register User
===============================================================================

Name:
    Register User Use Case

Business Goal:
    Dar de alta una identidad nueva con rol por defecto (customer) y devolver
    un token de sesión listo para usar.

Flow:
    1) Email ya registrado -> DUPLICATE_EMAIL.
    2) Crear usuario (hash Argon2 + rol customer) en una sola mutación.
    3) Violaciones de política -> REGISTRATION_REJECTED con la lista de errores.
    4) Éxito -> token + vista pública.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    RegisterUserUseCase

Collaborators:
    - identity.credential_store.CredentialStore
    - identity.tokens.TokenIssuer
    - crosscutting.metrics.record_auth_event
===============================================================================
"""

from __future__ import annotations

from typing import Final

from ....crosscutting.exceptions import DuplicateRecordError
from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_auth_event
from ....identity.credential_store import CredentialStore
from ....identity.tokens import TokenIssuer
from ....identity.users import DEFAULT_ROLE, UserView
from .auth_results import AuthError, AuthErrorCode, AuthResult

_ACTION: Final[str] = "register"
_MSG_DUPLICATE: Final[str] = "User already exists with this email"
_MSG_REJECTED: Final[str] = "Registration failed"


class RegisterUserUseCase:
    def __init__(self, credentials: CredentialStore, token_issuer: TokenIssuer):
        self._credentials = credentials
        self._tokens = token_issuer

    def execute(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> AuthResult:
        try:
            if self._credentials.find_by_email(email) is not None:
                return self._duplicate(email)

            try:
                created = self._credentials.create(
                    email=email,
                    password=password,
                    first_name=first_name,
                    last_name=last_name,
                    roles=(DEFAULT_ROLE,),
                )
            except DuplicateRecordError:
                # Carrera entre lookup e insert: el índice único decide.
                return self._duplicate(email)

            if not created.succeeded:
                record_auth_event(_ACTION, AuthErrorCode.REGISTRATION_REJECTED.value.lower())
                return AuthResult(
                    error=AuthError(
                        code=AuthErrorCode.REGISTRATION_REJECTED,
                        message=_MSG_REJECTED,
                        errors=tuple(created.errors),
                    )
                )

            user = created.user
            issued = self._tokens.issue(user)
        except Exception:
            record_auth_event(_ACTION, "error")
            logger.exception("Registro falló inesperadamente", extra={"email": email})
            raise

        record_auth_event(_ACTION, "success")
        logger.info("Usuario registrado", extra={"user_id": str(user.id)})
        return AuthResult(token=issued, user=UserView.from_user(user))

    @staticmethod
    def _duplicate(email: str) -> AuthResult:
        record_auth_event(_ACTION, AuthErrorCode.DUPLICATE_EMAIL.value.lower())
        logger.info("Registro rechazado: email duplicado", extra={"email": email})
        return AuthResult(
            error=AuthError(code=AuthErrorCode.DUPLICATE_EMAIL, message=_MSG_DUPLICATE)
        )
