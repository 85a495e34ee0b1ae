"""
===============================================================================
USE CASE: Login User
===============================================================================

Name:
    Login User Use Case

Business Goal:
    Verificar credenciales, registrar el último login y emitir un token.

Security:
    - Usuario inexistente, inactivo o password incorrecto -> mismo
      INVALID_CREDENTIALS (no se distingue cuál falló).
    - La única mutación del flujo exitoso es last_login_at.
===============================================================================
"""

from __future__ import annotations

from typing import Final

from ....crosscutting.logger import logger
from ....crosscutting.metrics import record_auth_event
from ....identity.credential_store import CredentialStore
from ....identity.tokens import TokenIssuer
from ....identity.users import UserView
from .auth_results import AuthError, AuthErrorCode, AuthResult

_ACTION: Final[str] = "login"
_MSG_INVALID: Final[str] = "Invalid credentials"


class LoginUserUseCase:
    def __init__(self, credentials: CredentialStore, token_issuer: TokenIssuer):
        self._credentials = credentials
        self._tokens = token_issuer

    def execute(self, *, email: str, password: str) -> AuthResult:
        try:
            user = self._credentials.find_by_email(email)
            if user is None or not user.is_active:
                return self._invalid()

            if not self._credentials.check_password(user, password):
                return self._invalid()

            user = self._credentials.record_login(user)
            issued = self._tokens.issue(user)
        except Exception:
            record_auth_event(_ACTION, "error")
            logger.exception("Login falló inesperadamente", extra={"email": email})
            raise

        record_auth_event(_ACTION, "success")
        logger.info("Login exitoso", extra={"user_id": str(user.id)})
        return AuthResult(token=issued, user=UserView.from_user(user))

    @staticmethod
    def _invalid() -> AuthResult:
        record_auth_event(_ACTION, AuthErrorCode.INVALID_CREDENTIALS.value.lower())
        return AuthResult(
            error=AuthError(code=AuthErrorCode.INVALID_CREDENTIALS, message=_MSG_INVALID)
        )
