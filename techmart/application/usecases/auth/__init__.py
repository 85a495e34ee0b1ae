"""Auth use cases: registro y login."""

from .auth_results import AuthError, AuthErrorCode, AuthResult
from .login_user import LoginUserUseCase
from .register_user import RegisterUserUseCase

__all__ = [
    "AuthError",
    "AuthErrorCode",
    "AuthResult",
    "LoginUserUseCase",
    "RegisterUserUseCase",
]
