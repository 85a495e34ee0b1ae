"""
===============================================================================
TARJETA CRC — techmart/api/auth_routes.py (Registro / Login / Usuario actual)
===============================================================================

Responsabilidades:
  - Exponer endpoints de autenticación (register/login/me) con JWT.
  - Traducir AuthResult -> HTTP (400 / 401) vía error_mapping.
  - Body malformado -> 400 (misma familia que duplicado / política).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> caso de uso.
  - Fail-safe security: si la autenticación falla, se deniega por defecto.

Colaboradores:
  - application.usecases.auth: RegisterUserUseCase, LoginUserUseCase
  - identity.auth_users.require_user
  - identity.credential_store (lookup de /auth/me)
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from ..application.usecases import LoginUserUseCase, RegisterUserUseCase
from ..container import (
    get_credential_store,
    get_login_user_use_case,
    get_register_user_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES, unauthorized
from ..identity.auth_users import require_user
from ..identity.credential_store import CredentialStore
from ..identity.tokens import TokenClaims
from ..identity.users import UserView
from ..interfaces.api.http.error_mapping import raise_auth_error
from ..interfaces.api.http.schemas.auth import AuthRes, LoginReq, RegisterReq, UserRes
from .exception_handlers import validation_problem


class ClientErrorRoute(APIRoute):
    """Body inválido en /auth/* -> 400 (ValidationFailure), no 422."""

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as exc:
                raise validation_problem(exc, status_code=400) from exc

        return route_handler


router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses=OPENAPI_ERROR_RESPONSES,
    route_class=ClientErrorRoute,
)


@router.post("/register", response_model=AuthRes)
def register(
    req: RegisterReq,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    """Alta de usuario (rol customer) y emisión de token."""
    result = use_case.execute(
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
    )
    if result.error is not None:
        raise_auth_error(result.error)
    return AuthRes.build(result.token, result.user)


@router.post("/login", response_model=AuthRes)
def login(
    req: LoginReq,
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
):
    """Inicia sesión y devuelve JWT."""
    result = use_case.execute(email=req.email, password=req.password)
    if result.error is not None:
        raise_auth_error(result.error)
    return AuthRes.build(result.token, result.user)


@router.get("/me", response_model=UserRes)
def me(
    claims: TokenClaims = Depends(require_user()),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Vista pública del usuario autenticado."""
    user = credentials.find_by_id(claims.user_id)
    if user is None or not user.is_active:
        raise unauthorized("Token inválido.")
    return UserRes.from_view(UserView.from_user(user))
