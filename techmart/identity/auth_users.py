"""
===============================================================================
TARJETA CRC — identity/auth_users.py
===============================================================================

Módulo:
    Autenticación de requests (Bearer JWT) para FastAPI

Responsabilidades:
    - Extraer el token desde `Authorization: Bearer <token>`.
    - Validar el token con el TokenIssuer del container.
    - Exponer dependencias FastAPI (require_user, require_roles).

Colaboradores:
    - container.get_token_issuer: emisor/validador configurado.
    - identity.tokens: TokenClaims / InvalidTokenError.
    - crosscutting.error_responses: unauthorized/forbidden estándar.
    - crosscutting.logger: logging estructurado (sin tokens).

Decisiones de diseño:
    - Las dependencias devuelven TokenClaims: los roles viajan en el token,
      no se consulta el store en cada request.
    - 401 sin token / token inválido; 403 con token válido pero sin rol.
===============================================================================
"""

from __future__ import annotations

from typing import Callable

from fastapi import Header, Request

from ..container import get_token_issuer
from ..crosscutting.error_responses import forbidden, unauthorized
from ..crosscutting.logger import logger
from .tokens import InvalidTokenError, TokenClaims, TokenExpiredError
from .users import UserRole


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def authenticate_request(request: Request, authorization: str | None) -> TokenClaims:
    """Resuelve los claims del request o levanta 401."""
    token = _extract_bearer_token(authorization)
    if not token:
        raise unauthorized("Falta token Bearer.")

    try:
        claims = get_token_issuer().validate(token)
    except TokenExpiredError as exc:
        raise unauthorized("Token expirado.") from exc
    except InvalidTokenError as exc:
        logger.info("Token rechazado", extra={"reason": exc.reason})
        raise unauthorized("Token inválido.") from exc

    request.state.claims = claims
    return claims


def require_user() -> Callable:
    """Dependency FastAPI: requiere usuario autenticado por JWT."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TokenClaims:
        return authenticate_request(request, authorization)

    return dependency


def require_roles(*roles: UserRole | str) -> Callable:
    """Dependency FastAPI: requiere al menos uno de los roles indicados."""
    allowed = frozenset(UserRole(role) for role in roles)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> TokenClaims:
        claims = authenticate_request(request, authorization)
        if not claims.has_any_role(allowed):
            logger.info(
                "Acceso denegado por rol",
                extra={
                    "user_id": str(claims.user_id),
                    "required_roles": sorted(r.value for r in allowed),
                },
            )
            raise forbidden("Rol insuficiente.")
        return claims

    return dependency
