"""
===============================================================================
TARJETA CRC — error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a HTTP Exceptions RFC7807.
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener el dominio libre de HTTP.

Reglas:
  - Los use cases devuelven errores tipados (code + message [+ errors]).
  - La API traduce a RFC7807 (crosscutting.error_responses).

Colaboradores:
  - application.usecases (AuthErrorCode, CatalogErrorCode)
  - crosscutting.error_responses
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from ....application.usecases import (
    AuthError,
    AuthErrorCode,
    CatalogError,
    CatalogErrorCode,
)
from ....crosscutting.error_responses import (
    bad_request,
    conflict,
    not_found,
    unauthorized,
    validation_error,
)


def raise_auth_error(error: AuthError) -> NoReturn:
    """
    Traduce AuthErrorCode -> HTTP.

      - DUPLICATE_EMAIL / REGISTRATION_REJECTED -> 400
      - INVALID_CREDENTIALS -> 401 (mismo shape para cualquier causa)
    """
    if error.code == AuthErrorCode.INVALID_CREDENTIALS:
        raise unauthorized(error.message)

    errors = [{"reason": error.code.value}]
    errors.extend({"msg": msg} for msg in error.errors)
    raise bad_request(error.message, errors)


def raise_catalog_error(error: CatalogError, *, product_id: int | None = None) -> NoReturn:
    """Traduce CatalogErrorCode -> HTTP."""
    if error.code == CatalogErrorCode.NOT_FOUND:
        raise not_found(error.resource or "Producto", str(product_id or "unknown"))
    if error.code == CatalogErrorCode.CONFLICT:
        raise conflict(error.message)

    # VALIDATION_ERROR y cualquier código nuevo -> 422
    raise validation_error(
        error.message, [{"msg": msg} for msg in error.errors] or None
    )
