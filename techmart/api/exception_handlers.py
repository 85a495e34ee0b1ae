"""
===============================================================================
TARJETA CRC — techmart/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de la aplicación a respuestas HTTP RFC7807.
  - Centralizar logging de errores con request_id + error_id.
  - Evitar filtrar detalles internos: un 500 nunca lleva el mensaje real
    (store/cache caídos incluidos).

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> INTERNAL_ERROR (con logging).
  - Observabilidad: correlación por request_id y error_id.

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting.exceptions: TechMartError y derivadas (Database/Cache)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import TechMartError
from ..crosscutting.logger import logger

_GENERIC_DETAIL = "Error interno."
_VALIDATION_DETAIL = "Request inválido."


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def validation_problem(
    exc: RequestValidationError, *, status_code: int = 422
) -> AppHTTPException:
    """RFC7807 con el detalle por campo que genera pydantic."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    code = ErrorCode.BAD_REQUEST if status_code == 400 else ErrorCode.VALIDATION_ERROR
    return AppHTTPException(
        status_code=status_code,
        code=code,
        detail=_VALIDATION_DETAIL,
        errors=errors,
    )


async def techmart_error_handler(request: Request, exc: TechMartError) -> JSONResponse:
    """
    Errores tipados de infraestructura (store / cache caídos, config).

    - Log con error_id + request_id.
    - Respuesta 500 genérica: el mensaje real nunca sale.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        exc_info=exc,
        extra={
            "code": exc.error_code,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=_GENERIC_DETAIL,
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return await app_exception_handler(request, validation_problem(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler de último recurso para excepciones no tipadas.

    - Log completo (stacktrace).
    - Respuesta genérica en todos los entornos.
    """
    request_id = _request_id_from(request)

    logger.error(
        "Excepción no controlada",
        exc_info=exc,
        extra={"request_id": request_id, "error_type": type(exc).__name__},
    )

    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=_GENERIC_DETAIL,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException debe registrarse para respetar RFC7807.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(TechMartError, techmart_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers", "validation_problem"]
