"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (app.include_router).
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por bounded context (catálogo).

Patrones aplicados:
  - Feature-based modular routing.
  - Factory: build_router() para testear composición sin side-effects.

Notas:
  - Este router se incluye desde techmart/api/main.py sin prefijo de versión.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers import products_router


def build_router() -> APIRouter:
    """Construye el router raíz del catálogo."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(products_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
