# techmart/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (fallas internas)
===============================================================================

Objetivo
--------
Representar fallas de colaboradores externos (Postgres, Redis) con:
- error_code estable
- error_id para correlación con logs
- message "humana" que NUNCA llega al cliente en producción

Los errores esperables (credenciales inválidas, producto inexistente, etc.)
NO son excepciones: los casos de uso los devuelven como resultados tipados.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  TechMartError + subclases

Colaboradores:
  - api/exception_handlers.py (mapea a respuesta RFC7807 genérica)
  - infrastructure/* (envuelven excepciones de drivers)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class TechMartError(Exception):
    """Base para fallas internas del sistema."""

    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(TechMartError):
    """Errores de DB (conexión, query, timeout, pool, constraint inesperada)."""

    error_code: str = "DATABASE_ERROR"


class CacheError(TechMartError):
    """Errores del cache distribuido (Redis caído, payload corrupto)."""

    error_code: str = "CACHE_ERROR"


class ConfigurationError(TechMartError):
    """Configuración inválida detectada al construir un componente (startup)."""

    error_code: str = "CONFIGURATION_ERROR"


class DuplicateRecordError(DatabaseError):
    """Violación de unicidad detectada por el store (email, sku)."""

    error_code: str = "DUPLICATE_RECORD"
