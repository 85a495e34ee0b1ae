"""
===============================================================================
TARJETA CRC — techmart/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers segmentados por bounded context para ser incluidos por el
      router raíz (router.py).
===============================================================================
"""

from .products import router as products_router

__all__ = ["products_router"]
