"""
===============================================================================
TARJETA CRC — domain/cache.py
===============================================================================

Módulo:
    Puerto de Cache de Productos (Dominio)

Responsabilidades:
    - Definir el contrato (Protocol) para cachear snapshots de Product.
    - Definir la clave canónica "product_{id}".
    - Habilitar Inversión de Dependencias:
        * application/usecases/catalog depende de esta interfaz
        * infrastructure/cache implementa backends (memoria / Redis)

Restricciones / Reglas:
    - Este módulo ES dominio: no importa Redis ni serializadores.
    - El cache nunca es autoritativo: el store es la fuente de verdad.
    - Fallas del backend se propagan (CacheError); no se degradan en silencio.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol

from .entities import Product

PRODUCT_CACHE_KEY_PREFIX = "product_"


def product_cache_key(product_id: int) -> str:
    """Clave de cache para un producto individual."""
    return f"{PRODUCT_CACHE_KEY_PREFIX}{product_id}"


class ProductCachePort(Protocol):
    """
    Interfaz de cache para productos individuales.

    Semántica:
      - get(key) retorna None si no existe / expiró
      - set(key, product) guarda o sobreescribe con el TTL del backend
      - delete(key) es idempotente (borrar una clave inexistente no falla)
    """

    def get(self, key: str) -> Product | None:
        ...

    def set(self, key: str, product: Product) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def ping(self) -> bool:
        ...
