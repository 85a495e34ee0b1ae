"""
============================================================
TARJETA CRC — infrastructure/cache.py
============================================================
Module: Product Cache (Snapshot codec + Backends)

Responsibilities:
  - Cachear snapshots de Product bajo la clave "product_{id}".
  - Proveer expiración por TTL (30 min por defecto).
  - Seleccionar backend según configuración:
      - Redis si REDIS_URL está definido
      - In-memory (LRU + TTL) caso contrario
  - Serializar Product a JSON estable (Decimal como string, fechas ISO-8601,
    categoría anidada).

Collaborators:
  - domain.cache.ProductCachePort: contrato que implementan los backends.
  - application.usecases.catalog: get_product (lee/escribe), mutaciones (borran).
  - redis-py: SETEX / GET / DELETE.
  - threading.Lock para thread-safety en backend in-memory.

Policy / Design Notes:
  - El cache NUNCA es autoritativo.
  - Fallas de Redis o payloads corruptos -> CacheError (se propaga).
  - Ambos backends guardan el snapshot serializado: lo devuelto es siempre una
    copia independiente del objeto cacheado.
============================================================
"""

from __future__ import annotations

import json
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from threading import Lock
from typing import Any, Callable, Dict, Optional

import redis

from ..crosscutting.config import Settings
from ..crosscutting.exceptions import CacheError
from ..crosscutting.logger import logger
from ..domain.cache import ProductCachePort
from ..domain.entities import Category, Product


# ============================================================
# Codec (Product <-> JSON)
# ============================================================
def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _dec(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _parse_dec(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def encode_product(product: Product) -> str:
    """Serializa un Product a JSON (snapshot completo, incluida la categoría)."""
    category = product.category
    payload: Dict[str, Any] = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": _dec(product.price),
        "sku": product.sku,
        "category_id": product.category_id,
        "stock_quantity": product.stock_quantity,
        "is_active": product.is_active,
        "image_urls": list(product.image_urls),
        "weight": _dec(product.weight),
        "brand": product.brand,
        "attributes": product.attributes,
        "created_at": _dt(product.created_at),
        "updated_at": _dt(product.updated_at),
        "category": (
            {
                "id": category.id,
                "name": category.name,
                "parent_category_id": category.parent_category_id,
            }
            if category is not None
            else None
        ),
    }
    return json.dumps(payload, separators=(",", ":"))


def decode_product(raw: str | bytes) -> Product:
    """Reconstruye un Product desde JSON. Payload inválido -> CacheError."""
    try:
        data = json.loads(raw)
        category_data = data.get("category")
        return Product(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            price=Decimal(data["price"]),
            sku=data["sku"],
            category_id=data["category_id"],
            stock_quantity=int(data.get("stock_quantity", 0)),
            is_active=bool(data.get("is_active", True)),
            image_urls=list(data.get("image_urls") or []),
            weight=_parse_dec(data.get("weight")),
            brand=data.get("brand"),
            attributes=dict(data.get("attributes") or {}),
            created_at=_parse_dt(data.get("created_at")),
            updated_at=_parse_dt(data.get("updated_at")),
            category=(
                Category(
                    id=category_data["id"],
                    name=category_data["name"],
                    parent_category_id=category_data.get("parent_category_id"),
                )
                if category_data
                else None
            ),
        )
    except (ValueError, KeyError, TypeError, InvalidOperation) as exc:
        raise CacheError("Corrupted product cache entry", original_error=exc) from exc


# ============================================================
# In-memory backend (LRU + TTL)
# ============================================================
@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Entrada con snapshot serializado y vencimiento absoluto."""

    payload: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryProductCache:
    """
    Caché en memoria con:
      - TTL por entrada
      - Eviction LRU real usando OrderedDict
      - Thread-safety con Lock

    Este backend NO comparte estado entre procesos (cada worker tiene su caché).
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 1800,
        max_size: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be > 0")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        self._ttl_seconds = float(ttl_seconds)
        self._max_size = int(max_size)
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Product | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                self._entries.pop(key, None)
                return None
            self._entries.move_to_end(key, last=True)
            payload = entry.payload
        return decode_product(payload)

    def set(self, key: str, product: Product) -> None:
        payload = encode_product(product)
        expires_at = self._clock() + self._ttl_seconds
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key, last=True)
            elif len(self._entries) >= self._max_size:
                self._entries.popitem(last=False)  # LRU
            self._entries[key] = CacheEntry(payload=payload, expires_at=expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ============================================================
# Redis backend (TTL nativo + namespace)
# ============================================================
class RedisProductCache:
    """
    Caché Redis de productos.

      - Compartido entre workers/instancias
      - TTL nativo por clave (SETEX)
    """

    CACHE_PREFIX = "techmart:"

    def __init__(
        self,
        *,
        redis_url: str | None = None,
        ttl_seconds: int = 1800,
        client: Any | None = None,
    ) -> None:
        if client is None and not redis_url:
            raise ValueError("redis_url is required")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        self._client = client or redis.from_url(redis_url, decode_responses=True)
        self._ttl_seconds = int(ttl_seconds)

    def _k(self, key: str) -> str:
        return f"{self.CACHE_PREFIX}{key}"

    def get(self, key: str) -> Product | None:
        try:
            data = self._client.get(self._k(key))
        except redis.RedisError as exc:
            raise CacheError("Redis GET failed", original_error=exc) from exc
        if data is None:
            return None
        return decode_product(data)

    def set(self, key: str, product: Product) -> None:
        payload = encode_product(product)
        try:
            self._client.setex(self._k(key), self._ttl_seconds, payload)
        except redis.RedisError as exc:
            raise CacheError("Redis SETEX failed", original_error=exc) from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._k(key))
        except redis.RedisError as exc:
            raise CacheError("Redis DELETE failed", original_error=exc) from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as exc:
            logger.warning("Redis ping falló", extra={"error": str(exc)})
            return False


# ============================================================
# Factory
# ============================================================
def build_product_cache(settings: Settings) -> ProductCachePort:
    """Redis si REDIS_URL está definido; in-memory caso contrario."""
    redis_url = (settings.redis_url or "").strip()
    if redis_url:
        logger.info("Product cache backend: redis")
        return RedisProductCache(
            redis_url=redis_url, ttl_seconds=settings.product_cache_ttl_seconds
        )

    logger.info("Product cache backend: in-memory")
    return InMemoryProductCache(
        ttl_seconds=settings.product_cache_ttl_seconds,
        max_size=settings.product_cache_max_entries,
    )
