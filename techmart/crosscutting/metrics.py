"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus): observabilidad de bajo acoplamiento

Responsabilidades:
    - Definir métricas Prometheus en un registry propio.
    - Proveer funciones pequeñas y estables para registrar eventos.
    - Cuidar cardinalidad (NO user_id, NO product_id, NO emails).
    - Exponer helper para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: latencia y conteo HTTP.
    - application/usecases/catalog: hits/misses del cache de productos.
    - application/usecases/auth: resultados de login/registro.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

# ------------------------
# HTTP
# ------------------------
_requests_total = Counter(
    "techmart_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "techmart_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

# ------------------------
# Cache de productos
# ------------------------
_product_cache_events = Counter(
    "techmart_product_cache_events_total",
    "Eventos del cache de productos (hit/miss/invalidate)",
    ["event"],
    registry=_registry,
)

# ------------------------
# Identidad
# ------------------------
_auth_events = Counter(
    "techmart_auth_events_total",
    "Resultados de registro/login",
    ["action", "outcome"],
    registry=_registry,
)

# Segmentos numéricos o UUID se colapsan para no explotar cardinalidad.
_ID_SEGMENT = re.compile(
    r"/(\d+|[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})(?=/|$)"
)


def _normalize_endpoint(path: str) -> str:
    return _ID_SEGMENT.sub("/{id}", path or "/")


def _status_bucket(status_code: int) -> str:
    return f"{int(status_code) // 100}xx"


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP (endpoint normalizado, status agrupado)."""
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        max(0.0, latency_seconds)
    )


def record_product_cache_hit() -> None:
    _product_cache_events.labels(event="hit").inc()


def record_product_cache_miss() -> None:
    _product_cache_events.labels(event="miss").inc()


def record_product_cache_invalidation() -> None:
    _product_cache_events.labels(event="invalidate").inc()


def record_auth_event(action: str, outcome: str) -> None:
    """action: register|login ; outcome: success|<error code en minúsculas>."""
    _auth_events.labels(action=action, outcome=outcome).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
