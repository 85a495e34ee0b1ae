"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount auth and catalog routers
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: catalog endpoints
  - auth_routes: register / login / me

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - APP_ENV=test skips the DB pool (in-memory repositories are wired instead)

Notes:
  - Middleware order matters: RequestContext → CORS → routes
  - /health reports DB and cache status separately
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_product_cache, get_product_repository, get_token_issuer
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import router
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates token config and initializes pool."""
    settings = get_settings()

    # Fail-fast: secreto vacío o TTL inválido -> ConfigurationError
    get_token_issuer()

    use_pool = not settings.is_test()
    if use_pool:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        logger.info(
            "TechMart API starting up",
            extra={
                "app_env": settings.app_env,
                "cache_backend": "redis" if settings.redis_url else "memory",
                "product_cache_ttl_seconds": settings.product_cache_ttl_seconds,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )
        yield
    finally:
        if use_pool:
            close_pool()
        logger.info("TechMart API shutting down")


app = FastAPI(
    title="TechMart API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Registro, login y usuario actual (JWT)"},
        {
            "name": "products",
            "description": "Catálogo de productos (mutaciones requieren admin/vendor)",
        },
    ],
)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
)

app.include_router(auth_router)
app.include_router(router)

register_exception_handlers(app)


@app.get("/health")
def health(request: Request):
    """
    Health check de dependencias.

    Returns:
        ok: True si DB y cache responden
        db: "connected" o "disconnected"
        cache: "connected" o "disconnected"
        request_id: Correlation ID de este request
    """
    db_status = "disconnected"
    try:
        if get_product_repository().ping():
            db_status = "connected"
    except Exception as e:
        logger.warning("Health check: DB unavailable", extra={"error": str(e)})

    cache_status = "disconnected"
    try:
        if get_product_cache().ping():
            cache_status = "connected"
    except Exception as e:
        logger.warning("Health check: cache unavailable", extra={"error": str(e)})

    return {
        "ok": db_status == "connected" and cache_status == "connected",
        "db": db_status,
        "cache": cache_status,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/metrics")
def metrics():
    """Expose Prometheus metrics."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
