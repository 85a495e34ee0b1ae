"""
Name: Application Surface Tests (/health, /metrics, error handling)

Responsibilities:
  - /health reporta DB y cache
  - /metrics expone formato Prometheus
  - X-Request-Id se propaga
  - Store / cache caídos y excepciones no tipadas -> 500 genérico sin detalle
"""

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from techmart.api.exception_handlers import register_exception_handlers
from techmart.api.main import app
from techmart.application.usecases import GetProductUseCase
from techmart.container import get_get_product_use_case, get_product_repository
from techmart.crosscutting.exceptions import CacheError, DatabaseError

pytestmark = pytest.mark.unit


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health_reports_dependencies(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["db"] == "connected"
    assert body["cache"] == "connected"


def test_metrics_exposes_prometheus_text(client):
    client.get("/products")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "techmart_requests_total" in response.text


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-Id": "req-123"})

    assert response.headers["x-request-id"] == "req-123"


def test_request_id_is_generated_when_missing(client):
    response = client.get("/products")

    assert response.headers["x-request-id"]


def test_cache_failure_is_generic_500(client):
    broken_cache = Mock()
    broken_cache.get.side_effect = CacheError("redis down")
    app.dependency_overrides[get_get_product_use_case] = lambda: GetProductUseCase(
        get_product_repository(), broken_cache
    )

    response = client.get("/products/1")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert body["detail"] == "Error interno."
    assert "redis" not in response.text.lower()


def test_store_failure_is_generic_500(client, monkeypatch):
    repo = get_product_repository()
    monkeypatch.setattr(
        repo,
        "get_product",
        Mock(side_effect=DatabaseError("connection refused to db-primary")),
    )

    response = client.get("/products/1")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert body["detail"] == "Error interno."
    assert any("error_id" in e for e in body["errors"])
    assert "db-primary" not in response.text


def test_unhandled_exception_is_generic_500():
    bare_app = FastAPI()
    register_exception_handlers(bare_app)

    @bare_app.get("/boom")
    def boom():
        raise RuntimeError("secret connection string postgres://u:p@host")

    response = TestClient(bare_app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert body["detail"] == "Error interno."
    assert "postgres" not in response.text
