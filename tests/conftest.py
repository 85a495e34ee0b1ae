"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test -> in-memory repositories)
  - Provide reusable domain fixtures (users, categories, products)
  - Reset container singletons between tests

Collaborators:
  - pytest: Test framework
  - techmart.container: singletons cacheados con lru_cache
  - techmart.domain / techmart.identity: entidades

Notes:
  - Fixtures are auto-discovered by pytest
  - El entorno se fija ANTES de importar techmart (settings se leen lazy)
"""

import os
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-entropy-0123456789")
os.environ.pop("REDIS_URL", None)

from techmart.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from techmart.container import reset_container  # noqa: E402
from techmart.domain.entities import Category, Product  # noqa: E402
from techmart.identity.passwords import hash_password  # noqa: E402
from techmart.identity.tokens import TokenSettings  # noqa: E402
from techmart.identity.users import User, UserRole  # noqa: E402

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require PostgreSQL)"
    )


@pytest.fixture(autouse=True)
def _reset_container():
    """Cada test arranca con repositorios/cache in-memory vacíos."""
    app_config.get_settings.cache_clear()
    reset_container()
    yield
    reset_container()


# ============================================================================
# Identity Fixtures
# ============================================================================


@pytest.fixture
def token_settings() -> TokenSettings:
    return TokenSettings(
        secret="unit-test-secret-0123456789abcdef",
        issuer="techmart-identity",
        audience="techmart-clients",
        access_ttl_minutes=60,
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sample_user() -> User:
    return User(
        id=uuid4(),
        email="ana@example.com",
        password_hash=hash_password("Secret123"),
        first_name="Ana",
        last_name="García",
        created_at=FIXED_NOW,
        roles=frozenset({UserRole.CUSTOMER}),
    )


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def laptops_category() -> Category:
    return Category(id=1, name="Laptops")


@pytest.fixture
def make_product():
    """Factory de Product con defaults válidos."""

    def _make(**overrides) -> Product:
        data = dict(
            name="Widget",
            description="Generic widget",
            price=Decimal("10.00"),
            sku=f"SKU-{uuid4().hex[:8]}",
            category_id=1,
            stock_quantity=5,
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        data.update(overrides)
        return Product(**data)

    return _make
