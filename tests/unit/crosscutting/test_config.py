"""
Name: Settings Validation Tests
"""

import pytest
from pydantic import ValidationError

from techmart.crosscutting.config import Settings

pytestmark = pytest.mark.unit


def test_defaults_are_usable_outside_production():
    settings = Settings(app_env="development")

    assert settings.jwt_access_ttl_minutes == 60
    assert settings.product_cache_ttl_seconds == 1800
    assert settings.catalog_default_take == 20
    assert not settings.is_production()


@pytest.mark.parametrize("app_env", ["test", "TESTING", " ci "])
def test_is_test(app_env):
    assert Settings(app_env=app_env).is_test()


def test_allowed_origins_are_split_and_trimmed():
    settings = Settings(allowed_origins=" https://a.example , ,https://b.example")

    assert settings.get_allowed_origins_list() == [
        "https://a.example",
        "https://b.example",
    ]


@pytest.mark.parametrize(
    "overrides",
    [
        {"jwt_access_ttl_minutes": 0},
        {"product_cache_ttl_seconds": -1},
        {"password_min_length": 0},
        {"catalog_default_take": 50, "catalog_max_take": 10},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)


@pytest.mark.parametrize("secret", ["dev-secret", "short-but-custom"])
def test_production_requires_strong_secret(secret):
    with pytest.raises(ValidationError):
        Settings(
            app_env="production",
            jwt_secret=secret,
            database_url="postgresql://db/techmart",
        )


def test_production_requires_database_url():
    with pytest.raises(ValidationError):
        Settings(app_env="production", jwt_secret="x" * 40, database_url="")


def test_valid_production_settings():
    settings = Settings(
        app_env="production",
        jwt_secret="x" * 40,
        database_url="postgresql://db/techmart",
    )

    assert settings.is_production()
