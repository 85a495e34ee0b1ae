"""
===============================================================================
TARJETA CRC — techmart/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, cache, emisor de tokens, use cases).
  - Exponer factories para FastAPI (Depends) y scripts.
  - Mantener singletons con caching (lru_cache).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - crosscutting.config.get_settings
  - domain.repositories.* / domain.cache (puertos)
  - infrastructure.* (implementaciones)
  - application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - En APP_ENV test/testing/ci se usan repositorios in-memory.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    UpdateProductUseCase,
    UpdateStockUseCase,
)
from .crosscutting.config import get_settings
from .domain.cache import ProductCachePort
from .domain.repositories import (
    CategoryRepository,
    ProductRepository,
    UserRepository,
)
from .identity.credential_store import CredentialStore
from .identity.passwords import PasswordPolicy
from .identity.tokens import TokenIssuer, TokenSettings
from .infrastructure.cache import build_product_cache
from .infrastructure.repositories import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    InMemoryUserRepository,
    PostgresCategoryRepository,
    PostgresProductRepository,
    PostgresUserRepository,
)

# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Repositorio de usuarios (in-memory en test; Postgres en runtime)."""
    if get_settings().is_test():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_category_repository() -> CategoryRepository:
    if get_settings().is_test():
        return InMemoryCategoryRepository()
    return PostgresCategoryRepository()


@lru_cache(maxsize=1)
def get_product_repository() -> ProductRepository:
    if get_settings().is_test():
        categories = get_category_repository()
        return InMemoryProductRepository(
            categories=(
                categories
                if isinstance(categories, InMemoryCategoryRepository)
                else None
            )
        )
    return PostgresProductRepository()


@lru_cache(maxsize=1)
def get_product_cache() -> ProductCachePort:
    """Cache de productos (Redis si REDIS_URL, in-memory caso contrario)."""
    return build_product_cache(get_settings())


# =============================================================================
# Identidad
# =============================================================================


@lru_cache(maxsize=1)
def get_token_issuer() -> TokenIssuer:
    """Emisor de tokens. Secreto vacío -> ConfigurationError (fail-fast)."""
    return TokenIssuer(TokenSettings.from_settings(get_settings()))


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStore:
    settings = get_settings()
    return CredentialStore(
        get_user_repository(),
        policy=PasswordPolicy(min_length=settings.password_min_length),
    )


# =============================================================================
# Use cases (factories por request: son livianos y sin estado)
# =============================================================================


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(get_credential_store(), get_token_issuer())


def get_login_user_use_case() -> LoginUserUseCase:
    return LoginUserUseCase(get_credential_store(), get_token_issuer())


def get_get_product_use_case() -> GetProductUseCase:
    return GetProductUseCase(get_product_repository(), get_product_cache())


def get_list_products_use_case() -> ListProductsUseCase:
    return ListProductsUseCase(
        get_product_repository(), max_take=get_settings().catalog_max_take
    )


def get_create_product_use_case() -> CreateProductUseCase:
    return CreateProductUseCase(get_product_repository(), get_category_repository())


def get_update_stock_use_case() -> UpdateStockUseCase:
    return UpdateStockUseCase(get_product_repository(), get_product_cache())


def get_update_product_use_case() -> UpdateProductUseCase:
    return UpdateProductUseCase(
        get_product_repository(), get_category_repository(), get_product_cache()
    )


def get_delete_product_use_case() -> DeleteProductUseCase:
    return DeleteProductUseCase(get_product_repository(), get_product_cache())


def reset_container() -> None:
    """Limpia los singletons (tests)."""
    for factory in (
        get_user_repository,
        get_category_repository,
        get_product_repository,
        get_product_cache,
        get_token_issuer,
        get_credential_store,
    ):
        factory.cache_clear()
