"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for identity and catalog (ports).
- Keep application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (fakes/stubs).

Collaborators
- identity.users: User, UserRole
- domain.entities: Product, Category
- domain.value_objects: ProductSearchCriteria
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- "Not found" is None / False, never an exception.
- Infrastructure failures raise crosscutting.exceptions.DatabaseError.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Protocol, Tuple
from uuid import UUID

from ..identity.users import User, UserRole
from .entities import Category, Product
from .value_objects import ProductSearchCriteria


class UserRepository(Protocol):
    """
    R: Interface for identity records.

    Emails are stored normalized (lowercase); lookups expect normalized input.
    """

    def get_user_by_email(self, email: str) -> Optional[User]:
        """R: Fetch a user by normalized email."""
        ...

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """R: Fetch a user by ID."""
        ...

    def create_user(self, user: User) -> User:
        """
        R: Insert user and its roles atomically (single logical mutation).

        Raises DatabaseError on unique violation (email) or connectivity issues.
        """
        ...

    def update_user(self, user: User) -> Optional[User]:
        """R: Persist mutable profile fields (names, is_active, last_login_at)."""
        ...

    def add_role(self, user_id: UUID, role: UserRole) -> Optional[User]:
        """R: Grant a role (idempotent). None if the user does not exist."""
        ...


class ProductRepository(Protocol):
    """
    R: Interface for product persistence and catalog queries.
    """

    def get_product(
        self, product_id: int, *, active_only: bool = True
    ) -> Optional[Product]:
        """R: Fetch a product (with category read-model) by ID."""
        ...

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        """R: Fetch a product by SKU regardless of is_active."""
        ...

    def search_products(
        self, criteria: ProductSearchCriteria
    ) -> Tuple[List[Product], int]:
        """
        R: Run a catalog query.

        Returns:
            (page items in [skip, skip+take), total count of the filtered set)
        """
        ...

    def create_product(self, product: Product) -> Product:
        """R: Insert a product and return it with the assigned ID."""
        ...

    def update_product(
        self,
        product_id: int,
        changes: Mapping[str, Any],
        *,
        updated_at: datetime,
    ) -> Optional[Product]:
        """
        R: Write only the given columns (plus updated_at) of an existing product.

        Returns the stored product, or None if the ID does not exist.
        """
        ...

    def update_stock(
        self, product_id: int, quantity: int, *, updated_at: datetime
    ) -> bool:
        """R: Set stock_quantity + updated_at only. False if the ID does not exist."""
        ...

    def ping(self) -> bool:
        """R: Connectivity check for health endpoints."""
        ...


class CategoryRepository(Protocol):
    """R: Read access to the category tree."""

    def get_category(self, category_id: int) -> Optional[Category]:
        ...
