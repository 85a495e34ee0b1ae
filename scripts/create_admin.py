"""
Name: Admin Bootstrap Script

Responsibilities:
  - Create a privileged user (admin / vendor), idempotent
  - If the user already exists, grant the requested role
  - Reuse the CredentialStore (password policy + Argon2 hashing)
"""

from __future__ import annotations

import argparse
import getpass
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from techmart.crosscutting.config import get_settings  # noqa: E402
from techmart.identity.credential_store import CredentialStore  # noqa: E402
from techmart.identity.passwords import PasswordPolicy  # noqa: E402
from techmart.identity.users import UserRole, normalize_email  # noqa: E402
from techmart.infrastructure.db.pool import close_pool, init_pool  # noqa: E402
from techmart.infrastructure.repositories import PostgresUserRepository  # noqa: E402

_PRIVILEGED_ROLES = (UserRole.ADMIN.value, UserRole.VENDOR.value)


def _prompt_email() -> str:
    email = normalize_email(input("Email: "))
    if not email:
        raise SystemExit("Email is required.")
    return email


def _prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password is required.")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise SystemExit("Passwords do not match.")
    return password


def _parse_args() -> argparse.Namespace:
    argv = sys.argv[1:]
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Create an admin/vendor user (idempotent)."
    )
    parser.add_argument("--email", help="User email (will be normalized)")
    parser.add_argument(
        "--password",
        help="User password (omit to be prompted securely)",
    )
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="TechMart")
    parser.add_argument(
        "--role",
        default=UserRole.ADMIN.value,
        choices=_PRIVILEGED_ROLES,
        help="User role (default: Admin)",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = _parse_args()
    settings = get_settings()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL is required to create a user.")

    email = normalize_email(args.email) if args.email else _prompt_email()
    role = UserRole(args.role)

    init_pool(
        database_url=settings.database_url,
        min_size=1,
        max_size=2,
    )
    try:
        store = CredentialStore(
            PostgresUserRepository(),
            policy=PasswordPolicy(min_length=settings.password_min_length),
        )
        existing = store.find_by_email(email)
        if existing is not None:
            updated = store.add_role(existing.id, role) or existing
            roles = ",".join(sorted(r.value for r in updated.roles))
            print(f"User already exists: id={existing.id} email={email} roles={roles}")
            return

        password = args.password or _prompt_password()
        result = store.create(
            email=email,
            password=password,
            first_name=args.first_name,
            last_name=args.last_name,
            roles=(role,),
        )
        if not result.succeeded:
            raise SystemExit("User not created: " + " ".join(result.errors))
        print(f"Created user: id={result.user.id} email={email} role={role.value}")
    finally:
        close_pool()


if __name__ == "__main__":
    main()
