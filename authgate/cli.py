"""
Name: Admin Bootstrap CLI (`authgate-create-admin`)

Responsibilities:
  - Create the first admin user (idempotent)
  - Hash the password through the same PasswordHasher the API uses
  - Store the user in PostgreSQL (DATABASE_URL required)
"""

from __future__ import annotations

import argparse
import getpass
import sys

from .container import get_logger, get_password_hasher
from .crosscutting.config import get_settings
from .crosscutting.exceptions import AuthGateError
from .domain.repositories import UserRepository
from .identity.mutations import build_user_create, normalize_email
from .identity.passwords import PasswordHasher
from .identity.users import User, UserRole
from .infrastructure.db.pool import close_pool, ensure_schema, init_pool
from .infrastructure.repositories import PostgresUserRepository


def _prompt_email() -> str:
    email = input("Email: ").strip().lower()
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


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Create the first admin user (idempotent)."
    )
    parser.add_argument("--email", help="User email (will be normalized)")
    parser.add_argument(
        "--password",
        help="User password (omit to be prompted securely)",
    )
    parser.add_argument(
        "--role",
        action="append",
        choices=[role.value for role in UserRole],
        help="User role, repeatable (default: admin)",
    )
    parser.add_argument("--tenant", default=None, help="Tenant id for the user")
    parser.add_argument(
        "--inactive",
        action="store_true",
        help="Create user as inactive",
    )
    return parser.parse_args(argv)


def create_user(
    repository: UserRepository,
    hasher: PasswordHasher,
    *,
    email: str,
    password: str,
    roles: list[str],
    tenant_id: str | None = None,
    active: bool = True,
) -> tuple[User, bool]:
    """Returns (user, created). An existing email is left untouched."""
    email = normalize_email(email)
    existing = repository.find_by_email(email)
    if existing is not None:
        return existing, False

    fields = build_user_create(
        {
            "email": email,
            "password": password,
            "roles": roles,
            "tenant_id": tenant_id,
            "is_active": active,
        },
        hasher,
    )
    return repository.create(fields), True


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if not settings.uses_database():
        raise SystemExit("DATABASE_URL is required to create a user.")

    email = args.email or _prompt_email()
    password = args.password or _prompt_password()

    logger = get_logger()
    pool = init_pool(
        settings.database_url,
        min_size=1,
        max_size=1,
        logger=logger,
        statement_timeout_ms=settings.db_statement_timeout_ms,
    )
    try:
        if settings.db_auto_create_schema:
            ensure_schema(pool, logger)
        user, created = create_user(
            PostgresUserRepository(pool, logger),
            get_password_hasher(),
            email=email,
            password=password,
            roles=args.role or [UserRole.ADMIN.value],
            tenant_id=args.tenant,
            active=not args.inactive,
        )
    except (AuthGateError, ValueError) as exc:
        print(f"Could not create user: {exc}", file=sys.stderr)
        return 1
    finally:
        close_pool(logger)

    roles = ",".join(role.value for role in user.roles)
    if created:
        print(f"Created user: id={user.id} email={user.email} roles={roles}")
    else:
        print(
            "User already exists: "
            f"id={user.id} email={user.email} roles={roles} active={user.is_active}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
