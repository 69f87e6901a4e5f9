"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure a hermetic test environment (no .env, no DB, no SMTP)
  - Provide fast Argon2 parameters and a fixed-secret token service
  - Provide an in-memory repository and a TestClient over the real app

Notes:
  - Settings/container caches are reset around every test for isolation
  - Argon2 runs with the minimum cost so the suite stays fast
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

os.environ.setdefault("APP_ENV", "test")

from authgate.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from authgate import container  # noqa: E402
from authgate.identity.mutations import build_user_create  # noqa: E402
from authgate.identity.passwords import PasswordHasher  # noqa: E402
from authgate.identity.tokens import TokenService  # noqa: E402
from authgate.infrastructure.repositories import InMemoryUserRepository  # noqa: E402

TEST_JWT_SECRET = "test-secret-0123456789-abcdefghijkl"

TEST_ENV = {
    "APP_ENV": "test",
    "DATABASE_URL": "",
    "SMTP_HOST": "",
    "JWT_SECRET": TEST_JWT_SECRET,
    "JWT_ACCESS_TTL_MINUTES": "60",
    "PASSWORD_TIME_COST": "1",
    "PASSWORD_MEMORY_COST": "8",
    "PASSWORD_PARALLELISM": "1",
    "LOG_LEVEL": "WARNING",
    "LOG_FILE": "",
}


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


class FakeClock:
    """R: Reloj controlable para expiración de tokens."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    app_config.get_settings.cache_clear()
    container.reset_container()
    yield
    app_config.get_settings.cache_clear()
    container.reset_container()


@pytest.fixture
def logger() -> Mock:
    return Mock()


@pytest.fixture
def hasher(logger) -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1, logger=logger)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_service(logger, clock) -> TokenService:
    return TokenService(
        secret=TEST_JWT_SECRET, ttl_minutes=60, logger=logger, clock=clock
    )


@pytest.fixture
def user_repository(logger) -> InMemoryUserRepository:
    return InMemoryUserRepository(logger)


@pytest.fixture
def make_user(user_repository, hasher):
    """R: Factory que persiste usuarios (password hasheado) en el repo in-memory."""

    def _make(
        email: str = "user@example.com",
        password: str = "secret123",
        *,
        roles=("user",),
        tenant_id: str | None = None,
        is_active: bool = True,
        repository=None,
    ):
        repo = repository or user_repository
        fields = build_user_create(
            {
                "email": email,
                "password": password,
                "roles": list(roles),
                "tenant_id": tenant_id,
                "is_active": is_active,
            },
            hasher,
        )
        return repo.create(fields)

    return _make


@pytest.fixture
def app():
    from authgate.api.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def app_repository():
    """R: El repositorio que usa la app (singleton in-memory del container)."""
    return container.get_user_repository()


@pytest.fixture
def seed_user(make_user, app_repository):
    def _seed(email: str = "user@example.com", password: str = "secret123", **kwargs):
        return make_user(email, password, repository=app_repository, **kwargs)

    return _seed


@pytest.fixture
def bearer():
    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def jwt_secret() -> str:
    return TEST_JWT_SECRET
