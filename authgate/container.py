"""
===============================================================================
TARJETA CRC — authgate/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (hasher, tokens, resolver, repositorio, mailer).
  - Exponer factories para FastAPI (Depends) y para el CLI.
  - Mantener singletons con caching (lru_cache) para recursos compartidos.
  - Decidir implementaciones según Settings (Postgres vs in-memory, SMTP vs null).

Colaboradores:
  - crosscutting.config.get_settings / crosscutting.logger.setup_logger
  - identity.* (PasswordHasher, TokenService, SessionResolver)
  - infrastructure.* (repositorios, pool, email)
  - application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
===============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .application.usecases.auth import (
    ChangePasswordUseCase,
    ConfirmPasswordUseCase,
    LoginUseCase,
    SignupUseCase,
)
from .application.usecases.users import (
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from .crosscutting.config import get_settings
from .crosscutting.logger import setup_logger
from .domain.repositories import UserRepository
from .domain.services import Mailer
from .identity.passwords import PasswordHasher
from .identity.session import SessionResolver
from .identity.tokens import TokenService
from .infrastructure.db.pool import get_pool
from .infrastructure.email import EmailTemplateLoader, NullMailer, SmtpMailer
from .infrastructure.repositories import (
    InMemoryUserRepository,
    PostgresUserRepository,
)

# =============================================================================
# Infra compartida (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_logger() -> logging.Logger:
    """Logger de la aplicación (se inyecta en cada componente)."""
    return setup_logger(get_settings())


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.password_time_cost,
        memory_cost=settings.password_memory_cost,
        parallelism=settings.password_parallelism,
        logger=get_logger(),
    )


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        ttl_minutes=settings.jwt_access_ttl_minutes,
        algorithm=settings.jwt_algorithm,
        logger=get_logger(),
    )


@lru_cache(maxsize=1)
def get_session_resolver() -> SessionResolver:
    return SessionResolver(get_token_service())


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Postgres si hay DATABASE_URL; si no, store in-memory del proceso."""
    if get_settings().uses_database():
        return PostgresUserRepository(get_pool(), get_logger())
    return InMemoryUserRepository(get_logger())


@lru_cache(maxsize=1)
def get_email_template_loader() -> EmailTemplateLoader:
    return EmailTemplateLoader(logger=get_logger())


@lru_cache(maxsize=1)
def get_mailer() -> Mailer:
    settings = get_settings()
    if settings.mail_enabled():
        return SmtpMailer(settings, get_email_template_loader(), get_logger())
    return NullMailer(get_email_template_loader(), get_logger())


def reset_container() -> None:
    """Olvida los singletons (tests / recarga de Settings)."""
    for factory in (
        get_logger,
        get_password_hasher,
        get_token_service,
        get_session_resolver,
        get_user_repository,
        get_email_template_loader,
        get_mailer,
    ):
        factory.cache_clear()


# =============================================================================
# Casos de uso
# =============================================================================


def get_signup_use_case() -> SignupUseCase:
    settings = get_settings()
    return SignupUseCase(
        repository=get_user_repository(),
        hasher=get_password_hasher(),
        tokens=get_token_service(),
        mailer=get_mailer(),
        logger=get_logger(),
        auto_activate=settings.signup_auto_activate,
        app_name=settings.mail_from_name,
    )


def get_login_use_case() -> LoginUseCase:
    return LoginUseCase(
        repository=get_user_repository(),
        hasher=get_password_hasher(),
        tokens=get_token_service(),
        logger=get_logger(),
    )


def get_change_password_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(
        repository=get_user_repository(),
        hasher=get_password_hasher(),
        mailer=get_mailer(),
        logger=get_logger(),
        app_name=get_settings().mail_from_name,
    )


def get_confirm_password_use_case() -> ConfirmPasswordUseCase:
    return ConfirmPasswordUseCase(
        repository=get_user_repository(), hasher=get_password_hasher()
    )


def get_get_user_use_case() -> GetUserUseCase:
    return GetUserUseCase(repository=get_user_repository())


def get_update_user_use_case() -> UpdateUserUseCase:
    return UpdateUserUseCase(
        repository=get_user_repository(),
        hasher=get_password_hasher(),
        logger=get_logger(),
    )


def get_delete_user_use_case() -> DeleteUserUseCase:
    return DeleteUserUseCase(repository=get_user_repository(), logger=get_logger())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(repository=get_user_repository())
