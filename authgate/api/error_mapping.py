"""
===============================================================================
TARJETA CRC — api/error_mapping.py (UseCase Error -> HTTP RFC7807)
===============================================================================

Responsabilidades:
  - Traducir códigos de error de casos de uso a AppHTTPException.
  - Centralizar el mapeo para no duplicarlo en routers.

Colaboradores:
  - application.usecases.auth (AuthError)
  - application.usecases.users (UserError)
  - crosscutting.error_responses
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ..application.usecases.auth import AuthError, AuthErrorCode
from ..application.usecases.users import UserError, UserErrorCode
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    conflict,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)


def raise_auth_error(error: AuthError) -> None:
    if error.code == AuthErrorCode.UNAUTHORIZED:
        raise unauthorized(error.message)
    if error.code == AuthErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == AuthErrorCode.CONFLICT:
        raise conflict(error.message)
    if error.code == AuthErrorCode.NOT_FOUND:
        raise AppHTTPException.of(ErrorCode.NOT_FOUND, error.message)
    raise validation_error(error.message)


def raise_user_error(error: UserError, *, user_id: UUID) -> None:
    if error.code == UserErrorCode.FORBIDDEN:
        raise forbidden(error.message)
    if error.code == UserErrorCode.CONFLICT:
        raise conflict(error.message)
    if error.code == UserErrorCode.NOT_FOUND:
        raise not_found("Usuario", str(user_id))
    raise validation_error(error.message)
