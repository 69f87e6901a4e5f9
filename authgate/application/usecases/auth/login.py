"""
===============================================================================
USE CASE: Login
===============================================================================

Business Goal:
    Autenticar email + password y emitir un access token.

Reglas:
    - Email desconocido y password incorrecto responden EXACTAMENTE igual
      (UNAUTHORIZED, mismo mensaje): no se filtra si la cuenta existe.
    - Usuario inactivo -> FORBIDDEN (solo después de validar el password).
    - Login exitoso actualiza last_login_at.
    - HashingError (hash corrupto) se propaga: es un fallo interno, no un 401.
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from ....crosscutting.metrics import record_auth_event
from ....domain.repositories import UserRepository
from ....identity.mutations import normalize_email, validate_password
from ....identity.passwords import PasswordHasher
from ....identity.tokens import TokenService, claims_for_user
from .auth_results import AuthError, AuthErrorCode, AuthResult

INVALID_CREDENTIALS = "Credenciales inválidas."


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


class LoginUseCase:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        logger: logging.Logger,
    ) -> None:
        self._users = repository
        self._hasher = hasher
        self._tokens = tokens
        self._logger = logger

    def execute(self, input_data: LoginInput) -> AuthResult:
        try:
            email = normalize_email(input_data.email)
        except ValueError:
            return self._unauthorized()

        user = self._users.find_by_email(email)
        if user is None or not validate_password(
            user, input_data.password, self._hasher
        ):
            self._logger.info(
                "Login rechazado", extra={"reason": "invalid_credentials"}
            )
            return self._unauthorized()

        if not user.is_active:
            self._logger.info(
                "Login rechazado",
                extra={"reason": "inactive", "user_id": str(user.id)},
            )
            record_auth_event("login", AuthErrorCode.FORBIDDEN.value)
            return AuthResult(
                error=AuthError(AuthErrorCode.FORBIDDEN, "Usuario inactivo.")
            )

        updated = self._users.update(
            user.id, {"last_login_at": datetime.now(timezone.utc)}
        )
        user = updated or user

        self._logger.info("Login exitoso", extra={"user_id": str(user.id)})
        record_auth_event("login", "ok")
        return AuthResult(
            user=user,
            access_token=self._tokens.issue(claims_for_user(user)),
            expires_in=self._tokens.ttl_seconds,
        )

    @staticmethod
    def _unauthorized() -> AuthResult:
        record_auth_event("login", AuthErrorCode.UNAUTHORIZED.value)
        return AuthResult(
            error=AuthError(AuthErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS)
        )
