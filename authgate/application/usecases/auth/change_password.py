"""
===============================================================================
USE CASE: Change Password
===============================================================================

Business Goal:
    Cambiar el password de un usuario autenticado, verificando el actual.

Reglas:
    - Password actual incorrecto -> UNAUTHORIZED.
    - El nuevo password se hashea UNA vez (build_user_update) y solo
      password_hash (+ updated_at) cambia en el store.
    - Aviso por email best-effort.
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.exceptions import AuthGateError
from ....crosscutting.metrics import record_auth_event
from ....domain.repositories import UserRepository
from ....domain.services import Mailer
from ....identity.mutations import build_user_update, validate_password
from ....identity.passwords import PasswordHasher
from .auth_results import AuthError, AuthErrorCode, AuthResult

PASSWORD_CHANGED_TEMPLATE = "password_changed"


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: UUID
    current_password: str
    new_password: str


class ChangePasswordUseCase:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        mailer: Mailer,
        logger: logging.Logger,
        *,
        app_name: str = "Authgate",
    ) -> None:
        self._users = repository
        self._hasher = hasher
        self._mailer = mailer
        self._logger = logger
        self._app_name = app_name

    def execute(self, input_data: ChangePasswordInput) -> AuthResult:
        user = self._users.find_by_id(input_data.user_id)
        if user is None:
            return self._error(AuthErrorCode.NOT_FOUND, "Usuario no encontrado.")

        if not validate_password(user, input_data.current_password, self._hasher):
            return self._error(
                AuthErrorCode.UNAUTHORIZED, "El password actual es incorrecto."
            )

        try:
            fields = build_user_update(
                user, {"password": input_data.new_password}, self._hasher
            )
        except ValueError as exc:
            return self._error(AuthErrorCode.VALIDATION_ERROR, str(exc))

        updated = self._users.update(user.id, fields)
        if updated is None:
            return self._error(AuthErrorCode.NOT_FOUND, "Usuario no encontrado.")

        self._logger.info("Password actualizado", extra={"user_id": str(user.id)})
        record_auth_event("change_password", "ok")
        try:
            self._mailer.send(
                updated.email,
                PASSWORD_CHANGED_TEMPLATE,
                {"app_name": self._app_name, "email": updated.email},
            )
        except AuthGateError as exc:
            self._logger.warning(
                "Aviso de cambio de password no enviado",
                extra={"user_id": str(user.id), "error_code": exc.error_code},
            )
        return AuthResult(user=updated)

    @staticmethod
    def _error(code: AuthErrorCode, message: str) -> AuthResult:
        record_auth_event("change_password", code.value)
        return AuthResult(error=AuthError(code=code, message=message))
