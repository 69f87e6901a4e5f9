"""
===============================================================================
USE CASE: Update User
===============================================================================

Business Goal:
    Actualizar el perfil de un usuario sin tocar su password.

Reglas:
    - Self-service: email, first_name, last_name.
    - Admin: además roles, tenant_id, is_active.
    - El password NO se cambia acá (ChangePasswordUseCase). Un update sin
      password nunca re-hashea ni toca password_hash.
    - Email duplicado -> CONFLICT.

Error Mapping:
    - FORBIDDEN: actor sin permiso sobre el usuario o sobre un campo admin
    - NOT_FOUND: usuario inexistente
    - VALIDATION_ERROR: campos desconocidos / valores inválidos
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping
from uuid import UUID

from ....crosscutting.exceptions import EmailAlreadyRegisteredError
from ....domain.repositories import UserRepository
from ....identity.mutations import build_user_update
from ....identity.passwords import PasswordHasher
from ....identity.users import Principal
from .access import ADMIN_ONLY_FIELDS, SELF_SERVICE_FIELDS, can_manage
from .user_results import UserError, UserErrorCode, UserResult


@dataclass(frozen=True)
class UpdateUserInput:
    user_id: UUID
    actor: Principal | None
    changes: Mapping[str, Any] = field(default_factory=dict)


class UpdateUserUseCase:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        logger: logging.Logger,
    ) -> None:
        self._users = repository
        self._hasher = hasher
        self._logger = logger

    def execute(self, input_data: UpdateUserInput) -> UserResult:
        actor = input_data.actor
        if not can_manage(actor, input_data.user_id):
            return self._error(UserErrorCode.FORBIDDEN, "Acceso denegado.")

        changes = dict(input_data.changes)
        allowed = set(SELF_SERVICE_FIELDS)
        if actor.is_admin:
            allowed |= ADMIN_ONLY_FIELDS
        rejected = sorted(set(changes) - allowed)
        if rejected:
            if set(rejected) <= ADMIN_ONLY_FIELDS:
                return self._error(
                    UserErrorCode.FORBIDDEN,
                    "Solo un admin puede modificar esos campos.",
                )
            return self._error(
                UserErrorCode.VALIDATION_ERROR, f"Campos no permitidos: {rejected}"
            )

        user = self._users.find_by_id(input_data.user_id)
        if user is None:
            return self._error(UserErrorCode.NOT_FOUND, "Usuario no encontrado.")

        try:
            fields = build_user_update(user, changes, self._hasher)
        except ValueError as exc:
            return self._error(UserErrorCode.VALIDATION_ERROR, str(exc))

        if not fields:
            return UserResult(user=user)

        try:
            updated = self._users.update(user.id, fields)
        except EmailAlreadyRegisteredError:
            return self._error(UserErrorCode.CONFLICT, "El email ya está registrado.")

        if updated is None:
            return self._error(UserErrorCode.NOT_FOUND, "Usuario no encontrado.")

        self._logger.info(
            "Usuario actualizado",
            extra={"user_id": str(user.id), "fields": sorted(fields)},
        )
        return UserResult(user=updated)

    @staticmethod
    def _error(code: UserErrorCode, message: str) -> UserResult:
        return UserResult(error=UserError(code=code, message=message))
