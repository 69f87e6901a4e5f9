"""USE CASE: Delete User (el propio usuario o un admin)."""

from __future__ import annotations

import logging
from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.users import Principal
from .access import can_manage
from .user_results import DeleteUserResult, UserError, UserErrorCode


class DeleteUserUseCase:
    def __init__(self, repository: UserRepository, logger: logging.Logger) -> None:
        self._users = repository
        self._logger = logger

    def execute(self, user_id: UUID, actor: Principal | None) -> DeleteUserResult:
        if not can_manage(actor, user_id):
            return DeleteUserResult(
                error=UserError(UserErrorCode.FORBIDDEN, "Acceso denegado.")
            )

        if not self._users.delete(user_id):
            return DeleteUserResult(
                error=UserError(UserErrorCode.NOT_FOUND, "Usuario no encontrado.")
            )

        self._logger.info(
            "Usuario eliminado",
            extra={"user_id": str(user_id), "actor_id": actor.user_id},
        )
        return DeleteUserResult(deleted=True)
