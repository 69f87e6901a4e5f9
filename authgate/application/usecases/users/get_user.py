"""
USE CASE: Get User

El propio usuario o un admin pueden leer el registro. Para cualquier otro
actor se responde NOT_FOUND (no se confirma la existencia del id).
"""

from __future__ import annotations

from uuid import UUID

from ....domain.repositories import UserRepository
from ....identity.users import Principal
from .access import can_manage
from .user_results import UserError, UserErrorCode, UserResult


class GetUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, user_id: UUID, actor: Principal | None) -> UserResult:
        if not can_manage(actor, user_id):
            return UserResult(
                error=UserError(UserErrorCode.NOT_FOUND, "Usuario no encontrado.")
            )

        user = self._users.find_by_id(user_id)
        if user is None:
            return UserResult(
                error=UserError(UserErrorCode.NOT_FOUND, "Usuario no encontrado.")
            )
        return UserResult(user=user)
