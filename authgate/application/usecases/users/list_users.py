"""USE CASE: List Users (solo admin)."""

from __future__ import annotations

from ....domain.repositories import UserRepository
from ....identity.users import Principal
from .user_results import UserError, UserErrorCode, UserListResult


class ListUsersUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(
        self, actor: Principal | None, *, limit: int = 200, offset: int = 0
    ) -> UserListResult:
        if actor is None or not actor.is_admin:
            return UserListResult(
                error=UserError(UserErrorCode.FORBIDDEN, "Solo administradores.")
            )
        return UserListResult(users=self._users.list_users(limit=limit, offset=offset))
