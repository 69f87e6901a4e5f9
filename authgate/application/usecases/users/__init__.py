from .delete_user import DeleteUserUseCase
from .get_user import GetUserUseCase
from .list_users import ListUsersUseCase
from .update_user import UpdateUserInput, UpdateUserUseCase
from .user_results import (
    DeleteUserResult,
    UserError,
    UserErrorCode,
    UserListResult,
    UserResult,
)

__all__ = [
    "GetUserUseCase",
    "UpdateUserInput",
    "UpdateUserUseCase",
    "DeleteUserUseCase",
    "ListUsersUseCase",
    "UserError",
    "UserErrorCode",
    "UserResult",
    "UserListResult",
    "DeleteUserResult",
]
