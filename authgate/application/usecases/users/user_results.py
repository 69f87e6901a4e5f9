"""
===============================================================================
USER USE CASE RESULTS
===============================================================================

Component:
    user_results models (module)

Responsibilities:
    - UserErrorCode / UserError para gestión de usuarios.
    - UserResult, UserListResult, DeleteUserResult.

Collaborators:
    - identity.users.User
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....identity.users import User


class UserErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class UserError:
    code: UserErrorCode
    message: str


@dataclass
class UserResult:
    user: User | None = None
    error: UserError | None = None


@dataclass
class UserListResult:
    users: List[User] = field(default_factory=list)
    error: UserError | None = None


@dataclass
class DeleteUserResult:
    deleted: bool = False
    error: UserError | None = None
