"""
USE CASE: Confirm Password

Re-autenticación puntual (ej. antes de una acción sensible): responde si el
password coincide con el del usuario, sin emitir sesión nueva.
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.repositories import UserRepository
from ....identity.mutations import normalize_email, validate_password
from ....identity.passwords import PasswordHasher
from .auth_results import AuthError, AuthErrorCode, PasswordCheckResult


@dataclass(frozen=True)
class ConfirmPasswordInput:
    email: str
    password: str


class ConfirmPasswordUseCase:
    def __init__(self, repository: UserRepository, hasher: PasswordHasher) -> None:
        self._users = repository
        self._hasher = hasher

    def execute(self, input_data: ConfirmPasswordInput) -> PasswordCheckResult:
        try:
            user = self._users.find_by_email(normalize_email(input_data.email))
        except ValueError:
            user = None
        if user is None:
            return PasswordCheckResult(
                error=AuthError(AuthErrorCode.NOT_FOUND, "Usuario no encontrado.")
            )
        return PasswordCheckResult(
            matches=validate_password(user, input_data.password, self._hasher)
        )
