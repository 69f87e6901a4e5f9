"""
===============================================================================
USE CASE: Signup
===============================================================================

Business Goal:
    Registrar un usuario nuevo con password hasheado ANTES del primer persist,
    y devolverle una sesión lista para usar.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Class:
    SignupUseCase

Responsibilities:
    - Rechazar emails ya registrados (CONFLICT).
    - Construir columnas vía identity.mutations.build_user_create (hash 1 vez).
    - Persistir en el UserRepository.
    - Enviar email de bienvenida (best-effort: una falla NO aborta el signup).
    - Emitir el access token.
    - El tenant NUNCA lo elige el cliente: el usuario nace sin tenant y un
      admin lo asigna (PATCH /users/{id} o CLI).

Collaborators:
    - UserRepository, PasswordHasher, TokenService, Mailer
    - auth_results: AuthResult / AuthError / AuthErrorCode

Error Mapping:
    - VALIDATION_ERROR: email/password faltantes o inválidos
    - CONFLICT: email ya registrado (incluye carrera detectada por el store)
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ....crosscutting.exceptions import AuthGateError, EmailAlreadyRegisteredError
from ....crosscutting.metrics import record_auth_event
from ....domain.repositories import UserRepository
from ....domain.services import Mailer
from ....identity.mutations import build_user_create, normalize_email
from ....identity.passwords import PasswordHasher
from ....identity.tokens import TokenService, claims_for_user
from ....identity.users import User
from .auth_results import AuthError, AuthErrorCode, AuthResult

WELCOME_TEMPLATE = "welcome"


@dataclass(frozen=True)
class SignupInput:
    email: str
    password: str
    first_name: str = ""
    last_name: str = ""


class SignupUseCase:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        mailer: Mailer,
        logger: logging.Logger,
        *,
        auto_activate: bool = True,
        app_name: str = "Authgate",
    ) -> None:
        self._users = repository
        self._hasher = hasher
        self._tokens = tokens
        self._mailer = mailer
        self._logger = logger
        self._auto_activate = auto_activate
        self._app_name = app_name

    def execute(self, input_data: SignupInput) -> AuthResult:
        try:
            email = normalize_email(input_data.email)
        except ValueError:
            return self._error(
                AuthErrorCode.VALIDATION_ERROR, "El email es obligatorio."
            )

        if self._users.find_by_email(email) is not None:
            return self._error(AuthErrorCode.CONFLICT, "El email ya está registrado.")

        try:
            fields = build_user_create(
                {
                    "email": email,
                    "password": input_data.password,
                    "first_name": input_data.first_name,
                    "last_name": input_data.last_name,
                    "is_active": self._auto_activate,
                },
                self._hasher,
            )
        except ValueError as exc:
            return self._error(AuthErrorCode.VALIDATION_ERROR, str(exc))

        try:
            user = self._users.create(fields)
        except EmailAlreadyRegisteredError:
            return self._error(AuthErrorCode.CONFLICT, "El email ya está registrado.")

        self._logger.info("Usuario registrado", extra={"user_id": str(user.id)})
        record_auth_event("signup", "ok")
        self._send_welcome(user)

        return AuthResult(
            user=user,
            access_token=self._tokens.issue(claims_for_user(user)),
            expires_in=self._tokens.ttl_seconds,
        )

    def _send_welcome(self, user: User) -> None:
        try:
            self._mailer.send(
                user.email,
                WELCOME_TEMPLATE,
                {
                    "app_name": self._app_name,
                    "first_name": user.first_name or user.email,
                    "email": user.email,
                },
            )
        except AuthGateError as exc:
            # R: best-effort, el usuario ya existe.
            self._logger.warning(
                "Email de bienvenida no enviado",
                extra={"user_id": str(user.id), "error_code": exc.error_code},
            )

    @staticmethod
    def _error(code: AuthErrorCode, message: str) -> AuthResult:
        record_auth_event("signup", code.value)
        return AuthResult(error=AuthError(code=code, message=message))
