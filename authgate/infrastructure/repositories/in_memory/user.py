"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev sin DATABASE_URL).
  - Respetar el mismo contrato que PostgresUserRepository:
      - email único (EmailAlreadyRegisteredError)
      - None cuando no existe
      - updated_at = now en cada update
      - ordering created_at DESC, id DESC

Collaborators:
  - domain.repositories.UserRepository (contrato)
  - identity.users.User

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock (es estado compartido).
  - User es inmutable: cada update reemplaza el registro (dataclasses.replace).
============================================================
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID, uuid4

from ....crosscutting.exceptions import EmailAlreadyRegisteredError, StoreError
from ....domain.repositories import UserRepository
from ....identity.users import User, parse_roles

_WRITABLE_FIELDS = frozenset(
    {
        "email",
        "first_name",
        "last_name",
        "password_hash",
        "is_active",
        "roles",
        "tenant_id",
        "refresh_token",
        "last_login_at",
    }
)


class InMemoryUserRepository(UserRepository):
    """Repositorio in-memory, thread-safe, para User."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _clean(fields: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - _WRITABLE_FIELDS
        if unknown:
            raise StoreError(f"Columnas desconocidas: {sorted(unknown)}")
        values = dict(fields)
        if "roles" in values:
            values["roles"] = parse_roles(values["roles"])
        return values

    def _email_taken(self, email: str, *, exclude: UUID | None = None) -> bool:
        return any(u.email == email and u.id != exclude for u in self._users.values())

    # =========================================================
    # Lectura
    # =========================================================
    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def list_users(self, *, limit: int = 200, offset: int = 0) -> List[User]:
        if limit <= 0:
            return []
        offset = max(offset, 0)
        with self._lock:
            users = list(self._users.values())
        # R: created_at DESC, id DESC (alineado con Postgres).
        users.sort(key=lambda u: (u.created_at, str(u.id)), reverse=True)
        return users[offset : offset + limit]

    # =========================================================
    # Escritura
    # =========================================================
    def create(self, fields: Mapping[str, Any]) -> User:
        values = self._clean(fields)
        if not values.get("email") or not values.get("password_hash"):
            raise StoreError("email y password_hash son obligatorios")

        now = self._now()
        user = User(id=uuid4(), created_at=now, updated_at=now, **values)
        with self._lock:
            if self._email_taken(user.email):
                raise EmailAlreadyRegisteredError("El email ya está registrado.")
            self._users[user.id] = user

        self._logger.debug("Usuario creado (in-memory)", extra={"user_id": str(user.id)})
        return user

    def update(self, user_id: UUID, fields: Mapping[str, Any]) -> Optional[User]:
        values = self._clean(fields)
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            if not values:
                return current
            email = values.get("email")
            if email and self._email_taken(email, exclude=user_id):
                raise EmailAlreadyRegisteredError("El email ya está registrado.")
            updated = replace(current, updated_at=self._now(), **values)
            self._users[user_id] = updated
        return updated

    def delete(self, user_id: UUID) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None
