"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelos de Usuario y Principal

Responsabilidades:
    - Definir el enum fijo de roles (admin, manager, user).
    - Definir el User persistido (credential store) sin exponer el hash.
    - Definir el Principal: identidad autenticada derivada de un token válido.

Colaboradores:
    - identity/tokens.py: claims <-> roles.
    - identity/session.py: construye Principal desde claims verificados.
    - identity/guards.py: evalúa roles/tenant del Principal.
    - infrastructure/repositories/*: mapean filas -> User.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - El Principal vive lo que dura un request; nunca se cachea en el servidor.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable
from uuid import UUID


class UserRole(str, Enum):
    """Roles soportados (enumeración cerrada)."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


DEFAULT_ROLES: tuple[UserRole, ...] = (UserRole.USER,)


def parse_roles(values: Iterable[object] | None) -> tuple[UserRole, ...]:
    """Convierte valores crudos a roles, preservando orden y sin duplicados.

    Errores:
        - ValueError si algún valor no pertenece a UserRole.
    """
    roles: list[UserRole] = []
    for value in values or ():
        role = value if isinstance(value, UserRole) else UserRole(str(value))
        if role not in roles:
            roles.append(role)
    return tuple(roles)


@dataclass(frozen=True, slots=True)
class User:
    """Registro de usuario persistido."""

    id: UUID
    email: str
    password_hash: str = field(repr=False)
    first_name: str = ""
    last_name: str = ""
    is_active: bool = False
    roles: tuple[UserRole, ...] = DEFAULT_ROLES
    tenant_id: str | None = None
    refresh_token: str | None = field(default=None, repr=False)
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class Principal:
    """Identidad autenticada adjunta a un request."""

    user_id: str
    email: str
    roles: frozenset[UserRole] = frozenset()
    tenant_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN in self.roles
