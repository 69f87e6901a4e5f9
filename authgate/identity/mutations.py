"""
===============================================================================
TARJETA CRC — identity/mutations.py
===============================================================================

Módulo:
    Builder de mutaciones de User (create / update)

Responsabilidades:
    - Traducir campos de entrada a columnas persistibles del User.
    - Hashear el password EXACTAMENTE una vez cuando forma parte de la mutación.
    - No re-hashear nunca en un update que no trae password.
    - Normalizar email (trim + lower) y roles (enum cerrado).

Colaboradores:
    - identity.passwords.PasswordHasher
    - identity.users.User / parse_roles

Notas:
    - password_hash NUNCA se acepta como input: solo sale de hasher.hash().
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from .passwords import PasswordHasher
from .users import DEFAULT_ROLES, User, parse_roles

# R: columnas que una mutación puede tocar (password_hash se deriva).
MUTABLE_FIELDS: tuple[str, ...] = (
    "email",
    "first_name",
    "last_name",
    "is_active",
    "roles",
    "tenant_id",
    "refresh_token",
    "last_login_at",
)

# R: únicas columnas que aceptan NULL; en el resto un None equivale a "no enviado".
NULLABLE_FIELDS: frozenset[str] = frozenset(
    {"tenant_id", "refresh_token", "last_login_at"}
)

CREATE_DEFAULTS: dict[str, Any] = {
    "first_name": "",
    "last_name": "",
    "is_active": False,
    "roles": DEFAULT_ROLES,
    "tenant_id": None,
}


def normalize_email(value: str) -> str:
    email = str(value or "").strip().lower()
    if not email:
        raise ValueError("email is required")
    return email


def _require_password(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError("password is required")
    return value


def _normalize(key: str, value: Any) -> Any:
    if key == "email":
        return normalize_email(value)
    if key == "roles":
        return parse_roles(value)
    return value


def build_user_create(
    fields: Mapping[str, Any], hasher: PasswordHasher
) -> dict[str, Any]:
    """Columnas para persistir un usuario nuevo.

    Errores:
        - ValueError si falta email/password o hay roles desconocidos.
        - HashingError si el hasher falla (se propaga).
    """
    password = _require_password(fields.get("password"))

    columns: dict[str, Any] = dict(CREATE_DEFAULTS)
    for key in MUTABLE_FIELDS:
        if key in fields and fields[key] is not None:
            columns[key] = _normalize(key, fields[key])

    if "email" not in columns:
        raise ValueError("email is required")

    columns["password_hash"] = hasher.hash(password)
    return columns


def build_user_update(
    current: User, changes: Mapping[str, Any], hasher: PasswordHasher
) -> dict[str, Any]:
    """Solo las columnas que cambian respecto de `current`.

    Si `changes` no trae password (o trae None), password_hash queda fuera
    del resultado y el hash almacenado no se toca. Lo mismo para cualquier
    columna NOT NULL que llegue en None (ej: `{"roles": null}` no borra roles).
    """
    columns: dict[str, Any] = {}
    for key in MUTABLE_FIELDS:
        if key not in changes:
            continue
        if changes[key] is None and key not in NULLABLE_FIELDS:
            continue
        value = _normalize(key, changes[key])
        if value != getattr(current, key):
            columns[key] = value

    if changes.get("password") is not None:
        columns["password_hash"] = hasher.hash(_require_password(changes["password"]))
    return columns


def validate_password(user: User, plaintext: str, hasher: PasswordHasher) -> bool:
    return hasher.verify(plaintext, user.password_hash)
