"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Cargar usuarios (por email / por id) y listarlos (admin).
  - Crear, actualizar y borrar usuarios.
  - Ejecutar SQL parametrizado contra la tabla `users` (USERS_DDL).
  - Mapear filas -> User y validar roles contra el enum.
  - Exponer fallos como StoreError (opaco para el core) con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool (inyectado)
  - identity.users.User / parse_roles
  - crosscutting.exceptions.StoreError / EmailAlreadyRegisteredError

Constraints / Notes:
  - Retorna None cuando no existe el recurso (no exception por “not found”).
  - Rol persistido inválido -> StoreError.
  - SQL parametrizado siempre; los nombres de columna salen de una whitelist.
  - Orden estable en listados: created_at DESC, id DESC.
============================================================
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional
from uuid import UUID, uuid4

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import EmailAlreadyRegisteredError, StoreError
from ....identity.users import User, parse_roles

# R: lista explícita de columnas (contrato estable con USERS_DDL).
_USER_COLUMNS = (
    "id, email, first_name, last_name, password_hash, is_active, roles, "
    "tenant_id, refresh_token, last_login_at, created_at, updated_at"
)

_USER_ORDER_BY = "created_at DESC, id DESC"

# R: columnas que create/update pueden escribir (nunca input del usuario como SQL).
_WRITABLE_COLUMNS: tuple[str, ...] = (
    "email",
    "first_name",
    "last_name",
    "password_hash",
    "is_active",
    "roles",
    "tenant_id",
    "refresh_token",
    "last_login_at",
)


def _row_to_user(row: tuple) -> User:
    """Fila de `users` -> User (roles estrictos)."""
    try:
        roles = parse_roles(row[6])
    except ValueError as exc:
        raise StoreError(f"Rol inválido en base de datos: {row[6]}") from exc

    return User(
        id=row[0],
        email=row[1],
        first_name=row[2] or "",
        last_name=row[3] or "",
        password_hash=row[4],
        is_active=row[5],
        roles=roles,
        tenant_id=row[7],
        refresh_token=row[8],
        last_login_at=row[9],
        created_at=row[10],
        updated_at=row[11],
    )


def _to_db(column: str, value: Any) -> Any:
    if column == "roles":
        return [role.value for role in parse_roles(value)]
    return value


class PostgresUserRepository:
    """Implementación Postgres de domain.repositories.UserRepository."""

    def __init__(self, pool: ConnectionPool, logger: logging.Logger) -> None:
        self._pool = pool
        self._logger = logger

    # =========================================================
    # Helpers internos: ejecución + errores consistentes
    # =========================================================
    def _execute(
        self,
        *,
        query: str,
        params: Iterable[object],
        fetch: str,
        log_msg: str,
        log_extra: dict[str, object],
    ):
        try:
            with self._pool.connection() as conn:
                cursor = conn.execute(query, tuple(params))
                if fetch == "one":
                    return cursor.fetchone()
                if fetch == "all":
                    return cursor.fetchall()
                return cursor.rowcount
        except pg_errors.UniqueViolation as exc:
            self._logger.info(log_msg, extra={**log_extra, "error": "unique_violation"})
            raise EmailAlreadyRegisteredError(
                "El email ya está registrado.", original_error=exc
            ) from exc
        except Exception as exc:
            self._logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
            raise StoreError(log_msg, original_error=exc) from exc

    @staticmethod
    def _split_columns(fields: Mapping[str, Any]) -> tuple[list[str], list[object]]:
        unknown = set(fields) - set(_WRITABLE_COLUMNS)
        if unknown:
            raise StoreError(f"Columnas desconocidas: {sorted(unknown)}")
        columns = [c for c in _WRITABLE_COLUMNS if c in fields]
        return columns, [_to_db(c, fields[c]) for c in columns]

    # =========================================================
    # Lectura
    # =========================================================
    def find_by_email(self, email: str) -> Optional[User]:
        row = self._execute(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
            params=(email,),
            fetch="one",
            log_msg="PostgresUserRepository: find_by_email failed",
            log_extra={},
        )
        return _row_to_user(row) if row else None

    def find_by_id(self, user_id: UUID) -> Optional[User]:
        row = self._execute(
            query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
            params=(user_id,),
            fetch="one",
            log_msg="PostgresUserRepository: find_by_id failed",
            log_extra={"user_id": str(user_id)},
        )
        return _row_to_user(row) if row else None

    def list_users(self, *, limit: int = 200, offset: int = 0) -> list[User]:
        if limit <= 0:
            return []
        offset = max(offset, 0)

        rows = self._execute(
            query=f"""
                SELECT {_USER_COLUMNS}
                FROM users
                ORDER BY {_USER_ORDER_BY}
                LIMIT %s OFFSET %s
            """,
            params=(limit, offset),
            fetch="all",
            log_msg="PostgresUserRepository: list_users failed",
            log_extra={"limit": limit, "offset": offset},
        )
        return [_row_to_user(r) for r in rows]

    # =========================================================
    # Escritura
    # =========================================================
    def create(self, fields: Mapping[str, Any]) -> User:
        columns, values = self._split_columns(fields)
        if "email" not in columns or "password_hash" not in columns:
            raise StoreError("email y password_hash son obligatorios")

        user_id = uuid4()
        placeholders = ", ".join(["%s"] * (len(columns) + 1))
        row = self._execute(
            query=f"""
                INSERT INTO users (id, {", ".join(columns)})
                VALUES ({placeholders})
                RETURNING {_USER_COLUMNS}
            """,
            params=(user_id, *values),
            fetch="one",
            log_msg="PostgresUserRepository: create failed",
            log_extra={"user_id": str(user_id)},
        )
        if not row:
            raise StoreError("PostgresUserRepository: create failed (no row returned)")
        return _row_to_user(row)

    def update(self, user_id: UUID, fields: Mapping[str, Any]) -> Optional[User]:
        columns, values = self._split_columns(fields)
        if not columns:
            return self.find_by_id(user_id)

        # R: columnas de la whitelist, el f-string no lleva input del usuario.
        assignments = ", ".join(f"{c} = %s" for c in columns)
        row = self._execute(
            query=f"""
                UPDATE users
                SET {assignments}, updated_at = now()
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
            """,
            params=(*values, user_id),
            fetch="one",
            log_msg="PostgresUserRepository: update failed",
            log_extra={"user_id": str(user_id), "columns": columns},
        )
        return _row_to_user(row) if row else None

    def delete(self, user_id: UUID) -> bool:
        deleted = self._execute(
            query="DELETE FROM users WHERE id = %s",
            params=(user_id,),
            fetch="none",
            log_msg="PostgresUserRepository: delete failed",
            log_extra={"user_id": str(user_id)},
        )
        return bool(deleted)
