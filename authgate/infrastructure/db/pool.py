"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones PostgreSQL (singleton por proceso)

Responsabilidades:
  - Inicializar, exponer y cerrar el pool.
  - Configurar cada conexión con statement_timeout.
  - Crear la tabla users si se pide (bootstrap sin migraciones).

Colaboradores:
  - psycopg_pool.ConnectionPool
  - logging.Logger inyectado

Principios:
  - Fail-fast: doble init o uso sin init son errores tipados.
===============================================================================
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from .errors import PoolAlreadyInitializedError, PoolNotInitializedError

_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()

USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id             UUID PRIMARY KEY,
    email          TEXT NOT NULL UNIQUE,
    first_name     TEXT NOT NULL DEFAULT '',
    last_name      TEXT NOT NULL DEFAULT '',
    password_hash  TEXT NOT NULL,
    is_active      BOOLEAN NOT NULL DEFAULT FALSE,
    roles          TEXT[] NOT NULL DEFAULT ARRAY['user']::TEXT[],
    tenant_id      TEXT NULL,
    refresh_token  TEXT NULL,
    last_login_at  TIMESTAMPTZ NULL,
    created_at     TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at     TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


def _connection_configurator(statement_timeout_ms: int):
    def configure(conn) -> None:
        # R: guardrail contra queries colgadas.
        if statement_timeout_ms > 0:
            conn.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")
            conn.commit()

    return configure


def init_pool(
    database_url: str,
    min_size: int,
    max_size: int,
    *,
    logger: logging.Logger,
    statement_timeout_ms: int = 0,
) -> ConnectionPool:
    """Inicializa el pool (una vez por proceso)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("El pool ya fue inicializado.")

        logger.info(
            "Inicializando pool DB",
            extra={"min_size": min_size, "max_size": max_size},
        )
        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_connection_configurator(statement_timeout_ms),
            open=True,
        )
        logger.info("Pool DB inicializado")
        return _pool


def get_pool() -> ConnectionPool:
    if _pool is None:
        raise PoolNotInitializedError(
            "Pool no inicializado. Llamar init_pool() primero."
        )
    return _pool


def close_pool(logger: logging.Logger | None = None) -> None:
    """Cierra el pool (idempotente)."""
    global _pool

    with _pool_lock:
        if _pool is not None:
            if logger:
                logger.info("Cerrando pool DB")
            try:
                _pool.close()
            finally:
                _pool = None


def reset_pool() -> None:
    """Olvida el pool actual (tests)."""
    global _pool

    with _pool_lock:
        _pool = None


def ensure_schema(pool: ConnectionPool, logger: logging.Logger) -> None:
    """Crea la tabla users si no existe."""
    with pool.connection() as conn:
        conn.execute(USERS_DDL)
    logger.info("Schema users verificado")
