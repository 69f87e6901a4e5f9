"""
Unit tests for infrastructure/db/pool.py (ConnectionPool patched).
"""

from unittest.mock import MagicMock, patch

import pytest

from authgate.infrastructure.db import pool as db_pool
from authgate.infrastructure.db.errors import (
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_pool():
    db_pool.reset_pool()
    yield
    db_pool.reset_pool()


def test_get_pool_before_init_fails():
    with pytest.raises(PoolNotInitializedError):
        db_pool.get_pool()


def test_init_get_close_cycle(logger):
    with patch.object(db_pool, "ConnectionPool") as pool_cls:
        created = db_pool.init_pool("postgresql://x", 1, 4, logger=logger)

        assert db_pool.get_pool() is created
        kwargs = pool_cls.call_args.kwargs
        assert (kwargs["min_size"], kwargs["max_size"]) == (1, 4)

        with pytest.raises(PoolAlreadyInitializedError):
            db_pool.init_pool("postgresql://x", 1, 4, logger=logger)

        db_pool.close_pool(logger)
        created.close.assert_called_once()
        db_pool.close_pool(logger)

    with pytest.raises(PoolNotInitializedError):
        db_pool.get_pool()


def test_statement_timeout_configurator():
    conn = MagicMock()

    db_pool._connection_configurator(1500)(conn)
    conn.execute.assert_called_once_with("SET statement_timeout = 1500")

    other = MagicMock()
    db_pool._connection_configurator(0)(other)
    other.execute.assert_not_called()


def test_ensure_schema_runs_ddl(logger):
    pool = MagicMock()
    conn = pool.connection.return_value.__enter__.return_value

    db_pool.ensure_schema(pool, logger)

    conn.execute.assert_called_once_with(db_pool.USERS_DDL)
