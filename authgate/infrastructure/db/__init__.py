from .errors import (
    DatabasePoolError,
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
)
from .pool import USERS_DDL, close_pool, ensure_schema, get_pool, init_pool, reset_pool

__all__ = [
    "DatabasePoolError",
    "PoolAlreadyInitializedError",
    "PoolNotInitializedError",
    "USERS_DDL",
    "init_pool",
    "get_pool",
    "close_pool",
    "reset_pool",
    "ensure_schema",
]
