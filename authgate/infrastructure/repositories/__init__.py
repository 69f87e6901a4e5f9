"""
============================================================
TARJETA CRC
============================================================
Class: authgate.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer las implementaciones del credential store en un único punto.

Collaborators:
- PostgresUserRepository (SQL parametrizado)
- InMemoryUserRepository (tests / dev sin DATABASE_URL)
============================================================
"""

from .in_memory.user import InMemoryUserRepository
from .postgres.user import PostgresUserRepository

__all__ = ["InMemoryUserRepository", "PostgresUserRepository"]
