"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del ciclo de vida del pool

Responsabilidades:
  - Distinguir "no inicializado" de "ya inicializado" (fail-fast).
===============================================================================
"""


class DatabasePoolError(Exception):
    """Base de errores del pool de base de datos."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() llamado dos veces en el mismo proceso."""


class PoolNotInitializedError(DatabasePoolError):
    """get_pool() llamado antes de init_pool()."""
