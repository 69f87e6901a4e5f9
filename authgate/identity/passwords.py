"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Password Hasher (Argon2id)

Responsabilidades:
    - hash(plaintext): digest salado e irreversible (salt aleatorio por llamada).
    - verify(plaintext, hash): True si coincide, False si NO coincide.
    - Distinguir “no coincide” de “falló el cómputo”: cualquier falla interna
      (hash malformado, error de argon2) se reporta como HashingError, nunca
      como False/True silencioso.

Colaboradores:
    - argon2-cffi (argon2.PasswordHasher)
    - crosscutting.exceptions.HashingError
    - logging.Logger inyectado

Notas:
    - Sin estado mutable compartido: solo parámetros inmutables de costo.
      Seguro para requests concurrentes.
    - Nunca loguear el plaintext ni el hash.
===============================================================================
"""

from __future__ import annotations

import logging

import argon2
from argon2 import exceptions as argon2_exceptions

from ..crosscutting.exceptions import HashingError


class PasswordHasher:
    """Hash/verify de passwords con Argon2id."""

    def __init__(
        self,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
        logger: logging.Logger,
    ) -> None:
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        self._logger = logger

    def hash(self, plaintext: str) -> str:
        """Hashea un password. Dos llamadas con el mismo input difieren (salt)."""
        if not isinstance(plaintext, str):
            raise HashingError("El password debe ser texto.")
        try:
            return self._hasher.hash(plaintext)
        except (argon2_exceptions.HashingError, UnicodeError) as exc:
            # R: surrogates sueltos (JSON "\ud800") no son codificables a UTF-8.
            self._logger.error(
                "Hashing de password falló", extra={"error": type(exc).__name__}
            )
            raise HashingError(
                "No se pudo hashear el password.", original_error=exc
            ) from exc

    def verify(self, plaintext: str, password_hash: str) -> bool:
        """Verifica plaintext vs hash almacenado.

        Retorna:
            True si coincide, False si no coincide.

        Errores:
            HashingError si el hash es inválido o el cómputo falla.
        """
        if not isinstance(plaintext, str) or not isinstance(password_hash, str):
            raise HashingError("Password y hash deben ser texto.")
        try:
            return self._hasher.verify(password_hash, plaintext)
        except argon2_exceptions.VerifyMismatchError:
            return False
        except (
            argon2_exceptions.InvalidHashError,
            argon2_exceptions.VerificationError,
            UnicodeError,
        ) as exc:
            self._logger.error(
                "Verificación de password falló", extra={"error": type(exc).__name__}
            )
            raise HashingError(
                "No se pudo verificar el password.", original_error=exc
            ) from exc
