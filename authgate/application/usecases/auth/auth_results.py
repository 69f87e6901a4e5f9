"""
===============================================================================
AUTH USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Resultados tipados para los flujos de autenticación (signup, login,
    cambio y confirmación de password), con un contrato estable para:
      - validaciones
      - credenciales inválidas (401) vs usuario bloqueado (403)
      - recursos no encontrados
      - conflictos (email ya registrado)

Why:
    - Los use cases devuelven resultados en vez de lanzar excepciones de
      negocio; la API mapea code -> status HTTP en un único lugar.
    - Errores de infraestructura (HashingError, StoreError) NO se modelan acá:
      se propagan y el borde HTTP los traduce a 500/503 genéricos.

-------------------------------------------------------------------------------
CRC CARD
-------------------------------------------------------------------------------
Component:
    auth_results models (module)

Responsibilities:
    - AuthErrorCode / AuthError (code + message).
    - AuthResult (user + access token) y PasswordCheckResult.

Collaborators:
    - identity.users.User
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ....identity.users import User


class AuthErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class AuthError:
    code: AuthErrorCode
    message: str


@dataclass
class AuthResult:
    """
    Contrato:
      - éxito: user presente (y access_token si el flujo emite sesión)
      - fallo: error presente
    """

    user: User | None = None
    access_token: str | None = None
    expires_in: int | None = None
    error: AuthError | None = None


@dataclass
class PasswordCheckResult:
    matches: bool = False
    error: AuthError | None = None
