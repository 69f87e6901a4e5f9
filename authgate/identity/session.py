"""
===============================================================================
TARJETA CRC — identity/session.py
===============================================================================

Módulo:
    Session Resolver (Authorization: Bearer <token> -> Principal)

Responsabilidades:
    - Extraer el token del header Authorization (esquema Bearer).
    - Delegar la verificación al TokenService.
    - Mapear claims verificados a un Principal.

Colaboradores:
    - identity.tokens.TokenService / VerificationFailure
    - identity.users.Principal

Contrato:
    - Header ausente, esquema distinto o token vacío -> None (sin excepción).
    - Token inválido/expirado -> None.
    - Sin efectos secundarios: no escribe estado en ningún lado.
===============================================================================
"""

from __future__ import annotations

from .tokens import TokenClaims, TokenService, VerificationFailure
from .users import Principal

BEARER_SCHEME: str = "Bearer"


def principal_from_claims(claims: TokenClaims) -> Principal:
    return Principal(
        user_id=claims.user_id,
        email=claims.email,
        roles=frozenset(claims.roles),
        tenant_id=claims.tenant_id,
    )


class SessionResolver:
    """Resuelve el Principal de un request a partir del header Authorization."""

    def __init__(self, tokens: TokenService, scheme: str = BEARER_SCHEME) -> None:
        self._tokens = tokens
        self._prefix = f"{scheme} "

    def extract_token(self, authorization: str | None) -> str | None:
        """Extrae token desde `Authorization: Bearer <token>`."""
        if not authorization or not authorization.startswith(self._prefix):
            return None
        token = authorization[len(self._prefix) :].strip()
        return token or None

    def resolve(self, authorization: str | None) -> Principal | None:
        token = self.extract_token(authorization)
        if token is None:
            return None

        try:
            claims = self._tokens.verify(token)
        except VerificationFailure:
            return None

        return principal_from_claims(claims)
