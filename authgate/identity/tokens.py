"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Token Issuer/Verifier (JWT HS256)

Responsabilidades:
    - Emitir un JWT compacto con claims {sub, email, roles, tenant_id} + iat/exp.
    - Verificar firma y expiración: un token es válido solo si AMBAS se cumplen.
    - Reportar cualquier falla (firma, estructura, claims, expiración) como un
      único VerificationFailure indistinguible desde afuera. El motivo real solo
      queda en el log interno (evita oráculos).

Colaboradores:
    - PyJWT (jwt.encode / jwt.decode)
    - identity.users.UserRole
    - logging.Logger inyectado

Decisiones de diseño:
    - TTL fijo por emisión (sin refresh ni rotación).
    - Sin lista de revocación: un token vive hasta su exp.
    - No loguear tokens ni el secreto.
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from .users import User, UserRole, parse_roles

DEFAULT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLES: str = "roles"
CLAIM_TENANT: str = "tenant_id"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"


class VerificationFailure(Exception):
    """Token inválido (mensaje constante, sin causa encadenada)."""

    MESSAGE = "Token inválido o expirado."

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Payload firmado del access token."""

    user_id: str
    email: str
    roles: tuple[UserRole, ...] = ()
    tenant_id: str | None = None

    def __post_init__(self) -> None:
        # "" y None significan lo mismo: sin tenant (el token no lleva el claim).
        if self.tenant_id == "":
            object.__setattr__(self, "tenant_id", None)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Emite y verifica access tokens con TTL fijo."""

    def __init__(
        self,
        *,
        secret: str,
        ttl_minutes: int,
        logger: logging.Logger,
        algorithm: str = DEFAULT_ALGORITHM,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("secret is required")
        if ttl_minutes <= 0:
            raise ValueError("ttl_minutes must be greater than 0")
        self._secret = secret
        self._ttl = timedelta(minutes=ttl_minutes)
        self._algorithm = algorithm
        self._logger = logger
        self._clock = clock or _utc_now

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, claims: TokenClaims) -> str:
        """Firma los claims con exp = now + TTL."""
        now = self._clock()
        payload: dict[str, object] = {
            CLAIM_SUB: claims.user_id,
            CLAIM_EMAIL: claims.email,
            CLAIM_ROLES: [role.value for role in claims.roles],
            CLAIM_IAT: int(now.timestamp()),
            CLAIM_EXP: int((now + self._ttl).timestamp()),
        }
        if claims.tenant_id:
            payload[CLAIM_TENANT] = claims.tenant_id

        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verifica firma + expiración y devuelve los claims.

        Errores:
            VerificationFailure ante cualquier problema (motivo solo en logs).
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": [CLAIM_SUB, CLAIM_EMAIL, CLAIM_EXP],
                    # R: exp/iat se validan contra nuestro reloj (inyectable).
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            self._check_not_expired(payload)
            return self._to_claims(payload)
        except jwt.ExpiredSignatureError:
            self._log_failure("expired")
        except jwt.InvalidTokenError as exc:
            self._log_failure(type(exc).__name__)
        except (TypeError, ValueError) as exc:
            self._log_failure(f"invalid_claims:{type(exc).__name__}")
        raise VerificationFailure()

    def _check_not_expired(self, payload: dict) -> None:
        exp = int(payload[CLAIM_EXP])
        if exp <= int(self._clock().timestamp()):
            raise jwt.ExpiredSignatureError("Signature has expired")

    @staticmethod
    def _to_claims(payload: dict) -> TokenClaims:
        user_id = payload.get(CLAIM_SUB)
        email = payload.get(CLAIM_EMAIL)
        if not isinstance(user_id, str) or not user_id:
            raise ValueError("sub")
        if not isinstance(email, str) or not email:
            raise ValueError("email")

        raw_roles = payload.get(CLAIM_ROLES) or []
        if not isinstance(raw_roles, list):
            raise ValueError("roles")

        tenant_id = payload.get(CLAIM_TENANT)
        if tenant_id is not None and not isinstance(tenant_id, str):
            raise ValueError("tenant_id")

        return TokenClaims(
            user_id=user_id,
            email=email,
            roles=parse_roles(raw_roles),
            tenant_id=tenant_id or None,
        )

    def _log_failure(self, reason: str) -> None:
        self._logger.info("Verificación de token falló", extra={"reason": reason})


def claims_for_user(user: User) -> TokenClaims:
    """Claims del access token para un User persistido."""
    return TokenClaims(
        user_id=str(user.id),
        email=user.email,
        roles=tuple(user.roles),
        tenant_id=user.tenant_id,
    )
