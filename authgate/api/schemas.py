"""
===============================================================================
TARJETA CRC — api/schemas.py (DTOs HTTP compartidos)
===============================================================================

Responsabilidades:
  - Definir las formas de respuesta públicas de usuario / sesión.
  - Garantizar que password_hash y refresh_token NUNCA salgan por HTTP.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from ..identity.users import Principal, User, UserRole


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    roles: list[UserRole]
    tenant_id: str | None
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime | None


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class PrincipalResponse(BaseModel):
    user_id: str
    email: str
    roles: list[UserRole]
    tenant_id: str | None


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        roles=list(user.roles),
        tenant_id=user.tenant_id,
        is_active=user.is_active,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


def to_principal_response(principal: Principal) -> PrincipalResponse:
    return PrincipalResponse(
        user_id=principal.user_id,
        email=principal.email,
        roles=sorted(principal.roles, key=lambda r: r.value),
        tenant_id=principal.tenant_id,
    )
