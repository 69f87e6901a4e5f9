"""
===============================================================================
TARJETA CRC — api/user_routes.py (Gestión de usuarios)
===============================================================================

Responsabilidades:
  - Listar usuarios (solo admin).
  - Leer / actualizar / borrar un usuario (el propio o cualquiera si es admin).

Colaboradores:
  - identity.pipeline.authorize / identity.guards
  - application.usecases.users
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, EmailStr, Field

from ..application.usecases.users import (
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserInput,
    UpdateUserUseCase,
)
from ..container import (
    get_delete_user_use_case,
    get_get_user_use_case,
    get_list_users_use_case,
    get_update_user_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.guards import admin_only, require_authenticated
from ..identity.pipeline import authorize
from ..identity.users import Principal, UserRole
from .error_mapping import raise_user_error
from .schemas import UserResponse, to_user_response

router = APIRouter(prefix="/users", tags=["users"], responses=OPENAPI_ERROR_RESPONSES)


class UpdateUserRequest(BaseModel):
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=120)
    last_name: str | None = Field(default=None, max_length=120)
    roles: list[UserRole] | None = None
    tenant_id: str | None = Field(default=None, max_length=120)
    is_active: bool | None = None


@router.get("", response_model=list[UserResponse])
def list_users(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    principal: Principal = Depends(authorize(admin_only())),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
):
    result = use_case.execute(principal, limit=limit, offset=offset)
    if result.error:
        raise_user_error(result.error, user_id=UUID(principal.user_id))
    return [to_user_response(u) for u in result.users]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UUID,
    principal: Principal = Depends(authorize(require_authenticated())),
    use_case: GetUserUseCase = Depends(get_get_user_use_case),
):
    result = use_case.execute(user_id, principal)
    if result.error:
        raise_user_error(result.error, user_id=user_id)
    return to_user_response(result.user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    req: UpdateUserRequest,
    principal: Principal = Depends(authorize(require_authenticated())),
    use_case: UpdateUserUseCase = Depends(get_update_user_use_case),
):
    """Actualiza el perfil. Campos omitidos no se tocan (tampoco el password)."""
    result = use_case.execute(
        UpdateUserInput(
            user_id=user_id,
            actor=principal,
            changes=req.model_dump(exclude_unset=True),
        )
    )
    if result.error:
        raise_user_error(result.error, user_id=user_id)
    return to_user_response(result.user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID,
    principal: Principal = Depends(authorize(require_authenticated())),
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
):
    result = use_case.execute(user_id, principal)
    if result.error:
        raise_user_error(result.error, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
