"""
===============================================================================
TARJETA CRC — api/auth_routes.py (Autenticación)
===============================================================================

Responsabilidades:
  - Exponer signup / login (emiten access token).
  - Exponer confirmación y cambio de password (requieren sesión).
  - Exponer /auth/me (Principal del token).

Patrones aplicados:
  - Adapter / Presentation Layer: traduce HTTP <-> caso de uso.
  - Fail-safe security: sin Principal válido se responde 401.

Colaboradores:
  - identity.pipeline.authorize / identity.guards
  - application.usecases.auth
  - api.error_mapping, api.schemas
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from ..application.usecases.auth import (
    ChangePasswordInput,
    ChangePasswordUseCase,
    ConfirmPasswordInput,
    ConfirmPasswordUseCase,
    LoginInput,
    LoginUseCase,
    SignupInput,
    SignupUseCase,
)
from ..container import (
    get_change_password_use_case,
    get_confirm_password_use_case,
    get_login_use_case,
    get_signup_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.guards import require_authenticated
from ..identity.pipeline import authorize
from ..identity.users import Principal
from .error_mapping import raise_auth_error
from .schemas import (
    PrincipalResponse,
    SessionResponse,
    to_principal_response,
    to_user_response,
)

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=512)
    first_name: str = Field(default="", max_length=120)
    last_name: str = Field(default="", max_length=120)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)


class ConfirmPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1, max_length=512)


class ConfirmPasswordResponse(BaseModel):
    confirmed: bool


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=512)
    new_password: str = Field(..., min_length=8, max_length=512)


# -----------------------------------------------------------------------------
# Endpoints públicos
# -----------------------------------------------------------------------------


@router.post(
    "/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED
)
def signup(
    req: SignupRequest,
    use_case: SignupUseCase = Depends(get_signup_use_case),
):
    result = use_case.execute(
        SignupInput(
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
        )
    )
    if result.error:
        raise_auth_error(result.error)

    return SessionResponse(
        access_token=result.access_token,
        expires_in=result.expires_in,
        user=to_user_response(result.user),
    )


@router.post("/login", response_model=SessionResponse)
def login(
    req: LoginRequest,
    use_case: LoginUseCase = Depends(get_login_use_case),
):
    """Inicia sesión y devuelve el access token (Bearer)."""
    result = use_case.execute(LoginInput(email=req.email, password=req.password))
    if result.error:
        raise_auth_error(result.error)

    return SessionResponse(
        access_token=result.access_token,
        expires_in=result.expires_in,
        user=to_user_response(result.user),
    )


# -----------------------------------------------------------------------------
# Endpoints autenticados
# -----------------------------------------------------------------------------


@router.get("/me", response_model=PrincipalResponse)
def me(principal: Principal = Depends(authorize(require_authenticated()))):
    return to_principal_response(principal)


@router.post("/confirm-password", response_model=ConfirmPasswordResponse)
def confirm_password(
    req: ConfirmPasswordRequest,
    principal: Principal = Depends(authorize(require_authenticated())),
    use_case: ConfirmPasswordUseCase = Depends(get_confirm_password_use_case),
):
    result = use_case.execute(
        ConfirmPasswordInput(email=principal.email, password=req.password)
    )
    if result.error:
        raise_auth_error(result.error)
    return ConfirmPasswordResponse(confirmed=result.matches)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    req: ChangePasswordRequest,
    principal: Principal = Depends(authorize(require_authenticated())),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    result = use_case.execute(
        ChangePasswordInput(
            user_id=UUID(principal.user_id),
            current_password=req.current_password,
            new_password=req.new_password,
        )
    )
    if result.error:
        raise_auth_error(result.error)
