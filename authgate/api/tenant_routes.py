"""
===============================================================================
TARJETA CRC — api/tenant_routes.py (rutas protegidas por rol / tenant)
===============================================================================

Responsabilidades:
  - GET /api/v1/tenants/{tenant_id}: miembro autenticado DEL tenant pedido.
  - GET /api/v1/manager/reports: manager o admin.

Notas:
  - El orden de guards importa: rol primero, tenant después. El primer
    rechazo corta la cadena y define el status (401 / 403).
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.guards import any_member, manager_or_above, require_tenant_match
from ..identity.pipeline import authorize
from ..identity.users import Principal

router = APIRouter(prefix="/api/v1", tags=["tenants"], responses=OPENAPI_ERROR_RESPONSES)


@router.get("/tenants/{tenant_id}")
def get_tenant(
    tenant_id: str,
    principal: Principal = Depends(authorize(any_member(), require_tenant_match())),
):
    return {"tenant_id": tenant_id, "user_id": principal.user_id}


@router.get("/manager/reports")
def manager_reports(principal: Principal = Depends(authorize(manager_or_above()))):
    return {
        "reports": [],
        "requested_by": principal.user_id,
        "tenant_id": principal.tenant_id,
    }
