"""
===============================================================================
TARJETA CRC — identity/pipeline.py
===============================================================================

Módulo:
    Request Pipeline de autorización (adapter FastAPI)

Responsabilidades:
    - Leer Authorization y resolver el Principal (SessionResolver).
    - Cortar con 401 si no hay Principal, ANTES de evaluar cualquier guard.
    - Armar el GuardContext (path params + body JSON) y correr la cadena.
    - Traducir el resultado: UNAUTHENTICATED -> 401, FORBIDDEN -> 403,
      PASSED -> Principal en request.state y como valor de la dependencia.

Colaboradores:
    - identity.session.SessionResolver
    - identity.guards (GuardContext, compose)
    - crosscutting.error_responses (unauthorized, forbidden, internal_error)
    - container (get_session_resolver, get_logger) vía Depends
    - context.set_principal_context (user_id / tenant_id en los logs)

Notas:
    - Un fallo inesperado dentro del pipeline NUNCA concede acceso: se loguea
      con detalle y sale como 500 genérico.
===============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import Depends, Header, Request

from ..container import get_logger, get_session_resolver
from ..context import set_principal_context
from ..crosscutting.error_responses import forbidden, internal_error, unauthorized
from ..crosscutting.metrics import record_guard_rejection
from .guards import Guard, GuardContext, GuardResult, GuardStatus, compose
from .session import SessionResolver
from .users import Principal


async def _read_json_body(request: Request) -> dict[str, Any] | None:
    """Body JSON como dict, o None si no hay / no es JSON de objeto."""
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type:
        return None

    raw = await request.body()
    if not raw:
        return None
    try:
        payload = await request.json()
    except ValueError:
        # R: body inválido lo reporta la validación del endpoint, no el guard.
        return None
    return payload if isinstance(payload, dict) else None


def _reject(result: GuardResult):
    if result.status == GuardStatus.UNAUTHENTICATED:
        return unauthorized(result.reason or "Autenticación requerida")
    return forbidden(result.reason or "Acceso denegado")


def authorize(*guards: Guard) -> Callable:
    """Dependency FastAPI: autentica y evalúa los guards en orden.

    Uso:
        @router.get("/x")
        def handler(principal: Principal = Depends(authorize(any_member()))): ...
    """
    chain = compose(*guards)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        resolver: SessionResolver = Depends(get_session_resolver),
        logger: logging.Logger = Depends(get_logger),
    ) -> Principal:
        try:
            principal = resolver.resolve(authorization)
            if principal is None:
                result = GuardResult.unauthenticated()
            else:
                context = GuardContext(
                    principal=principal,
                    path_params=dict(request.path_params),
                    body=await _read_json_body(request),
                )
                result = chain(context)
        except Exception as exc:
            logger.exception(
                "Pipeline de autorización falló", extra={"error": type(exc).__name__}
            )
            raise internal_error() from None

        if not result.passed:
            record_guard_rejection(result.status.value)
            logger.info(
                "Acceso rechazado",
                extra={"status": result.status.value, "reason": result.reason},
            )
            raise _reject(result)

        request.state.principal = principal
        set_principal_context(user_id=principal.user_id, tenant_id=principal.tenant_id)
        return principal

    return dependency


def get_current_principal(request: Request) -> Principal:
    """Principal ya resuelto por authorize(); 401 si la ruta no lo corrió."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise unauthorized()
    return principal
