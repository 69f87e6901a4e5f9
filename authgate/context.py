"""
===============================================================================
TARJETA CRC — authgate/context.py (Contexto de logging por request)
===============================================================================

Responsabilidades:
  - Guardar en ContextVars los datos que todo log del request debe llevar:
    request_id, method, path y, una vez autenticado, user_id / tenant_id.
  - Exponerlos como dict plano para el JSONFormatter.

Colaboradores:
  - crosscutting.middleware: abre y cierra el contexto del request.
  - identity.pipeline: agrega user_id / tenant_id cuando el Principal pasa.
  - crosscutting.logger: lee get_context_dict().

Restricciones:
  - Solo strings; "" significa "no disponible" y no se emite.
  - Es contexto de LOGGING: la autorización nunca lee de acá, el Principal
    vive en request.state.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar

_FIELDS: dict[str, ContextVar[str]] = {
    name: ContextVar(name, default="")
    for name in ("request_id", "method", "path", "user_id", "tenant_id")
}


def _assign(**values: str | None) -> None:
    for name, value in values.items():
        _FIELDS[name].set(value or "")


def set_request_context(
    *, request_id: str = "", method: str = "", path: str = ""
) -> None:
    _assign(request_id=request_id, method=method, path=path)


def set_principal_context(*, user_id: str = "", tenant_id: str | None = None) -> None:
    """Identidad ya verificada del request (tenant_id puede faltar)."""
    _assign(user_id=user_id, tenant_id=tenant_id)


def get_context_dict() -> dict[str, str]:
    return {name: var.get() for name, var in _FIELDS.items() if var.get()}


def clear_context() -> None:
    # workers async reusan el task context entre requests
    for var in _FIELDS.values():
        var.set("")
