"""
===============================================================================
TARJETA CRC — identity/guards.py
===============================================================================

Módulo:
    Authorization Guards (roles / tenant) + composición secuencial

Responsabilidades:
    - Definir el resultado etiquetado de un guard (passed | unauthenticated | forbidden).
    - require_any_role(allowed): pasa si los roles del Principal intersectan allowed.
    - require_tenant_match(): pasa si el tenant del Principal coincide con el pedido.
    - compose(*guards): evalúa en orden y corta en el primer rechazo, preservando
      el motivo (401 vs 403) hasta el borde HTTP.

Colaboradores:
    - identity.users.Principal / UserRole
    - identity.pipeline (adapter FastAPI que arma el GuardContext)

Notas:
    - Este módulo NO depende de FastAPI. Es lógica pura (fácil de testear).
    - Sin Principal -> UNAUTHENTICATED (nunca FORBIDDEN): son resultados distintos.
    - Tenant pedido: el parámetro de ruta gana sobre el body si vienen ambos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping

from .users import Principal, UserRole

# R: claves aceptadas para el tenant pedido (ruta camelCase heredada + snake_case).
TENANT_KEYS: tuple[str, ...] = ("tenantId", "tenant_id")


class GuardStatus(str, Enum):
    PENDING = "pending"
    PASSED = "passed"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class GuardResult:
    """Resultado de evaluar un guard (o una cadena de guards)."""

    status: GuardStatus
    reason: str = ""

    @property
    def passed(self) -> bool:
        return self.status == GuardStatus.PASSED

    @classmethod
    def ok(cls) -> "GuardResult":
        return cls(GuardStatus.PASSED)

    @classmethod
    def unauthenticated(cls, reason: str = "Autenticación requerida.") -> "GuardResult":
        return cls(GuardStatus.UNAUTHENTICATED, reason)

    @classmethod
    def forbidden(cls, reason: str = "Acceso denegado.") -> "GuardResult":
        return cls(GuardStatus.FORBIDDEN, reason)


@dataclass(frozen=True, slots=True)
class GuardContext:
    """Lo que un guard puede mirar: el Principal y los datos del request."""

    principal: Principal | None
    path_params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] | None = None

    def requested_tenant_id(self) -> str | None:
        """Tenant pedido por el request (ruta primero, después body)."""
        for source in (self.path_params, self.body or {}):
            for key in TENANT_KEYS:
                value = source.get(key)
                if value not in (None, ""):
                    return str(value)
        return None


Guard = Callable[[GuardContext], GuardResult]


def require_authenticated() -> Guard:
    def guard(ctx: GuardContext) -> GuardResult:
        if ctx.principal is None:
            return GuardResult.unauthenticated()
        return GuardResult.ok()

    return guard


def require_any_role(allowed: Iterable[UserRole | str]) -> Guard:
    """Guard de roles: alcanza con tener UNO de los roles permitidos."""
    allowed_roles = frozenset(UserRole(r) for r in allowed)

    def guard(ctx: GuardContext) -> GuardResult:
        if ctx.principal is None:
            return GuardResult.unauthenticated()
        if not (ctx.principal.roles & allowed_roles):
            return GuardResult.forbidden("Rol insuficiente.")
        return GuardResult.ok()

    return guard


def require_tenant_match() -> Guard:
    """Guard de tenant: el Principal debe pertenecer al tenant pedido.

    Un Principal sin tenant nunca coincide (ni siquiera con un pedido vacío).
    """

    def guard(ctx: GuardContext) -> GuardResult:
        if ctx.principal is None:
            return GuardResult.unauthenticated()

        principal_tenant = ctx.principal.tenant_id
        requested = ctx.requested_tenant_id()
        if not principal_tenant or principal_tenant != requested:
            return GuardResult.forbidden("Acceso inválido al tenant.")
        return GuardResult.ok()

    return guard


# ---------------------------------------------------------------------------
# Presets (jerarquía: admin > manager > user)
# ---------------------------------------------------------------------------


def admin_only() -> Guard:
    return require_any_role([UserRole.ADMIN])


def manager_or_above() -> Guard:
    return require_any_role([UserRole.ADMIN, UserRole.MANAGER])


def any_member() -> Guard:
    return require_any_role([UserRole.ADMIN, UserRole.MANAGER, UserRole.USER])


def compose(*guards: Guard) -> Guard:
    """Combina guards en una cadena secuencial.

    Estados: pending -> passed | rejected(motivo). El rechazo es terminal: los
    guards siguientes no se evalúan.
    """
    chain = tuple(guards)

    def guard(ctx: GuardContext) -> GuardResult:
        result = GuardResult(GuardStatus.PENDING)
        for current in chain:
            result = current(ctx)
            if not result.passed:
                return result
        return GuardResult.ok()

    return guard
