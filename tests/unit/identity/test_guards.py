"""
Name: Authorization Guard Tests

Responsibilities:
  - Role guard: intersection semantics, 401 vs 403 distinction
  - Tenant guard: path param first, body fallback, missing tenant never matches
  - compose: strict order, short-circuit on first rejection, reason preserved
"""

import pytest

from authgate.identity.guards import (
    GuardContext,
    GuardResult,
    GuardStatus,
    admin_only,
    any_member,
    compose,
    manager_or_above,
    require_any_role,
    require_authenticated,
    require_tenant_match,
)
from authgate.identity.users import Principal, UserRole

pytestmark = pytest.mark.unit


def _principal(*roles: UserRole, tenant_id: str | None = "t1") -> Principal:
    return Principal(
        user_id="u-1", email="a@b.com", roles=frozenset(roles), tenant_id=tenant_id
    )


def _ctx(principal, path_params=None, body=None) -> GuardContext:
    return GuardContext(principal=principal, path_params=path_params or {}, body=body)


class CountingGuard:
    def __init__(self, result: GuardResult) -> None:
        self.result = result
        self.calls = 0

    def __call__(self, ctx: GuardContext) -> GuardResult:
        self.calls += 1
        return self.result


# ---------------------------------------------------------------------------
# require_any_role
# ---------------------------------------------------------------------------


def test_role_guard_passes_on_intersection():
    guard = require_any_role(["admin", "manager"])

    assert guard(_ctx(_principal(UserRole.MANAGER, UserRole.USER))).passed


def test_role_guard_forbids_without_intersection():
    result = require_any_role([UserRole.ADMIN])(_ctx(_principal(UserRole.USER)))

    assert result.status == GuardStatus.FORBIDDEN


def test_role_guard_forbids_empty_role_set():
    result = require_any_role([UserRole.USER])(_ctx(_principal()))

    assert result.status == GuardStatus.FORBIDDEN


def test_role_guard_without_principal_is_unauthenticated():
    result = require_any_role([UserRole.USER])(_ctx(None))

    assert result.status == GuardStatus.UNAUTHENTICATED


def test_role_guard_rejects_unknown_role_names():
    with pytest.raises(ValueError):
        require_any_role(["superuser"])


@pytest.mark.parametrize(
    "preset, role, passed",
    [
        (admin_only, UserRole.ADMIN, True),
        (admin_only, UserRole.MANAGER, False),
        (manager_or_above, UserRole.MANAGER, True),
        (manager_or_above, UserRole.ADMIN, True),
        (manager_or_above, UserRole.USER, False),
        (any_member, UserRole.USER, True),
    ],
)
def test_presets(preset, role, passed):
    assert preset()(_ctx(_principal(role))).passed is passed


# ---------------------------------------------------------------------------
# require_tenant_match
# ---------------------------------------------------------------------------


def test_tenant_guard_matches_path_param():
    guard = require_tenant_match()

    assert guard(_ctx(_principal(UserRole.USER), {"tenantId": "t1"})).passed
    assert guard(_ctx(_principal(UserRole.USER), {"tenant_id": "t1"})).passed


def test_tenant_guard_falls_back_to_body():
    guard = require_tenant_match()

    assert guard(_ctx(_principal(UserRole.USER), body={"tenantId": "t1"})).passed


def test_tenant_guard_path_param_wins_over_body():
    guard = require_tenant_match()
    ctx = _ctx(_principal(UserRole.USER), {"tenantId": "t2"}, {"tenantId": "t1"})

    assert guard(ctx).status == GuardStatus.FORBIDDEN


def test_tenant_guard_mismatch_is_forbidden():
    result = require_tenant_match()(_ctx(_principal(UserRole.USER), {"tenantId": "t2"}))

    assert result.status == GuardStatus.FORBIDDEN
    assert "tenant" in result.reason.lower()


def test_tenant_guard_principal_without_tenant_is_forbidden():
    principal = _principal(UserRole.USER, tenant_id=None)

    assert require_tenant_match()(_ctx(principal, {"tenantId": "t1"})).status == (
        GuardStatus.FORBIDDEN
    )
    assert require_tenant_match()(_ctx(principal)).status == GuardStatus.FORBIDDEN


def test_tenant_guard_missing_requested_tenant_is_forbidden():
    result = require_tenant_match()(_ctx(_principal(UserRole.USER)))

    assert result.status == GuardStatus.FORBIDDEN


def test_tenant_guard_without_principal_is_unauthenticated():
    result = require_tenant_match()(_ctx(None, {"tenantId": "t1"}))

    assert result.status == GuardStatus.UNAUTHENTICATED


# ---------------------------------------------------------------------------
# compose
# ---------------------------------------------------------------------------


def test_compose_empty_chain_passes():
    assert compose()(_ctx(None)).passed


def test_compose_runs_all_when_passing():
    first, second = CountingGuard(GuardResult.ok()), CountingGuard(GuardResult.ok())

    assert compose(first, second)(_ctx(_principal())).passed
    assert (first.calls, second.calls) == (1, 1)


def test_compose_short_circuits_on_first_rejection():
    rejection = GuardResult.forbidden("nope")
    first = CountingGuard(rejection)
    second = CountingGuard(GuardResult.ok())

    result = compose(first, second)(_ctx(_principal()))

    assert result is rejection
    assert second.calls == 0


def test_compose_preserves_unauthenticated_reason():
    chain = compose(require_authenticated(), require_any_role([UserRole.ADMIN]))

    assert chain(_ctx(None)).status == GuardStatus.UNAUTHENTICATED
    assert chain(_ctx(_principal(UserRole.USER))).status == GuardStatus.FORBIDDEN


def test_compose_role_then_tenant_order():
    chain = compose(any_member(), require_tenant_match())

    assert chain(_ctx(_principal(UserRole.USER), {"tenantId": "t1"})).passed
    result = chain(_ctx(_principal(), {"tenantId": "t1"}))
    assert result.reason == "Rol insuficiente."
