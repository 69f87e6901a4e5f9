"""
Name: Request Pipeline Tests

Responsibilities:
  - 401 short-circuit before any guard runs
  - Guard rejection mapped to 401/403 with the guard's reason
  - Principal exposed to the handler only after the whole chain passed
  - Internal failures surface as a generic 500 (never as access)
"""

from unittest.mock import Mock

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from authgate.api.exception_handlers import register_exception_handlers
from authgate.container import get_session_resolver
from authgate.identity.guards import (
    GuardResult,
    any_member,
    manager_or_above,
    require_tenant_match,
)
from authgate.identity.pipeline import authorize, get_current_principal
from authgate.identity.tokens import TokenClaims
from authgate.identity.users import Principal, UserRole

pytestmark = pytest.mark.unit


class SpyGuard:
    def __init__(self) -> None:
        self.calls = 0
        self.seen = None

    def __call__(self, ctx):
        self.calls += 1
        self.seen = ctx
        return GuardResult.ok()


@pytest.fixture
def spy() -> SpyGuard:
    return SpyGuard()


@pytest.fixture
def pipeline_app(spy) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/spy")
    def spy_route(principal: Principal = Depends(authorize(spy))):
        return {"user_id": principal.user_id}

    @app.get("/manager")
    def manager_route(principal: Principal = Depends(authorize(manager_or_above()))):
        return {"ok": True}

    @app.get("/tenants/{tenantId}")
    def tenant_route(
        tenantId: str,
        principal: Principal = Depends(authorize(any_member(), require_tenant_match())),
    ):
        return {"tenant": tenantId}

    @app.post("/tenant-body")
    def tenant_body_route(
        principal: Principal = Depends(authorize(require_tenant_match())),
    ):
        return {"ok": True}

    @app.get("/whoami", dependencies=[Depends(authorize())])
    def whoami(principal: Principal = Depends(get_current_principal)):
        return {"email": principal.email}

    @app.get("/unguarded")
    def unguarded(principal: Principal = Depends(get_current_principal)):
        return {"email": principal.email}

    return app


@pytest.fixture
def pipeline_client(pipeline_app) -> TestClient:
    return TestClient(pipeline_app)


@pytest.fixture
def issue(bearer):
    from authgate.container import get_token_service

    def _issue(roles=(UserRole.USER,), tenant_id="t1") -> dict[str, str]:
        token = get_token_service().issue(
            TokenClaims(
                user_id="u-1", email="a@b.com", roles=tuple(roles), tenant_id=tenant_id
            )
        )
        return bearer(token)

    return _issue


def test_missing_credentials_is_401_and_no_guard_runs(pipeline_client, spy):
    response = pipeline_client.get("/spy")

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"
    assert response.headers["www-authenticate"] == "Bearer"
    assert spy.calls == 0


def test_invalid_token_is_401_and_no_guard_runs(pipeline_client, spy, bearer):
    response = pipeline_client.get("/spy", headers=bearer("garbage"))

    assert response.status_code == 401
    assert spy.calls == 0


def test_valid_token_reaches_handler_with_principal(pipeline_client, spy, issue):
    response = pipeline_client.get("/spy", headers=issue())

    assert response.status_code == 200
    assert response.json() == {"user_id": "u-1"}
    assert spy.calls == 1
    assert spy.seen.principal.email == "a@b.com"


def test_role_rejection_is_403_with_reason(pipeline_client, issue):
    response = pipeline_client.get("/manager", headers=issue())

    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "FORBIDDEN"
    assert body["detail"] == "Rol insuficiente."


def test_role_accepted_for_manager(pipeline_client, issue):
    response = pipeline_client.get("/manager", headers=issue([UserRole.MANAGER]))

    assert response.status_code == 200


def test_tenant_path_param_is_checked(pipeline_client, issue):
    assert pipeline_client.get("/tenants/t1", headers=issue()).status_code == 200
    assert pipeline_client.get("/tenants/t2", headers=issue()).status_code == 403


def test_tenant_from_json_body(pipeline_client, issue):
    ok = pipeline_client.post("/tenant-body", json={"tenantId": "t1"}, headers=issue())
    wrong = pipeline_client.post(
        "/tenant-body", json={"tenantId": "t2"}, headers=issue()
    )
    missing = pipeline_client.post("/tenant-body", headers=issue())

    assert ok.status_code == 200
    assert wrong.status_code == 403
    assert missing.status_code == 403


def test_non_object_body_is_ignored(pipeline_client, issue):
    response = pipeline_client.post("/tenant-body", json=["t1"], headers=issue())

    assert response.status_code == 403


def test_resolver_failure_is_generic_500(pipeline_app):
    resolver = Mock()
    resolver.resolve.side_effect = RuntimeError("boom")
    pipeline_app.dependency_overrides[get_session_resolver] = lambda: resolver

    response = TestClient(pipeline_app).get(
        "/spy", headers={"Authorization": "Bearer x"}
    )

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "INTERNAL_ERROR"
    assert "boom" not in response.text


def test_guard_failure_is_generic_500(pipeline_app, issue):
    def exploding_guard(ctx):
        raise KeyError("secret-detail")

    @pipeline_app.get("/explode")
    def explode(principal: Principal = Depends(authorize(exploding_guard))):
        return {"ok": True}

    response = TestClient(pipeline_app).get("/explode", headers=issue())

    assert response.status_code == 500
    assert "secret-detail" not in response.text


def test_current_principal_after_authorize(pipeline_client, issue):
    response = pipeline_client.get("/whoami", headers=issue())

    assert response.status_code == 200
    assert response.json() == {"email": "a@b.com"}


def test_current_principal_without_authorize_is_401(pipeline_client, issue):
    response = pipeline_client.get("/unguarded", headers=issue())

    assert response.status_code == 401
