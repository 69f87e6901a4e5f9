"""
Unit tests for crosscutting/metrics.py and the /metrics endpoint.
"""

import pytest

from authgate.crosscutting.metrics import (
    _normalize_endpoint,
    _status_bucket,
    get_metrics_response,
    record_auth_event,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/v1/tenants/acme", "/api/v1/tenants/{tenant_id}"),
        ("/users/3fa85f64-5717-4562-b3fc-2c963f66afa6", "/users/{id}"),
        ("/users/42", "/users/{id}"),
        ("/auth/login", "/auth/login"),
    ],
)
def test_normalize_endpoint(path, expected):
    assert _normalize_endpoint(path) == expected


@pytest.mark.parametrize(
    "code, bucket",
    [(200, "2xx"), (204, "2xx"), (403, "4xx"), (503, "5xx"), (302, "other")],
)
def test_status_bucket(code, bucket):
    assert _status_bucket(code) == bucket


def test_auth_events_are_exported():
    record_auth_event("login", "UNAUTHORIZED")

    body, content_type = get_metrics_response()

    assert content_type.startswith("text/plain")
    assert b'authgate_auth_events_total{event="login",outcome="unauthorized"}' in body


def test_metrics_endpoint_is_admin_only(client, seed_user, bearer):
    seed_user("admin@b.com", roles=("admin",))
    seed_user("user@b.com")

    def _token(email):
        response = client.post(
            "/auth/login", json={"email": email, "password": "secret123"}
        )
        return bearer(response.json()["access_token"])

    assert client.get("/metrics").status_code == 401
    assert client.get("/metrics", headers=_token("user@b.com")).status_code == 403

    response = client.get("/metrics", headers=_token("admin@b.com"))
    assert response.status_code == 200
    assert b"authgate_requests_total" in response.content
    assert b"authgate_guard_rejections_total" in response.content
