"""
===============================================================================
ARCHIVO: crosscutting/metrics.py
===============================================================================

CRC CARD (Módulo)
-------------------------------------------------------------------------------
Nombre:
    Métricas (Prometheus) de la API de autenticación

Responsabilidades:
    - Definir las métricas Prometheus en un registry propio del proceso.
    - Proveer funciones pequeñas y estables para registrar eventos/duraciones.
    - Cuidar cardinalidad (NO user_id, NO email, NO tenant_id en labels).
    - Exponer helpers para generar la respuesta /metrics.

Colaboradores:
    - crosscutting.middleware: registra latencia y conteo HTTP.
    - identity.pipeline: cuenta rechazos de guards (401 / 403).
    - application/usecases/auth: cuenta resultados de signup / login.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "authgate_requests_total",
    "Total de requests HTTP",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "authgate_request_latency_seconds",
    "Latencia de requests HTTP (segundos)",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

_auth_events_total = Counter(
    "authgate_auth_events_total",
    "Resultados de flujos de autenticación",
    ["event", "outcome"],
    registry=_registry,
)

_guard_rejections_total = Counter(
    "authgate_guard_rejections_total",
    "Requests rechazados por el pipeline de autorización",
    ["status"],
    registry=_registry,
)

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)


def _normalize_endpoint(path: str) -> str:
    """Normaliza paths para evitar cardinalidad alta.

    Reemplaza tenant ids, UUIDs e IDs numéricos por placeholders.
    """
    path = re.sub(r"/tenants/[^/]+", "/tenants/{tenant_id}", path)
    path = _UUID_RE.sub("{id}", path)
    return re.sub(r"/\d+", "/{id}", path)


def _status_bucket(code: int) -> str:
    if 200 <= code < 300:
        return "2xx"
    if 400 <= code < 500:
        return "4xx"
    if 500 <= code < 600:
        return "5xx"
    return "other"


def record_request_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    latency_seconds: float,
) -> None:
    """Registra métricas HTTP (endpoint normalizado, status agrupado)."""
    normalized = _normalize_endpoint(endpoint)
    _requests_total.labels(
        endpoint=normalized, method=method, status=_status_bucket(status_code)
    ).inc()
    _request_latency.labels(endpoint=normalized, method=method).observe(
        latency_seconds
    )


def record_auth_event(event: str, outcome: str) -> None:
    """Cuenta un resultado de signup/login/change_password ("ok" o código de error)."""
    _auth_events_total.labels(event=event, outcome=outcome.lower()).inc()


def record_guard_rejection(status: str) -> None:
    _guard_rejections_total.labels(status=status).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Genera el body y content-type para /metrics."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST
