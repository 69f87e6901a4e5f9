# authgate/crosscutting/logger.py
"""
===============================================================================
TARJETA CRC — crosscutting/logger.py (logs JSON sin secretos)
===============================================================================

Responsabilidades:
  - Emitir una línea JSON por evento, con el contexto del request
    (request_id, method, path, user_id, tenant_id) tomado de authgate/context.
  - Redactar todo lo que parezca credencial antes de serializar:
      * claves cuyo nombre contiene password / secret / token / credential,
        más `authorization` y `hash`;
      * valores string con forma "Bearer <jwt>" bajo cualquier clave.
  - Ciclo de vida explícito: setup_logger() al arrancar (container),
    shutdown_logger() en el lifespan de la API.

Colaboradores:
  - authgate/context.py
  - crosscutting/config.py (LOG_LEVEL, LOG_JSON, LOG_FILE)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..context import get_context_dict
from .config import Settings

DEFAULT_LOGGER_NAME = "authgate"
REDACTED = "***REDACTADO***"

_MAX_STR = 4_000
_MAX_DEPTH = 4

# Atributos que todo LogRecord trae de fábrica: lo demás vino por `extra=`.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

_SENSITIVE_FRAGMENTS = ("password", "passwd", "secret", "token", "credential")
_SENSITIVE_EXACT = {"authorization", "password_hash", "hash", "cookie"}
_BEARER_RE = re.compile(r"Bearer\s+[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*")


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return lowered in _SENSITIVE_EXACT or any(
        fragment in lowered for fragment in _SENSITIVE_FRAGMENTS
    )


def _scrub(value: Any, key: str = "", depth: int = 0) -> Any:
    if key and _is_sensitive(key):
        return REDACTED
    if depth > _MAX_DEPTH:
        return "…"

    if isinstance(value, str):
        value = _BEARER_RE.sub("Bearer " + REDACTED, value)
        return value if len(value) <= _MAX_STR else value[:_MAX_STR] + "…"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, dict):
        return {str(k): _scrub(v, str(k), depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_scrub(item, key, depth + 1) for item in value]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """LogRecord -> JSON compacto (contexto + extras redactados + excepción)."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _scrub(record.getMessage()),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "pid": os.getpid(),
        }
        payload.update(get_context_dict())

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                payload[key] = _scrub(value, key)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": _scrub(str(exc)),
                "stacktrace": traceback.format_exception(exc_type, exc, tb),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(
    settings: Settings | None = None, name: str = DEFAULT_LOGGER_NAME
) -> logging.Logger:
    """Logger del proceso; llamarlo dos veces no duplica handlers."""
    level = settings.log_level if settings else "INFO"
    use_json = settings.log_json if settings else True
    log_file = (settings.log_file if settings else "").strip()

    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))
    # uvicorn configura el root: propagar duplicaría cada línea
    log.propagate = False
    if log.handlers:
        return log

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)
    return log


def shutdown_logger(log: logging.Logger) -> None:
    for handler in list(log.handlers):
        try:
            handler.flush()
            handler.close()
        finally:
            log.removeHandler(handler)
