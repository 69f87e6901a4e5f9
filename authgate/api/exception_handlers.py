"""
===============================================================================
TARJETA CRC — api/exception_handlers.py (errores internos -> problem+json)
===============================================================================

Responsabilidades:
  - Registrar en la app un handler por familia de excepción de authgate.
  - Loguear el detalle real (error_id, mensaje, request_id) y devolver al
    cliente solo un mensaje genérico: nunca hashes, SQL ni trazas SMTP.

Mapeo:
  - HashingError                 -> 500 INTERNAL_ERROR
  - EmailAlreadyRegisteredError  -> 409 CONFLICT (mensaje de dominio, sin log)
  - StoreError                   -> 503 STORE_ERROR
  - AuthGateError (resto)        -> 500 INTERNAL_ERROR
  - Exception no tipada          -> 500 INTERNAL_ERROR (con traceback)

Colaboradores:
  - crosscutting.error_responses
  - crosscutting.exceptions
  - container.get_logger
===============================================================================
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..container import get_logger
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    AuthGateError,
    EmailAlreadyRegisteredError,
    HashingError,
    StoreError,
)

GENERIC_INTERNAL = "Ocurrió un error inesperado."
GENERIC_STORE = "Servicio de usuarios no disponible temporalmente."


def _request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _opaque(code: ErrorCode, public_detail: str):
    """Handler que esconde el mensaje interno detrás de `public_detail`."""

    async def handler(request: Request, exc: AuthGateError) -> JSONResponse:
        get_logger().error(
            "Error interno",
            extra={
                "code": code.value,
                "error_code": exc.error_code,
                "error_id": exc.error_id,
                "error_message": exc.message,
                "request_id": _request_id(request),
            },
        )
        problem = AppHTTPException.of(
            code, public_detail, errors=[{"error_id": exc.error_id}]
        )
        return await app_exception_handler(request, problem)

    return handler


async def email_registered_handler(
    request: Request, exc: EmailAlreadyRegisteredError
) -> JSONResponse:
    return await app_exception_handler(
        request, AppHTTPException.of(ErrorCode.CONFLICT, exc.message)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    get_logger().error(
        "Excepción no controlada",
        exc_info=exc,
        extra={"request_id": request_id, "error": type(exc).__name__},
    )
    # app_exception_handler agrega el request_id a errors[]
    return await app_exception_handler(
        request, AppHTTPException.of(ErrorCode.INTERNAL_ERROR, GENERIC_INTERNAL)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Starlette resuelve por MRO: gana la clase más específica registrada."""
    app.add_exception_handler(
        HashingError, _opaque(ErrorCode.INTERNAL_ERROR, GENERIC_INTERNAL)
    )
    app.add_exception_handler(EmailAlreadyRegisteredError, email_registered_handler)
    app.add_exception_handler(StoreError, _opaque(ErrorCode.STORE_ERROR, GENERIC_STORE))
    app.add_exception_handler(
        AuthGateError, _opaque(ErrorCode.INTERNAL_ERROR, GENERIC_INTERNAL)
    )
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
