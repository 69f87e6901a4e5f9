# authgate/crosscutting/error_responses.py
"""
===============================================================================
TARJETA CRC — crosscutting/error_responses.py (Problem Details de authgate)
===============================================================================

Responsabilidades:
  - Mantener el catálogo cerrado de códigos HTTP de la API (ErrorCode) junto
    con su status y título en una sola tabla (_CATALOG).
  - Serializar cualquier AppHTTPException como application/problem+json.
  - Exponer factories cortas para los casos que usan routers y el pipeline.

Reglas:
  - 401 siempre viaja con el challenge `WWW-Authenticate: Bearer`.
  - 401 y 403 son códigos distintos: "no sé quién sos" vs "sé quién sos y
    no podés".
  - El request_id (si el middleware lo dejó en request.state) se agrega a
    errors[] para correlacionar con los logs.

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - identity/pipeline.py (unauthorized / forbidden / internal_error)
  - api/exception_handlers.py, api/error_mapping.py
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"
PROBLEM_TYPE_PREFIX = "urn:authgate:problem:"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_ERROR = "STORE_ERROR"


class _Entry(NamedTuple):
    status: int
    title: str


_CATALOG: dict[ErrorCode, _Entry] = {
    ErrorCode.VALIDATION_ERROR: _Entry(422, "Validation Error"),
    ErrorCode.UNAUTHORIZED: _Entry(401, "Unauthorized"),
    ErrorCode.FORBIDDEN: _Entry(403, "Forbidden"),
    ErrorCode.NOT_FOUND: _Entry(404, "Not Found"),
    ErrorCode.CONFLICT: _Entry(409, "Conflict"),
    ErrorCode.INTERNAL_ERROR: _Entry(500, "Internal Server Error"),
    ErrorCode.STORE_ERROR: _Entry(503, "User Store Unavailable"),
}


class ErrorDetail(BaseModel):
    """Cuerpo problem+json. `code` es el campo estable para clientes."""

    type: str
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


def _documented(*codes: ErrorCode) -> dict[str, Any]:
    content = {
        PROBLEM_JSON_MEDIA_TYPE: {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
    }
    responses: dict[str, Any] = {}
    for code in codes:
        entry = _CATALOG[code]
        responses[str(entry.status)] = {
            "description": entry.title,
            "model": ErrorDetail,
            "content": content,
        }
    responses["default"] = {
        "description": "Problem Details",
        "model": ErrorDetail,
        "content": content,
    }
    return responses


# R: lo que cualquier router de authgate puede devolver además del 2xx.
OPENAPI_ERROR_RESPONSES = _documented(
    ErrorCode.UNAUTHORIZED,
    ErrorCode.FORBIDDEN,
    ErrorCode.NOT_FOUND,
    ErrorCode.CONFLICT,
    ErrorCode.VALIDATION_ERROR,
)


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y errors[] opcional.

    Si no se pasa status_code explícito vale el del catálogo; los handlers
    internos lo fuerzan (ej: STORE_ERROR siempre es 503).
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors

    @classmethod
    def of(cls, code: ErrorCode, detail: str, **kwargs: Any) -> "AppHTTPException":
        return cls(_CATALOG[code].status, code, detail, **kwargs)

    def to_problem(self, request: Request) -> ErrorDetail:
        extra = list(self.errors or [])
        request_id = getattr(getattr(request, "state", None), "request_id", None)
        if request_id:
            extra.append({"request_id": request_id})

        entry = _CATALOG.get(self.code)
        return ErrorDetail(
            type=PROBLEM_TYPE_PREFIX + self.code.value.lower(),
            title=entry.title if entry else self.code.value,
            status=self.status_code,
            detail=str(self.detail),
            code=self.code,
            instance=str(request.url),
            errors=extra or None,
        )


def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException.of(ErrorCode.VALIDATION_ERROR, detail, errors=errors)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException.of(
        ErrorCode.NOT_FOUND, f"{resource} '{identifier}' no encontrado"
    )


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException.of(ErrorCode.CONFLICT, detail)


def unauthorized(detail: str = "Autenticación requerida") -> AppHTTPException:
    return AppHTTPException.of(
        ErrorCode.UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(detail: str = "Acceso denegado") -> AppHTTPException:
    return AppHTTPException.of(ErrorCode.FORBIDDEN, detail)


def internal_error(detail: str = "Ocurrió un error inesperado") -> AppHTTPException:
    return AppHTTPException.of(ErrorCode.INTERNAL_ERROR, detail)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler FastAPI: AppHTTPException -> problem+json (headers incluidos)."""
    problem = exc.to_problem(request)
    return JSONResponse(
        status_code=exc.status_code,
        content=problem.model_dump(mode="json", exclude_none=True),
        headers=exc.headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
