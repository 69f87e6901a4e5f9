# authgate/crosscutting/exceptions.py
"""
===============================================================================
TARJETA CRC — crosscutting/exceptions.py (jerarquía de errores internos)
===============================================================================

Jerarquía:
  AuthGateError
    ├── HashingError                (argon2 / hash almacenado corrupto)
    ├── StoreError                  (credential store caído o query inválida)
    │     └── EmailAlreadyRegisteredError
    ├── MailDeliveryError           (SMTP)
    └── TemplateNotFoundError       (templates de email)

Reglas:
  - `message` es apto para logs, pero NO para el cliente salvo en
    EmailAlreadyRegisteredError (api/exception_handlers decide).
  - Nunca incluir passwords, hashes ni tokens en `message`.
  - `error_id` se genera por instancia y es lo único que ve el cliente para
    cruzar su reporte con el log.

Colaboradores:
  - api/exception_handlers.py
  - identity/passwords.py, infrastructure/*
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class AuthGateError(Exception):
    """Raíz de los errores internos; `error_code` lo fija cada subclase."""

    error_code: str = "AUTHGATE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.error_id = error_id if error_id else uuid4().hex


class HashingError(AuthGateError):
    error_code = "HASHING_ERROR"


class StoreError(AuthGateError):
    error_code = "STORE_ERROR"


class EmailAlreadyRegisteredError(StoreError):
    """Unicidad de email violada al insertar o actualizar."""

    error_code = "EMAIL_ALREADY_REGISTERED"


class MailDeliveryError(AuthGateError):
    error_code = "MAIL_DELIVERY_ERROR"


class TemplateNotFoundError(AuthGateError):
    """Nombre inválido, archivo ausente o frontmatter sin subject."""

    error_code = "TEMPLATE_NOT_FOUND"
