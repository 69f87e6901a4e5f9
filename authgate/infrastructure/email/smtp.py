"""
===============================================================================
TARJETA CRC — infrastructure/email/smtp.py
===============================================================================

Módulo:
    Mailers (SMTP real + Null para dev/tests)

Responsabilidades:
    - Renderizar el template (EmailTemplateLoader) y armar un mensaje multipart.
    - Enviarlo por SMTP (STARTTLS opcional, login opcional).
    - Reportar fallas de transporte como MailDeliveryError.

Colaboradores:
    - smtplib / email.message (stdlib)
    - infrastructure.email.templates.EmailTemplateLoader
    - crosscutting.config.Settings (smtp_*, mail_from_*)

Notas:
    - NullMailer se usa cuando SMTP_HOST está vacío: loguea y descarta.
    - Nunca loguear el password SMTP ni el cuerpo del email.
===============================================================================
"""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Mapping

from ...crosscutting.config import Settings
from ...crosscutting.exceptions import MailDeliveryError
from .templates import EmailTemplateLoader, RenderedEmail


def build_message(
    rendered: RenderedEmail, *, to: str, sender: str
) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = rendered.subject
    message["From"] = sender
    message["To"] = to
    message.set_content("Este email requiere un cliente con soporte HTML.")
    message.add_alternative(rendered.html_body, subtype="html")
    return message


class SmtpMailer:
    """Envía emails con plantilla vía SMTP."""

    def __init__(
        self,
        settings: Settings,
        loader: EmailTemplateLoader,
        logger: logging.Logger,
    ) -> None:
        self._settings = settings
        self._loader = loader
        self._logger = logger

    @property
    def sender(self) -> str:
        return formataddr((self._settings.mail_from_name, self._settings.mail_from_email))

    def send(self, to: str, template: str, data: Mapping[str, Any]) -> None:
        rendered = self._loader.render(template, data)
        message = build_message(rendered, to=to, sender=self.sender)

        s = self._settings
        try:
            with smtplib.SMTP(
                s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds
            ) as client:
                if s.smtp_starttls:
                    client.starttls()
                if s.smtp_user:
                    client.login(s.smtp_user, s.smtp_password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            self._logger.error(
                "Envío de email falló",
                extra={"template": template, "error": type(exc).__name__},
            )
            raise MailDeliveryError(
                "No se pudo enviar el email.", original_error=exc
            ) from exc

        self._logger.info("Email enviado", extra={"template": template})


class NullMailer:
    """Mailer sin transporte: valida el template y descarta el envío."""

    def __init__(
        self, loader: EmailTemplateLoader, logger: logging.Logger
    ) -> None:
        self._loader = loader
        self._logger = logger
        self.sent: list[tuple[str, str]] = []

    def send(self, to: str, template: str, data: Mapping[str, Any]) -> None:
        self._loader.render(template, data)
        self.sent.append((to, template))
        self._logger.info(
            "Email descartado (SMTP no configurado)", extra={"template": template}
        )
