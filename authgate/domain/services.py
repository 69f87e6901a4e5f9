"""
CRC — domain/services.py

Name
- Outbound service ports

Responsibilities
- Define the Mailer contract used by auth use cases (welcome, password changed).

Collaborators
- infrastructure.email: SmtpMailer, NullMailer

Constraints
- Implementations raise MailDeliveryError / TemplateNotFoundError on failure.
"""

from typing import Any, Mapping, Protocol


class Mailer(Protocol):
    def send(self, to: str, template: str, data: Mapping[str, Any]) -> None:
        """R: Render `template` with `data` and deliver it to `to`."""
        ...
