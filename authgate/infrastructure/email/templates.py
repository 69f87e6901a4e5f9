"""
Name: Email Template Loader (HTML templates with Frontmatter)

Responsibilities:
  - Load `<name>.html` templates from the templates directory
  - Parse frontmatter metadata (subject, inputs)
  - Cache parsed templates in-memory per instance
  - Render safely: replace only declared `{token}` inputs, HTML-escaped

Collaborators:
  - authgate/templates/email/*.html
  - logger (observability)

Patterns:
  - Repository-like (filesystem-backed templates)
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ...crosscutting.exceptions import TemplateNotFoundError

TEMPLATES_DIR = (Path(__file__).resolve().parents[2] / "templates" / "email").resolve()

_NAME_RE = re.compile(r"^[a-z0-9_]+$")
_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


@dataclass
class TemplateMetadata:
    """R: Parsed frontmatter metadata from an email template."""

    subject: str = ""
    description: str = ""
    inputs: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str


def parse_frontmatter(content: str) -> tuple[TemplateMetadata, str]:
    """
    R: Parse the frontmatter block of a template.

    Returns:
        Tuple of (metadata, body_without_frontmatter)
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return TemplateMetadata(), content

    metadata = TemplateMetadata()
    current_key = ""
    for line in match.group(1).split("\n"):
        line = line.rstrip()
        if not line or line.startswith("#"):
            continue

        if line.strip().startswith("- "):
            if current_key == "inputs":
                metadata.inputs.append(line.strip()[2:].strip())
            continue

        if ":" in line:
            key, _, value = line.partition(":")
            current_key = key.strip()
            value = value.strip().strip('"').strip("'")
            if current_key == "subject":
                metadata.subject = value
            elif current_key == "description":
                metadata.description = value

    return metadata, content[match.end() :]


class EmailTemplateLoader:
    """
    R: Load, cache and render email templates.

    Constraints:
      - No path traversal via template name
      - Only declared inputs are replaced; everything else stays literal
    """

    def __init__(
        self,
        templates_dir: Path = TEMPLATES_DIR,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._templates_dir = Path(templates_dir)
        self._logger = logger or logging.getLogger(__name__)
        self._cache: dict[str, tuple[TemplateMetadata, str]] = {}

    def load(self, name: str) -> tuple[TemplateMetadata, str]:
        if name in self._cache:
            return self._cache[name]

        if not _NAME_RE.match(name or ""):
            raise TemplateNotFoundError(f"Nombre de template inválido: {name!r}")

        path = self._templates_dir / f"{name}.html"
        if not path.exists():
            self._logger.error("Email template not found", extra={"template": name})
            raise TemplateNotFoundError(f"Template de email no encontrado: {name}")

        metadata, body = parse_frontmatter(path.read_text(encoding="utf-8"))
        if not metadata.subject:
            raise TemplateNotFoundError(f"Template sin subject: {name}")

        self._logger.debug(
            "Loaded email template",
            extra={"template": name, "declared_inputs": metadata.inputs},
        )
        self._cache[name] = (metadata, body)
        return metadata, body

    def render(self, name: str, data: Mapping[str, Any]) -> RenderedEmail:
        metadata, body = self.load(name)

        missing = [key for key in metadata.inputs if key not in data]
        if missing:
            self._logger.warning(
                "Template expects inputs not provided",
                extra={"template": name, "missing": missing},
            )

        subject = metadata.subject
        for key in metadata.inputs:
            value = str(data.get(key, ""))
            body = body.replace("{" + key + "}", html.escape(value))
            subject = subject.replace("{" + key + "}", value)
        return RenderedEmail(subject=subject, html_body=body.strip())
