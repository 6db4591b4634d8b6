"""Render xml2rfc partials (front matter snippets) with Jinja2."""

from __future__ import annotations

import calendar
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from rfcsmith.core.metadata import DocumentDate, TitleMetadata


TEMPLATE_DIR = Path(__file__).resolve().parent / "partials"


def date_attributes(date: DocumentDate | None) -> list[tuple[str, str]]:
    """Return the ``<date>`` attributes, omitting missing components."""
    if date is None:
        return []
    attributes: list[tuple[str, str]] = []
    if date.year:
        attributes.append(("year", str(date.year)))
    if date.month:
        attributes.append(("month", calendar.month_name[date.month]))
    if date.day:
        attributes.append(("day", str(date.day)))
    return attributes


class Xml2RfcFormatter:
    """Render xml2rfc partials stored next to this module."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.templates: dict[str, Template] = {}

    def _get_template(self, name: str) -> Template:
        template = self.templates.get(name)
        if template is None:
            template = self.env.get_template(f"{name}.xml")
            self.templates[name] = template
        return template

    def render(self, name: str, **context: Any) -> str:
        """Render the partial ``name`` with the given context."""
        return self._get_template(name).render(**context)

    def front(self, title: TitleMetadata) -> str:
        """Render the ``<rfc>`` opening tag and the ``<front>`` contents."""
        return self.render("front", title=title, date_attributes=date_attributes(title.date))


__all__ = ["TEMPLATE_DIR", "Xml2RfcFormatter", "date_attributes"]
