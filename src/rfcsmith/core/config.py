"""Configuration model used by the xml2rfc renderer.

RenderConfig

`standalone` (`bool`)
: Emit a complete document: XML declaration, `<rfc>` wrapper, front matter,
  matter containers and the generated references section. When `False` the
  renderer only produces a content fragment (sections and blocks).

`reference_base_url` (`str | None`)
: Prefix joined to conventional reference file names such as
  `reference.RFC.2119.xml`. Leave unset to include bare file names.

`warn_on_level_skip` (`bool`)
: Report headings that jump more than one level deeper than the current
  section. The output is never altered.

`markdown_extensions` (`list[str]`)
: Python-Markdown extensions used when converting Markdown sources.

Front matter may carry an `rfcsmith` mapping with the same keys; values given
on the command line take precedence.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _default_extensions() -> list[str]:
    from rfcsmith.adapters.markdown import DEFAULT_MARKDOWN_EXTENSIONS

    return list(DEFAULT_MARKDOWN_EXTENSIONS)


class RenderConfig(BaseModel):
    """Options controlling a single render."""

    model_config = ConfigDict(extra="forbid")

    standalone: bool = False
    reference_base_url: str | None = None
    warn_on_level_skip: bool = True
    markdown_extensions: list[str] = Field(default_factory=_default_extensions)

    @field_validator("reference_base_url", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_front_matter(
        cls,
        front_matter: Mapping[str, Any] | None,
        **overrides: Any,
    ) -> RenderConfig:
        """Build a configuration from the ``rfcsmith`` front matter section.

        Overrides set to ``None`` are ignored so that unset CLI flags do not
        mask front matter values.
        """
        section = (front_matter or {}).get("rfcsmith")
        payload: dict[str, Any] = dict(section) if isinstance(section, Mapping) else {}
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(payload)


__all__ = ["RenderConfig"]
