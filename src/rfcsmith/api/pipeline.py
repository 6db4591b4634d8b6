"""Markdown to xml2rfc conversion pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

from rfcsmith.adapters.driver import DocumentDriver
from rfcsmith.adapters.markdown import (
    merge_markdown_extensions,
    render_markdown,
    split_front_matter,
)
from rfcsmith.adapters.xml2rfc.renderer import Xml2RfcRenderer
from rfcsmith.core.citations import CitationRecord
from rfcsmith.core.config import RenderConfig
from rfcsmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from rfcsmith.core.metadata import TitleMetadata, load_title_metadata


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversionResult:
    """Output of a single conversion."""

    xml: bytes
    metadata: TitleMetadata
    citations: list[CitationRecord] = field(default_factory=list)
    front_matter: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.xml.decode("utf-8")


def convert_html(
    html: str,
    *,
    config: RenderConfig | None = None,
    metadata: TitleMetadata | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> ConversionResult:
    """Render HTML produced by Python-Markdown into xml2rfc.

    Diagnostics go to the ``rfcsmith`` loggers unless ``emitter`` is given.
    """
    config = config or RenderConfig()
    metadata = metadata or TitleMetadata()
    renderer = Xml2RfcRenderer(config, emitter=emitter or LoggingEmitter())
    xml = DocumentDriver(renderer).run(html, metadata)
    return ConversionResult(
        xml=xml,
        metadata=metadata,
        citations=list(renderer.state.citations),
    )


def convert_markdown(
    source: str,
    *,
    config: RenderConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
    extensions: Iterable[str] | None = None,
    **overrides: Any,
) -> ConversionResult:
    """Convert Markdown ``source`` into xml2rfc.

    Configuration is read from the ``rfcsmith`` front matter section unless
    ``config`` is given; keyword ``overrides`` take precedence over the front
    matter. Extra ``extensions`` are appended to the configured list.
    """
    front_matter, _ = split_front_matter(source)
    if config is None:
        config = RenderConfig.from_front_matter(front_matter, **overrides)
    else:
        updates = {key: value for key, value in overrides.items() if value is not None}
        if updates:
            config = config.model_copy(update=updates)

    active = merge_markdown_extensions(config.markdown_extensions, extensions)
    logger.debug("converting Markdown with extensions %s", active)

    document = render_markdown(source, active)
    metadata = load_title_metadata(_title_payload(document.front_matter))
    result = convert_html(document.html, config=config, metadata=metadata, emitter=emitter)
    result.front_matter = document.front_matter
    return result


def convert_file(
    path: Path | str,
    *,
    config: RenderConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
    extensions: Iterable[str] | None = None,
    **overrides: Any,
) -> ConversionResult:
    """Read a Markdown file and convert it."""
    source = Path(path).read_text(encoding="utf-8")
    return convert_markdown(
        source,
        config=config,
        emitter=emitter,
        extensions=extensions,
        **overrides,
    )


def _title_payload(front_matter: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in front_matter.items() if key != "rfcsmith"}


__all__ = ["ConversionResult", "convert_file", "convert_html", "convert_markdown"]
