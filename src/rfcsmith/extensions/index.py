"""Markdown extension providing the ``(((primary, secondary)))`` index syntax."""

from __future__ import annotations

import re
from xml.etree import ElementTree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor


INDEX_PATTERN = r"\(\(\((?P<payload>[^()]+)\)\)\)"


class _IndexInlineProcessor(InlineProcessor):
    """Replace index syntax with invisible tagged spans."""

    def handleMatch(  # noqa: N802 - Markdown inline API requires camelCase
        self,
        match: re.Match[str],
        data: str,
    ) -> tuple[ElementTree.Element | None, int, int]:  # type: ignore[override]
        del data
        primary, _, secondary = match.group("payload").partition(",")
        primary = primary.strip()
        if not primary:
            return None, match.start(0), match.end(0)

        element = ElementTree.Element("span")
        element.set("class", "rfcsmith-index")
        element.set("data-primary", primary)
        secondary = secondary.strip()
        if secondary:
            element.set("data-secondary", secondary)
        # The index marker is invisible in the output text
        element.text = ""
        return element, match.start(0), match.end(0)


class IndexExtension(Extension):
    """Register the inline index processor with Python-Markdown."""

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        processor = _IndexInlineProcessor(INDEX_PATTERN, md)
        md.inlinePatterns.register(processor, "rfcsmith_index", 180)


def makeExtension(**kwargs: object) -> IndexExtension:  # noqa: N802 - Markdown API hook; pragma: no cover
    return IndexExtension(**kwargs)


__all__ = ["INDEX_PATTERN", "IndexExtension", "makeExtension"]
