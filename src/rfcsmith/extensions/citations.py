"""Markdown extension providing the ``[@!RFC2119]`` citation syntax.

``[@RFC2119]`` and ``[@?RFC2119]`` cite a document informatively,
``[@!RFC2119]`` normatively. An Internet-Draft revision follows a hash
(``[@?I-D.ietf-foo#02]``) and an explicit reference file follows a semicolon
(``[@!RFC2119;refs/rfc2119.xml]``).
"""

from __future__ import annotations

import re
from xml.etree import ElementTree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor


CITATION_PATTERN = (
    r"\[@(?P<kind>[!?]?)"
    r"(?P<target>[A-Za-z0-9][A-Za-z0-9._-]*)"
    r"(?:#(?P<sequence>\d+))?"
    r"(?:;(?P<file>[^\]\s]+))?"
    r"\]"
)

_KINDS = {"!": "normative", "?": "informative", "": "informative"}


class _CitationInlineProcessor(InlineProcessor):
    """Replace citation syntax with ``<cite>`` markers."""

    def handleMatch(  # noqa: N802 - Markdown inline API requires camelCase
        self,
        match: re.Match[str],
        data: str,
    ) -> tuple[ElementTree.Element, int, int]:  # type: ignore[override]
        del data
        element = ElementTree.Element("cite")
        element.set("data-target", match.group("target"))
        element.set("data-kind", _KINDS[match.group("kind")])
        sequence = match.group("sequence")
        if sequence:
            element.set("data-sequence", sequence)
        filename = match.group("file")
        if filename:
            element.set("data-file", filename)
        element.text = ""
        return element, match.start(0), match.end(0)


class CitationExtension(Extension):
    """Register the citation processor ahead of the link processors."""

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        processor = _CitationInlineProcessor(CITATION_PATTERN, md)
        md.inlinePatterns.register(processor, "rfcsmith_citation", 185)


def makeExtension(**kwargs: object) -> CitationExtension:  # noqa: N802 - Markdown API hook; pragma: no cover
    return CitationExtension(**kwargs)


__all__ = ["CITATION_PATTERN", "CitationExtension", "makeExtension"]
