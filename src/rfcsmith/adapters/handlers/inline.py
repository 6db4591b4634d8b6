"""Inline handlers: emphasis, code, links, images, citations and index terms."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bs4.element import NavigableString, Tag

from rfcsmith.adapters.xml2rfc.renderer import LinkKind
from rfcsmith.core.citations import CitationKind, CitationRecord
from rfcsmith.core.rules import renders

from ._helpers import child_tags, coerce_attribute


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rfcsmith.adapters.driver import DriverContext


_MAILTO = "mailto:"


def _sole_child(element: Tag, names: tuple[str, ...]) -> Tag | None:
    """Return the only child of ``element`` when it is one of ``names``."""
    for child in element.children:
        if isinstance(child, NavigableString) and child.strip():
            return None
    tags = child_tags(element)
    if len(tags) == 1 and tags[0].name in names:
        return tags[0]
    return None


@renders("em", "i", name="emphasis")
def render_emphasis(element: Tag, context: DriverContext) -> None:
    inner = _sole_child(element, ("strong", "b"))
    if inner is not None:
        context.renderer.triple_emphasis(context.capture_children(inner))
        return
    context.renderer.emphasis(context.capture_children(element))


@renders("strong", "b", name="strong_emphasis")
def render_strong(element: Tag, context: DriverContext) -> None:
    """Render strong text; ``***text***`` becomes triple emphasis."""
    inner = _sole_child(element, ("em", "i"))
    if inner is not None:
        context.renderer.triple_emphasis(context.capture_children(inner))
        return
    context.renderer.double_emphasis(context.capture_children(element))


@renders("code", "kbd", "samp", name="code_spans")
def render_code_span(element: Tag, context: DriverContext) -> None:
    context.renderer.code_span(element.get_text())


@renders("del", "s", "strike", name="strike_through")
def render_strike_through(element: Tag, context: DriverContext) -> None:
    context.renderer.strike_through(context.capture_children(element))


@renders("br", name="line_breaks")
def render_line_break(element: Tag, context: DriverContext) -> None:
    context.renderer.line_break()


@renders("a", name="links")
def render_link(element: Tag, context: DriverContext) -> None:
    """Render hyperlinks, autolinks and e-mail addresses."""
    renderer = context.renderer
    href = coerce_attribute(element.get("href")) or ""
    if not href:
        context.render_children(element)
        return

    text = element.get_text()
    if not child_tags(element):
        if href.startswith(_MAILTO) and href[len(_MAILTO) :] == text:
            renderer.autolink(text, LinkKind.EMAIL)
            return
        if href == text:
            renderer.autolink(href)
            return

    title = coerce_attribute(element.get("title")) or ""
    renderer.link(href, title, context.capture_children(element))


@renders("img", name="images")
def render_image(element: Tag, context: DriverContext) -> None:
    src = coerce_attribute(element.get("src")) or ""
    if not src:
        return
    title = coerce_attribute(element.get("title")) or ""
    alt = coerce_attribute(element.get("alt")) or ""
    context.renderer.image(src, title, alt)


def _sequence_of(element: Tag) -> int | None:
    value = coerce_attribute(element.get("data-sequence"))
    if not value or not value.isdigit():
        return None
    return int(value)


@renders("cite", name="citations")
def render_citation(element: Tag, context: DriverContext) -> None:
    """Register a citation marker and render its cross-reference."""
    target = coerce_attribute(element.get("data-target"))
    if not target:
        context.render_children(element)
        return

    if coerce_attribute(element.get("data-kind")) == CitationKind.NORMATIVE.value:
        kind = CitationKind.NORMATIVE
    else:
        kind = CitationKind.INFORMATIVE
    record = CitationRecord(
        target=target,
        kind=kind,
        filename=coerce_attribute(element.get("data-file")) or None,
        sequence=_sequence_of(element),
    )
    context.renderer.register_citation(record)
    context.renderer.citation(target)


@renders("span", classes=("rfcsmith-index",), name="index_terms")
def render_index_term(element: Tag, context: DriverContext) -> None:
    primary = coerce_attribute(element.get("data-primary")) or ""
    if not primary:
        return
    secondary = coerce_attribute(element.get("data-secondary")) or ""
    context.renderer.index(primary, secondary)


__all__ = [
    "render_citation",
    "render_code_span",
    "render_emphasis",
    "render_image",
    "render_index_term",
    "render_line_break",
    "render_link",
    "render_strike_through",
    "render_strong",
]
