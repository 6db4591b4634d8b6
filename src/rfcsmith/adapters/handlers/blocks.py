"""Block-level handlers: paragraphs, sections, lists, tables and containers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bs4.element import NavigableString, Tag
from slugify import slugify

from rfcsmith.adapters.driver import MATTER_MARKERS
from rfcsmith.adapters.xml2rfc.renderer import ListFlags, TableAlignment
from rfcsmith.core.rules import renders
from rfcsmith.core.utils import escape_xml_chars

from ._helpers import (
    alignment_of,
    attribute_set,
    child_tags,
    coerce_attribute,
    gather_classes,
    language_of,
)


if TYPE_CHECKING:  # pragma: no cover - typing only
    from rfcsmith.adapters.driver import DriverContext


_LIST_FLAGS = {
    "ul": ListFlags.NONE,
    "ol": ListFlags.ORDERED,
    "dl": ListFlags.DEFINITION,
}

_ITEM_FLAGS = {
    "li": ListFlags.NONE,
    "dt": ListFlags.DEFINITION | ListFlags.TERM,
    "dd": ListFlags.DEFINITION,
}

_ADMONITION_KINDS = ("abstract", "note", "aside")


def _has_text(element: Tag) -> bool:
    return any(
        isinstance(child, NavigableString) and child.strip() for child in element.children
    )


def _render_title(element: Tag, context: DriverContext) -> None:
    """Render ``element`` as the ``<name>`` of the enclosing container."""
    context.renderer.header(lambda: context.render_children(element), 0, "", True)


@renders("p", name="paragraphs")
def render_paragraph(element: Tag, context: DriverContext) -> None:
    """Render paragraphs, honouring ``{mainmatter}``-style markers."""
    renderer = context.renderer
    tags = child_tags(element)
    matter = MATTER_MARKERS.get(element.get_text().strip())
    if matter is not None and not tags:
        context.auto_main = False
        renderer.document_matter(matter)
        return

    # A lone image is artwork, which xml2rfc does not allow inside <t>.
    if len(tags) == 1 and tags[0].name == "img" and not _has_text(element):
        context.render_node(tags[0])
        return

    renderer.paragraph(lambda: context.render_children(element))


@renders("h1", "h2", "h3", "h4", "h5", "h6", name="headings")
def render_heading(element: Tag, context: DriverContext) -> None:
    level = int(element.name[1])
    anchor = coerce_attribute(element.get("id")) or slugify(element.get_text(" ", strip=True))
    quote = context.quoted
    if not quote:
        context.enter_main_matter()
    context.renderer.header(lambda: context.render_children(element), level, anchor, quote)


@renders("blockquote", name="blockquotes")
def render_blockquote(element: Tag, context: DriverContext) -> None:
    with context.quote():
        content = context.capture_children(element)
    # Attributes are queued after the content so nested blocks cannot consume them.
    context.renderer.set_ial([attribute_set(element)])
    context.renderer.block_quote(content)


@renders("pre", name="code_blocks")
def render_code_block(element: Tag, context: DriverContext) -> None:
    """Render fenced and indented code as ``<sourcecode>``."""
    renderer = context.renderer
    code = element.find("code", recursive=False)
    if not isinstance(code, Tag):
        renderer.block_html(element.get_text().encode("utf-8"))
        return

    lang = language_of(code)
    dropped = (f"language-{lang}",) if lang else ()
    renderer.set_ial([attribute_set(element, code, drop_classes=dropped)])
    renderer.block_code(escape_xml_chars(code.get_text()).encode("utf-8"), lang)


def _list_start(element: Tag) -> int:
    value = coerce_attribute(element.get("start"))
    if not value:
        return 1
    try:
        return int(value)
    except ValueError:
        return 1


@renders("ul", "ol", "dl", name="lists")
def render_list(element: Tag, context: DriverContext) -> None:
    flags = _LIST_FLAGS[element.name]
    context.renderer.list(
        lambda: context.render_children(element),
        flags,
        _list_start(element),
    )


@renders("li", "dt", "dd", name="list_items")
def render_list_item(element: Tag, context: DriverContext) -> None:
    with context.quote():
        text = context.capture_children(element)
    context.renderer.list_item(text, _ITEM_FLAGS[element.name])


def _table_rows(table: Tag) -> tuple[list[Tag], list[Tag]]:
    """Split the rows that belong to ``table`` into header and body rows."""
    header: list[Tag] = []
    body: list[Tag] = []
    for row in table.find_all("tr"):
        if row.find_parent("table") is not table:
            continue
        if row.parent is not None and row.parent.name == "thead":
            header.append(row)
        else:
            body.append(row)
    return header, body


def _cell_alignment(cell: Tag) -> TableAlignment:
    align = alignment_of(cell)
    if align is None:
        return TableAlignment.NONE
    try:
        return TableAlignment(align)
    except ValueError:
        return TableAlignment.NONE


@renders("table", name="tables")
def render_table(element: Tag, context: DriverContext) -> None:
    header_rows, body_rows = _table_rows(element)
    header = context.capture_nodes(header_rows)
    body = context.capture_nodes(body_rows)
    alignments: list[TableAlignment] = []
    if header_rows:
        alignments = [_cell_alignment(cell) for cell in header_rows[0].find_all(["th", "td"])]
    context.renderer.table(header, body, alignments)


@renders("tr", name="table_rows")
def render_table_row(element: Tag, context: DriverContext) -> None:
    context.renderer.table_row(context.capture_children(element))


@renders("th", name="table_header_cells")
def render_table_header_cell(element: Tag, context: DriverContext) -> None:
    with context.quote():
        text = context.capture_children(element)
    context.renderer.table_header_cell(text, _cell_alignment(element))


@renders("td", name="table_cells")
def render_table_cell(element: Tag, context: DriverContext) -> None:
    with context.quote():
        text = context.capture_children(element)
    context.renderer.table_cell(text, _cell_alignment(element))


def _admonition_kind(element: Tag) -> str:
    classes = gather_classes(element.get("class"))
    for kind in _ADMONITION_KINDS:
        if kind in classes:
            return kind
    return "note"


def _admonition_body(element: Tag, kind: str, context: DriverContext) -> None:
    for child in list(element.children):
        if isinstance(child, Tag) and "admonition-title" in gather_classes(child.get("class")):
            # Abstracts carry no title in xml2rfc.
            if kind != "abstract":
                _render_title(child, context)
            continue
        context.render_node(child)


@renders("div", classes=("admonition",), name="admonitions")
def render_admonition(element: Tag, context: DriverContext) -> None:
    """Render ``!!! abstract``, ``!!! note`` and ``!!! aside`` blocks.

    Other admonition types are rendered as notes.
    """
    renderer = context.renderer
    kind = _admonition_kind(element)
    with context.quote():
        content = renderer.out.capture(lambda: _admonition_body(element, kind, context))
    emitters = {
        "abstract": renderer.abstract,
        "note": renderer.note,
        "aside": renderer.aside,
    }
    emitters[kind](content)


@renders("figure", name="figures")
def render_figure(element: Tag, context: DriverContext) -> None:
    """Render figures, moving the caption ahead of the artwork."""
    caption = element.find("figcaption", recursive=False)
    caption = caption if isinstance(caption, Tag) else None

    def render_body() -> None:
        if caption is not None:
            _render_title(caption, context)
        context.render_nodes(child for child in element.children if child is not caption)

    with context.quote():
        content = context.renderer.out.capture(render_body)
    context.renderer.figure(content)


@renders("figcaption", name="figure_captions")
def render_figure_caption(element: Tag, context: DriverContext) -> None:
    _render_title(element, context)


@renders("aside", name="asides")
def render_aside(element: Tag, context: DriverContext) -> None:
    with context.quote():
        content = context.capture_children(element)
    context.renderer.aside(content)


@renders("hr", name="horizontal_rules")
def render_horizontal_rule(element: Tag, context: DriverContext) -> None:
    context.renderer.hrule()


__all__ = [
    "render_admonition",
    "render_aside",
    "render_blockquote",
    "render_code_block",
    "render_figure",
    "render_figure_caption",
    "render_heading",
    "render_horizontal_rule",
    "render_list",
    "render_list_item",
    "render_paragraph",
    "render_table",
    "render_table_cell",
    "render_table_header_cell",
    "render_table_row",
]
