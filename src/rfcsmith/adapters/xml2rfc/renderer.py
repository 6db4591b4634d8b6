"""Callback-driven renderer producing xml2rfc documents.

The renderer is fed by a document driver in document order. Block callbacks
receive either pre-rendered inner content (``bytes``) or a zero-argument
callable that renders the inner content into the shared output buffer and
reports whether it produced anything. The renderer keeps the state that spans
callbacks: open sections, the current document matter, pending inline
attribute lists and the citations to list in the references section.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from enum import Enum, IntFlag
import logging

from rfcsmith.core.attributes import AttributeSet, render_attributes
from rfcsmith.core.citations import CitationKind, CitationRecord, reference_file
from rfcsmith.core.config import RenderConfig
from rfcsmith.core.context import DocumentMatter, Lifecycle, OutputBuffer, RendererState
from rfcsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from rfcsmith.core.metadata import TitleMetadata
from rfcsmith.core.utils import escape_cdata, escape_xml_attribute, escape_xml_chars

from .formatter import Xml2RfcFormatter


logger = logging.getLogger(__name__)

RenderCallback = Callable[[], bool]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Requirement-level keywords from BCP 14 (RFC 2119, RFC 8174).
BCP14_KEYWORDS = frozenset(
    {
        "MUST",
        "MUST NOT",
        "REQUIRED",
        "SHALL",
        "SHALL NOT",
        "SHOULD",
        "SHOULD NOT",
        "RECOMMENDED",
        "NOT RECOMMENDED",
        "MAY",
        "OPTIONAL",
    }
)

_MATTER_OPEN = {
    DocumentMatter.FRONT: "<front>\n",
    DocumentMatter.MAIN: "<middle>\n",
    DocumentMatter.BACK: "<back>\n",
}
_MATTER_CLOSE = {
    DocumentMatter.FRONT: "</front>\n",
    DocumentMatter.MAIN: "</middle>\n",
    DocumentMatter.BACK: "</back>\n",
}

_REFERENCE_GROUPS = (
    (CitationKind.INFORMATIVE, "Informative References"),
    (CitationKind.NORMATIVE, "Normative References"),
)


class ListFlags(IntFlag):
    """Flag bits describing lists and list items."""

    NONE = 0
    ORDERED = 1
    DEFINITION = 2
    TERM = 4


class TableAlignment(Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class LinkKind(Enum):
    NORMAL = "normal"
    EMAIL = "email"


class Xml2RfcRenderer:
    """Render parser callbacks into an xml2rfc byte stream."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        *,
        formatter: Xml2RfcFormatter | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self.formatter = formatter or Xml2RfcFormatter()
        self.emitter = emitter or NullEmitter()
        self.state = RendererState(standalone=self.config.standalone)

    @property
    def out(self) -> OutputBuffer:
        """Output buffer owned by this renderer."""
        return self.state.out

    @property
    def standalone(self) -> bool:
        return self.state.standalone

    def getvalue(self) -> bytes:
        """Return the bytes rendered so far."""
        return self.state.out.getvalue()

    # Inline attribute lists -------------------------------------------------

    def set_ial(self, batch: Iterable[AttributeSet]) -> None:
        """Attach attribute sets to the next block that consumes them."""
        self.state.push_attributes(list(batch))

    def take_ial(self) -> list[AttributeSet]:
        """Return the pending attribute sets and clear them."""
        return self.state.take_attributes()

    # Block emitters ---------------------------------------------------------

    def block_code(self, text: bytes, lang: str = "") -> None:
        """Render a code block; ``text`` is written verbatim."""
        attributes = render_attributes(self.take_ial())
        out = self.state.out
        if lang:
            out.write(f'<sourcecode{attributes} type="{escape_xml_attribute(lang)}">\n')
        else:
            out.write(f"<sourcecode{attributes}>\n")
        out.write(text)
        out.write("</sourcecode>\n")

    def block_quote(self, text: bytes) -> None:
        attributes = render_attributes(self.take_ial())
        self._wrap(f"<blockquote{attributes}>\n", text, "</blockquote>\n")

    def abstract(self, text: bytes) -> None:
        self._wrap("<abstract>\n", text, "</abstract>\n")

    def aside(self, text: bytes) -> None:
        self._wrap("<aside>\n", text, "</aside>\n")

    def note(self, text: bytes) -> None:
        self._wrap("<note>\n", text, "</note>\n")

    def figure(self, text: bytes) -> None:
        self._wrap("<figure>\n", text, "</figure>\n")

    def block_html(self, text: bytes) -> None:
        """Render raw markup as verbatim artwork."""
        payload = escape_cdata(text.decode("utf-8")).strip("\n")
        self._wrap('<artwork type="ascii-art"><![CDATA[\n', payload, "\n]]></artwork>\n")

    def _wrap(self, opening: str, text: bytes | str, closing: str) -> None:
        out = self.state.out
        out.write(opening)
        out.write(text)
        out.write(closing)

    def paragraph(self, render_text: RenderCallback) -> None:
        """Render a paragraph, dropping it when the text renders nothing."""
        out = self.state.out
        with out.scratch() as area:
            out.write("<t>")
            if not render_text():
                return
            out.write("</t>\n")
            area.commit()

    def list(self, render_items: RenderCallback, flags: ListFlags, start: int = 1) -> None:
        """Render a list, dropping it entirely when no item is produced."""
        out = self.state.out
        if flags & ListFlags.ORDERED:
            opening = "<ol>\n" if start <= 1 else f'<ol start="{start}">\n'
            closing = "</ol>\n"
        elif flags & ListFlags.DEFINITION:
            opening, closing = "<dl>\n", "</dl>\n"
        else:
            opening, closing = "<ul>\n", "</ul>\n"

        with out.scratch() as area:
            out.write(opening)
            if not render_items():
                return
            out.write(closing)
            area.commit()

    def list_item(self, text: bytes, flags: ListFlags) -> None:
        if flags & ListFlags.DEFINITION and not flags & ListFlags.TERM:
            self._wrap("<dd>", text, "</dd>\n")
        elif flags & ListFlags.TERM:
            self._wrap("<dt>", text, "</dt>\n")
        else:
            self._wrap("<li>", text, "</li>\n")

    def hrule(self) -> None:
        """Horizontal rules have no xml2rfc counterpart."""

    def table(self, header: bytes, body: bytes, column_data: Sequence[TableAlignment] = ()) -> None:
        out = self.state.out
        out.write("<table>\n<thead>\n")
        out.write(header)
        out.write("</thead>\n")
        if body:
            self._wrap("<tbody>\n", body, "</tbody>\n")
        out.write("</table>\n")

    def table_row(self, text: bytes) -> None:
        self._wrap("<tr>", text, "</tr>\n")

    def table_header_cell(self, text: bytes, align: TableAlignment = TableAlignment.NONE) -> None:
        if align in (TableAlignment.LEFT, TableAlignment.RIGHT):
            value = align.value
        else:
            value = TableAlignment.CENTER.value
        self._wrap(f'<th align="{value}">', text, "</th>")

    def table_cell(self, text: bytes, align: TableAlignment = TableAlignment.NONE) -> None:
        self._wrap("<td>", text, "</td>")

    def footnotes(self, render_text: RenderCallback) -> None:
        """Footnotes are not supported by xml2rfc."""

    def footnote_item(self, name: bytes, text: bytes, flags: ListFlags) -> None:
        """Footnotes are not supported by xml2rfc."""

    # Sections ---------------------------------------------------------------

    def header(self, render_title: RenderCallback, level: int, anchor: str, quote: bool) -> None:
        """Open a section for a heading, closing deeper or sibling sections.

        Headings inside quoted containers (figures, asides, notes) only render
        their title as a ``<name>`` and leave the section state alone.
        """
        out = self.state.out
        if quote:
            out.write("<name>")
            render_title()
            out.write("</name>\n")
            return

        open_sections = self.state.open_sections
        previous = self.state.heading_level
        if previous and level > previous + 1:
            self._report_level_skip(previous, level, anchor)
        while open_sections and open_sections[-1] >= level:
            open_sections.pop()
            out.write("</section>\n")

        out.write(f'\n<section anchor="{escape_xml_attribute(anchor)}">\n')
        out.write("<name>")
        render_title()
        out.write("</name>\n")
        open_sections.append(level)

    def _report_level_skip(self, previous: int, level: int, anchor: str) -> None:
        logger.debug("heading %r skips from level %d to %d", anchor, previous, level)
        if not self.config.warn_on_level_skip:
            return
        payload = {"anchor": anchor, "previous": previous, "level": level}
        self.emitter.event("heading_level_skip", payload)
        self.emitter.warning(
            f"Heading '{anchor}' jumps from level {previous} to level {level}; "
            "no intermediate sections are created."
        )

    def close_sections(self) -> int:
        """Close every open section and return how many were closed."""
        open_sections = self.state.open_sections
        closed = len(open_sections)
        self.state.out.write("</section>\n" * closed)
        open_sections.clear()
        return closed

    # Document lifecycle -----------------------------------------------------

    def document_header(self) -> None:
        """Emit the XML declaration once per standalone document."""
        if not self.standalone or self.state.lifecycle is not Lifecycle.NOT_STARTED:
            return
        self.state.out.write(XML_DECLARATION)
        self.state.lifecycle = Lifecycle.HEADER_EMITTED

    def title_block(self, title: TitleMetadata) -> None:
        """Capture the title metadata and open ``<rfc>`` and ``<front>``."""
        if not self.standalone:
            return
        if self.state.title is not None:
            self.emitter.warning("Ignoring additional title block; the first one is kept.")
            return
        self.state.title = title
        self.state.out.write(self.formatter.front(title))

    def document_matter(self, matter: DocumentMatter) -> None:
        """Move to ``matter``, closing the previous container.

        Front matter is open from the start, so moving into it is a no-op.
        Matter never moves backwards.
        """
        current = self.state.matter
        if matter == current:
            return
        if matter < current:
            self.emitter.warning(
                f"Ignoring transition from {current.name.lower()} matter "
                f"back to {matter.name.lower()} matter."
            )
            return
        self._switch_matter(matter)

    def _switch_matter(self, matter: DocumentMatter) -> None:
        self.close_sections()
        if self.standalone:
            out = self.state.out
            out.write(_MATTER_CLOSE[self.state.matter])
            out.write(_MATTER_OPEN[matter])
        self.state.matter = matter

    def document_footer(self) -> None:
        """Close open sections, the current matter and ``<rfc>``, once."""
        if not self.standalone or self.state.lifecycle is Lifecycle.FOOTER_EMITTED:
            return
        self.close_sections()
        out = self.state.out
        out.write(_MATTER_CLOSE[self.state.matter])
        out.write("</rfc>\n")
        self.state.lifecycle = Lifecycle.FOOTER_EMITTED

    # Citations and references -----------------------------------------------

    def register_citation(self, record: CitationRecord) -> None:
        """Remember a citation for the references section."""
        self.state.citations.register(record)

    def citation(self, target: str, title: str = "") -> None:
        """Render an inline cross-reference to a cited document."""
        self.state.out.write(f'<xref target="{escape_xml_attribute(target)}"/>')

    def references(self) -> None:
        """Emit the references section in back matter, once per document."""
        if not self.standalone or self.state.references_emitted:
            return
        self.state.references_emitted = True

        if self.state.matter is DocumentMatter.BACK:
            self.close_sections()
        else:
            self._switch_matter(DocumentMatter.BACK)

        counts: dict[str, int] = {}
        out = self.state.out
        for kind, group_title in _REFERENCE_GROUPS:
            records = self.state.citations.of_kind(kind)
            hrefs = [href for href in map(self._reference_href, records) if href]
            counts[kind.value] = len(hrefs)
            if not hrefs:
                continue
            out.write(f'<references title="{group_title}">\n')
            for href in hrefs:
                out.write(f'\t<xi:include href="{escape_xml_attribute(href)}"/>\n')
            out.write("</references>\n")
        self.emitter.event("references_emitted", counts)

    def _reference_href(self, record: CitationRecord) -> str | None:
        href = record.filename or reference_file(record, self.config.reference_base_url)
        if not href:
            self._report_unresolved(record)
        return href

    def _report_unresolved(self, record: CitationRecord) -> None:
        self.emitter.event("unresolved_citation", {"target": record.target})
        self.emitter.warning(
            f"Citation '{record.target}' has no reference file and no naming convention "
            "applies; it is left out of the references."
        )

    # Inline emitters --------------------------------------------------------

    def autolink(self, link: str, kind: LinkKind = LinkKind.NORMAL) -> None:
        target = f"mailto:{link}" if kind is LinkKind.EMAIL else link
        self.state.out.write(
            f'<eref target="{escape_xml_attribute(target)}">{escape_xml_chars(link)}</eref>'
        )

    def code_span(self, text: str) -> None:
        self._wrap("<tt>", escape_xml_chars(text), "</tt>")

    def double_emphasis(self, text: bytes) -> None:
        """Render strong text, using ``<bcp14>`` for requirement keywords."""
        if text.decode("utf-8") in BCP14_KEYWORDS:
            self._wrap("<bcp14>", text, "</bcp14>")
            return
        self._wrap("<strong>", text, "</strong>")

    def emphasis(self, text: bytes) -> None:
        self._wrap("<em>", text, "</em>")

    def triple_emphasis(self, text: bytes) -> None:
        self._wrap("<strong><em>", text, "</em></strong>")

    def strike_through(self, text: bytes) -> None:
        self.state.out.write(text)

    def image(self, link: str, title: str, alt: str) -> None:
        """Render remote images as hyperlinks and local ones as artwork."""
        target = escape_xml_attribute(link)
        if link.startswith(("http://", "https://")):
            self.state.out.write(f'<eref target="{target}">{escape_xml_chars(alt)}</eref>')
            return
        alt_attribute = f' alt="{escape_xml_attribute(alt)}"' if alt else ""
        self.state.out.write(f'<artwork src="{target}"{alt_attribute}/>')

    def line_break(self) -> None:
        self.state.out.write("\n<br/>\n")

    def link(self, link: str, title: str, content: bytes) -> None:
        """Render a link; fragment links become internal cross-references."""
        if link.startswith("#"):
            opening = f'<xref target="{escape_xml_attribute(link[1:])}">'
            self._wrap(opening, content, "</xref>")
            return
        self._wrap(f'<eref target="{escape_xml_attribute(link)}">', content, "</eref>")

    def index(self, primary: str, secondary: str = "") -> None:
        subitem = f' subitem="{escape_xml_attribute(secondary)}"' if secondary else ""
        self.state.out.write(f'<iref item="{escape_xml_attribute(primary)}"{subitem}/>')

    def raw_html_tag(self, tag: bytes) -> None:
        """Inline raw HTML is dropped."""

    def footnote_ref(self, ref: bytes, id: int) -> None:  # noqa: A002
        """Footnotes are not supported by xml2rfc."""

    def entity(self, entity: bytes) -> None:
        self.state.out.write(entity)

    def normal_text(self, text: bytes | str) -> None:
        self.state.out.write(text)


__all__ = [
    "BCP14_KEYWORDS",
    "XML_DECLARATION",
    "LinkKind",
    "ListFlags",
    "TableAlignment",
    "Xml2RfcRenderer",
]
