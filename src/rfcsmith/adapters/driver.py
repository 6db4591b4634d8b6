"""Walk the HTML produced by Python-Markdown and feed the xml2rfc renderer.

The driver owns the document lifecycle: it opens the document, dispatches
every node to the handler registered for its tag, appends the references
section when citations were collected and finally closes the document (or
only the open sections when rendering a fragment).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
import logging

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from rfcsmith.core.context import DocumentMatter
from rfcsmith.core.diagnostics import DiagnosticEmitter
from rfcsmith.core.metadata import TitleMetadata
from rfcsmith.core.rules import RenderRegistry
from rfcsmith.core.utils import escape_xml_chars

from .xml2rfc.renderer import Xml2RfcRenderer


logger = logging.getLogger(__name__)

MATTER_MARKERS: dict[str, DocumentMatter] = {
    "{frontmatter}": DocumentMatter.FRONT,
    "{mainmatter}": DocumentMatter.MAIN,
    "{backmatter}": DocumentMatter.BACK,
}

# Containers whose newline-only text nodes are layout, not content.
_BLOCK_CONTAINERS = frozenset(
    {
        "[document]",
        "html",
        "body",
        "div",
        "section",
        "blockquote",
        "figure",
        "aside",
        "ul",
        "ol",
        "dl",
        "li",
        "dt",
        "dd",
        "table",
        "thead",
        "tbody",
        "tr",
        "td",
        "th",
    }
)


def build_default_registry() -> RenderRegistry:
    """Return a registry populated with the built-in handlers."""
    from .handlers import blocks, inline

    registry = RenderRegistry()
    registry.collect_from(blocks)
    registry.collect_from(inline)
    return registry


def uses_matter_markers(root: Tag) -> bool:
    """Return True when the document switches matter explicitly."""
    for paragraph in root.find_all("p"):
        if paragraph.get_text().strip() in MATTER_MARKERS:
            return True
    return False


@dataclass
class DriverContext:
    """State shared with handlers while one document is walked."""

    renderer: Xml2RfcRenderer
    registry: RenderRegistry
    auto_main: bool = False
    quote_depth: int = 0

    @property
    def emitter(self) -> DiagnosticEmitter:
        return self.renderer.emitter

    @property
    def quoted(self) -> bool:
        """Whether headings currently render as container titles."""
        return self.quote_depth > 0

    @contextmanager
    def quote(self) -> Iterator[None]:
        """Treat headings rendered inside the block as container titles."""
        self.quote_depth += 1
        try:
            yield
        finally:
            self.quote_depth -= 1

    def render_node(self, node: PageElement) -> None:
        """Dispatch a single node to its handler."""
        if isinstance(node, PreformattedString):
            return
        if isinstance(node, NavigableString):
            self._render_text(node)
            return
        if not isinstance(node, Tag):
            return
        rule = self.registry.resolve(node)
        if rule is None:
            self.render_children(node)
            return
        rule.handler(node, self)

    def render_nodes(self, nodes: Iterable[PageElement]) -> bool:
        """Render ``nodes`` in order and report whether output was produced."""
        out = self.renderer.out
        before = len(out)
        for node in list(nodes):
            self.render_node(node)
        return len(out) > before

    def render_children(self, element: Tag) -> bool:
        return self.render_nodes(element.children)

    def capture_children(self, element: Tag) -> bytes:
        """Render the children of ``element`` and return the bytes instead."""
        return self.renderer.out.capture(lambda: self.render_children(element))

    def capture_nodes(self, nodes: Iterable[PageElement]) -> bytes:
        return self.renderer.out.capture(lambda: self.render_nodes(nodes))

    def enter_main_matter(self) -> None:
        """Switch to main matter ahead of the first section when implicit."""
        if not self.auto_main:
            return
        self.auto_main = False
        if self.renderer.state.matter is DocumentMatter.FRONT:
            self.renderer.document_matter(DocumentMatter.MAIN)

    def _render_text(self, node: NavigableString) -> None:
        text = str(node)
        if not text:
            return
        parent = node.parent
        parent_name = parent.name if parent is not None else "[document]"
        if not text.strip() and "\n" in text and parent_name in _BLOCK_CONTAINERS:
            return
        self.renderer.normal_text(escape_xml_chars(text))


class DocumentDriver:
    """Render an HTML document through :class:`Xml2RfcRenderer` callbacks."""

    def __init__(
        self,
        renderer: Xml2RfcRenderer,
        registry: RenderRegistry | None = None,
        *,
        parser: str = "html.parser",
    ) -> None:
        self.renderer = renderer
        self.registry = registry or build_default_registry()
        self.parser = parser

    def parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html, self.parser)

    def run(self, html: str, title: TitleMetadata | None = None) -> bytes:
        """Render ``html`` and return the produced xml2rfc bytes."""
        soup = self.parse(html)
        renderer = self.renderer
        context = DriverContext(
            renderer=renderer,
            registry=self.registry,
            auto_main=renderer.standalone and not uses_matter_markers(soup),
        )

        renderer.document_header()
        if renderer.standalone:
            renderer.title_block(title or TitleMetadata())

        context.render_children(soup)

        if len(renderer.state.citations):
            logger.debug("emitting references for %d citations", len(renderer.state.citations))
            renderer.references()
        if renderer.standalone:
            renderer.document_footer()
        else:
            renderer.close_sections()
        return renderer.getvalue()


__all__ = [
    "MATTER_MARKERS",
    "DocumentDriver",
    "DriverContext",
    "build_default_registry",
    "uses_matter_markers",
]
