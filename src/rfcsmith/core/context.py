"""Rendering state primitives shared across the xml2rfc pipeline."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto
from typing import TYPE_CHECKING

from .attributes import AttributeSet
from .citations import CitationRegistry


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .metadata import TitleMetadata


class DocumentMatter(IntEnum):
    """Top-level divisions of an xml2rfc document.

    The ordering is meaningful: a document only ever moves forward from
    ``FRONT`` to ``MAIN`` to ``BACK``.
    """

    FRONT = 1
    """``<front>``: title block, abstract and notes."""

    MAIN = 2
    """``<middle>``: the numbered sections."""

    BACK = 3
    """``<back>``: references and appendices."""


class Lifecycle(Enum):
    """Progress of the document-level wrapper tags."""

    NOT_STARTED = auto()
    HEADER_EMITTED = auto()
    FOOTER_EMITTED = auto()


class OutputBuffer:
    """Append-only byte buffer with nested scratch areas.

    Writes always land in the innermost scratch area. A scratch area is merged
    into its parent when committed and dropped otherwise, which lets emitters
    discard a container whose content turned out to be empty.
    """

    def __init__(self) -> None:
        self._stack: list[bytearray] = [bytearray()]

    def write(self, data: str | bytes) -> None:
        """Append text (encoded as UTF-8) or raw bytes."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._stack[-1].extend(data)

    def __len__(self) -> int:
        return len(self._stack[-1])

    @property
    def depth(self) -> int:
        """Number of scratch areas currently open."""
        return len(self._stack) - 1

    def getvalue(self) -> bytes:
        """Return the committed output."""
        return bytes(self._stack[0])

    @contextmanager
    def scratch(self) -> Iterator[_Scratch]:
        """Open a scratch area; its bytes survive only when committed."""
        area = bytearray()
        self._stack.append(area)
        handle = _Scratch()
        try:
            yield handle
        finally:
            popped = self._stack.pop()
            if handle.committed:
                self._stack[-1].extend(popped)

    def capture(self, render: Callable[[], object]) -> bytes:
        """Run ``render`` against a scratch area and return what it wrote."""
        with self.scratch():
            render()
            captured = bytes(self._stack[-1])
        return captured


class _Scratch:
    __slots__ = ("committed",)

    def __init__(self) -> None:
        self.committed = False

    def commit(self) -> None:
        self.committed = True


@dataclass(slots=True)
class RendererState:
    """In-memory state accumulated while rendering one document."""

    standalone: bool = False
    open_sections: list[int] = field(default_factory=list)
    matter: DocumentMatter = DocumentMatter.FRONT
    lifecycle: Lifecycle = Lifecycle.NOT_STARTED
    references_emitted: bool = False
    pending_attributes: list[AttributeSet] = field(default_factory=list)
    title: TitleMetadata | None = None
    citations: CitationRegistry = field(default_factory=CitationRegistry)
    out: OutputBuffer = field(default_factory=OutputBuffer)

    @property
    def section_level(self) -> int:
        """Number of <section> elements opened and not yet closed."""
        return len(self.open_sections)

    @property
    def heading_level(self) -> int:
        """Heading level of the innermost open section, 0 when none is open."""
        return self.open_sections[-1] if self.open_sections else 0

    def push_attributes(self, batch: list[AttributeSet]) -> None:
        """Queue attribute sets for the next consuming block."""
        self.pending_attributes.extend(item for item in batch if not item.is_empty())

    def take_attributes(self) -> list[AttributeSet]:
        """Return the pending attribute sets and clear the queue."""
        batch = self.pending_attributes
        self.pending_attributes = []
        return batch


__all__ = ["DocumentMatter", "Lifecycle", "OutputBuffer", "RendererState"]
