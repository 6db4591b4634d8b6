"""Citation records collected while rendering and their reference files."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
import re


class CitationKind(Enum):
    """Classification of a cited document."""

    NORMATIVE = "normative"
    INFORMATIVE = "informative"


@dataclass(frozen=True, slots=True)
class CitationRecord:
    """A document cited from the text."""

    target: str
    kind: CitationKind = CitationKind.INFORMATIVE
    filename: str | None = None
    sequence: int | None = None


class CitationRegistry:
    """Citation records keyed by target, iterated in first-seen order.

    Registering a target again replaces its record but keeps the position the
    target was first seen at.
    """

    def __init__(self) -> None:
        self._records: dict[str, CitationRecord] = {}

    def register(self, record: CitationRecord) -> None:
        self._records[record.target] = record

    def get(self, target: str) -> CitationRecord | None:
        return self._records.get(target)

    def of_kind(self, kind: CitationKind) -> list[CitationRecord]:
        """Return the records of one kind in registration order."""
        return [record for record in self._records.values() if record.kind is kind]

    def __iter__(self) -> Iterator[CitationRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, target: object) -> bool:
        return target in self._records


_RFC_PATTERN = re.compile(r"^RFC\s*0*(?P<number>\d+)$", re.IGNORECASE)
_DRAFT_PATTERN = re.compile(r"^I-D\.(?:draft-)?(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)$")


def reference_file(record: CitationRecord, base_url: str | None = None) -> str | None:
    """Derive the conventional inclusion path for a citation.

    ``RFC2119`` maps to ``reference.RFC.2119.xml`` and ``I-D.ietf-foo`` (with an
    optional revision) to ``reference.I-D.draft-ietf-foo-02.xml``. Other
    identifiers have no convention and yield ``None``.
    """
    target = record.target.strip()
    filename: str | None = None

    rfc = _RFC_PATTERN.match(target)
    if rfc is not None:
        filename = f"reference.RFC.{int(rfc.group('number')):04d}.xml"
    else:
        draft = _DRAFT_PATTERN.match(target)
        if draft is not None:
            revision = f"-{record.sequence:02d}" if record.sequence is not None else ""
            filename = f"reference.I-D.draft-{draft.group('name')}{revision}.xml"

    if filename is None:
        return None
    if base_url:
        return f"{base_url.rstrip('/')}/{filename}"
    return filename


__all__ = ["CitationKind", "CitationRecord", "CitationRegistry", "reference_file"]
