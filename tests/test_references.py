from __future__ import annotations

import pytest

from rfcsmith.adapters.xml2rfc import Xml2RfcRenderer
from rfcsmith.core.citations import (
    CitationKind,
    CitationRecord,
    CitationRegistry,
    reference_file,
)
from rfcsmith.core.config import RenderConfig
from rfcsmith.core.context import DocumentMatter
from rfcsmith.core.diagnostics import RecordingEmitter


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def renderer(emitter: RecordingEmitter) -> Xml2RfcRenderer:
    return Xml2RfcRenderer(RenderConfig(standalone=True), emitter=emitter)


def _normative(target: str) -> CitationRecord:
    return CitationRecord(target, CitationKind.NORMATIVE)


def _informative(target: str) -> CitationRecord:
    return CitationRecord(target, CitationKind.INFORMATIVE)


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        (CitationRecord("RFC2119"), "reference.RFC.2119.xml"),
        (CitationRecord("RFC0793"), "reference.RFC.0793.xml"),
        (CitationRecord("rfc20"), "reference.RFC.0020.xml"),
        (CitationRecord("I-D.ietf-foo-bar"), "reference.I-D.draft-ietf-foo-bar.xml"),
        (
            CitationRecord("I-D.draft-ietf-foo-bar", sequence=3),
            "reference.I-D.draft-ietf-foo-bar-03.xml",
        ),
        (CitationRecord("STD68"), None),
    ],
)
def test_reference_file_conventions(record: CitationRecord, expected: str | None) -> None:
    assert reference_file(record) == expected


def test_reference_file_joins_base_url() -> None:
    record = CitationRecord("RFC8174")
    assert (
        reference_file(record, "https://bib.ietf.org/public/rfc/bibxml/")
        == "https://bib.ietf.org/public/rfc/bibxml/reference.RFC.8174.xml"
    )


def test_registry_keeps_first_position_and_last_record() -> None:
    registry = CitationRegistry()
    registry.register(_informative("RFC2119"))
    registry.register(_informative("RFC8174"))
    registry.register(_normative("RFC2119"))

    assert [record.target for record in registry] == ["RFC2119", "RFC8174"]
    assert registry.get("RFC2119") == _normative("RFC2119")
    assert "RFC8174" in registry
    assert len(registry) == 2
    assert [record.target for record in registry.of_kind(CitationKind.NORMATIVE)] == ["RFC2119"]


def test_references_emit_informative_before_normative(
    renderer: Xml2RfcRenderer, emitter: RecordingEmitter
) -> None:
    renderer.document_matter(DocumentMatter.MAIN)
    renderer.register_citation(_normative("RFC2119"))
    renderer.register_citation(_informative("RFC8174"))
    renderer.register_citation(_normative("RFC5234"))
    start = len(renderer.getvalue())

    renderer.references()

    assert renderer.getvalue()[start:] == (
        b"</middle>\n<back>\n"
        b'<references title="Informative References">\n'
        b'\t<xi:include href="reference.RFC.8174.xml"/>\n'
        b"</references>\n"
        b'<references title="Normative References">\n'
        b'\t<xi:include href="reference.RFC.2119.xml"/>\n'
        b'\t<xi:include href="reference.RFC.5234.xml"/>\n'
        b"</references>\n"
    )
    assert emitter.events_named("references_emitted") == [{"informative": 1, "normative": 2}]


def test_references_drain_open_sections_first(renderer: Xml2RfcRenderer) -> None:
    renderer.document_matter(DocumentMatter.MAIN)
    renderer.header(lambda: True, 1, "intro", False)
    renderer.header(lambda: True, 2, "terms", False)
    renderer.register_citation(_normative("RFC2119"))
    start = len(renderer.getvalue())

    renderer.references()

    assert renderer.getvalue()[start:].startswith(
        b"</section>\n</section>\n</middle>\n<back>\n<references"
    )
    assert renderer.state.matter is DocumentMatter.BACK


def test_references_in_back_matter_close_appendix_sections(renderer: Xml2RfcRenderer) -> None:
    renderer.document_matter(DocumentMatter.BACK)
    renderer.header(lambda: True, 1, "appendix", False)
    renderer.register_citation(_informative("RFC8174"))
    start = len(renderer.getvalue())

    renderer.references()

    assert renderer.getvalue()[start:].startswith(b"</section>\n<references")


def test_empty_group_is_omitted(renderer: Xml2RfcRenderer) -> None:
    renderer.register_citation(_normative("RFC2119"))
    renderer.references()
    output = renderer.getvalue()
    assert b"Informative References" not in output
    assert b"Normative References" in output


def test_references_are_emitted_once(renderer: Xml2RfcRenderer) -> None:
    renderer.register_citation(_normative("RFC2119"))
    renderer.references()
    renderer.references()
    assert renderer.getvalue().count(b"<references ") == 1


def test_unresolved_citation_is_skipped_with_warning(
    renderer: Xml2RfcRenderer, emitter: RecordingEmitter
) -> None:
    renderer.register_citation(_normative("RFC2119"))
    renderer.register_citation(_normative("STD68"))
    renderer.register_citation(_informative("BCP14"))
    renderer.references()

    output = renderer.getvalue()
    assert b"STD68" not in output
    assert b"Informative References" not in output
    assert emitter.events_named("unresolved_citation") == [
        {"target": "BCP14"},
        {"target": "STD68"},
    ]
    assert len(emitter.warnings) == 2


def test_explicit_reference_file_wins(renderer: Xml2RfcRenderer) -> None:
    renderer.register_citation(
        CitationRecord("STD68", CitationKind.NORMATIVE, filename="refs/std68.xml")
    )
    renderer.references()
    assert b'\t<xi:include href="refs/std68.xml"/>\n' in renderer.getvalue()


def test_reference_base_url_from_config() -> None:
    renderer = Xml2RfcRenderer(
        RenderConfig(standalone=True, reference_base_url="https://example.org/refs")
    )
    renderer.register_citation(_informative("RFC8174"))
    renderer.references()
    assert b'href="https://example.org/refs/reference.RFC.8174.xml"' in renderer.getvalue()


def test_citation_renders_cross_reference(renderer: Xml2RfcRenderer) -> None:
    renderer.citation("RFC2119")
    assert renderer.getvalue() == b'<xref target="RFC2119"/>'
