from __future__ import annotations

import pytest

from rfcsmith.adapters.xml2rfc import XML_DECLARATION, Xml2RfcRenderer
from rfcsmith.core.config import RenderConfig
from rfcsmith.core.context import DocumentMatter, Lifecycle
from rfcsmith.core.diagnostics import RecordingEmitter
from rfcsmith.core.metadata import TitleMetadata


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def standalone(emitter: RecordingEmitter) -> Xml2RfcRenderer:
    return Xml2RfcRenderer(RenderConfig(standalone=True), emitter=emitter)


@pytest.fixture
def fragment(emitter: RecordingEmitter) -> Xml2RfcRenderer:
    return Xml2RfcRenderer(RenderConfig(standalone=False), emitter=emitter)


def _open_section(renderer: Xml2RfcRenderer, anchor: str, level: int = 1) -> None:
    renderer.header(lambda: True, level, anchor, False)


def test_document_header_is_emitted_once(standalone: Xml2RfcRenderer) -> None:
    standalone.document_header()
    standalone.document_header()
    assert standalone.getvalue() == XML_DECLARATION.encode()
    assert standalone.state.lifecycle is Lifecycle.HEADER_EMITTED


def test_fragment_lifecycle_calls_write_nothing(fragment: Xml2RfcRenderer) -> None:
    fragment.document_header()
    fragment.title_block(TitleMetadata(title="Ignored"))
    fragment.document_matter(DocumentMatter.MAIN)
    fragment.document_matter(DocumentMatter.BACK)
    fragment.references()
    fragment.document_footer()
    assert fragment.getvalue() == b""


def test_title_block_opens_rfc_and_front(standalone: Xml2RfcRenderer) -> None:
    standalone.title_block(TitleMetadata(title="Example", doc_name="draft-example-00"))
    output = standalone.getvalue().decode()
    assert output.startswith(
        '<rfc xmlns:xi="http://www.w3.org/2001/XInclude" docName="draft-example-00">\n<front>\n'
    )
    assert "<title>Example</title>" in output


def test_second_title_block_is_ignored_with_warning(
    standalone: Xml2RfcRenderer, emitter: RecordingEmitter
) -> None:
    standalone.title_block(TitleMetadata(title="First"))
    before = standalone.getvalue()
    standalone.title_block(TitleMetadata(title="Second"))

    assert standalone.getvalue() == before
    assert standalone.state.title is not None
    assert standalone.state.title.title == "First"
    assert len(emitter.warnings) == 1


def test_matter_transitions_close_and_open_containers(standalone: Xml2RfcRenderer) -> None:
    standalone.document_matter(DocumentMatter.FRONT)
    assert standalone.getvalue() == b""

    standalone.document_matter(DocumentMatter.MAIN)
    assert standalone.getvalue() == b"</front>\n<middle>\n"

    _open_section(standalone, "intro")
    standalone.document_matter(DocumentMatter.BACK)
    assert standalone.getvalue().endswith(b"</section>\n</middle>\n<back>\n")
    assert standalone.state.section_level == 0


def test_repeated_matter_is_a_noop(standalone: Xml2RfcRenderer) -> None:
    standalone.document_matter(DocumentMatter.MAIN)
    _open_section(standalone, "intro")
    before = standalone.getvalue()

    standalone.document_matter(DocumentMatter.MAIN)

    assert standalone.getvalue() == before
    assert standalone.state.section_level == 1


def test_backward_matter_transition_is_ignored(
    standalone: Xml2RfcRenderer, emitter: RecordingEmitter
) -> None:
    standalone.document_matter(DocumentMatter.BACK)
    before = standalone.getvalue()

    standalone.document_matter(DocumentMatter.MAIN)

    assert standalone.getvalue() == before
    assert standalone.state.matter is DocumentMatter.BACK
    assert emitter.warnings and "back" in emitter.warnings[0]


def test_fragment_matter_change_only_closes_sections(fragment: Xml2RfcRenderer) -> None:
    _open_section(fragment, "a")
    _open_section(fragment, "b", level=2)
    fragment.document_matter(DocumentMatter.MAIN)
    assert fragment.getvalue().endswith(b"</section>\n</section>\n")
    assert fragment.state.matter is DocumentMatter.MAIN


def test_footer_closes_everything_once(standalone: Xml2RfcRenderer) -> None:
    standalone.document_header()
    standalone.title_block(TitleMetadata())
    standalone.document_matter(DocumentMatter.MAIN)
    _open_section(standalone, "a")
    _open_section(standalone, "b", level=2)

    standalone.document_footer()
    standalone.document_footer()

    output = standalone.getvalue()
    assert output.endswith(b"</section>\n</section>\n</middle>\n</rfc>\n")
    assert output.count(b"</rfc>") == 1
    assert standalone.state.lifecycle is Lifecycle.FOOTER_EMITTED


def test_footer_in_front_matter_closes_front(standalone: Xml2RfcRenderer) -> None:
    standalone.title_block(TitleMetadata())
    standalone.document_footer()
    assert standalone.getvalue().endswith(b"</front>\n</rfc>\n")
