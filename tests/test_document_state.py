from __future__ import annotations

from rfcsmith.core.attributes import AttributeSet, render_attributes
from rfcsmith.core.context import DocumentMatter, OutputBuffer, RendererState


def test_output_buffer_encodes_text_as_utf8() -> None:
    buffer = OutputBuffer()
    buffer.write("café ")
    buffer.write(b"bytes")
    assert buffer.getvalue() == "café bytes".encode()
    assert len(buffer) == len("café bytes".encode())


def test_uncommitted_scratch_is_discarded() -> None:
    buffer = OutputBuffer()
    buffer.write("keep")
    with buffer.scratch():
        buffer.write("drop")
        assert buffer.depth == 1
        assert len(buffer) == 4
    assert buffer.getvalue() == b"keep"
    assert buffer.depth == 0


def test_committed_scratch_merges_into_parent() -> None:
    buffer = OutputBuffer()
    with buffer.scratch() as outer:
        buffer.write("a")
        with buffer.scratch():
            buffer.write("lost")
        with buffer.scratch() as inner:
            buffer.write("b")
            inner.commit()
        outer.commit()
    assert buffer.getvalue() == b"ab"


def test_capture_returns_bytes_without_writing() -> None:
    buffer = OutputBuffer()
    buffer.write("x")
    captured = buffer.capture(lambda: buffer.write("<t>y</t>"))
    assert captured == b"<t>y</t>"
    assert buffer.getvalue() == b"x"


def test_document_matter_is_ordered() -> None:
    assert DocumentMatter.FRONT < DocumentMatter.MAIN < DocumentMatter.BACK


def test_state_attribute_queue() -> None:
    state = RendererState()
    state.push_attributes([AttributeSet(), AttributeSet(anchor="a")])
    state.push_attributes([AttributeSet(classes=("x",))])
    assert state.take_attributes() == [AttributeSet(anchor="a"), AttributeSet(classes=("x",))]
    assert state.take_attributes() == []


def test_attribute_set_from_mapping() -> None:
    attributes = AttributeSet.from_mapping(
        {"id": "fig-1", "class": ["wide", "dark"], "title": "Flow", "ignored": None}
    )
    assert attributes.anchor == "fig-1"
    assert attributes.classes == ("wide", "dark")
    assert attributes.items() == [
        ("anchor", "fig-1"),
        ("class", "wide dark"),
        ("title", "Flow"),
    ]


def test_render_attributes_escapes_values() -> None:
    rendered = render_attributes([AttributeSet(attributes=(("title", 'say "hi" & <go>'),))])
    assert rendered == ' title="say &quot;hi&quot; &amp; &lt;go&gt;"'


def test_render_attributes_empty() -> None:
    assert render_attributes([]) == ""
