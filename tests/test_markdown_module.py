from __future__ import annotations

import pytest

from rfcsmith.adapters.markdown import (
    DEFAULT_MARKDOWN_EXTENSIONS,
    MarkdownConversionError,
    merge_markdown_extensions,
    render_markdown,
    split_front_matter,
)


def test_split_front_matter() -> None:
    source = "---\ntitle: Example\nauthor:\n  surname: Doe\n---\n# Intro\n"
    metadata, body = split_front_matter(source)
    assert metadata == {"title": "Example", "author": {"surname": "Doe"}}
    assert body == "# Intro\n"


def test_split_front_matter_without_block() -> None:
    source = "# Intro\n\n---\n"
    assert split_front_matter(source) == ({}, source)


def test_split_front_matter_unterminated_block() -> None:
    source = "---\ntitle: Example\n# Intro\n"
    assert split_front_matter(source) == ({}, source)


def test_split_front_matter_non_mapping_is_ignored() -> None:
    metadata, body = split_front_matter("---\n- a\n- b\n---\ntext\n")
    assert metadata == {}
    assert body == "text\n"


def test_split_front_matter_accepts_yaml_document_end() -> None:
    metadata, body = split_front_matter("---\ntitle: Example\n...\ntext\n")
    assert metadata == {"title": "Example"}
    assert body == "text\n"


def test_split_front_matter_invalid_yaml_keeps_source() -> None:
    source = "---\ntitle: [unclosed\n---\ntext\n"
    assert split_front_matter(source) == ({}, source)


def test_merge_markdown_extensions_appends_requested_once() -> None:
    merged = merge_markdown_extensions(["tables", "toc"], ["footnotes, TOC", "abbr footnotes"])
    assert merged == ["tables", "toc", "footnotes", "abbr"]


def test_merge_markdown_extensions_accepts_single_string() -> None:
    assert merge_markdown_extensions(["toc"], "footnotes") == ["toc", "footnotes"]
    assert merge_markdown_extensions(["toc"], None) == ["toc"]


def test_defaults_carry_rfcsmith_extensions() -> None:
    assert "rfcsmith.extensions.citations:CitationExtension" in DEFAULT_MARKDOWN_EXTENSIONS
    assert "rfcsmith.extensions.index:IndexExtension" in DEFAULT_MARKDOWN_EXTENSIONS


def test_render_markdown_collects_front_matter() -> None:
    document = render_markdown("---\ntitle: Demo\n---\n# Heading\n\nBody text.\n")
    assert document.front_matter == {"title": "Demo"}
    assert '<h1 id="heading">Heading</h1>' in document.html
    assert "<p>Body text.</p>" in document.html


def test_heading_ids_use_slugify() -> None:
    document = render_markdown("## Security Considerations & Caveats\n")
    assert 'id="security-considerations-caveats"' in document.html


def test_unknown_extension_is_reported() -> None:
    with pytest.raises(MarkdownConversionError):
        render_markdown("text\n", ["rfcsmith_no_such_extension"])
