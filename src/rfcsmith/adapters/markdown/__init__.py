"""Markdown front end: YAML front matter and conversion to HTML."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import re
from threading import Lock
from typing import Any

import markdown
from slugify import slugify
import yaml

from rfcsmith.core.exceptions import RfcRenderingError


DEFAULT_MARKDOWN_EXTENSIONS = [
    "admonition",
    "attr_list",
    "def_list",
    "fenced_code",
    "tables",
    "toc",
    "rfcsmith.extensions.citations:CitationExtension",
    "rfcsmith.extensions.index:IndexExtension",
]

_FRONT_MATTER = re.compile(
    r"\A(?P<bom>\ufeff?)---[ \t]*\r?\n(?P<body>.*?)(?:\r?\n)?^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

_NAME_SEPARATORS = re.compile(r"[,\s]+")


class MarkdownConversionError(RfcRenderingError):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(slots=True)
class MarkdownDocument:
    """HTML body and YAML front matter of one Markdown source."""

    html: str
    front_matter: dict[str, Any]


def _heading_slug(value: str, separator: str) -> str:
    # Same slugs as headings without an id get from the block handlers.
    return slugify(value, separator=separator)


def _extension_configs(extensions: Iterable[str]) -> dict[str, dict[str, Any]]:
    if "toc" not in extensions:
        return {}
    return {"toc": {"permalink": False, "slugify": _heading_slug}}


class _ProcessorPool:
    """Markdown processors keyed by extension list, each guarded by its own lock.

    ``markdown.Markdown`` instances keep per-document state and must not be
    shared between threads while converting.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, ...], tuple[Lock, markdown.Markdown]] = {}
        self._guard = Lock()

    def get(self, extensions: tuple[str, ...]) -> tuple[Lock, markdown.Markdown]:
        entry = self._entries.get(extensions)
        if entry is not None:
            return entry
        with self._guard:
            entry = self._entries.get(extensions)
            if entry is None:
                entry = (Lock(), self._build(extensions))
                self._entries[extensions] = entry
        return entry

    @staticmethod
    def _build(extensions: tuple[str, ...]) -> markdown.Markdown:
        try:
            return markdown.Markdown(
                extensions=list(extensions),
                extension_configs=_extension_configs(extensions),
            )
        except Exception as exc:
            raise MarkdownConversionError(
                f"Cannot load Markdown extensions {list(extensions)}: {exc}"
            ) from exc


_PROCESSORS = _ProcessorPool()


def merge_markdown_extensions(
    base: Iterable[str],
    requested: Iterable[str] | str | None = None,
) -> list[str]:
    """Append ``requested`` extensions to ``base``, keeping each name once.

    Requested names may be given as comma or whitespace separated strings, as
    they arrive from ``-x`` options. Duplicates are detected case-insensitively
    and the first spelling wins.
    """
    if isinstance(requested, str):
        requested = [requested]
    names = list(base)
    for value in requested or ():
        names.extend(chunk for chunk in _NAME_SEPARATORS.split(value) if chunk)

    seen: set[str] = set()
    merged: list[str] = []
    for name in names:
        if name.lower() not in seen:
            seen.add(name.lower())
            merged.append(name)
    return merged


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Return the YAML front matter mapping and the remaining Markdown.

    Sources without a well-formed block, or whose block is not valid YAML,
    are returned unchanged with empty metadata. A block that parses to
    something other than a mapping is dropped.
    """
    match = _FRONT_MATTER.match(source)
    if match is None:
        return {}, source
    try:
        metadata = yaml.safe_load(match.group("body"))
    except yaml.YAMLError:
        return {}, source
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, match.group("bom") + source[match.end() :]


def render_markdown(
    source: str,
    extensions: Sequence[str] | None = None,
) -> MarkdownDocument:
    """Convert Markdown ``source`` into HTML, collecting its front matter."""
    front_matter, body = split_front_matter(source)
    active = tuple(DEFAULT_MARKDOWN_EXTENSIONS if extensions is None else extensions)
    lock, processor = _PROCESSORS.get(active)
    try:
        with lock:
            html = processor.reset().convert(body)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc
    return MarkdownDocument(html=html, front_matter=front_matter)


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "MarkdownConversionError",
    "MarkdownDocument",
    "merge_markdown_extensions",
    "render_markdown",
    "split_front_matter",
]
