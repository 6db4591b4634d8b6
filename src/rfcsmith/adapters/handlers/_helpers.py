"""Internal helpers shared across handler modules."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import re
from typing import Any, cast

from bs4.element import Tag

from rfcsmith.core.attributes import AttributeSet


_ALIGN_STYLE = re.compile(r"text-align\s*:\s*(?P<align>left|right|center)", re.IGNORECASE)


def coerce_attribute(value: Any) -> str | None:
    """Normalise a BeautifulSoup attribute value to a string when possible."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(value, Iterable):
        for item in value:
            if isinstance(item, str):
                return item
    return None


def gather_classes(value: Any) -> list[str]:
    """Return a list of classes extracted from a BeautifulSoup attribute."""
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
        return [cast(str, item) for item in value if isinstance(item, str)]
    return []


def attribute_set(*elements: Tag, drop_classes: Iterable[str] = ()) -> AttributeSet:
    """Build an IAL from the attributes of one or more elements."""
    dropped = set(drop_classes)
    merged: dict[str, Any] = {}
    classes: list[str] = []
    for element in elements:
        attrs: Mapping[str, Any] = element.attrs
        for key, value in attrs.items():
            if key == "class":
                classes.extend(cls for cls in gather_classes(value) if cls not in dropped)
                continue
            merged[key] = coerce_attribute(value)
    if classes:
        merged["class"] = classes
    return AttributeSet.from_mapping(merged)


def language_of(element: Tag) -> str:
    """Return the fenced-code language declared by ``language-*`` classes."""
    for cls in gather_classes(element.get("class")):
        if cls.startswith("language-"):
            return cls[len("language-") :]
    return ""


def alignment_of(element: Tag) -> str | None:
    """Return the alignment declared by the ``align`` attribute or inline style."""
    align = coerce_attribute(element.get("align"))
    if align:
        return align.strip().lower()
    style = coerce_attribute(element.get("style")) or ""
    match = _ALIGN_STYLE.search(style)
    return match.group("align").lower() if match else None


def child_tags(element: Tag) -> list[Tag]:
    return [child for child in element.children if isinstance(child, Tag)]
