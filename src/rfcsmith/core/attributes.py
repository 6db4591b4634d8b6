"""Inline attribute lists (IALs) attached to the next rendered block."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .utils import escape_xml_attribute


@dataclass(frozen=True, slots=True)
class AttributeSet:
    """Attributes declared by an IAL such as ``{#anchor .class key=value}``."""

    anchor: str | None = None
    classes: tuple[str, ...] = ()
    attributes: tuple[tuple[str, str], ...] = field(default=())

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> AttributeSet:
        """Build an attribute set from HTML-style attributes.

        ``id`` becomes the anchor and ``class`` the class list; every other
        key is kept in declaration order.
        """
        anchor: str | None = None
        classes: list[str] = []
        extra: list[tuple[str, str]] = []
        for key, value in values.items():
            if key == "id":
                anchor = str(value) if value else None
            elif key == "class":
                if isinstance(value, str):
                    classes.extend(value.split())
                else:
                    classes.extend(str(item) for item in value)
            elif value is not None:
                extra.append((str(key), str(value)))
        return cls(anchor=anchor, classes=tuple(classes), attributes=tuple(extra))

    def is_empty(self) -> bool:
        return self.anchor is None and not self.classes and not self.attributes

    def items(self) -> list[tuple[str, str]]:
        """Return the xml2rfc attributes in emission order."""
        entries: list[tuple[str, str]] = []
        if self.anchor:
            entries.append(("anchor", self.anchor))
        if self.classes:
            entries.append(("class", " ".join(self.classes)))
        entries.extend(self.attributes)
        return entries


def render_attributes(batch: Iterable[AttributeSet]) -> str:
    """Render pending attribute sets into an opening-tag attribute string.

    Later sets override earlier ones key by key so the opening tag never
    carries the same attribute twice. The result is empty or starts with a
    space.
    """
    merged: dict[str, str] = {}
    for attribute_set in batch:
        for key, value in attribute_set.items():
            merged.pop(key, None)
            merged[key] = value
    return "".join(f' {key}="{escape_xml_attribute(value)}"' for key, value in merged.items())


__all__ = ["AttributeSet", "render_attributes"]
