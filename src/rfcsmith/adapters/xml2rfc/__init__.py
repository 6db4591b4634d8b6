"""xml2rfc output backend."""

from __future__ import annotations

from .formatter import Xml2RfcFormatter
from .renderer import (
    BCP14_KEYWORDS,
    XML_DECLARATION,
    LinkKind,
    ListFlags,
    TableAlignment,
    Xml2RfcRenderer,
)


__all__ = [
    "BCP14_KEYWORDS",
    "XML_DECLARATION",
    "LinkKind",
    "ListFlags",
    "TableAlignment",
    "Xml2RfcFormatter",
    "Xml2RfcRenderer",
]
