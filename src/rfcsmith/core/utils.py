"""Utility helpers specific to xml2rfc output."""

from __future__ import annotations

import re
from xml.sax.saxutils import escape


_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\t": "&#9;"}

# Characters that are not allowed anywhere in an XML 1.0 document.
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def escape_xml_chars(text: str) -> str:
    """Escape character data for an xml2rfc element body."""
    if not text:
        return text
    return escape(_INVALID_XML_CHARS.sub("", text))


def escape_xml_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute."""
    if not value:
        return value
    return escape(_INVALID_XML_CHARS.sub("", value), _ATTRIBUTE_ENTITIES)


def escape_cdata(text: str) -> str:
    """Split ``]]>`` sequences so the payload can live inside a CDATA section."""
    return text.replace("]]>", "]]]]><![CDATA[>")


__all__ = ["escape_cdata", "escape_xml_attribute", "escape_xml_chars"]
