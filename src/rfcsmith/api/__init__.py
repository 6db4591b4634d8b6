"""High-level entry points converting Markdown into xml2rfc documents.

Usage Example
:
    >>> from rfcsmith.api import convert_markdown
    >>> result = convert_markdown("# Intro\\n\\nHello.")
    >>> print(result.text, end="")
    <BLANKLINE>
    <section anchor="intro">
    <name>Intro</name>
    <t>Hello.</t>
    </section>
"""

from __future__ import annotations

from .pipeline import ConversionResult, convert_file, convert_html, convert_markdown


__all__ = ["ConversionResult", "convert_file", "convert_html", "convert_markdown"]
