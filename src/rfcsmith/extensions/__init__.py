"""Python-Markdown extensions producing markup understood by the rfcsmith driver."""

from __future__ import annotations

from .citations import CitationExtension
from .index import IndexExtension


__all__ = ["CitationExtension", "IndexExtension"]
