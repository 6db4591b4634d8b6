"""rfcsmith converts Markdown documents into xml2rfc (RFC 7991) XML."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .adapters.xml2rfc import Xml2RfcRenderer
from .api import ConversionResult, convert_file, convert_html, convert_markdown
from .core.config import RenderConfig
from .core.exceptions import RfcRenderingError, TitleBlockError
from .core.metadata import TitleMetadata, load_title_metadata


try:
    __version__ = version("rfcsmith")
except PackageNotFoundError:  # pragma: no cover - source checkout
    __version__ = "0.0.0"


__all__ = [
    "ConversionResult",
    "RenderConfig",
    "RfcRenderingError",
    "TitleBlockError",
    "TitleMetadata",
    "Xml2RfcRenderer",
    "__version__",
    "convert_file",
    "convert_html",
    "convert_markdown",
    "load_title_metadata",
]
