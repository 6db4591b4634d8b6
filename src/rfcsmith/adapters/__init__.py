"""Adapters bridging Markdown sources and the xml2rfc renderer."""
