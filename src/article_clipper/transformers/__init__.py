"""Transformers from fetched pages to Markdown notes."""

from .extractor import ReadableExtractor, sanitize_title
from .markdown_converter import EmbedConverter, MarkupConverter, format_embed

__all__ = [
    "ReadableExtractor",
    "MarkupConverter",
    "EmbedConverter",
    "format_embed",
    "sanitize_title",
]
