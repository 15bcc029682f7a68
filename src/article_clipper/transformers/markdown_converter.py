"""Markdown conversion for extracted articles.

Images tagged by the extractor are rendered with the double-bracket embed
syntax (``![[path]]``). Every other element, including untagged images,
goes through markdownify unchanged, so bracket sequences in prose are
never rewritten.
"""

import logging
import re

import lxml.html
from lxml.html import HtmlElement
from markdownify import MarkdownConverter as BaseMarkdownConverter

from schemas.clip import MarkupDocument

from .extractor import EMBED_ATTRIBUTE

logger = logging.getLogger(__name__)

_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
_FENCED_BLOCK = re.compile(r"(^```.*?^```[ \t]*$)", re.MULTILINE | re.DOTALL)


def collapse_blank_lines(markdown: str) -> str:
    """Reduce runs of blank lines to one, leaving fenced code untouched."""
    parts = _FENCED_BLOCK.split(markdown)
    # Odd indexes hold the fenced blocks captured by split()
    for i in range(0, len(parts), 2):
        parts[i] = _EXCESS_BLANK_LINES.sub("\n\n", parts[i])
    return "".join(parts)


def format_embed(name: str) -> str:
    """Return the embed markup for a local media file.

    Examples:
        >>> format_embed("static/foo.png")
        '![[static/foo.png]]'
    """
    return f"![[{name}]]"


class EmbedConverter(BaseMarkdownConverter):
    """markdownify converter that renders tagged images as local embeds."""

    def convert_img(self, el, text, parent_tags):
        name = el.get(EMBED_ATTRIBUTE)
        if name:
            return format_embed(name)
        return super().convert_img(el, text, parent_tags)


class MarkupConverter:
    """Convert a readable article subtree to Markdown.

    Attributes:
        options: Options passed to markdownify
    """

    def __init__(self, **options):
        self.options = {
            "heading_style": "ATX",
            "bullets": "-",
            **options,
        }

    def convert(self, readable_node: HtmlElement) -> MarkupDocument:
        """Render *readable_node* as Markdown.

        Args:
            readable_node: Article subtree produced by the extractor

        Returns:
            MarkupDocument holding the Markdown text
        """
        html = lxml.html.tostring(readable_node, encoding="unicode")
        markdown = EmbedConverter(**self.options).convert(html)
        markdown = collapse_blank_lines(markdown).strip() + "\n"
        logger.debug(f"Converted article to {len(markdown)} chars of Markdown")
        return MarkupDocument(text=markdown)
