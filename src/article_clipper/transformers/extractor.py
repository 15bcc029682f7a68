"""Readable content extraction.

Isolates the article body of a parsed page with readability, derives a
file-safe title, and collects the page's own images as origin-relative
paths. Collected images are tagged so the Markdown converter can render
them as local embeds.
"""

import logging
import posixpath
import re
from urllib.parse import unquote, urlsplit, urljoin

import lxml.html
from lxml import etree
from lxml.html import HtmlElement
from readability import Document
from readability.readability import Unparseable

from article_clipper.clients.exceptions import ExtractionFault
from schemas.clip import ExtractedArticle, asset_file_name

logger = logging.getLogger(__name__)

EMBED_ATTRIBUTE = "data-clip-embed"
FALLBACK_TITLE = "Untitled"
MAX_TITLE_LENGTH = 100

_INVALID_TITLE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")


def _is_data_uri(src: str) -> bool:
    return src.strip().lower().startswith("data:")


def sanitize_title(title: str) -> str:
    """Make *title* usable as both a folder name and a file stem.

    Examples:
        >>> sanitize_title("  A/B: testing?  ")
        'A B testing'
        >>> sanitize_title("...")
        ''
    """
    title = _INVALID_TITLE_CHARS.sub(" ", title)
    title = _WHITESPACE.sub(" ", title).strip()
    title = title[:MAX_TITLE_LENGTH].strip()
    return title.strip(". ")


class ReadableExtractor:
    """Extract the primary article content from a parsed page.

    Example:
        document = lxml.html.document_fromstring(page.text)
        article = ReadableExtractor().extract(document, "example.com")
    """

    def extract(
        self,
        document: HtmlElement,
        hostname: str,
        page_url: str | None = None,
    ) -> ExtractedArticle:
        """Extract title, readable subtree and asset references.

        The input document is not modified.

        Args:
            document: Parsed HTML document
            hostname: Host the document was fetched from
            page_url: Full page URL, used to resolve document-relative
                      image paths (default: the origin root)

        Returns:
            ExtractedArticle for the page

        Raises:
            ExtractionFault: If no readable content can be found
        """
        title = self.derive_title(document, hostname)

        source = lxml.html.tostring(document, encoding="unicode")
        try:
            summary = Document(source).summary(html_partial=True)
        except Unparseable as e:
            raise ExtractionFault(f"Cannot extract readable content: {e}") from e

        try:
            readable = lxml.html.fromstring(summary)
        except etree.ParserError as e:
            raise ExtractionFault(f"No readable content found on {hostname}") from e

        images = readable.xpath("//img")
        if not readable.text_content().strip() and not images:
            raise ExtractionFault(f"No readable content found on {hostname}")

        base_url = page_url or f"https://{hostname}/"
        asset_references: list[str] = []
        for img in images:
            reference = self._relative_asset_path(
                self._image_source(img), hostname, base_url
            )
            if reference is None:
                continue
            file_name = asset_file_name(reference)
            img.set("src", file_name)
            img.set(EMBED_ATTRIBUTE, file_name)
            if "srcset" in img.attrib:
                del img.attrib["srcset"]
            asset_references.append(reference)

        logger.debug(
            f"Extracted '{title}' with {len(asset_references)} asset reference(s)"
        )
        return ExtractedArticle(
            title=title,
            readable_node=readable,
            asset_references=asset_references,
        )

    def derive_title(self, document: HtmlElement, hostname: str) -> str:
        """Return a non-empty, file-safe title for *document*.

        Tries the <title> element, then the first h1, h2 or h3, then the
        hostname, then FALLBACK_TITLE.
        """
        candidates = [document.findtext(".//title") or ""]
        for tag in ("h1", "h2", "h3"):
            headings = document.xpath(f"//{tag}")
            if headings:
                candidates.append(headings[0].text_content())
        candidates.append(hostname)

        for candidate in candidates:
            title = sanitize_title(candidate)
            if title:
                return title
        return FALLBACK_TITLE

    def _image_source(self, img: HtmlElement) -> str | None:
        """Return the image URL, preferring data-src over a data: placeholder."""
        src = img.get("src")
        if not src or _is_data_uri(src):
            return img.get("data-src") or src
        return src

    def _relative_asset_path(
        self, src: str | None, hostname: str, base_url: str
    ) -> str | None:
        """Map an image src to a path relative to the page origin.

        The query string, if any, is kept so the asset URL can be rebuilt.
        Returns None for images that are not served by *hostname*
        (other hosts, data URIs).
        """
        if not src or _is_data_uri(src):
            return None

        parts = urlsplit(urljoin(base_url, src.strip()))
        if parts.scheme not in ("http", "https") or parts.hostname != hostname:
            return None

        path = unquote(parts.path).lstrip("/")
        if not path:
            return None
        path = posixpath.normpath(path)
        # An encoded "?" in the path would read back as a query separator
        if path.startswith("..") or "?" in path:
            return None
        if parts.query:
            return f"{path}?{parts.query}"
        return path
