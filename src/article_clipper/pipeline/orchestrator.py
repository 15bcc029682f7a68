"""Clip orchestrator for end-to-end URL → note processing.

Wires the fetcher, extractor, converter, store and asset retriever
together and runs a single clip through them.
"""

import asyncio
import logging
import posixpath

import lxml.html
from lxml import etree
from lxml.html import HtmlElement

from article_clipper.aggregators.asset_retriever import AssetRetriever
from article_clipper.clients.exceptions import (
    ClipperError,
    ExtractionFault,
    NetworkFault,
    TitleCollisionError,
)
from article_clipper.clients.fetcher import ContentFetcher
from article_clipper.config import ClipperConfig
from article_clipper.notifications import LoggingNotifier, Notifier
from article_clipper.storage import Storage, ensure_path
from article_clipper.transformers.extractor import MAX_TITLE_LENGTH, ReadableExtractor
from article_clipper.transformers.markdown_converter import MarkupConverter
from schemas.clip import (
    ClipRequest,
    ClipResult,
    ClipState,
    ExtractedArticle,
    FetchedPage,
    StoredAsset,
    TargetLayout,
)

logger = logging.getLogger(__name__)


class ClipOrchestrator:
    """Runs one clip from URL to stored note and media.

    The page stages run strictly in order: fetch, extract, convert, write
    the note. Only then are the article's assets downloaded, concurrently,
    one task per distinct reference. The clip is done once every asset task
    has settled. A failing asset never affects its siblings or the note.

    Page-level faults end the clip in the failed state with a single
    notification. Cancelling :meth:`clip` cancels in-flight downloads and
    leaves the note in place.

    Attributes:
        storage: Store that receives the note and media
        fetcher: HTTP fetcher shared by the page and its assets
        notifier: Sink for user-facing messages
        config: Clip settings
    """

    def __init__(
        self,
        storage: Storage,
        fetcher: ContentFetcher,
        notifier: Notifier | None = None,
        config: ClipperConfig | None = None,
        extractor: ReadableExtractor | None = None,
        converter: MarkupConverter | None = None,
    ):
        self.storage = storage
        self.fetcher = fetcher
        self.notifier = notifier or LoggingNotifier()
        self.config = config or ClipperConfig()
        self.extractor = extractor or ReadableExtractor()
        self.converter = converter or MarkupConverter()
        self.retriever = AssetRetriever.from_config(
            self.config, fetcher, storage, self.notifier
        )

    async def clip(self, request: ClipRequest) -> ClipResult:
        """Clip the page at ``request.source_url``.

        Args:
            request: The clip request

        Returns:
            ClipResult in the done or failed state
        """
        result = ClipResult(request=request)

        try:
            self._transition(result, ClipState.FETCHING)
            page = await self._fetch_page(request.source_url)

            self._transition(result, ClipState.EXTRACTING)
            document = self._parse_document(page)
            article = self.extractor.extract(
                document, page.hostname, page_url=page.url
            )
            result.title = article.title

            self._transition(result, ClipState.CONVERTING)
            markdown = self.converter.convert(article.readable_node)

            self._transition(result, ClipState.PERSISTING_NOTE)
            layout = self._resolve_layout(article.title)
            result.title = layout.title
            ensure_path(self.storage, posixpath.dirname(layout.note_path))
            self.storage.create_text_file(
                layout.note_path,
                markdown.text,
                overwrite=self.config.on_collision == "overwrite",
            )
            result.note_path = layout.note_path
            self.notifier.notify(f"Created {layout.title}")

            ensure_path(self.storage, layout.image_dir)
        except ClipperError as e:
            result.state = ClipState.FAILED
            result.error = e.message
            logger.error(f"Failed to clip {request.source_url}: {e.message}")
            self.notifier.notify(f"Failed to clip {request.source_url}: {e.message}")
            return result

        self._transition(result, ClipState.PERSISTING_ASSETS)
        await self._persist_assets(page.hostname, article, layout, result)

        self._transition(result, ClipState.DONE)
        logger.info(
            f"Clipped {request.source_url} to {layout.note_path} "
            f"({len(result.assets)} assets stored, "
            f"{len(result.failed_assets)} failed)"
        )
        return result

    async def clip_url(self, url: str) -> ClipResult:
        """Convenience wrapper around :meth:`clip`."""
        return await self.clip(ClipRequest(source_url=url))

    def _transition(self, result: ClipResult, state: ClipState) -> None:
        logger.debug(f"{result.request.source_url}: {result.state.value} -> {state.value}")
        result.state = state

    async def _fetch_page(self, url: str) -> FetchedPage:
        """Fetch the article page, treating non-2xx as a fault."""
        page = await self.fetcher.fetch(url)
        if not page.is_success:
            raise NetworkFault(
                f"HTTP {page.status_code} for {url}",
                url=url,
                status_code=page.status_code,
            )
        return page

    def _parse_document(self, page: FetchedPage) -> HtmlElement:
        """Parse the page body into an HTML document."""
        try:
            try:
                return lxml.html.document_fromstring(page.text)
            except ValueError:
                # Text with an XML encoding declaration must be parsed as bytes
                return lxml.html.document_fromstring(page.content)
        except etree.ParserError as e:
            raise ExtractionFault(f"Cannot parse {page.url}: {e}") from e

    def _resolve_layout(self, title: str) -> TargetLayout:
        """Choose the store layout for *title*, applying the collision policy.

        Raises:
            TitleCollisionError: If the clip folder exists and the policy is
                                 "fail"
        """
        layout = self._layout(title)
        if not self.storage.folder_exists(layout.clip_dir):
            return layout

        policy = self.config.on_collision
        if policy == "overwrite":
            logger.info(f"Overwriting existing clip {layout.clip_dir}")
            return layout
        if policy == "fail":
            raise TitleCollisionError(
                f"A clip named '{title}' already exists",
                path=layout.clip_dir,
            )

        counter = 2
        while self.storage.folder_exists(layout.clip_dir):
            layout = self._layout(self._suffixed_title(title, counter))
            counter += 1
        logger.info(f"Clip '{title}' exists, using '{layout.title}'")
        return layout

    def _suffixed_title(self, title: str, counter: int) -> str:
        """Append " (n)" to *title*, shortening it to stay within MAX_TITLE_LENGTH."""
        suffix = f" ({counter})"
        base = title[: MAX_TITLE_LENGTH - len(suffix)].rstrip(". ")
        return f"{base}{suffix}"

    def _layout(self, title: str) -> TargetLayout:
        return TargetLayout(
            reading_root=self.config.reading_root,
            title=title,
            image_dir_name=self.config.image_dir_name,
        )

    async def _persist_assets(
        self,
        hostname: str,
        article: ExtractedArticle,
        layout: TargetLayout,
        result: ClipResult,
    ) -> None:
        """Download every distinct asset reference and wait for all of them."""
        references = list(dict.fromkeys(article.asset_references))
        if not references:
            return

        limit = self.config.max_concurrent_assets
        semaphore = asyncio.Semaphore(limit) if limit else None

        logger.info(f"Downloading {len(references)} asset(s) from {hostname}")
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(
                        self._persist_asset(hostname, reference, layout, semaphore)
                    )
                    for reference in references
                ]
        except asyncio.CancelledError:
            logger.warning(
                f"Clip of {result.request.source_url} cancelled; "
                f"note kept at {layout.note_path}"
            )
            raise

        for reference, task in zip(references, tasks):
            asset = task.result()
            if asset is None:
                result.failed_assets.append(
                    AssetRetriever.asset_url(hostname, reference)
                )
            else:
                result.assets.append(asset)

    async def _persist_asset(
        self,
        hostname: str,
        reference: str,
        layout: TargetLayout,
        semaphore: asyncio.Semaphore | None,
    ) -> StoredAsset | None:
        """Persist one asset, reporting its failure instead of raising."""
        try:
            if semaphore is None:
                return await self.retriever.persist(hostname, reference, layout)
            async with semaphore:
                return await self.retriever.persist(hostname, reference, layout)
        except ClipperError as e:
            url = AssetRetriever.asset_url(hostname, reference)
            logger.warning(f"Failed to store {url}: {e.message}")
            self.notifier.notify(f"Failed to save {url}")
            return None


async def run_clip(
    url: str,
    storage: Storage,
    config: ClipperConfig | None = None,
    notifier: Notifier | None = None,
) -> ClipResult:
    """Clip *url* into *storage* using a fetcher built from *config*.

    Args:
        url: Page to clip
        storage: Destination store
        config: Clip settings (default: ClipperConfig())
        notifier: Sink for user-facing messages (default: LoggingNotifier)

    Returns:
        The ClipResult
    """
    config = config or ClipperConfig()
    async with ContentFetcher(
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
    ) as fetcher:
        orchestrator = ClipOrchestrator(
            storage, fetcher, notifier=notifier, config=config
        )
        return await orchestrator.clip_url(url)
