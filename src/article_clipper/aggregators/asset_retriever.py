"""Asset retriever for downloading article media into the store."""

import asyncio
import hashlib
import logging
import posixpath
from urllib.parse import quote

from article_clipper.clients.exceptions import AssetFault, NetworkFault
from article_clipper.clients.fetcher import ContentFetcher
from article_clipper.config import ClipperConfig
from article_clipper.notifications import Notifier
from article_clipper.storage import Storage, ensure_path
from schemas.clip import StoredAsset, TargetLayout

logger = logging.getLogger(__name__)


class AssetRetriever:
    """Downloads media referenced by an article, with bounded retry.

    Every asset is an independent unit of work: failures are retried up to
    ``attempts`` times in total, with ``retry_delay`` seconds between
    attempts, and an asset that still fails is reported and skipped without
    raising. After each successful download the retriever pauses for
    ``politeness_delay`` seconds to avoid hammering the origin server.

    Example:
        retriever = AssetRetriever(fetcher, storage, notifier)
        asset = await retriever.persist("example.com", "img/a.png", layout)
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        storage: Storage,
        notifier: Notifier,
        attempts: int = 4,
        retry_delay: float = 5.0,
        politeness_delay: float = 1.0,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")

        self.fetcher = fetcher
        self.storage = storage
        self.notifier = notifier
        self.attempts = attempts
        self.retry_delay = retry_delay
        self.politeness_delay = politeness_delay

    @classmethod
    def from_config(
        cls,
        config: ClipperConfig,
        fetcher: ContentFetcher,
        storage: Storage,
        notifier: Notifier,
    ) -> "AssetRetriever":
        return cls(
            fetcher,
            storage,
            notifier,
            attempts=config.asset_attempts,
            retry_delay=config.retry_delay,
            politeness_delay=config.politeness_delay,
        )

    @staticmethod
    def asset_url(hostname: str, relative_path: str) -> str:
        """Build the absolute URL for an origin-relative asset reference.

        The path is percent-encoded; a query string is passed through as is.

        Examples:
            >>> AssetRetriever.asset_url("example.com", "img/a b.png")
            'https://example.com/img/a%20b.png'
            >>> AssetRetriever.asset_url("example.com", "img.php?id=1")
            'https://example.com/img.php?id=1'
        """
        path, sep, query = relative_path.partition("?")
        return f"https://{hostname}/{quote(path, safe='/')}{sep}{query}"

    async def retrieve(self, hostname: str, relative_path: str) -> bytes | None:
        """Download an asset.

        Args:
            hostname: Origin host of the article
            relative_path: Asset path relative to the origin

        Returns:
            The asset bytes, or None if every attempt failed
        """
        url = self.asset_url(hostname, relative_path)
        try:
            data = await self._download(url)
        except AssetFault as e:
            logger.warning(e.message)
            self.notifier.notify(f"Failed to download {url}")
            return None

        await asyncio.sleep(self.politeness_delay)
        return data

    async def persist(
        self,
        hostname: str,
        relative_path: str,
        layout: TargetLayout,
    ) -> StoredAsset | None:
        """Download an asset and write it below the clip's image folder.

        Args:
            hostname: Origin host of the article
            relative_path: Asset path relative to the origin
            layout: Store layout of the clip

        Returns:
            StoredAsset on success, None if the download was skipped

        Raises:
            StorageFault: If the asset cannot be written
        """
        data = await self.retrieve(hostname, relative_path)
        if data is None:
            return None

        storage_path = layout.asset_path(relative_path)
        ensure_path(self.storage, posixpath.dirname(storage_path))
        self.storage.create_binary_file(storage_path, data)

        logger.debug(f"Stored asset {storage_path} ({len(data)} bytes)")
        return StoredAsset(
            relative_path=relative_path,
            absolute_url=self.asset_url(hostname, relative_path),
            storage_path=storage_path,
            size=len(data),
            checksum=self._compute_checksum(data),
        )

    async def _download(self, url: str) -> bytes:
        """Fetch *url*, retrying on non-2xx responses and transport errors.

        Raises:
            AssetFault: If all attempts fail
        """
        for attempt in range(1, self.attempts + 1):
            try:
                page = await self.fetcher.fetch(url)
                if page.is_success:
                    return page.content
                logger.debug(
                    f"HTTP {page.status_code} for {url} "
                    f"(attempt {attempt}/{self.attempts})"
                )
            except NetworkFault as e:
                logger.debug(f"{e.message} (attempt {attempt}/{self.attempts})")

            if attempt < self.attempts:
                await asyncio.sleep(self.retry_delay)

        raise AssetFault(
            f"Failed to download {url} after {self.attempts} attempts",
            url=url,
            attempts=self.attempts,
        )

    def _compute_checksum(self, data: bytes) -> str:
        """Compute the SHA-256 hex digest of *data*."""
        return hashlib.sha256(data).hexdigest()
