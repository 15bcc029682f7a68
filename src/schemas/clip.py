"""Clip schemas.

A clip turns one web page into a note plus its media inside a
hierarchical store. All paths are store-relative and use forward slashes.

Store layout:
    {reading_root}/
    └── {title}/
        ├── {title}.md        # MarkupDocument
        └── images/
            └── {asset file name}
"""

import hashlib
import posixpath
from enum import Enum
from urllib.parse import urlsplit

from lxml.html import HtmlElement
from pydantic import BaseModel, Field


def asset_file_name(reference: str) -> str:
    """Map an asset reference to its path below the clip's image folder.

    References without a query keep their path. A query is folded into
    the file stem as a short digest, so distinct queries on the same path
    get distinct files and the extension is preserved.

    Examples:
        >>> asset_file_name("static/foo.png")
        'static/foo.png'
        >>> asset_file_name("img.php?id=1").endswith(".php")
        True
    """
    path, sep, query = reference.partition("?")
    if not sep:
        return path
    stem, ext = posixpath.splitext(path)
    digest = hashlib.sha256(query.encode("utf-8")).hexdigest()[:8]
    return f"{stem}-{digest}{ext}"


class ClipState(str, Enum):
    """Stages of a single clip invocation."""

    IDLE = "idle"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    CONVERTING = "converting"
    PERSISTING_NOTE = "persisting_note"
    PERSISTING_ASSETS = "persisting_assets"
    DONE = "done"
    FAILED = "failed"


class ClipRequest(BaseModel):
    """A user-initiated request to clip one URL.

    Attributes:
        source_url: URL of the page to clip
    """

    source_url: str

    model_config = {"frozen": True}

    @property
    def hostname(self) -> str:
        return urlsplit(self.source_url).hostname or ""


class FetchedPage(BaseModel):
    """The raw HTTP response for a single fetch.

    Non-2xx responses are represented here as data; callers decide
    whether a status is acceptable.

    Attributes:
        url: URL that was requested
        hostname: Host part of the URL
        status_code: HTTP status code
        content: Raw response body
        encoding: Text encoding reported by the server, if any
    """

    url: str
    hostname: str
    status_code: int
    content: bytes = b""
    encoding: str | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8", errors="replace")


class ExtractedArticle(BaseModel):
    """Readable content isolated from a page.

    Attributes:
        title: Non-empty title, safe to use as a file stem
        readable_node: Root of the extracted article subtree
        asset_references: Origin-relative media references (path plus any
                          query string) in discovery order
    """

    title: str = Field(min_length=1)
    readable_node: HtmlElement
    asset_references: list[str] = []

    model_config = {"arbitrary_types_allowed": True}


class MarkupDocument(BaseModel):
    """Markdown text for a clipped article."""

    text: str


class TargetLayout(BaseModel):
    """Where a clip's note and media live in the store.

    Attributes:
        reading_root: Root folder for all clips
        title: Folder name and note stem for this clip
        image_dir_name: Name of the media folder inside the clip folder
    """

    reading_root: str
    title: str
    image_dir_name: str = "images"

    @property
    def clip_dir(self) -> str:
        return posixpath.join(self.reading_root, self.title)

    @property
    def note_path(self) -> str:
        return posixpath.join(self.clip_dir, f"{self.title}.md")

    @property
    def image_dir(self) -> str:
        return posixpath.join(self.clip_dir, self.image_dir_name)

    def asset_path(self, reference: str) -> str:
        """Return the store path for an asset reference."""
        return posixpath.join(self.image_dir, asset_file_name(reference))


class StoredAsset(BaseModel):
    """A media file downloaded and written into the store.

    Attributes:
        relative_path: Origin-relative reference the asset was fetched by
        absolute_url: URL the bytes were downloaded from
        storage_path: Store path the bytes were written to
        size: Number of bytes written
        checksum: SHA-256 hash of the bytes
    """

    relative_path: str
    absolute_url: str
    storage_path: str
    size: int
    checksum: str


class ClipResult(BaseModel):
    """Outcome of one clip invocation.

    Attributes:
        request: The request that was processed
        state: Final state (done or failed)
        title: Title of the note, once known
        note_path: Store path of the note, once written
        assets: Assets that were stored
        failed_assets: Absolute URLs of assets that were skipped
        error: Description of the page-level fault, if any
    """

    request: ClipRequest
    state: ClipState = ClipState.IDLE
    title: str | None = None
    note_path: str | None = None
    assets: list[StoredAsset] = []
    failed_assets: list[str] = []
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == ClipState.DONE
