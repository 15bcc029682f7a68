"""Pytest fixtures for Article Clipper tests."""

import posixpath

import httpx
import pytest

from article_clipper.clients import ContentFetcher, StorageFault
from article_clipper.config import ClipperConfig
from article_clipper.notifications import CollectingNotifier
from article_clipper.storage import Storage


class RecordingStorage(Storage):
    """In-memory store that records every call made to it."""

    def __init__(self, folders: list[str] | None = None):
        self.folders: set[str] = set(folders or [])
        self.files: dict[str, str | bytes] = {}
        self.calls: list[tuple[str, str]] = []

    def folder_exists(self, path: str) -> bool:
        self.calls.append(("folder_exists", path))
        return path in self.folders

    def create_folder(self, path: str) -> None:
        self.calls.append(("create_folder", path))
        if path in self.files:
            raise StorageFault(f"A file exists at {path}", path=path)
        parent = posixpath.dirname(path)
        if parent and parent not in self.folders:
            raise StorageFault(f"Parent of {path} does not exist", path=path)
        self.folders.add(path)

    def create_text_file(
        self, path: str, content: str, overwrite: bool = False
    ) -> None:
        self.calls.append(("create_text_file", path))
        if path in self.files and not overwrite:
            raise StorageFault(f"File exists: {path}", path=path)
        self._check_parent(path)
        self.files[path] = content

    def create_binary_file(self, path: str, data: bytes) -> None:
        self.calls.append(("create_binary_file", path))
        self._check_parent(path)
        self.files[path] = data

    def _check_parent(self, path: str) -> None:
        parent = posixpath.dirname(path)
        if parent and parent not in self.folders:
            raise StorageFault(f"Parent of {path} does not exist", path=path)

    def created_folders(self) -> list[str]:
        return [path for name, path in self.calls if name == "create_folder"]


@pytest.fixture
def storage():
    """Empty in-memory store."""
    return RecordingStorage()


@pytest.fixture
def notifier():
    """Notifier that collects messages."""
    return CollectingNotifier()


@pytest.fixture
def fast_config():
    """Configuration with all delays disabled."""
    return ClipperConfig(retry_delay=0, politeness_delay=0)


@pytest.fixture
def make_fetcher():
    """Build a ContentFetcher backed by an httpx.MockTransport.

    ``routes`` maps URLs to a response or a list of responses; lists are
    consumed one per request, repeating the last entry. A response is a
    ``(status_code, body)`` tuple or an exception instance to raise.
    Every requested URL is appended to ``fetcher.requested``.
    """

    def factory(routes: dict) -> ContentFetcher:
        requested: list[str] = []
        queues = {
            url: list(value) if isinstance(value, list) else [value]
            for url, value in routes.items()
        }

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            requested.append(url)
            queue = queues.get(url)
            if queue is None:
                return httpx.Response(404, content=b"not found")
            entry = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(entry, Exception):
                raise entry
            status_code, body = entry
            if isinstance(body, str):
                body = body.encode("utf-8")
            return httpx.Response(
                status_code,
                content=body,
                headers={"Content-Type": "text/html; charset=utf-8"},
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        fetcher = ContentFetcher(http_client=client)
        fetcher.requested = requested
        return fetcher

    return factory


@pytest.fixture
def article_url():
    return "https://example.com/blog/widgets"


@pytest.fixture
def sample_article_html():
    """A blog post with navigation chrome, local and remote images."""
    return """<!DOCTYPE html>
<html>
<head><title>Understanding Widgets</title></head>
<body>
  <nav class="menu">
    <ul><li><a href="/">Home</a></li><li><a href="/about">About</a></li></ul>
  </nav>
  <div id="content">
    <article class="post">
      <h1>Understanding Widgets</h1>
      <p>Widgets are small, composable pieces of software that do one thing
      well, and they show up in nearly every modern application, from
      dashboards to mobile apps, to command-line tools.</p>
      <p><img src="/media/diagram.png" alt="Diagram"> The diagram shows how
      widgets connect to each other, how events flow between them, and where
      state is kept, which matters a lot once an application grows.</p>
      <p>Building a widget starts with a clear contract, a small surface
      area, and tests that pin down behaviour before the first line of code
      is written, so that later changes stay safe.</p>
      <p><img src="photos/team.jpg" alt="Team"> Our team has been building
      widgets for years, and we have learned a great deal about what makes
      them easy to maintain, extend, and eventually retire.</p>
      <p><img src="https://cdn.other.net/ad.png" alt="Ad"> Images from other
      hosts are left alone, because they are not served by the origin of the
      article, and downloading them would need a different policy.</p>
    </article>
  </div>
  <footer class="footer">Copyright 2026 Example Corp. All rights reserved.</footer>
</body>
</html>
"""


@pytest.fixture
def storage_cls():
    """The in-memory store class, for tests that need custom instances."""
    return RecordingStorage
