"""Hierarchical storage backends.

The clipper only talks to storage through :class:`Storage`. Paths are
store-relative strings separated by forward slashes.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from article_clipper.clients.exceptions import StorageFault

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract base class for a folder/file store."""

    @abstractmethod
    def folder_exists(self, path: str) -> bool:
        """Return True if a folder exists at *path*."""
        pass

    @abstractmethod
    def create_folder(self, path: str) -> None:
        """Create a single folder whose parent already exists.

        Creating a folder that already exists is a no-op.

        Raises:
            StorageFault: If the folder cannot be created
        """
        pass

    @abstractmethod
    def create_text_file(
        self, path: str, content: str, overwrite: bool = False
    ) -> None:
        """Write a new text file.

        Raises:
            StorageFault: If the file exists and *overwrite* is False, or
                          the write fails
        """
        pass

    @abstractmethod
    def create_binary_file(self, path: str, data: bytes) -> None:
        """Write a binary file, replacing any existing one.

        Raises:
            StorageFault: If the write fails
        """
        pass


class FilesystemStorage(Storage):
    """Storage backed by a directory on the local filesystem.

    Example:
        storage = FilesystemStorage(Path("~/Notes").expanduser())
        storage.create_folder("0 Reading")
    """

    def __init__(self, root: Path):
        self.root = root

    def __repr__(self) -> str:
        return f"FilesystemStorage('{self.root}')"

    def _resolve(self, path: str) -> Path:
        parts = [p for p in path.split("/") if p not in ("", ".")]
        if ".." in parts:
            raise StorageFault(f"Path escapes the store: {path}", path=path)
        return self.root.joinpath(*parts)

    def folder_exists(self, path: str) -> bool:
        return self._resolve(path).is_dir()

    def create_folder(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.mkdir(exist_ok=True)
        except OSError as e:
            raise StorageFault(f"Cannot create folder {path}: {e}", path=path) from e
        logger.debug(f"Created folder {target}")

    def create_text_file(
        self, path: str, content: str, overwrite: bool = False
    ) -> None:
        target = self._resolve(path)
        mode = "w" if overwrite else "x"
        try:
            with target.open(mode, encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise StorageFault(f"Cannot write file {path}: {e}", path=path) from e
        logger.debug(f"Wrote text file {target}")

    def create_binary_file(self, path: str, data: bytes) -> None:
        target = self._resolve(path)
        try:
            target.write_bytes(data)
        except OSError as e:
            raise StorageFault(f"Cannot write file {path}: {e}", path=path) from e
        logger.debug(f"Wrote {len(data)} bytes to {target}")
