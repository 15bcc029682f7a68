"""Idempotent creation of missing folders along a store path."""

import logging
import posixpath

from article_clipper.clients.exceptions import StorageFault

from .storage import Storage

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Normalize a store path: forward slashes, no leading/trailing slash.

    Examples:
        >>> normalize_path("/0 Reading//Title/")
        '0 Reading/Title'
        >>> normalize_path(".")
        ''
    """
    path = path.replace("\\", "/").strip("/")
    if not path:
        return ""
    path = posixpath.normpath(path)
    return "" if path == "." else path


def ensure_path(storage: Storage, path: str) -> list[str]:
    """Create every missing folder along *path*, parents first.

    Climbs from *path* towards the store root until an existing folder (or
    the root) is found, then creates the missing folders root-to-leaf.
    Folders that appear while we are creating (e.g. made by a concurrent
    task) are accepted rather than treated as errors.

    Creation is not atomic: if a creation fails, folders created before it
    are left in place and the remaining ones are not attempted.

    Args:
        storage: Store to create folders in
        path: Store path of the folder that must exist

    Returns:
        The folders that were created, in creation order

    Raises:
        StorageFault: If a folder cannot be created
    """
    pending: list[str] = []

    current = normalize_path(path)
    while current and not storage.folder_exists(current):
        pending.insert(0, current)
        current = posixpath.dirname(current)

    created: list[str] = []
    for folder in pending:
        try:
            storage.create_folder(folder)
        except StorageFault:
            if storage.folder_exists(folder):
                logger.debug(f"Folder {folder} appeared concurrently")
                continue
            raise
        created.append(folder)

    if created:
        logger.debug(f"Materialized {len(created)} folder(s) for {path}")
    return created
