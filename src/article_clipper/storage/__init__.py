"""Hierarchical storage and path materialization."""

from .materializer import ensure_path, normalize_path
from .storage import FilesystemStorage, Storage

__all__ = ["Storage", "FilesystemStorage", "ensure_path", "normalize_path"]
