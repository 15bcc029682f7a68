"""Network clients and the clipper exception hierarchy."""

from .exceptions import (
    AssetFault,
    ClipperError,
    ConfigError,
    ExtractionFault,
    NetworkFault,
    StorageFault,
    TitleCollisionError,
)
from .fetcher import ContentFetcher

__all__ = [
    "ContentFetcher",
    "ClipperError",
    "NetworkFault",
    "ExtractionFault",
    "StorageFault",
    "TitleCollisionError",
    "AssetFault",
    "ConfigError",
]
