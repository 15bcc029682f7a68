"""Schema definitions for Article Clipper."""

from .clip import (
    ClipRequest,
    ClipResult,
    ClipState,
    ExtractedArticle,
    FetchedPage,
    MarkupDocument,
    StoredAsset,
    TargetLayout,
    asset_file_name,
)

__all__ = [
    "ClipRequest",
    "ClipResult",
    "ClipState",
    "ExtractedArticle",
    "FetchedPage",
    "MarkupDocument",
    "StoredAsset",
    "TargetLayout",
    "asset_file_name",
]
