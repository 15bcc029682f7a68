"""Aggregators for gathering article resources."""

from .asset_retriever import AssetRetriever

__all__ = ["AssetRetriever"]
