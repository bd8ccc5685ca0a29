"""Remote image access and collection."""

from .collector import MIME_EXTENSIONS, AssetCollector, CollectedAssets, infer_extension
from .fetcher import AssetFetcher, FetchedAsset, ImageSource

__all__ = [
    "MIME_EXTENSIONS",
    "AssetCollector",
    "AssetFetcher",
    "CollectedAssets",
    "FetchedAsset",
    "ImageSource",
    "infer_extension",
]
