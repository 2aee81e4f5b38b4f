"""Per-file and per-manifest metadata extractors."""

from .component import ComponentMetadataExtractor
from .package import PackageMetadataExtractor

__all__ = ["ComponentMetadataExtractor", "PackageMetadataExtractor"]
