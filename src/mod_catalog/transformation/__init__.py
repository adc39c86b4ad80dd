"""
Transformation of upstream releases into catalog records.

Asset classification and release metadata resolution.
"""

from mod_catalog.transformation.assets import (
    PLATFORM_PREFIXES,
    TEXTURE_PACK_ARCHIVE,
    classify_platform_assets,
    find_archive_asset,
)
from mod_catalog.transformation.metadata import (
    METADATA_ASSET,
    MetadataResolver,
    PerGameMerger,
)

__all__ = [
    "METADATA_ASSET",
    "PLATFORM_PREFIXES",
    "TEXTURE_PACK_ARCHIVE",
    "MetadataResolver",
    "PerGameMerger",
    "classify_platform_assets",
    "find_archive_asset",
]
