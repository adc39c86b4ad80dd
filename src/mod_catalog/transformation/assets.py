"""
Release asset classification.

Mods ship one build per platform, named with a platform prefix
("windows-", "linux-", "macos-"); texture packs ship one "assets.zip".
Matching is case-insensitive and the first matching asset wins.
"""

from mod_catalog.catalog.models import PlatformAssets, PlatformDownloadCounts
from mod_catalog.ingestion.contracts import ReleaseAsset

PLATFORM_PREFIXES = {
    "windows": "windows-",
    "linux": "linux-",
    "macos": "macos-",
}

TEXTURE_PACK_ARCHIVE = "assets.zip"


def classify_platform_assets(
    assets: list[ReleaseAsset],
) -> tuple[PlatformAssets, PlatformDownloadCounts]:
    """
    Assign release assets to platform slots.

    Args:
        assets: Release assets in the order GitHub lists them

    Returns:
        Download URLs and download counts per platform
    """
    urls: dict[str, str] = {}
    counts: dict[str, int] = {}

    for asset in assets:
        name = asset.name.lower()
        for platform, prefix in PLATFORM_PREFIXES.items():
            if platform not in urls and name.startswith(prefix):
                urls[platform] = asset.browser_download_url
                counts[platform] = asset.download_count
                break

    return PlatformAssets(**urls), PlatformDownloadCounts(**counts)


def find_archive_asset(assets: list[ReleaseAsset]) -> ReleaseAsset | None:
    """Return the texture-pack archive of a release, if it has one."""
    for asset in assets:
        if asset.name.lower() == TEXTURE_PACK_ARCHIVE:
            return asset
    return None
