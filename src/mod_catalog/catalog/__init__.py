"""
Mod catalog.

Source configuration schemas and validation, the published document
models, and the assembly and diff-and-write of the catalog.
"""

from mod_catalog.catalog.loader import load_source_config, parse_source_config
from mod_catalog.catalog.manager import CatalogAssembler
from mod_catalog.catalog.models import (
    Catalog,
    ModSourceInfo,
    PerGameInfo,
    PlatformAssets,
    PlatformDownloadCounts,
    TexturePackInfo,
    TexturePackVersionInfo,
    VersionInfo,
)
from mod_catalog.catalog.schemas import (
    ModEntry,
    ModSourceConfig,
    PerGameOverride,
    SourceMetadata,
    TexturePackEntry,
)
from mod_catalog.catalog.writer import CatalogWriter, WriteOutcome

__all__ = [
    "Catalog",
    "CatalogAssembler",
    "CatalogWriter",
    "ModEntry",
    "ModSourceConfig",
    "ModSourceInfo",
    "PerGameInfo",
    "PerGameOverride",
    "PlatformAssets",
    "PlatformDownloadCounts",
    "SourceMetadata",
    "TexturePackEntry",
    "TexturePackInfo",
    "TexturePackVersionInfo",
    "VersionInfo",
    "WriteOutcome",
    "load_source_config",
    "parse_source_config",
]
