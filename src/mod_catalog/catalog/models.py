"""
Schemas of the published catalog document (mods.json).

Field names are snake_case in Python and camelCase in the document,
which is what the website reads.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mod_catalog import SCHEMA_VERSION


class CatalogModel(BaseModel):
    """Base for every model serialized into the catalog."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PerGameInfo(CatalogModel):
    """Release date and art resolved for one supported game."""

    release_date: str | None = None
    cover_art_url: str | None = None
    thumbnail_art_url: str | None = None


class PlatformAssets(CatalogModel):
    """Download URL per platform, null where the release has no build."""

    windows: str | None = None
    linux: str | None = None
    macos: str | None = None

    @property
    def has_any(self) -> bool:
        """Whether at least one platform has a download."""
        return any(url is not None for url in (self.windows, self.linux, self.macos))


class PlatformDownloadCounts(CatalogModel):
    """Download count per platform asset."""

    windows: int = 0
    linux: int = 0
    macos: int = 0


class VersionInfo(CatalogModel):
    """One published release of a mod."""

    version: str
    published_date: str
    supported_games: list[str] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)
    assets: PlatformAssets = Field(default_factory=PlatformAssets)
    asset_download_counts: PlatformDownloadCounts = Field(default_factory=PlatformDownloadCounts)


class TexturePackVersionInfo(CatalogModel):
    """One published release of a texture pack."""

    version: str
    published_date: str
    download_url: str
    download_count: int = 0


class ModSourceInfo(CatalogModel):
    """Everything the website shows about a mod."""

    display_name: str
    description: str
    authors: list[str]
    tags: list[str]
    website_url: str | None = None
    supported_games: list[str] = Field(default_factory=list)
    versions: list[VersionInfo] = Field(default_factory=list)
    cover_art_url: str | None = None
    thumbnail_art_url: str | None = None
    per_game_config: dict[str, PerGameInfo] = Field(default_factory=dict)
    external_link: str | None = None


class TexturePackInfo(CatalogModel):
    """Everything the website shows about a texture pack."""

    display_name: str
    description: str
    authors: list[str]
    tags: list[str]
    website_url: str | None = None
    versions: list[TexturePackVersionInfo] = Field(default_factory=list)
    thumbnail_art_url: str | None = None
    per_game_config: dict[str, PerGameInfo] | None = None


class Catalog(CatalogModel):
    """
    The complete catalog document.

    `last_updated` is only stamped by the writer, when content changed.
    """

    schema_version: str = SCHEMA_VERSION
    source_name: str
    mods: dict[str, ModSourceInfo] = Field(default_factory=dict)
    texture_packs: dict[str, TexturePackInfo] = Field(default_factory=dict)
    last_updated: str | None = None

    def to_document(self) -> dict[str, Any]:
        """JSON-ready document, without lastUpdated unless it was stamped."""
        document = self.model_dump(mode="json", by_alias=True)
        if self.last_updated is None:
            document.pop("lastUpdated", None)
        return document
