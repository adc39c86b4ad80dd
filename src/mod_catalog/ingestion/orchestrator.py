"""
Catalog orchestrator that runs every configured entry through the pipeline.

Entries are processed one at a time, in declaration order. Each entry goes
through the same steps (fetch releases, filter versions, build one record
per accepted release) and only the per-kind strategy decides what a
version looks like: platform builds plus metadata.json for mods, a single
assets.zip for texture packs.

Lint runs pass no GitHub client: configuration and structural checks still
run, but no releases are fetched.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Generic, TypeVar

from mod_catalog.catalog.manager import CatalogAssembler
from mod_catalog.catalog.models import (
    Catalog,
    ModSourceInfo,
    PerGameInfo,
    TexturePackInfo,
    TexturePackVersionInfo,
    VersionInfo,
)
from mod_catalog.catalog.schemas import (
    EntryBase,
    ModEntry,
    ModSourceConfig,
    PerGameOverride,
    TexturePackEntry,
)
from mod_catalog.catalog.validation import validate_source_config
from mod_catalog.ingestion.contracts import Release
from mod_catalog.ingestion.extractors.github_releases import GitHubReleasesExtractor
from mod_catalog.ingestion.utils.timestamps import format_timestamp
from mod_catalog.ingestion.utils.versions import find_ignore_match, normalize_tag, parse_version
from mod_catalog.logger import get_logger
from mod_catalog.transformation.assets import classify_platform_assets, find_archive_asset
from mod_catalog.transformation.metadata import MetadataResolver, PerGameMerger

EntryT = TypeVar("EntryT", bound=EntryBase)
InfoT = TypeVar("InfoT", ModSourceInfo, TexturePackInfo)
VersionT = TypeVar("VersionT", VersionInfo, TexturePackVersionInfo)


class EntryKind(str, Enum):
    """Kinds of configured entries."""

    MOD = "mod"
    TEXTURE_PACK = "texture_pack"


@dataclass(frozen=True)
class AcceptedRelease:
    """A release that passed tag validation and ignore rules."""

    release: Release
    version: str
    published_at: datetime


def _per_game_art(overrides: dict[str, PerGameOverride] | None) -> dict[str, PerGameInfo]:
    """Seed per-game config with the art overrides from the configuration."""
    return {
        game: PerGameInfo(
            cover_art_url=override.cover_art_url,
            thumbnail_art_url=override.thumbnail_art_url,
        )
        for game, override in (overrides or {}).items()
    }


class EntryStrategy(ABC, Generic[EntryT, InfoT, VersionT]):
    """Decides the output shape of one kind of entry."""

    kind: ClassVar[EntryKind]

    def fetches_releases(self, entry: EntryT) -> bool:
        """Whether the entry's releases should be polled."""
        return entry.has_repository

    @abstractmethod
    def start(self, name: str, entry: EntryT) -> InfoT:
        """Build the record before any release is processed."""
        ...

    @abstractmethod
    async def build_version(
        self,
        name: str,
        entry: EntryT,
        info: InfoT,
        accepted: AcceptedRelease,
    ) -> VersionT | None:
        """Build the version for an accepted release, or None to drop it."""
        ...

    def finish(self, name: str, entry: EntryT, info: InfoT) -> None:
        """Complete the record once every release has been processed."""


class ModStrategy(EntryStrategy[ModEntry, ModSourceInfo, VersionInfo]):
    """
    Mods: one build per platform and a metadata.json per release.

    Args:
        resolver: Metadata resolver (None in lint runs)
        default_supported_games: Games assumed when no release declares any
        check_final_art: Require art for every game of the finished record
    """

    kind = EntryKind.MOD

    def __init__(
        self,
        *,
        resolver: MetadataResolver | None,
        default_supported_games: list[str],
        check_final_art: bool,
    ) -> None:
        self._resolver = resolver
        self._default_supported_games = default_supported_games
        self._check_final_art = check_final_art
        self._mergers: dict[str, PerGameMerger] = {}
        self._logger = get_logger(__name__, component="mod_strategy")

    def fetches_releases(self, entry: ModEntry) -> bool:
        return not entry.is_external and entry.has_repository

    def start(self, name: str, entry: ModEntry) -> ModSourceInfo:
        website_url = entry.website_url
        if website_url is None and not entry.is_external:
            website_url = entry.repository_url

        info = ModSourceInfo(
            display_name=entry.display_name,
            description=entry.description,
            authors=entry.authors,
            tags=entry.tags,
            website_url=website_url,
            cover_art_url=entry.cover_art_url,
            thumbnail_art_url=entry.thumbnail_art_url,
            per_game_config=_per_game_art(entry.per_game_config),
            external_link=entry.external_link,
        )
        if entry.is_external:
            info.supported_games = list(entry.supported_games or [])

        self._mergers[name] = PerGameMerger(name, entry, info)
        return info

    async def build_version(
        self,
        name: str,
        entry: ModEntry,
        info: ModSourceInfo,
        accepted: AcceptedRelease,
    ) -> VersionInfo | None:
        if self._resolver is None:
            raise RuntimeError("Mod releases can't be resolved without a GitHub client")
        version = accepted.version
        document = await self._resolver.resolve(name, version, accepted.release)
        assets, download_counts = classify_platform_assets(accepted.release.assets)

        # supported games count even when the release ships no platform build
        self._mergers[name].merge(document.supported_games, accepted.published_at)

        if not assets.has_any:
            self._logger.info("Ignoring version, no assets found", entry=name, version=version)
            return None

        return VersionInfo(
            version=version,
            published_date=format_timestamp(accepted.published_at),
            supported_games=document.supported_games,
            settings=document.resolved_settings(),
            assets=assets,
            asset_download_counts=download_counts,
        )

    def finish(self, name: str, entry: ModEntry, info: ModSourceInfo) -> None:
        merger = self._mergers.pop(name)

        used_default = not info.supported_games
        if used_default:
            info.supported_games = list(self._default_supported_games)
            self._logger.info(
                "No supported games at the top level, using the default",
                entry=name,
                supported_games=info.supported_games,
            )

        # release games were already checked as they were merged
        if self._check_final_art and (entry.is_external or used_default):
            merger.check_art(info.supported_games)


class TexturePackStrategy(
    EntryStrategy[TexturePackEntry, TexturePackInfo, TexturePackVersionInfo]
):
    """Texture packs: a single assets.zip per release, no metadata.json."""

    kind = EntryKind.TEXTURE_PACK

    def __init__(self) -> None:
        self._logger = get_logger(__name__, component="texture_pack_strategy")

    def start(self, name: str, entry: TexturePackEntry) -> TexturePackInfo:
        return TexturePackInfo(
            display_name=entry.display_name,
            description=entry.description,
            authors=entry.authors,
            tags=entry.tags,
            website_url=entry.website_url or entry.repository_url,
            thumbnail_art_url=entry.thumbnail_art_url,
            per_game_config=(
                None if entry.per_game_config is None else _texture_pack_per_game(entry)
            ),
        )

    async def build_version(
        self,
        name: str,
        entry: TexturePackEntry,
        info: TexturePackInfo,
        accepted: AcceptedRelease,
    ) -> TexturePackVersionInfo | None:
        archive = find_archive_asset(accepted.release.assets)
        if archive is None:
            self._logger.info(
                "Ignoring version, no assets.zip found",
                entry=name,
                version=accepted.version,
            )
            return None

        return TexturePackVersionInfo(
            version=accepted.version,
            published_date=format_timestamp(accepted.published_at),
            download_url=archive.browser_download_url,
            download_count=archive.download_count,
        )


def _texture_pack_per_game(entry: TexturePackEntry) -> dict[str, PerGameInfo]:
    per_game = _per_game_art(entry.per_game_config)
    for game, override in (entry.per_game_config or {}).items():
        per_game[game].release_date = override.release_date_override
    return per_game


class EntryPipeline(Generic[EntryT, InfoT, VersionT]):
    """
    Runs one entry through fetch, filter and version building.

    Args:
        strategy: Output shape for this kind of entry
        extractor: GitHub client, or None to skip all network calls
    """

    def __init__(
        self,
        strategy: EntryStrategy[EntryT, InfoT, VersionT],
        extractor: GitHubReleasesExtractor | None,
    ) -> None:
        self._strategy = strategy
        self._extractor = extractor
        self._logger = get_logger(__name__, component="pipeline", kind=strategy.kind.value)

    async def run(self, name: str, entry: EntryT) -> InfoT:
        """
        Resolve one entry into its catalog record.

        Raises:
            CatalogError: If the entry or one of its releases is invalid
            ExtractionError: If GitHub can't be reached after retries
        """
        info = self._strategy.start(name, entry)

        if self._extractor is not None and self._strategy.fetches_releases(entry):
            releases = await self._extractor.list_releases(
                entry.repo_owner or "",
                entry.repo_name or "",
            )

            for accepted in self.accepted_releases(name, entry, releases):
                built = await self._strategy.build_version(name, entry, info, accepted)
                if built is not None:
                    info.versions.append(built)  # type: ignore[arg-type]

        self._strategy.finish(name, entry, info)

        self._logger.info("Resolved entry", entry=name, versions=len(info.versions))
        return info

    def accepted_releases(
        self,
        name: str,
        entry: EntryT,
        releases: list[Release],
    ) -> Iterator[AcceptedRelease]:
        """
        Yield releases that survive tag validation and ignore rules.

        Releases are visited newest first by publish date; drafts, tags that
        aren't semantic versions, and ignored versions are skipped.

        Yields:
            AcceptedRelease: release with its normalized version
        """
        rules = entry.ignore_rules

        published: list[tuple[datetime, Release]] = []
        for release in releases:
            if release.draft or release.published_at is None:
                self._logger.warning(
                    "Skipping unpublished release",
                    entry=name,
                    tag=release.tag_name,
                )
                continue
            published.append((release.published_at, release))
        published.sort(key=lambda item: item[0], reverse=True)

        for published_at, release in published:
            version = normalize_tag(release.tag_name)
            parsed = parse_version(version)
            if parsed is None:
                self._logger.warning(
                    "Not a valid semantic version, skipping",
                    entry=name,
                    version=version,
                )
                continue

            rule = find_ignore_match(parsed, rules)
            if rule is not None:
                self._logger.info("Ignoring release", entry=name, version=version, rule=rule.raw)
                continue

            yield AcceptedRelease(release=release, version=version, published_at=published_at)


class CatalogOrchestrator:
    """
    Builds the whole catalog from a parsed configuration.

    Example:
        >>> async with GitHubReleasesExtractor() as github:
        ...     catalog = await CatalogOrchestrator(extractor=github).build(config)
    """

    def __init__(
        self,
        *,
        extractor: GitHubReleasesExtractor | None = None,
        default_supported_games: list[str] | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            extractor: GitHub client; None runs in lint mode
            default_supported_games: Fallback for mods whose releases declare no game
        """
        self._extractor = extractor
        self._default_supported_games = default_supported_games or ["jak1"]
        self._logger = get_logger(__name__, component="orchestrator")

    @property
    def lint_mode(self) -> bool:
        """Whether the run skips all network calls."""
        return self._extractor is None

    async def build(self, config: ModSourceConfig) -> Catalog:
        """
        Validate every entry, then resolve them in declaration order.

        Raises:
            CatalogError: On the first invalid entry or release
            ExtractionError: If GitHub can't be reached after retries
        """
        validate_source_config(config)

        self._logger.info(
            "Starting catalog build",
            source_name=config.metadata.name,
            mods=len(config.mods),
            texture_packs=len(config.texture_packs),
            lint_mode=self.lint_mode,
        )

        assembler = CatalogAssembler(config.metadata.name)

        mod_pipeline = EntryPipeline(
            ModStrategy(
                resolver=None if self._extractor is None else MetadataResolver(self._extractor),
                default_supported_games=self._default_supported_games,
                check_final_art=not self.lint_mode,
            ),
            self._extractor,
        )
        for name, mod in config.mods.items():
            assembler.add_mod(name, await mod_pipeline.run(name, mod))

        texture_pack_pipeline = EntryPipeline(TexturePackStrategy(), self._extractor)
        for name, texture_pack in config.texture_packs.items():
            assembler.add_texture_pack(name, await texture_pack_pipeline.run(name, texture_pack))

        self._logger.info("Catalog build complete", **assembler.get_catalog_stats())
        return assembler.catalog

