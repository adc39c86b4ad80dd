"""
Release metadata resolution.

Every mod release publishes a metadata.json asset declaring the games it
supports and its settings. The resolver downloads and validates it; the
merger folds each release's supported games into the mod's aggregate
supported-games list and per-game configuration.
"""

import json
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from mod_catalog.catalog.models import ModSourceInfo, PerGameInfo
from mod_catalog.catalog.schemas import ModEntry
from mod_catalog.catalog.validation import require_resolvable_art
from mod_catalog.exceptions import ReleaseMetadataError
from mod_catalog.ingestion.contracts import Release, ReleaseMetadataDocument
from mod_catalog.ingestion.extractors.github_releases import GitHubReleasesExtractor
from mod_catalog.ingestion.utils.timestamps import format_timestamp
from mod_catalog.logger import get_logger

METADATA_ASSET = "metadata.json"


class MetadataResolver:
    """
    Downloads and validates the metadata.json of mod releases.

    Every failure is fatal: a release without usable metadata
    aborts the run rather than being skipped.
    """

    def __init__(self, extractor: GitHubReleasesExtractor) -> None:
        self._extractor = extractor
        self._logger = get_logger(__name__, component="metadata_resolver")

    async def resolve(self, entry: str, version: str, release: Release) -> ReleaseMetadataDocument:
        """
        Fetch and parse the metadata document of a release.

        Args:
            entry: Mod name, for error messages
            version: Normalized version of the release
            release: The release to inspect

        Returns:
            ReleaseMetadataDocument: Validated metadata

        Raises:
            ReleaseMetadataError: If the asset is missing, unreachable or invalid
        """
        asset = release.find_asset(METADATA_ASSET)
        if asset is None:
            raise ReleaseMetadataError(
                f"Could not find '{METADATA_ASSET}' asset in {entry}:{version}",
                entry=entry,
                version=version,
            )

        response = await self._extractor.fetch_asset(asset.browser_download_url)

        if response.status_code != 200:
            raise ReleaseMetadataError(
                f"Hit non-200 status code ({response.status_code}) when fetching metadata "
                f"file for mod release version {entry}:{version}",
                entry=entry,
                version=version,
            )

        try:
            raw = json.loads(response.content)
        except ValueError as e:
            raise ReleaseMetadataError(
                f"Bad {METADATA_ASSET}, not valid JSON: {e} -- {entry}:{version}",
                entry=entry,
                version=version,
            ) from e

        if not isinstance(raw, dict):
            raise ReleaseMetadataError(
                f"Bad {METADATA_ASSET}, expected a JSON object -- {entry}:{version}",
                entry=entry,
                version=version,
            )
        if "supportedGames" not in raw:
            raise ReleaseMetadataError(
                f"{METADATA_ASSET}, for version: {entry}:{version} does not include "
                "'supportedGames'",
                entry=entry,
                version=version,
            )

        try:
            document = ReleaseMetadataDocument.model_validate(raw)
        except PydanticValidationError as e:
            raise ReleaseMetadataError(
                f"Bad {METADATA_ASSET}: {e} -- {entry}:{version}",
                entry=entry,
                version=version,
            ) from e

        self._logger.debug(
            "Resolved release metadata",
            entry=entry,
            version=version,
            supported_games=document.supported_games,
        )
        return document


class PerGameMerger:
    """
    Folds supported games of accepted releases into a mod's record.

    Release date precedence per game: the entry-level override, then the
    per-game override, then the earliest publish date of any accepted
    release supporting that game. The earliest date is an explicit
    minimum, so the result doesn't depend on listing order.
    """

    def __init__(self, name: str, entry: ModEntry, info: ModSourceInfo) -> None:
        self._name = name
        self._entry = entry
        self._info = info
        self._earliest: dict[str, datetime] = {}

    def merge(self, games: list[str], published_at: datetime) -> None:
        """
        Merge one release's supported games.

        Raises:
            EntryValidationError: If a game ends up without cover or thumbnail art
        """
        for game in games:
            if game not in self._info.supported_games:
                self._info.supported_games.append(game)

            per_game = self._info.per_game_config.setdefault(game, PerGameInfo())
            per_game.release_date = self._release_date(game, published_at)

        self.check_art(games)

    def check_art(self, games: list[str]) -> None:
        """Require global or per-game art for every game in `games`."""
        require_resolvable_art(
            self._name,
            {
                "cover_art_url": self._info.cover_art_url,
                "thumbnail_art_url": self._info.thumbnail_art_url,
            },
            {game: pg.model_dump() for game, pg in self._info.per_game_config.items()},
            games,
        )

    def _release_date(self, game: str, published_at: datetime) -> str:
        if self._entry.release_date_override is not None:
            return self._entry.release_date_override

        override = self._entry.per_game_override(game)
        if override is not None and override.release_date_override is not None:
            return override.release_date_override

        earliest = self._earliest.get(game)
        if earliest is None or published_at < earliest:
            self._earliest[game] = published_at
        return format_timestamp(self._earliest[game])
