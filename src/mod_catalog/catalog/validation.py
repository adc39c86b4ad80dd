"""
Entry validation.

Required-field checks run on the raw YAML mapping so the error can name
exactly what is missing; structural checks run on the parsed entries.
Any violation aborts the whole run.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from mod_catalog.catalog.schemas import ModEntry, ModSourceConfig, TexturePackEntry
from mod_catalog.exceptions import EntryValidationError

REQUIRED_ENTRY_FIELDS = ("display_name", "description", "authors", "tags")

ART_FIELDS = ("cover_art_url", "thumbnail_art_url")


def validate_required_fields(
    name: str,
    raw_entry: Any,
    required: Iterable[str] = REQUIRED_ENTRY_FIELDS,
) -> None:
    """
    Check that a raw entry mapping carries every required key.

    Raises:
        EntryValidationError: Naming the entry and the first missing field
    """
    if not isinstance(raw_entry, Mapping):
        raise EntryValidationError(f"{name}: entry must be a mapping", entry=name)
    for field in required:
        if field not in raw_entry:
            raise EntryValidationError(f"{name}: missing {field}", entry=name, field=field)


def _require_repository(name: str, entry: ModEntry | TexturePackEntry) -> None:
    if not entry.has_repository:
        raise EntryValidationError(
            f"'repo_owner' or 'repo_name' missing in: {name}",
            entry=name,
            field="repo_owner" if not entry.repo_owner else "repo_name",
        )


def validate_mod_entry(name: str, entry: ModEntry) -> None:
    """
    Structural checks for a mod entry.

    External mods must list their supported games. Repository mods need
    owner and repo, and art that is either global or configurable per game.
    """
    if entry.is_external:
        if entry.supported_games is None:
            raise EntryValidationError(
                f"{name} is external but lacks 'supported_games'",
                entry=name,
                field="supported_games",
            )
        return

    _require_repository(name, entry)

    for field in ART_FIELDS:
        if getattr(entry, field) is None and entry.per_game_config is None:
            raise EntryValidationError(
                f"{name} does not define '{field}' but lacks 'per_game_config'",
                entry=name,
                field=field,
            )


def validate_texture_pack_entry(name: str, entry: TexturePackEntry) -> None:
    """Structural checks for a texture-pack entry."""
    if entry.thumbnail_art_url is None and entry.per_game_config is None:
        raise EntryValidationError(
            f"{name} does not define 'thumbnail_art_url' but lacks 'per_game_config'",
            entry=name,
            field="thumbnail_art_url",
        )
    _require_repository(name, entry)


def validate_source_config(config: ModSourceConfig) -> None:
    """Run the structural checks on every entry, in declaration order."""
    for name, mod in config.mods.items():
        validate_mod_entry(name, mod)
    for name, texture_pack in config.texture_packs.items():
        validate_texture_pack_entry(name, texture_pack)


def require_resolvable_art(
    name: str,
    top_level: Mapping[str, str | None],
    per_game: Mapping[str, Mapping[str, str | None]],
    games: Iterable[str],
) -> None:
    """
    Check that every game has cover and thumbnail art.

    Args:
        name: Entry name, for the error message
        top_level: Art field -> URL defined for the whole entry
        per_game: Game -> (art field -> URL) overrides
        games: Supported games that must be covered

    Raises:
        EntryValidationError: If a game has neither global nor per-game art
    """
    games = list(games)
    for field in ART_FIELDS:
        if top_level.get(field) is not None:
            continue
        for game in games:
            if per_game.get(game, {}).get(field) is None:
                raise EntryValidationError(
                    f"{name} does not define '{field}' and it's missing in "
                    f"'per_game_config.{game}'",
                    entry=name,
                    field=field,
                )
