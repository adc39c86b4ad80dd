"""
Schemas for the mod source configuration (config.yaml).

Optional keys are typed as `X | None` and checked once at parse time,
so the pipeline never has to probe raw mappings for key presence.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mod_catalog.ingestion.utils.timestamps import format_timestamp
from mod_catalog.ingestion.utils.versions import IgnoreRule


def _coerce_to_str(value: Any) -> Any:
    """
    Undo PyYAML's implicit typing of dates and numbers.

    Dates come back as written; timestamps are rendered in UTC with a
    "Z" suffix, so `2023-05-01T00:00:00Z` round-trips unchanged.
    """
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class PerGameOverride(BaseModel):
    """Overrides applied to one supported game of an entry."""

    model_config = ConfigDict(extra="ignore")

    cover_art_url: str | None = None
    thumbnail_art_url: str | None = None
    release_date_override: str | None = None

    @field_validator("release_date_override", mode="before")
    @classmethod
    def coerce_release_date(cls, v: Any) -> Any:
        """Keep YAML dates as the literal text they were written as."""
        return _coerce_to_str(v)


class EntryBase(BaseModel):
    """Fields shared by mod and texture-pack entries."""

    model_config = ConfigDict(extra="ignore")

    display_name: str
    description: str
    authors: list[str]
    tags: list[str]
    website_url: str | None = None
    repo_owner: str | None = None
    repo_name: str | None = None
    ignore_versions: list[str] = Field(default_factory=list)
    thumbnail_art_url: str | None = None
    per_game_config: dict[str, PerGameOverride] | None = None

    @field_validator("ignore_versions", mode="before")
    @classmethod
    def coerce_ignore_versions(cls, v: Any) -> Any:
        """Treat an empty key as no rules and stringify numeric YAML scalars."""
        if v is None:
            return []
        if isinstance(v, list):
            return [_coerce_to_str(item) for item in v]
        return v

    @field_validator("ignore_versions")
    @classmethod
    def validate_ignore_versions(cls, v: list[str]) -> list[str]:
        """Reject rules that aren't valid semver bounds."""
        for rule in v:
            IgnoreRule.parse(rule)
        return v

    @property
    def ignore_rules(self) -> list[IgnoreRule]:
        """Parsed ignore rules, in configured order."""
        return [IgnoreRule.parse(rule) for rule in self.ignore_versions]

    @property
    def has_repository(self) -> bool:
        """Whether both repo_owner and repo_name are set."""
        return bool(self.repo_owner) and bool(self.repo_name)

    @property
    def repository_url(self) -> str:
        """Project page inferred from the backing repository."""
        return f"https://www.github.com/{self.repo_owner}/{self.repo_name}"

    def per_game_override(self, game: str) -> PerGameOverride | None:
        """Overrides configured for `game`, if any."""
        if self.per_game_config is None:
            return None
        return self.per_game_config.get(game)


class ModEntry(EntryBase):
    """A configured mod, backed by a GitHub repository or an external link."""

    external_link: str | None = None
    supported_games: list[str] | None = None
    release_date_override: str | None = None
    cover_art_url: str | None = None

    @field_validator("release_date_override", mode="before")
    @classmethod
    def coerce_release_date(cls, v: Any) -> Any:
        """Keep YAML dates as the literal text they were written as."""
        return _coerce_to_str(v)

    @property
    def is_external(self) -> bool:
        """External entries link elsewhere and have no releases to poll."""
        return self.external_link is not None


class TexturePackEntry(EntryBase):
    """A configured texture pack, distributed as one assets.zip per release."""


class SourceMetadata(BaseModel):
    """The `metadata` section of the configuration."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)


class ModSourceConfig(BaseModel):
    """
    Parsed mod source configuration.

    Mappings keep the declaration order of the YAML file.
    """

    metadata: SourceMetadata
    mods: dict[str, ModEntry]
    texture_packs: dict[str, TexturePackEntry] = Field(default_factory=dict)
