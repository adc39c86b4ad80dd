"""
Data contract for the metadata.json asset published with each mod release.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def default_settings() -> dict[str, Any]:
    """Settings a version gets when its metadata.json declares none."""
    return {
        "decompConfigOverride": "",
        "shareVanillaSaves": False,
    }


class ReleaseMetadataDocument(BaseModel):
    """
    Per-release metadata document.

    Example:
        {"settings": {"shareVanillaSaves": true}, "supportedGames": ["jak1", "jak2"]}
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    settings: dict[str, Any] | None = Field(
        default=None,
        description="Mod-specific settings, replaces the defaults when present",
    )
    supported_games: list[str] = Field(
        ...,
        alias="supportedGames",
        description="Game identifiers this release supports",
    )

    def resolved_settings(self) -> dict[str, Any]:
        """Settings to publish for the version."""
        if self.settings is None:
            return default_settings()
        return self.settings
