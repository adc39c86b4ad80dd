"""
Data contracts for GitHub REST API release responses.

Only the fields the catalog consumes are declared; everything
else GitHub returns is ignored.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ReleaseAsset(BaseModel):
    """A file attached to a GitHub release."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Asset file name")
    browser_download_url: str = Field(..., description="Public download URL")
    download_count: int = Field(default=0, ge=0, description="Times the asset was downloaded")


class Release(BaseModel):
    """
    A single entry of GET /repos/{owner}/{repo}/releases.

    Drafts carry `draft: true` and usually a null `published_at`.
    """

    model_config = ConfigDict(extra="ignore")

    tag_name: str = Field(..., description="Git tag the release points at")
    published_at: datetime | None = Field(default=None, description="Publish timestamp (UTC)")
    draft: bool = Field(default=False)
    assets: list[ReleaseAsset] = Field(default_factory=list)

    def find_asset(self, name: str) -> ReleaseAsset | None:
        """Return the first asset whose name matches `name` case-insensitively."""
        wanted = name.lower()
        for asset in self.assets:
            if asset.name.lower() == wanted:
                return asset
        return None
