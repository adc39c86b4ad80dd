"""
Data contracts for upstream documents.

Pydantic models describing GitHub release listings and the
metadata.json asset attached to mod releases.
"""

from mod_catalog.ingestion.contracts.github import Release, ReleaseAsset
from mod_catalog.ingestion.contracts.release_metadata import (
    ReleaseMetadataDocument,
    default_settings,
)

__all__ = [
    "Release",
    "ReleaseAsset",
    "ReleaseMetadataDocument",
    "default_settings",
]
