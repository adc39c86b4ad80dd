"""
Upstream API clients.

All clients are built on a common base with bounded retries,
rate limit handling, and structured logging.
"""

from mod_catalog.ingestion.extractors.base import (
    APIError,
    BaseExtractor,
    ExtractionError,
    RateLimitError,
    ValidationError,
)
from mod_catalog.ingestion.extractors.github_releases import GitHubReleasesExtractor

__all__ = [
    # Base classes and errors
    "APIError",
    "BaseExtractor",
    "ExtractionError",
    "RateLimitError",
    "ValidationError",
    # Extractors
    "GitHubReleasesExtractor",
]
