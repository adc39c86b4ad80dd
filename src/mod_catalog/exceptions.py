"""Exceptions raised while building the catalog.

Every fatal condition is raised where it is detected and propagates up to
the CLI, which reports it and exits non-zero. Nothing is written when one
of these escapes the pipeline.
"""


class CatalogError(Exception):
    """Base exception for all catalog build errors."""


class ConfigError(CatalogError):
    """The source configuration file is missing, unparseable or malformed."""


class EntryValidationError(CatalogError):
    """A mod or texture-pack entry fails a required or structural check."""

    def __init__(self, message: str, *, entry: str, field: str | None = None) -> None:
        super().__init__(message)
        self.entry = entry
        self.field = field


class ReleaseMetadataError(CatalogError):
    """A release's metadata.json is missing, unreachable or invalid."""

    def __init__(self, message: str, *, entry: str, version: str) -> None:
        super().__init__(message)
        self.entry = entry
        self.version = version
