"""
Catalog writer.

Compares the freshly built catalog with the published one and only
rewrites the file when the content actually changed.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from mod_catalog.catalog.models import Catalog
from mod_catalog.ingestion.utils.timestamps import format_timestamp, utc_now
from mod_catalog.logger import get_logger

LAST_UPDATED_KEY = "lastUpdated"


@dataclass
class WriteOutcome:
    """Result of a diff-and-write pass."""

    path: Path
    written: bool
    last_updated: str | None = None


class CatalogWriter:
    """
    Writes the catalog document when it differs from the published one.

    Example:
        >>> writer = CatalogWriter(Path("site/mods.json"))
        >>> outcome = writer.write(catalog)
        >>> outcome.written
        False
    """

    def __init__(
        self,
        output_path: Path,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the writer.

        Args:
            output_path: Published catalog document
            clock: Source of the lastUpdated timestamp
        """
        self._output_path = output_path
        self._clock = clock
        self._logger = get_logger(__name__, component="catalog_writer")

    def load_previous(self) -> dict[str, Any] | None:
        """
        Load the published document without its lastUpdated field.

        Returns:
            The previous document, or None if there is none or it can't be read
        """
        if not self._output_path.exists():
            return None

        try:
            with self._output_path.open(encoding="utf-8") as f:
                previous = json.load(f)
        except ValueError as e:
            # invalid JSON or bytes that are not UTF-8
            self._logger.warning(
                "Published catalog is not valid JSON, it will be replaced",
                path=str(self._output_path),
                error=str(e),
            )
            return None

        if not isinstance(previous, dict):
            return None
        previous.pop(LAST_UPDATED_KEY, None)
        return previous

    def has_changed(self, catalog: Catalog) -> bool:
        """Deep-compare the catalog with the published document."""
        previous = self.load_previous()
        if previous is None:
            return True
        return previous != catalog.model_copy(update={"last_updated": None}).to_document()

    def write(self, catalog: Catalog) -> WriteOutcome:
        """
        Write the catalog if its content changed.

        The document is stamped with a new lastUpdated timestamp and
        replaces the file wholesale.

        Args:
            catalog: Freshly assembled catalog

        Returns:
            WriteOutcome: Whether the file was written and the stamp used
        """
        if not self.has_changed(catalog):
            self._logger.info(
                "Catalog would be unchanged, not updating the file",
                path=str(self._output_path),
            )
            return WriteOutcome(path=self._output_path, written=False)

        last_updated = format_timestamp(self._clock(), timespec="milliseconds")
        stamped = catalog.model_copy(update={"last_updated": last_updated})

        self._output_path.parent.mkdir(parents=True, exist_ok=True)
        with self._output_path.open("w", encoding="utf-8") as f:
            json.dump(stamped.to_document(), f, indent=4, ensure_ascii=False)

        self._logger.info(
            "Wrote catalog",
            path=str(self._output_path),
            last_updated=last_updated,
            mods=len(catalog.mods),
            texture_packs=len(catalog.texture_packs),
        )
        return WriteOutcome(path=self._output_path, written=True, last_updated=last_updated)
