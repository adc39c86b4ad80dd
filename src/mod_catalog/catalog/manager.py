"""
Catalog assembly.

Collects the resolved mod and texture-pack records into one catalog,
keyed by entry name in configuration declaration order.
"""

from typing import Any

from mod_catalog.catalog.models import Catalog, ModSourceInfo, TexturePackInfo
from mod_catalog.logger import get_logger


class CatalogAssembler:
    """
    Accumulates resolved entries into a Catalog.

    Example:
        >>> assembler = CatalogAssembler("OpenGOAL Mods")
        >>> assembler.add_mod("foo", foo_info)
        >>> catalog = assembler.catalog
    """

    def __init__(self, source_name: str) -> None:
        self._catalog = Catalog(source_name=source_name)
        self._logger = get_logger(__name__, component="assembler")

    @property
    def catalog(self) -> Catalog:
        """The catalog assembled so far."""
        return self._catalog

    def add_mod(self, name: str, info: ModSourceInfo) -> None:
        """Add a resolved mod under `name`."""
        self._catalog.mods[name] = info
        self._logger.debug("Added mod", entry=name, versions=len(info.versions))

    def add_texture_pack(self, name: str, info: TexturePackInfo) -> None:
        """Add a resolved texture pack under `name`."""
        self._catalog.texture_packs[name] = info
        self._logger.debug("Added texture pack", entry=name, versions=len(info.versions))

    def get_catalog_stats(self) -> dict[str, Any]:
        """
        Get statistics about the catalog.

        Returns:
            Dict with entry and version counts
        """
        mods = self._catalog.mods.values()
        texture_packs = self._catalog.texture_packs.values()
        return {
            "mods": len(self._catalog.mods),
            "external_mods": sum(1 for m in mods if m.external_link is not None),
            "mod_versions": sum(len(m.versions) for m in mods),
            "texture_packs": len(self._catalog.texture_packs),
            "texture_pack_versions": sum(len(t.versions) for t in texture_packs),
        }
