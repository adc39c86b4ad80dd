"""
Mod Catalog.

Builds the published catalog of community mods and texture packs
from the release history of their GitHub repositories.
"""

__version__ = "0.1.0"

SCHEMA_VERSION = "1.0.0"

__all__ = [
    "SCHEMA_VERSION",
    "__version__",
]
