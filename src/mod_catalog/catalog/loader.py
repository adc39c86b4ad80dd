"""Loading of the mod source configuration file."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from mod_catalog.catalog.schemas import (
    ModEntry,
    ModSourceConfig,
    SourceMetadata,
    TexturePackEntry,
)
from mod_catalog.catalog.validation import validate_required_fields
from mod_catalog.exceptions import ConfigError, EntryValidationError
from mod_catalog.logger import get_logger

logger = get_logger(__name__)

EntryT = TypeVar("EntryT", bound=BaseModel)


def load_source_config(path: Path) -> ModSourceConfig:
    """
    Read and parse config.yaml.

    Args:
        path: Location of the YAML configuration

    Returns:
        ModSourceConfig: Parsed configuration

    Raises:
        ConfigError: If the file is missing, unparseable or malformed
        EntryValidationError: If an entry misses a required field
    """
    if not path.exists():
        raise ConfigError(f"Couldn't locate '{path}' file, aborting!")

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Couldn't successfully parse config file, fix it!: {e}") from e

    config = parse_source_config(raw)
    logger.info(
        "Loaded source config",
        path=str(path),
        source_name=config.metadata.name,
        mods=len(config.mods),
        texture_packs=len(config.texture_packs),
    )
    return config


def _parse_entry(model: type[EntryT], name: str, raw_entry: Any) -> EntryT:
    validate_required_fields(name, raw_entry)
    try:
        return model.model_validate(raw_entry)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        raise EntryValidationError(
            f"{name}: invalid '{field}': {error['msg']}",
            entry=name,
            field=field,
        ) from e


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = raw.get(key)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{key}' section must be a mapping")
    return section


def parse_source_config(raw: Any) -> ModSourceConfig:
    """
    Build a ModSourceConfig from already-parsed YAML.

    Raises:
        ConfigError: If a section is missing or malformed
        EntryValidationError: If an entry misses a required field
    """
    if not isinstance(raw, Mapping):
        raise ConfigError("Config file must contain a mapping at the top level")

    metadata = raw.get("metadata")
    if not isinstance(metadata, Mapping) or not metadata.get("name"):
        raise ConfigError("'metadata' section missing name")

    if raw.get("mods") is None:
        raise ConfigError("'mods' section missing")

    mods = {
        str(name): _parse_entry(ModEntry, str(name), entry)
        for name, entry in _section(raw, "mods").items()
    }
    texture_packs = {
        str(name): _parse_entry(TexturePackEntry, str(name), entry)
        for name, entry in _section(raw, "texture_packs").items()
    }

    return ModSourceConfig(
        metadata=SourceMetadata(name=str(metadata["name"])),
        mods=mods,
        texture_packs=texture_packs,
    )
