"""
Command-line interface for the mod catalog.

Without arguments, rebuilds the catalog from GitHub and publishes it when
something changed. `lint` only validates the configuration.
"""

import asyncio
import sys
from pathlib import Path

from mod_catalog.catalog import CatalogWriter, load_source_config
from mod_catalog.catalog.models import Catalog
from mod_catalog.config import get_settings
from mod_catalog.exceptions import CatalogError
from mod_catalog.ingestion.extractors import ExtractionError, GitHubReleasesExtractor
from mod_catalog.ingestion.orchestrator import CatalogOrchestrator
from mod_catalog.logger import get_logger, setup_logging

logger = get_logger(__name__)


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Mod Catalog CLI
===============

Usage: mod-catalog [command] [options]

Commands:
  (none)                      Rebuild the catalog from GitHub and publish it if it changed
  lint                        Validate the configuration without calling GitHub
  help                        Show this message

Options:
  --config <path>             Source configuration (default: $CATALOG_CONFIG_PATH or config.yaml)
  --output <path>             Published catalog (default: $CATALOG_OUTPUT_PATH)

Environment:
  GITHUB_TOKEN                Token used for the GitHub API

Examples:
  mod-catalog lint --config config.yaml
  GITHUB_TOKEN=... mod-catalog --output site/mods.json
"""
    print(usage)


async def cmd_lint(config_path: Path) -> Catalog:
    """Validate the configuration and every entry, offline."""
    settings = get_settings()
    logger.info("lint mode enabled", config_path=str(config_path))

    config = load_source_config(config_path)
    catalog = await CatalogOrchestrator(
        default_supported_games=settings.catalog.default_supported_games,
    ).build(config)

    print(f"Configuration OK: {len(catalog.mods)} mods, {len(catalog.texture_packs)} texture packs")
    return catalog


async def cmd_sync(config_path: Path, output_path: Path) -> Catalog:
    """Rebuild the catalog from GitHub and write it if it changed."""
    settings = get_settings()
    if settings.github.token is None:
        logger.warning("GITHUB_TOKEN is not set, requests are unauthenticated and heavily limited")

    config = load_source_config(config_path)

    async with GitHubReleasesExtractor() as github:
        catalog = await CatalogOrchestrator(
            extractor=github,
            default_supported_games=settings.catalog.default_supported_games,
        ).build(config)

    outcome = CatalogWriter(output_path).write(catalog)

    if outcome.written:
        print(f"Updated {outcome.path} (lastUpdated={outcome.last_updated})")
    else:
        print(f"{outcome.path} would be unchanged, not updating the file")
    return catalog


def _option(args: list[str], name: str) -> str | None:
    """Pop `name <value>` from args and return the value."""
    if name not in args:
        return None
    idx = args.index(name)
    if idx + 1 >= len(args):
        print(f"Error: {name} requires a value")
        sys.exit(1)
    value = args[idx + 1]
    del args[idx : idx + 2]
    return value


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = list(sys.argv[1:] if argv is None else argv)

    setup_logging()
    settings = get_settings()

    config_option = _option(args, "--config")
    output_option = _option(args, "--output")
    config_path = Path(config_option) if config_option else settings.catalog.config_path
    output_path = Path(output_option) if output_option else settings.catalog.output_path

    command = args[0] if args else None

    try:
        if command is None:
            asyncio.run(cmd_sync(config_path, output_path))

        elif command == "lint":
            asyncio.run(cmd_lint(config_path))

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except (CatalogError, ExtractionError) as e:
        logger.error("Catalog build failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
