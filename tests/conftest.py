"""Shared fixtures for the test suite."""

import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, cast
from unittest.mock import patch

import pytest

from mod_catalog.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ReleaseFactory = Callable[..., dict[str, Any]]


def load_fixture(name: str) -> Any:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def mock_env() -> Iterator[None]:
    """Run every test with a GitHub token and fresh settings."""
    with patch.dict(os.environ, {"GITHUB_TOKEN": "test_token_123"}):
        get_settings.cache_clear()
        yield
    get_settings.cache_clear()


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the static test fixtures."""
    return FIXTURES_DIR


@pytest.fixture
def releases_page_1() -> list[dict[str, Any]]:
    """First page of a GitHub release listing."""
    return cast(list[dict[str, Any]], load_fixture("github_releases_page_1.json"))


@pytest.fixture
def releases_page_2() -> list[dict[str, Any]]:
    """Second (last) page of a GitHub release listing."""
    return cast(list[dict[str, Any]], load_fixture("github_releases_page_2.json"))


@pytest.fixture
def make_release() -> ReleaseFactory:
    """
    Build GitHub release payloads.

    Assets are given by name; download URLs are derived from owner,
    repo and tag the way GitHub lays them out.
    """

    def _make(
        tag: str,
        published_at: str | None = "2024-01-02T03:04:05Z",
        assets: list[str] | None = None,
        *,
        owner: str = "x",
        repo: str = "y",
        download_count: int = 0,
    ) -> dict[str, Any]:
        return {
            "tag_name": tag,
            "name": tag,
            "draft": published_at is None,
            "published_at": published_at,
            "assets": [
                {
                    "name": name,
                    "browser_download_url": (
                        f"https://github.com/{owner}/{repo}/releases/download/{tag}/{name}"
                    ),
                    "download_count": download_count,
                }
                for name in (assets or [])
            ],
        }

    return _make
