"""Integration tests for the catalog pipeline with mocked GitHub responses."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest
import respx

from mod_catalog.catalog import Catalog, parse_source_config
from mod_catalog.exceptions import EntryValidationError, ReleaseMetadataError
from mod_catalog.ingestion.extractors import GitHubReleasesExtractor
from mod_catalog.ingestion.orchestrator import CatalogOrchestrator


FOO_RELEASES_URL = "https://api.github.com/repos/x/y/releases"
FOO_DOWNLOADS = "https://github.com/x/y/releases/download"
METADATA = "metadata.json"

ReleaseFactory = Callable[..., dict[str, Any]]


def foo_config(**overrides: Any) -> dict[str, Any]:
    """Configuration with a single repository mod named foo."""
    foo: dict[str, Any] = {
        "display_name": "Foo",
        "description": "The foo mod",
        "authors": ["someone"],
        "tags": ["gameplay"],
        "repo_owner": "x",
        "repo_name": "y",
        "per_game_config": {
            "jak1": {
                "cover_art_url": "https://example.com/jak1-cover.png",
                "thumbnail_art_url": "https://example.com/jak1-thumb.png",
            }
        },
    }
    foo.update(overrides)
    return {"metadata": {"name": "OpenGOAL Mods"}, "mods": {"foo": foo}}


def mock_metadata(tag: str, document: dict[str, Any] | None = None) -> respx.Route:
    """Serve metadata.json for a release of x/y."""
    return respx.get(f"{FOO_DOWNLOADS}/{tag}/metadata.json").mock(
        return_value=httpx.Response(200, json=document or {"supportedGames": ["jak1"]})
    )


async def build(raw_config: dict[str, Any]) -> Catalog:
    """Run the full pipeline against the mocked API."""
    async with GitHubReleasesExtractor() as github:
        return await CatalogOrchestrator(extractor=github).build(parse_source_config(raw_config))


class TestModPipeline:
    """End-to-end mod scenarios."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_art_aborts(self) -> None:
        """Test that a mod without art or per-game config names foo and cover_art_url."""
        raw = foo_config(per_game_config=None)

        with pytest.raises(EntryValidationError) as exc_info:
            await build(raw)

        assert "foo" in str(exc_info.value)
        assert "cover_art_url" in str(exc_info.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_release_game_without_art_aborts(self, make_release: ReleaseFactory) -> None:
        """Test that a release declaring a game without art is fatal."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[make_release("v1.0.0", assets=["windows-1.0.0.zip", "metadata.json"])],
            )
        )
        mock_metadata("v1.0.0", {"supportedGames": ["jak1", "jak2"]})

        with pytest.raises(EntryValidationError, match=r"per_game_config\.jak2"):
            await build(foo_config())

    @respx.mock
    @pytest.mark.asyncio
    async def test_single_release(self, make_release: ReleaseFactory) -> None:
        """Test the happy path with only a windows build."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    make_release(
                        "v1.0.0",
                        "2024-01-02T03:04:05Z",
                        ["windows-1.0.0.zip", "metadata.json"],
                        download_count=12,
                    )
                ],
            )
        )
        mock_metadata("v1.0.0")

        document = (await build(foo_config())).to_document()
        foo = document["mods"]["foo"]

        assert "lastUpdated" not in document
        assert foo["websiteUrl"] == "https://www.github.com/x/y"
        assert foo["supportedGames"] == ["jak1"]
        assert foo["perGameConfig"]["jak1"] == {
            "releaseDate": "2024-01-02T03:04:05Z",
            "coverArtUrl": "https://example.com/jak1-cover.png",
            "thumbnailArtUrl": "https://example.com/jak1-thumb.png",
        }

        assert len(foo["versions"]) == 1
        version = foo["versions"][0]
        assert version["version"] == "1.0.0"
        assert version["publishedDate"] == "2024-01-02T03:04:05Z"
        assert version["supportedGames"] == ["jak1"]
        assert version["settings"] == {"decompConfigOverride": "", "shareVanillaSaves": False}
        assert version["assets"]["windows"] == f"{FOO_DOWNLOADS}/v1.0.0/windows-1.0.0.zip"
        assert version["assets"]["linux"] is None
        assert version["assets"]["macos"] is None
        assert version["assetDownloadCounts"]["windows"] == 12

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_metadata_asset_aborts(self, make_release: ReleaseFactory) -> None:
        """Test that a release without metadata.json is fatal."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[make_release("v1.0.0", assets=["windows-1.zip"])],
            )
        )

        with pytest.raises(ReleaseMetadataError, match=r"foo:1\.0\.0"):
            await build(foo_config())

    @respx.mock
    @pytest.mark.asyncio
    async def test_missing_supported_games_aborts(self, make_release: ReleaseFactory) -> None:
        """Test that metadata without supportedGames is fatal."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[make_release("v1.0.0", assets=["windows-1.zip", "metadata.json"])],
            )
        )
        mock_metadata("v1.0.0", {"settings": {"shareVanillaSaves": True}})

        with pytest.raises(ReleaseMetadataError, match="does not include 'supportedGames'"):
            await build(foo_config())

    @respx.mock
    @pytest.mark.asyncio
    async def test_invalid_semver_skipped(self, make_release: ReleaseFactory) -> None:
        """Test that non-semver tags are skipped without aborting."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    make_release("nightly", "2024-02-01T00:00:00Z", ["windows-n.zip"]),
                    make_release(
                        "v1.0.0", "2024-01-01T00:00:00Z", ["windows-1.zip", "metadata.json"]
                    ),
                ],
            )
        )
        mock_metadata("v1.0.0")

        catalog = await build(foo_config())

        assert [v.version for v in catalog.mods["foo"].versions] == ["1.0.0"]

    @pytest.mark.parametrize(
        ("rule", "expected"),
        [
            ("<1.2.0", ["1.3.0", "1.2.0"]),
            ("1.2.0", ["1.3.0", "1.1.0"]),
        ],
    )
    @respx.mock
    @pytest.mark.asyncio
    async def test_ignore_rules(
        self,
        make_release: ReleaseFactory,
        rule: str,
        expected: list[str],
    ) -> None:
        """Test bounded and exact ignore rules."""
        releases = [
            make_release(
                f"v1.{minor}.0",
                f"2024-0{minor}-01T00:00:00Z",
                [f"windows-1.{minor}.0.zip", "metadata.json"],
            )
            for minor in (1, 2, 3)
        ]
        respx.get(FOO_RELEASES_URL).mock(return_value=httpx.Response(200, json=releases))
        # ignored releases are never downloaded
        for version in expected:
            mock_metadata(f"v{version}")

        catalog = await build(foo_config(ignore_versions=[rule]))

        assert [v.version for v in catalog.mods["foo"].versions] == expected

    @respx.mock
    @pytest.mark.asyncio
    async def test_version_without_platform_assets_dropped(
        self,
        make_release: ReleaseFactory,
    ) -> None:
        """Test that a release with no build is left out but still counts its games."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    make_release("v1.1.0", "2024-02-01T00:00:00Z", ["metadata.json", "src.zip"]),
                    make_release(
                        "v1.0.0", "2024-01-01T00:00:00Z", ["linux-1.0.0.zip", "metadata.json"]
                    ),
                ],
            )
        )
        mock_metadata("v1.1.0")
        mock_metadata("v1.0.0")

        catalog = await build(foo_config())
        foo = catalog.mods["foo"]

        assert [v.version for v in foo.versions] == ["1.0.0"]
        assert foo.supported_games == ["jak1"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_versions_newest_first_and_earliest_date(
        self,
        make_release: ReleaseFactory,
    ) -> None:
        """Test version order and the per-game release date whatever the API order."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    make_release("v1.0.0", "2024-01-01T00:00:00Z", ["windows-a.zip", METADATA]),
                    make_release("v1.1.0", "2024-03-01T00:00:00Z", ["windows-b.zip", METADATA]),
                ],
            )
        )
        mock_metadata("v1.0.0")
        mock_metadata(
            "v1.1.0",
            {"supportedGames": ["jak1"], "settings": {"shareVanillaSaves": True}},
        )

        foo = (await build(foo_config())).mods["foo"]

        assert [v.version for v in foo.versions] == ["1.1.0", "1.0.0"]
        assert foo.versions[0].settings == {"shareVanillaSaves": True}
        assert foo.per_game_config["jak1"].release_date == "2024-01-01T00:00:00Z"

    @respx.mock
    @pytest.mark.asyncio
    async def test_drafts_skipped(self, make_release: ReleaseFactory) -> None:
        """Test that unpublished releases are never fetched."""
        respx.get(FOO_RELEASES_URL).mock(
            return_value=httpx.Response(200, json=[make_release("v2.0.0", None, ["windows.zip"])])
        )

        foo = (await build(foo_config())).mods["foo"]

        assert foo.versions == []
        assert foo.supported_games == ["jak1"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_dated_drafts_skipped(self, make_release: ReleaseFactory) -> None:
        """Test that a draft is skipped even when it carries a publish date."""
        draft = make_release("v2.0.0", assets=["windows.zip", METADATA])
        draft["draft"] = True
        respx.get(FOO_RELEASES_URL).mock(return_value=httpx.Response(200, json=[draft]))

        foo = (await build(foo_config())).mods["foo"]

        assert foo.versions == []
        assert foo.supported_games == ["jak1"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_releases_default_games(self) -> None:
        """Test the supported games fallback."""
        respx.get(FOO_RELEASES_URL).mock(return_value=httpx.Response(200, json=[]))

        foo = (await build(foo_config())).mods["foo"]

        assert foo.versions == []
        assert foo.supported_games == ["jak1"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_default_games_need_art(self) -> None:
        """Test that a mod falling back to the default games needs art for them."""
        respx.get(FOO_RELEASES_URL).mock(return_value=httpx.Response(200, json=[]))
        raw = foo_config(
            per_game_config={"jak2": {"cover_art_url": "c", "thumbnail_art_url": "t"}}
        )

        with pytest.raises(EntryValidationError, match=r"per_game_config\.jak1"):
            await build(raw)


class TestExternalMods:
    """External mods link elsewhere and have no releases."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_external_mod(self) -> None:
        """Test that external mods are published without polling GitHub."""
        raw = foo_config(
            repo_owner=None,
            repo_name=None,
            external_link="https://example.com/foo",
            supported_games=["jak1"],
        )

        foo = (await build(raw)).mods["foo"]

        assert foo.external_link == "https://example.com/foo"
        assert foo.website_url is None
        assert foo.supported_games == ["jak1"]
        assert foo.versions == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_external_mod_needs_art_per_game(self) -> None:
        """Test that every listed game of an external mod needs art."""
        raw = foo_config(
            repo_owner=None,
            repo_name=None,
            external_link="https://example.com/foo",
            supported_games=["jak1", "jak3"],
        )

        with pytest.raises(EntryValidationError, match=r"per_game_config\.jak3"):
            await build(raw)

    @respx.mock
    @pytest.mark.asyncio
    async def test_empty_games_checked_after_default(self) -> None:
        """Test that the default games of an external mod still need art."""
        raw = foo_config(
            repo_owner=None,
            repo_name=None,
            external_link="https://example.com/foo",
            supported_games=[],
            per_game_config=None,
        )

        with pytest.raises(EntryValidationError) as exc_info:
            await build(raw)

        assert "foo" in str(exc_info.value)
        assert "per_game_config.jak1" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_games_not_checked_in_lint(self) -> None:
        """Test that lint runs publish the default games without the art check."""
        raw = foo_config(
            repo_owner=None,
            repo_name=None,
            external_link="https://example.com/foo",
            supported_games=[],
            per_game_config=None,
        )

        catalog = await CatalogOrchestrator().build(parse_source_config(raw))

        assert catalog.mods["foo"].supported_games == ["jak1"]


class TestTexturePackPipeline:
    """End-to-end texture pack scenarios."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_archive_per_release(self, make_release: ReleaseFactory) -> None:
        """Test that only releases with assets.zip become versions."""
        respx.get("https://api.github.com/repos/tex/hd/releases").mock(
            return_value=httpx.Response(
                200,
                json=[
                    make_release(
                        "v2.0.0",
                        "2024-02-01T00:00:00Z",
                        ["assets.zip"],
                        owner="tex",
                        repo="hd",
                        download_count=5,
                    ),
                    make_release(
                        "v1.0.0", "2024-01-01T00:00:00Z", ["textures.7z"], owner="tex", repo="hd"
                    ),
                ],
            )
        )
        raw = {
            "metadata": {"name": "OpenGOAL Mods"},
            "mods": {},
            "texture_packs": {
                "hd": {
                    "display_name": "HD",
                    "description": "",
                    "authors": ["tex"],
                    "tags": ["textures"],
                    "repo_owner": "tex",
                    "repo_name": "hd",
                    "thumbnail_art_url": "https://example.com/hd.png",
                }
            },
        }

        document = (await build(raw)).to_document()
        hd = document["texturePacks"]["hd"]

        assert hd["websiteUrl"] == "https://www.github.com/tex/hd"
        assert hd["perGameConfig"] is None
        assert hd["versions"] == [
            {
                "version": "2.0.0",
                "publishedDate": "2024-02-01T00:00:00Z",
                "downloadUrl": "https://github.com/tex/hd/releases/download/v2.0.0/assets.zip",
                "downloadCount": 5,
            }
        ]


class TestLintMode:
    """Lint runs validate without touching the network."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_no_requests(self) -> None:
        """Test that lint mode builds records without releases."""
        catalog = await CatalogOrchestrator().build(parse_source_config(foo_config()))

        assert catalog.mods["foo"].versions == []
        assert catalog.mods["foo"].supported_games == ["jak1"]
        assert not respx.calls

    @pytest.mark.asyncio
    async def test_structural_errors_still_raised(self) -> None:
        """Test that lint mode still runs the structural checks."""
        with pytest.raises(EntryValidationError, match="cover_art_url"):
            await CatalogOrchestrator().build(parse_source_config(foo_config(per_game_config=None)))

    @pytest.mark.asyncio
    async def test_custom_default_games(self) -> None:
        """Test the configurable supported games fallback."""
        orchestrator = CatalogOrchestrator(default_supported_games=["jak2"])

        catalog = await orchestrator.build(parse_source_config(foo_config()))

        assert catalog.mods["foo"].supported_games == ["jak2"]
