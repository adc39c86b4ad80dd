"""
GitHub releases extractor.

Lists every release of a repository (following Link pagination)
and downloads individual release assets.
"""

import time
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from mod_catalog.config import GitHubAPIConfig, get_settings
from mod_catalog.ingestion.contracts import Release
from mod_catalog.ingestion.extractors.base import BaseExtractor, ValidationError

API_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


class GitHubReleasesExtractor(BaseExtractor):
    """
    Client for the GitHub releases API.

    Example:
        >>> async with GitHubReleasesExtractor() as github:
        ...     releases = await github.list_releases("open-goal", "mod-base")
        ...     print([r.tag_name for r in releases])
    """

    def __init__(
        self,
        *,
        github_config: GitHubAPIConfig | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the GitHub releases extractor.

        Args:
            github_config: API settings (defaults to the cached settings)
            **kwargs: Arguments passed to BaseExtractor
        """
        self._github = github_config or get_settings().github
        headers = {"User-Agent": self._github.user_agent}
        if self._github.token is not None:
            headers["Authorization"] = f"Bearer {self._github.token.get_secret_value()}"
        kwargs.setdefault("timeout", self._github.timeout_seconds)
        super().__init__(headers=headers, **kwargs)

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "github_releases"

    def _build_url(self, owner: str, repo: str) -> str:
        """Build API URL for a repository's release listing."""
        return f"{self._github.base_url}/repos/{owner}/{repo}/releases"

    def _parse_page(self, response: httpx.Response) -> list[Release]:
        """
        Parse and validate one page of the release listing.

        Raises:
            ValidationError: If the page doesn't match the release contract
        """
        endpoint = str(response.url)
        try:
            raw_data = response.json()
        except ValueError as e:
            raise ValidationError(
                f"Release listing is not valid JSON: {e}",
                source=self.source_name,
                endpoint=endpoint,
            ) from e

        if not isinstance(raw_data, list):
            raise ValidationError(
                "Release listing is not a JSON array",
                source=self.source_name,
                endpoint=endpoint,
            )
        try:
            return [Release.model_validate(item) for item in raw_data]
        except PydanticValidationError as e:
            raise ValidationError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=endpoint,
            ) from e

    async def list_releases(self, owner: str, repo: str) -> list[Release]:
        """
        Fetch the complete release list of a repository.

        Pages are requested one after another until the Link header
        no longer advertises a next page.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name

        Returns:
            list[Release]: Releases in the order GitHub returned them

        Raises:
            RateLimitError: If the quota stays exhausted after all retries
            APIError: If GitHub returns an error response
            ValidationError: If a page doesn't match the release contract
        """
        url: str | None = self._build_url(owner, repo)
        params: dict[str, Any] | None = {"per_page": self._github.per_page}
        releases: list[Release] = []
        pages = 0
        start_time = time.perf_counter()

        self._logger.info("Listing releases", owner=owner, repo=repo)

        while url is not None:
            response = await self._make_request("GET", url, params=params, headers=API_HEADERS)
            releases.extend(self._parse_page(response))
            pages += 1

            url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            params = None

        self._logger.info(
            "Listed releases",
            owner=owner,
            repo=repo,
            releases=len(releases),
            pages=pages,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return releases

    async def fetch_asset(self, url: str) -> httpx.Response:
        """
        Download a release asset.

        Redirects to the storage backend are followed. Error statuses are
        returned to the caller rather than raised; only rate limiting is
        retried.

        Args:
            url: Asset download URL

        Returns:
            httpx.Response: Final response
        """
        self._logger.debug("Fetching asset", url=url)
        return await self._make_request("GET", url, check_status=False)
