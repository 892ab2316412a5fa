"""
A concrete ReleaseSource backed by the GitHub releases API.
"""
import os
from typing import Any, Optional

import requests

from unitydap.internal.constants import (
    GITHUB_API_URL,
    GITHUB_USER_AGENT,
    HTTP_TIMEOUT_SECONDS,
    UNITY_DAP_ASSET_NAME,
    UNITY_DAP_GITHUB,
)
from unitydap.internal.logging import get_logger
from unitydap.kernel.artifacts import Release, ReleaseSource
from unitydap.kernel.errors import RegistryError

logger = get_logger(__name__)

# GitHub pages release listings; the default page only holds 30.
RELEASES_PER_PAGE = 100


class GitHubReleaseSource(ReleaseSource):
    """
    Finds the newest non-prerelease release of a repository that ships at
    least one asset, and the download URL of the expected archive in it.
    """

    def __init__(
        self,
        repo: str = UNITY_DAP_GITHUB,
        asset_name: str = UNITY_DAP_ASSET_NAME,
        api_url: str = GITHUB_API_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.repo = repo
        self.asset_name = asset_name
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": GITHUB_USER_AGENT,
        }
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _fetch_releases(self) -> list[dict[str, Any]]:
        url = f"{self.api_url}/repos/{self.repo}/releases"
        try:
            r = self._session.get(
                url,
                headers=self._headers(),
                params={"per_page": RELEASES_PER_PAGE},
                timeout=self.timeout,
            )
            r.raise_for_status()
            releases = r.json()
        except requests.RequestException as e:
            raise RegistryError(
                f"failed to fetch latest github release of unity-debug-adapter: {e}"
            ) from e
        except ValueError as e:
            raise RegistryError(f"malformed release listing from {url}: {e}") from e

        if not isinstance(releases, list):
            raise RegistryError(f"unexpected release listing from {url}")
        return releases

    @staticmethod
    def _is_candidate(release: Any) -> bool:
        # Listing entries of an unexpected shape are skipped, not trusted.
        if not isinstance(release, dict):
            return False
        assets = release.get("assets")
        if release.get("draft") or release.get("prerelease"):
            return False
        return isinstance(assets, list) and bool(assets)

    def latest_release(self) -> Release:
        release = next((r for r in self._fetch_releases() if self._is_candidate(r)), None)
        if release is None:
            raise RegistryError(f"no release with assets found for {self.repo}")

        version = str(release.get("tag_name") or "")
        asset = next(
            (a for a in release["assets"] if isinstance(a, dict) and a.get("name") == self.asset_name),
            None,
        )
        url = asset.get("browser_download_url") if asset else None
        if not isinstance(url, str) or not url:
            raise RegistryError(
                f"failed to find a valid build of unity-debug-adapter in release {version}"
            )

        logger.debug("Found latest release", repo=self.repo, version=version)
        return Release(version=version, asset_url=url)
