"""
GitHub client module
Fetches raw script files from the repository on GitHub
"""
import logging
from typing import Optional

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Network-level failure talking to GitHub"""
    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class GithubFetcher:
    """Raw-content fetcher for {repository}/raw/{branch}/scripts/..."""

    def __init__(
        self,
        repository_url: str,
        branch: str,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            repository_url: e.g. https://github.com/owner/repo
            branch: branch to read scripts from
            transport: custom httpx transport (tests use httpx.MockTransport)
        """
        self.repository_url = repository_url.rstrip('/')
        self.branch = branch
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> 'GithubFetcher':
        return cls(settings.repository_url, settings.branch, transport=transport)

    def build_url(self, mapped_path: str) -> str:
        return f"{self.repository_url}/raw/{self.branch}/scripts/{mapped_path}"

    async def fetch_file(self, mapped_path: str) -> Optional[bytes]:
        """
        Fetch a script file

        GitHub answers /raw/ with a redirect to raw.githubusercontent.com,
        so redirects are followed.

        Returns:
            The file bytes on a 200, None for any other status
        Raises:
            UpstreamError: connection failure, timeout or redirect loop
        """
        url = self.build_url(mapped_path)

        try:
            async with httpx.AsyncClient(transport=self.transport, follow_redirects=True) as client:
                resp = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamError(f"Failed to fetch {url}: {e}", url) from e

        if resp.status_code != 200:
            logger.info(f"Upstream miss: {url} -> {resp.status_code}")
            return None

        return resp.content
