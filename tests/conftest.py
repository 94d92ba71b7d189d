import httpx
import pytest
from fastapi.testclient import TestClient

from scriptproxy.api.client import GithubFetcher
from scriptproxy.config import Settings, reset_config
from scriptproxy.server import create_app

REPO_URL = "https://github.com/owner/repo"


@pytest.fixture(autouse=True)
def _clear_config_cache():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def settings():
    return Settings(repository_url=REPO_URL, branch="main", port=4000)


@pytest.fixture
def upstream():
    """Fake GitHub: maps request URL -> (status, body); records requested URLs"""
    class Upstream:
        def __init__(self):
            self.files = {}
            self.requested = []
            self.error = None

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requested.append(str(request.url))
            if self.error is not None:
                raise self.error
            status, body = self.files.get(str(request.url), (404, b"Not Found"))
            return httpx.Response(status, content=body)

    return Upstream()


@pytest.fixture
def fetcher(settings, upstream):
    return GithubFetcher.from_settings(settings, transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
def client(settings, fetcher):
    return TestClient(create_app(settings, fetcher))
