import asyncio

import httpx
import pytest

from scriptproxy.api.client import GithubFetcher, UpstreamError


def test_build_url():
    fetcher = GithubFetcher("https://github.com/owner/repo/", "develop")
    assert fetcher.build_url("bash/prepare.sh") == \
        "https://github.com/owner/repo/raw/develop/scripts/bash/prepare.sh"


def test_fetch_file_returns_bytes_on_200(fetcher, upstream):
    url = "https://github.com/owner/repo/raw/main/scripts/bash/prepare.sh"
    upstream.files[url] = (200, b"#!/bin/sh\necho hi\n")

    assert asyncio.run(fetcher.fetch_file("bash/prepare.sh")) == b"#!/bin/sh\necho hi\n"
    assert upstream.requested == [url]


@pytest.mark.parametrize("status", [201, 204, 404, 500, 503])
def test_fetch_file_returns_none_on_other_status(fetcher, upstream, status):
    upstream.files["https://github.com/owner/repo/raw/main/scripts/bash/prepare.sh"] = (status, b"")

    assert asyncio.run(fetcher.fetch_file("bash/prepare.sh")) is None


def test_fetch_file_follows_raw_redirect():
    raw_url = "https://raw.githubusercontent.com/owner/repo/main/scripts/bash/prepare.sh"

    def handler(request):
        if request.url.host == "github.com":
            return httpx.Response(302, headers={"Location": raw_url})
        return httpx.Response(200, content=b"echo raw")

    fetcher = GithubFetcher("https://github.com/owner/repo", "main", transport=httpx.MockTransport(handler))
    assert asyncio.run(fetcher.fetch_file("bash/prepare.sh")) == b"echo raw"


def test_fetch_file_wraps_transport_errors(fetcher, upstream):
    upstream.error = httpx.ConnectError("connection refused")

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(fetcher.fetch_file("bash/prepare.sh"))

    assert exc_info.value.url.endswith("/scripts/bash/prepare.sh")
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_fetch_file_does_not_cache(fetcher, upstream):
    url = "https://github.com/owner/repo/raw/main/scripts/bash/prepare.sh"
    upstream.files[url] = (200, b"v1")
    assert asyncio.run(fetcher.fetch_file("bash/prepare.sh")) == b"v1"

    upstream.files[url] = (200, b"v2")
    assert asyncio.run(fetcher.fetch_file("bash/prepare.sh")) == b"v2"
    assert len(upstream.requested) == 2


def test_fetch_file_wraps_redirect_loops():
    url = "https://github.com/owner/repo/raw/main/scripts/bash/prepare.sh"

    def handler(request):
        return httpx.Response(302, headers={"Location": url})

    fetcher = GithubFetcher("https://github.com/owner/repo", "main", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(fetcher.fetch_file("bash/prepare.sh"))

    assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)
