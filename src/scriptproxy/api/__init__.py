"""
scriptproxy upstream module
Fetches script files from the GitHub raw-content endpoint
"""
from .client import GithubFetcher, UpstreamError

__all__ = [
    'GithubFetcher',
    'UpstreamError',
]
