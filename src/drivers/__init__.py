"""Lantern page and HTTP collaborators."""

from drivers.base import PageDriver, PageHandle
from drivers.fetcher import HttpFetcher

__all__ = [
    "PageDriver",
    "PageHandle",
    "HttpFetcher",
]
