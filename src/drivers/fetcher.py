"""Out-of-band HTTP fetching for robots.txt, sitemaps, manifests and headers."""

import logging

import httpx

from config import settings
from core.errors import FetchError, FetchTimeout

logger = logging.getLogger(__name__)


class HttpFetcher:
    """
    Thin async wrapper over ``httpx.AsyncClient``.

    Transport failures are raised as FetchError so analyzers can decide
    between "not found" and "could not check". HTTP error statuses are not
    errors here; callers look at ``response.status_code``.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self.timeout = timeout or settings.fetch_timeout
        self._client = client or httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
        )

    async def get(self, url: str, timeout: float | None = None) -> httpx.Response:
        return await self._request("GET", url, timeout)

    async def head(self, url: str, timeout: float | None = None) -> httpx.Response:
        return await self._request("HEAD", url, timeout)

    async def _request(self, method: str, url: str, timeout: float | None) -> httpx.Response:
        try:
            return await self._client.request(method, url, timeout=timeout or self.timeout)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {url} timed out")
            raise FetchTimeout(url, "request timed out") from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise FetchError(url, str(e)) from e

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
