"""Playwright-backed page driver."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from config import settings
from core.errors import NavigationError
from drivers.base import PageDriver, PageHandle

logger = logging.getLogger(__name__)


async def redirect_chain(response) -> list[dict]:
    """Walk the redirects that led to ``response``, oldest hop first."""
    chain = []
    request = response.request.redirected_from
    while request is not None:
        hop = await request.response()
        chain.append(
            {
                "url": request.url,
                "status": hop.status if hop else None,
                "location": request.redirected_to.url if request.redirected_to else None,
            }
        )
        request = request.redirected_from
    chain.reverse()
    return chain


@dataclass
class PlaywrightPage(PageHandle):
    """PageHandle wrapping a Playwright ``Page``."""

    page: Any = field(default=None, repr=False)

    async def evaluate(self, script: str) -> Any:
        return await self.page.evaluate(script)

    async def content(self) -> str:
        return await self.page.content()

    async def screenshot(self, path: str | None = None) -> bytes:
        if path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        return await self.page.screenshot(path=path, full_page=True)

    async def add_script(self, path: str) -> None:
        await self.page.add_script_tag(path=path)


class PlaywrightDriver(PageDriver):
    """
    Launches headless Chromium and opens one page per navigation.

    Usage:
        async with PlaywrightDriver() as driver:
            handle = await driver.navigate("https://example.com")
    """

    def __init__(
        self,
        headless: bool | None = None,
        navigation_timeout: float | None = None,
        user_agent: str | None = None,
    ):
        self.headless = settings.headless if headless is None else headless
        self.navigation_timeout = navigation_timeout or settings.navigation_timeout
        self.user_agent = user_agent or settings.user_agent
        self._playwright = None
        self._browser = None
        self._context = None

    async def _ensure_browser(self):
        if self._browser is None:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            self._context = await self._browser.new_context(user_agent=self.user_agent)

    async def navigate(self, url: str) -> PageHandle:
        await self._ensure_browser()
        page = await self._context.new_page()

        handle = PlaywrightPage(url=url, final_url=url, page=page)

        def on_console(message):
            if message.type == "error":
                handle.console_errors.append(message.text)

        def on_request_failed(request):
            handle.failed_requests.append(request.url)

        page.on("console", on_console)
        page.on("pageerror", lambda error: handle.console_errors.append(str(error)))
        page.on("requestfailed", on_request_failed)

        started = time.perf_counter()
        try:
            response = await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.navigation_timeout * 1000,
            )
        except PlaywrightError as e:
            await page.close()
            raise NavigationError(url, str(e)) from e

        if response is None:
            await page.close()
            raise NavigationError(url, "no response received")

        handle.response_time_ms = round((time.perf_counter() - started) * 1000, 1)
        handle.redirect_chain = await redirect_chain(response)
        handle.final_url = page.url
        handle.status_code = response.status
        handle.headers = {k.lower(): v for k, v in (await response.all_headers()).items()}

        if handle.redirect_chain:
            logger.info(f"{url} redirected {len(handle.redirect_chain)} time(s)")
        logger.info(f"Loaded {url} -> {handle.final_url} ({handle.status_code})")
        return handle

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
