"""Progressive Web App checks: manifest, service worker and installability."""

import json
import logging
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.errors import FetchError
from core.results import ManifestInfo, PwaResult

logger = logging.getLogger(__name__)

SERVICE_WORKER_SCRIPT = """
async () => {
  if (!('serviceWorker' in navigator)) {
    return {supported: false, registered: false, active: false};
  }
  const registrations = await navigator.serviceWorker.getRegistrations();
  return {
    supported: true,
    registered: registrations.length > 0,
    active: registrations.some((registration) => !!registration.active),
  };
}
"""

VALID_DISPLAY_MODES = {"fullscreen", "standalone", "minimal-ui", "browser"}
INSTALLABLE_DISPLAY_MODES = {"fullscreen", "standalone", "minimal-ui"}

FAST_FCP_MS = 2000
FAST_LOAD_MS = 5000


def _icon_sizes(icons) -> set[int]:
    """Square icon edge lengths declared in a manifest ``icons`` list."""
    sizes = set()
    for icon in icons if isinstance(icons, list) else []:
        if not isinstance(icon, dict):
            continue
        for size in str(icon.get("sizes", "")).split():
            width, _, height = size.lower().partition("x")
            if width.isdigit() and width == height:
                sizes.add(int(width))
    return sizes


def parse_manifest(url: str, text: str) -> ManifestInfo:
    """Validate a fetched web app manifest."""
    info = ManifestInfo(checked=True, found=True, url=url)

    try:
        content = json.loads(text)
    except json.JSONDecodeError as e:
        info.errors.append(f"Invalid JSON: {e.msg}")
        return info

    if not isinstance(content, dict):
        info.errors.append("Manifest is not a JSON object")
        return info

    info.name = content.get("name") or content.get("short_name")
    info.start_url = content.get("start_url")
    info.display = content.get("display")
    info.prefer_related_applications = bool(content.get("prefer_related_applications", False))

    sizes = _icon_sizes(content.get("icons"))
    info.has_192_icon = any(size >= 192 for size in sizes)
    info.has_512_icon = any(size >= 512 for size in sizes)

    if not info.name:
        info.errors.append("Missing name or short_name")
    if not content.get("icons"):
        info.errors.append("Missing icons")
    if not info.start_url:
        info.errors.append("Missing start_url")
    if info.display is not None and info.display not in VALID_DISPLAY_MODES:
        info.errors.append(f"Invalid display mode: {info.display}")

    info.valid = not info.errors
    return info


class PwaAnalyzer(BaseAnalyzer):
    """
    Checks whether the page qualifies as an installable Progressive Web App.

    Loading speed comes from the performance timings and the viewport from
    the HTML structure results; either may be missing.
    """

    kind = AnalyzerKind.PAGE
    reads = frozenset({slots.PERFORMANCE, slots.HTML})
    writes = frozenset({slots.PWA})

    @property
    def name(self) -> str:
        return "pwa"

    async def run(self, ctx) -> None:
        page = ctx.page
        page_url = page.final_url or ctx.url
        is_https = urlparse(page_url).scheme == "https"

        manifest = await self._check_manifest(ctx, page_url, await page.content())
        worker = await page.evaluate(SERVICE_WORKER_SCRIPT) or {}

        result = PwaResult(
            https=is_https,
            manifest=manifest,
            service_worker_supported=bool(worker.get("supported")),
            service_worker_registered=bool(worker.get("registered")),
            service_worker_active=bool(worker.get("active")),
        )

        criteria = {
            "https": is_https,
            "manifest": manifest.found and manifest.valid,
            "service_worker": result.service_worker_registered,
            "icons": manifest.has_192_icon and manifest.has_512_icon,
            "name": bool(manifest.name),
            "start_url": bool(manifest.start_url),
            "display": manifest.display in INSTALLABLE_DISPLAY_MODES,
            "no_related_app_preference": not manifest.prefer_related_applications,
        }
        result.installability_criteria = criteria
        result.missing_requirements = [name for name, met in criteria.items() if not met]
        result.installable = not result.missing_requirements

        perf = ctx.get(slots.PERFORMANCE)
        if perf is not None and perf.fcp_ms is not None:
            result.fast_loading = perf.fcp_ms < FAST_FCP_MS and (
                perf.load_event_ms is None or perf.load_event_ms < FAST_LOAD_MS
            )

        html = ctx.get(slots.HTML)
        if html is not None:
            result.viewport_responsive = html.viewport_responsive

        result.is_pwa = (
            result.https
            and manifest.valid
            and result.service_worker_registered
            and result.installable
        )

        logger.info(f"{page_url}: installable={result.installable} is_pwa={result.is_pwa}")
        ctx.set(slots.PWA, result)

    async def _check_manifest(self, ctx, page_url: str, html: str) -> ManifestInfo:
        soup = BeautifulSoup(html, "lxml")
        link = soup.find("link", attrs={"rel": "manifest"}, href=True)
        if link is None:
            return ManifestInfo(checked=True, found=False)

        url = urljoin(page_url, link["href"])
        try:
            response = await ctx.fetcher.get(url)
        except FetchError as e:
            logger.warning(f"Could not fetch manifest {url}: {e}")
            return ManifestInfo(checked=False, found=True, url=url, errors=[str(e)])

        if response.status_code != 200:
            return ManifestInfo(
                checked=True,
                found=True,
                url=url,
                errors=[f"Failed to fetch manifest: HTTP {response.status_code}"],
            )

        return parse_manifest(url, response.text)
