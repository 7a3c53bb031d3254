"""Resource loading analysis: sizes, compression, slow and blocking requests."""

import logging
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.results import ResourceEntry, ResourceResult

logger = logging.getLogger(__name__)

RESOURCE_SCRIPT = """
() => performance.getEntriesByType('resource').map((entry) => ({
  url: entry.name,
  initiator: entry.initiatorType,
  transfer: entry.transferSize || 0,
  encoded: entry.encodedBodySize || 0,
  decoded: entry.decodedBodySize || 0,
  duration: entry.duration || 0,
}))
"""

SLOW_REQUEST_MS = 1000
COMPRESSIBLE_TYPES = {"script", "stylesheet", "document", "xhr"}
MIN_COMPRESSIBLE_BYTES = 1024

EXTENSION_TYPES = {
    ".js": "script",
    ".mjs": "script",
    ".css": "stylesheet",
    ".png": "image",
    ".jpg": "image",
    ".jpeg": "image",
    ".gif": "image",
    ".webp": "image",
    ".avif": "image",
    ".svg": "image",
    ".ico": "image",
    ".woff": "font",
    ".woff2": "font",
    ".ttf": "font",
    ".otf": "font",
    ".html": "document",
    ".json": "xhr",
}

INITIATOR_TYPES = {
    "script": "script",
    "css": "stylesheet",
    "link": "stylesheet",
    "img": "image",
    "image": "image",
    "xmlhttprequest": "xhr",
    "fetch": "xhr",
    "iframe": "document",
}


def resource_type(url: str, initiator: str) -> str:
    """Classify a resource by file extension, falling back to its initiator."""
    path = urlparse(url).path.lower()
    for extension, kind in EXTENSION_TYPES.items():
        if path.endswith(extension):
            return kind
    return INITIATOR_TYPES.get(initiator, "other")


def find_render_blocking(html: str, base_url: str) -> list[str]:
    """Scripts and stylesheets in <head> that block the first render."""
    soup = BeautifulSoup(html, "lxml")
    head = soup.find("head")
    if head is None:
        return []

    blocking = []
    for script in head.find_all("script", src=True):
        if script.get("async") is not None or script.get("defer") is not None:
            continue
        if script.get("type") == "module":
            continue
        blocking.append(urljoin(base_url, script["src"]))

    for link in head.find_all("link", href=True):
        rel = [value.lower() for value in link.get("rel", [])]
        if "stylesheet" not in rel or link.get("disabled") is not None:
            continue
        if link.get("media", "all").strip().lower() not in ("all", "screen", ""):
            continue
        blocking.append(urljoin(base_url, link["href"]))

    return blocking


class ResourceAnalyzer(BaseAnalyzer):
    """
    Summarizes the requests the page made while loading.

    Checks:
    - Transfer size per resource type
    - Text resources served without compression
    - Requests slower than one second
    - Requests that failed
    - Render-blocking scripts and stylesheets in <head>
    """

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.RESOURCES})

    @property
    def name(self) -> str:
        return "resources"

    async def run(self, ctx) -> None:
        page = ctx.page
        raw_entries = await page.evaluate(RESOURCE_SCRIPT) or []
        html = await page.content()

        entries = []
        by_type: dict[str, dict[str, int]] = {}
        uncompressed = []
        slow = []

        for raw in raw_entries:
            kind = resource_type(raw["url"], raw.get("initiator", ""))
            transfer = int(raw.get("transfer") or 0)
            encoded = int(raw.get("encoded") or 0)
            decoded = int(raw.get("decoded") or 0)

            # a cached response has no transfer size and says nothing about compression
            compressed = not (
                kind in COMPRESSIBLE_TYPES
                and transfer > 0
                and decoded >= MIN_COMPRESSIBLE_BYTES
                and encoded >= decoded
            )

            entry = ResourceEntry(
                url=raw["url"],
                type=kind,
                transfer_bytes=transfer,
                duration_ms=round(float(raw.get("duration") or 0), 1),
                compressed=compressed,
            )
            entries.append(entry)

            stats = by_type.setdefault(kind, {"count": 0, "bytes": 0})
            stats["count"] += 1
            stats["bytes"] += transfer

            if not compressed:
                uncompressed.append(entry.url)
            if entry.duration_ms > SLOW_REQUEST_MS:
                slow.append(entry.url)

        largest = sorted(entries, key=lambda e: e.transfer_bytes, reverse=True)[:5]

        result = ResourceResult(
            total_requests=len(entries),
            total_transfer_bytes=sum(e.transfer_bytes for e in entries),
            by_type=dict(sorted(by_type.items())),
            slow_requests=slow,
            failed_requests=list(page.failed_requests),
            uncompressed=uncompressed,
            render_blocking=find_render_blocking(html, page.final_url or ctx.url),
            largest=largest,
        )

        logger.info(
            f"{ctx.url}: {result.total_requests} requests, "
            f"{result.total_transfer_bytes // 1024} KB transferred"
        )
        ctx.set(slots.RESOURCES, result)
