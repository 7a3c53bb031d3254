"""Out-of-band crawl checks: robots.txt and XML sitemaps."""

import logging
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.errors import FetchError
from core.results import RobotsResult, SitemapResult

logger = logging.getLogger(__name__)


def site_root(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def parse_robots_txt(text: str) -> dict:
    """
    Parse the parts of robots.txt that matter for an audit.

    ``blocks_all`` is set when the group for every user agent (``*``)
    disallows the site root.
    """
    user_agents = []
    sitemaps = []
    crawl_delay = None
    blocks_all = False

    group: list[str] = []
    in_rules = False
    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if ":" not in line:
            continue
        field, value = (part.strip() for part in line.split(":", 1))
        field = field.lower()

        if field == "user-agent":
            # a user-agent line after rules starts a new group
            if in_rules:
                group = []
                in_rules = False
            group.append(value)
            if value not in user_agents:
                user_agents.append(value)
        elif field == "disallow":
            in_rules = True
            if value == "/" and "*" in group:
                blocks_all = True
        elif field == "allow":
            in_rules = True
        elif field == "crawl-delay":
            in_rules = True
            try:
                crawl_delay = float(value)
            except ValueError:
                logger.debug(f"Ignoring invalid Crawl-delay: {value}")
        elif field == "sitemap" and value:
            sitemaps.append(value)

    return {
        "user_agents": user_agents,
        "sitemaps": sitemaps,
        "crawl_delay": crawl_delay,
        "blocks_all": blocks_all,
    }


def parse_sitemap(text: str) -> tuple[bool, int] | None:
    """
    Return ``(is_index, entry_count)`` for a sitemap document, or None when
    the document is not a sitemap at all.
    """
    soup = BeautifulSoup(text, "xml")
    if soup.find("sitemapindex") is not None:
        return True, len(soup.find_all("sitemap"))
    if soup.find("urlset") is not None:
        return False, len(soup.find_all("url"))
    return None


class RobotsTxtAnalyzer(BaseAnalyzer):
    """Fetches /robots.txt for the site of the audited page."""

    kind = AnalyzerKind.NETWORK
    writes = frozenset({slots.ROBOTS})

    @property
    def name(self) -> str:
        return "robots_txt"

    async def run(self, ctx) -> None:
        url = urljoin(site_root(ctx.url), "/robots.txt")

        try:
            response = await ctx.fetcher.get(url)
        except FetchError as e:
            ctx.set(slots.ROBOTS, RobotsResult(checked=False, url=url, error=str(e)))
            return

        if response.status_code >= 500:
            ctx.set(
                slots.ROBOTS,
                RobotsResult(
                    checked=False,
                    url=url,
                    status_code=response.status_code,
                    error=f"HTTP {response.status_code}",
                ),
            )
            return

        if response.status_code != 200:
            logger.info(f"No robots.txt at {url} (HTTP {response.status_code})")
            ctx.set(
                slots.ROBOTS,
                RobotsResult(checked=True, found=False, url=url, status_code=response.status_code),
            )
            return

        parsed = parse_robots_txt(response.text)
        ctx.set(
            slots.ROBOTS,
            RobotsResult(checked=True, found=True, url=url, status_code=200, **parsed),
        )


class SitemapAnalyzer(BaseAnalyzer):
    """
    Looks for an XML sitemap.

    Sitemaps declared in robots.txt are tried first, then the conventional
    /sitemap.xml and /sitemap_index.xml locations.
    """

    kind = AnalyzerKind.NETWORK
    reads = frozenset({slots.ROBOTS})
    writes = frozenset({slots.SITEMAP})

    FALLBACK_PATHS = ["/sitemap.xml", "/sitemap_index.xml"]
    MAX_DECLARED = 3
    max_requests = MAX_DECLARED + len(FALLBACK_PATHS)

    @property
    def name(self) -> str:
        return "sitemap"

    def candidates(self, page_url: str, robots: RobotsResult | None) -> list[str]:
        root = site_root(page_url)
        urls = list(robots.sitemaps[: self.MAX_DECLARED]) if robots and robots.found else []
        for path in self.FALLBACK_PATHS:
            url = urljoin(root, path)
            if url not in urls:
                urls.append(url)
        return urls

    async def run(self, ctx) -> None:
        robots = ctx.get(slots.ROBOTS)
        tried = []
        errors = []
        answered = False

        for url in self.candidates(ctx.url, robots):
            tried.append(url)
            try:
                response = await ctx.fetcher.get(url)
            except FetchError as e:
                errors.append(str(e))
                continue

            answered = True
            if response.status_code != 200:
                continue

            parsed = parse_sitemap(response.text)
            if parsed is None:
                logger.debug(f"{url} is not a sitemap document")
                continue

            is_index, count = parsed
            logger.info(f"Found sitemap {url} with {count} entries")
            ctx.set(
                slots.SITEMAP,
                SitemapResult(
                    checked=True,
                    found=True,
                    url=url,
                    is_index=is_index,
                    url_count=count,
                    tried=tried,
                ),
            )
            return

        ctx.set(
            slots.SITEMAP,
            SitemapResult(
                checked=answered,
                found=False,
                tried=tried,
                error="; ".join(errors) or None,
            ),
        )
