"""SEO analysis engine."""

import json
import logging
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.results import SeoResult

logger = logging.getLogger(__name__)

REQUIRED_OG_TAGS = ["og:title", "og:description", "og:image", "og:url"]


class SEOAnalyzer(BaseAnalyzer):
    """
    Analyzes the rendered HTML for SEO best practices.

    Checks:
    - Title tag (existence, length)
    - Meta description (existence, length)
    - Canonical URL
    - H1 headings (existence, count)
    - Image alt attributes
    - Open Graph / Twitter Card tags
    - Robots meta tag and X-Robots-Tag header
    - Structured data (JSON-LD)
    """

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.SEO})

    @property
    def name(self) -> str:
        return "seo"

    async def run(self, ctx) -> None:
        page = ctx.page
        html = await page.content()
        page_url = page.final_url or ctx.url
        result = self.analyze_html(html, page_url, page.headers)

        logger.info(f"SEO data collected for {page_url}: title={result.title!r}")
        ctx.set(slots.SEO, result)

    def analyze_html(self, html: str, page_url: str, headers: dict | None = None) -> SeoResult:
        """Extract every SEO signal from one HTML document."""
        soup = BeautifulSoup(html, "lxml")
        headers = {k.lower(): v for k, v in (headers or {}).items()}

        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else None

        meta_desc = soup.find("meta", attrs={"name": "description"})
        description = meta_desc.get("content", "").strip() if meta_desc else None

        canonical, matches_page = self._check_canonical(soup, page_url)
        images = self._check_alt_tags(soup)
        og_tags, twitter_tags = self._check_social_tags(soup)
        robots = self._check_robots(soup, headers)
        json_ld_types, json_ld_count = self._check_structured_data(soup)

        return SeoResult(
            title=title or None,
            meta_description=description or None,
            h1_values=[h1.get_text(strip=True) for h1 in soup.find_all("h1")],
            heading_counts=self._analyze_heading_structure(soup),
            canonical=canonical,
            canonical_matches_page=matches_page,
            images_total=images["total"],
            images_missing_alt=len(images["missing"]),
            images_empty_alt=len(images["empty"]),
            missing_alt_samples=images["missing"][:5],
            og_tags=og_tags,
            twitter_tags=twitter_tags,
            missing_og=[tag for tag in REQUIRED_OG_TAGS if tag not in og_tags],
            robots_meta=robots["meta"],
            x_robots_tag=robots["header"],
            is_indexable=robots["indexable"],
            is_followable=robots["followable"],
            json_ld_types=json_ld_types,
            json_ld_count=json_ld_count,
            links=self._analyze_links(soup, page_url),
        )

    def _check_canonical(self, soup: BeautifulSoup, page_url: str) -> tuple[str | None, bool]:
        """Canonical URL and whether it points back at this page."""
        canonical = soup.find("link", attrs={"rel": "canonical"})
        canonical_url = canonical.get("href", "").strip() if canonical else ""
        if not canonical_url:
            return None, False

        # Normalize both before comparing
        page_parsed = urlparse(page_url)
        canonical_parsed = urlparse(urljoin(page_url, canonical_url))
        matches = (
            page_parsed.netloc == canonical_parsed.netloc
            and page_parsed.path.rstrip("/") == canonical_parsed.path.rstrip("/")
        )
        return canonical_url, matches

    def _check_alt_tags(self, soup: BeautifulSoup) -> dict:
        """Check image alt attributes."""
        images = soup.find_all("img")
        missing_alt = []
        empty_alt = []

        for img in images:
            src = img.get("src", "unknown")
            alt = img.get("alt")

            if alt is None:
                missing_alt.append(src[:100])  # Truncate long URLs
            elif alt.strip() == "":
                empty_alt.append(src[:100])

        return {"total": len(images), "missing": missing_alt, "empty": empty_alt}

    def _check_social_tags(self, soup: BeautifulSoup) -> tuple[dict, dict]:
        """Collect Open Graph and Twitter Card tags."""
        og_tags = {}
        twitter_tags = {}

        for meta in soup.find_all("meta"):
            prop = meta.get("property", "")
            name = meta.get("name", "")
            content = meta.get("content", "")

            if prop.startswith("og:"):
                og_tags[prop] = content
            elif name.startswith("twitter:"):
                twitter_tags[name] = content

        return og_tags, twitter_tags

    def _check_robots(self, soup: BeautifulSoup, headers: dict) -> dict:
        """Check robots meta tag and X-Robots-Tag header."""
        robots_meta = soup.find("meta", attrs={"name": "robots"})
        robots_content = robots_meta.get("content", "").lower() if robots_meta else None
        x_robots = headers.get("x-robots-tag", "").lower()

        all_robots = f"{robots_content or ''} {x_robots}"
        return {
            "meta": robots_content,
            "header": x_robots or None,
            "indexable": "noindex" not in all_robots and "none" not in all_robots.split(),
            "followable": "nofollow" not in all_robots and "none" not in all_robots.split(),
        }

    def _check_structured_data(self, soup: BeautifulSoup) -> tuple[list[str], int]:
        """Find JSON-LD blocks and the schema.org types they declare."""
        scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
        types = []

        for script in scripts:
            try:
                data = json.loads(script.string or "")
            except (json.JSONDecodeError, TypeError):
                logger.debug("Skipping unparseable JSON-LD block")
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if isinstance(item, dict) and "@type" in item:
                    declared = item["@type"]
                    types.extend(declared if isinstance(declared, list) else [declared])

        return [str(t) for t in types], len(scripts)

    def _analyze_heading_structure(self, soup: BeautifulSoup) -> dict:
        """Count headings per level."""
        return {level: len(soup.find_all(level)) for level in ("h1", "h2", "h3", "h4", "h5", "h6")}

    def _analyze_links(self, soup: BeautifulSoup, page_url: str) -> dict:
        """Analyze internal and external links."""
        links = soup.find_all("a", href=True)
        page_domain = urlparse(page_url).netloc

        internal = 0
        external = 0
        nofollow = 0

        for link in links:
            href = link.get("href", "")
            rel = link.get("rel", [])

            # Resolve relative URLs
            full_url = urljoin(page_url, href)
            link_domain = urlparse(full_url).netloc

            if link_domain == page_domain:
                internal += 1
            elif link_domain:
                external += 1

            if "nofollow" in rel:
                nofollow += 1

        return {
            "total": len(links),
            "internal": internal,
            "external": external,
            "nofollow": nofollow,
        }
