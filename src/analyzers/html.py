"""HTML document structure checks."""

import logging
import re
from collections import Counter
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.results import HtmlStructureResult

logger = logging.getLogger(__name__)

DEPRECATED_ELEMENTS = frozenset(
    {
        "acronym", "applet", "basefont", "bgsound", "big", "blink",
        "center", "dir", "font", "frame", "frameset", "isindex",
        "keygen", "listing", "marquee", "multicol", "nextid", "nobr",
        "noembed", "noframes", "plaintext", "spacer", "strike", "tt", "xmp",
    }
)

# Elements whose URL attribute is fetched as a subresource
SUBRESOURCE_ATTRIBUTES = {
    "img": "src",
    "script": "src",
    "iframe": "src",
    "audio": "src",
    "video": "src",
    "source": "src",
    "embed": "src",
    "object": "data",
}

DOCTYPE_PATTERN = re.compile(r"^\s*<!doctype\s+html", re.IGNORECASE)


def is_responsive_viewport(content: str | None) -> bool:
    return bool(content) and "width=device-width" in content.replace(" ", "").lower()


class HtmlStructureAnalyzer(BaseAnalyzer):
    """
    Checks the document for modern, well-formed HTML.

    Checks:
    - <!DOCTYPE html>
    - lang attribute and character encoding
    - Responsive viewport
    - Deprecated elements and duplicate ids
    - Mixed content on HTTPS pages
    - Errors logged to the browser console
    """

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.HTML})

    @property
    def name(self) -> str:
        return "html_structure"

    async def run(self, ctx) -> None:
        page = ctx.page
        html = await page.content()
        result = self.analyze_html(html, page.final_url or ctx.url)
        result.console_errors = list(page.console_errors)
        ctx.set(slots.HTML, result)

    def analyze_html(self, html: str, page_url: str) -> HtmlStructureResult:
        soup = BeautifulSoup(html, "lxml")

        html_tag = soup.find("html")
        charset = soup.find("meta", charset=True)
        if charset is not None:
            charset_value = charset["charset"]
        else:
            http_equiv = soup.find(
                "meta", attrs={"http-equiv": re.compile("^content-type$", re.IGNORECASE)}
            )
            match = re.search(r"charset=([\w-]+)", http_equiv.get("content", "")) if http_equiv else None
            charset_value = match.group(1) if match else None

        viewport = soup.find("meta", attrs={"name": "viewport"})
        viewport_content = viewport.get("content") if viewport else None

        deprecated = Counter(
            element.name for element in soup.find_all(True) if element.name in DEPRECATED_ELEMENTS
        )

        ids = Counter(element["id"] for element in soup.find_all(id=True))
        duplicate_ids = sorted(element_id for element_id, count in ids.items() if count > 1)

        return HtmlStructureResult(
            has_doctype=bool(DOCTYPE_PATTERN.match(html)),
            lang=(html_tag.get("lang") or None) if html_tag else None,
            charset=charset_value,
            viewport=viewport_content,
            viewport_responsive=is_responsive_viewport(viewport_content),
            deprecated_elements=dict(sorted(deprecated.items())),
            duplicate_ids=duplicate_ids,
            mixed_content=self._find_mixed_content(soup, page_url),
        )

    def _find_mixed_content(self, soup: BeautifulSoup, page_url: str) -> list[str]:
        if urlparse(page_url).scheme != "https":
            return []

        insecure = []
        for tag, attribute in SUBRESOURCE_ATTRIBUTES.items():
            for element in soup.find_all(tag):
                value = element.get(attribute, "")
                if value.lower().startswith("http://"):
                    insecure.append(value)

        for link in soup.find_all("link", href=True):
            rel = [value.lower() for value in link.get("rel", [])]
            if "stylesheet" in rel and link["href"].lower().startswith("http://"):
                insecure.append(link["href"])

        return insecure
