from datetime import datetime

import httpx
import pytest

from analyzers.accessibility import AXE_SCRIPT, AccessibilityAnalyzer, run_builtin_rules
from analyzers.crawl import RobotsTxtAnalyzer, SitemapAnalyzer, parse_robots_txt, parse_sitemap
from analyzers.html import HtmlStructureAnalyzer, is_responsive_viewport
from analyzers.mobile import MOBILE_SCRIPT, MobileAnalyzer, parse_viewport
from analyzers.performance import TIMING_SCRIPT, PerformanceAnalyzer
from analyzers.pwa import SERVICE_WORKER_SCRIPT, PwaAnalyzer, parse_manifest
from analyzers.resources import RESOURCE_SCRIPT, ResourceAnalyzer, find_render_blocking
from analyzers.screenshot import ScreenshotAnalyzer, screenshot_filename
from analyzers.security import SecurityHeadersAnalyzer, parse_csp, parse_hsts_max_age
from analyzers.seo import SEOAnalyzer
from core import slots
from core.context import RunContext
from core.errors import AnalyzerError
from core.results import HtmlStructureResult, PerformanceResult, RobotsResult
from fakes import GOOD_PAGE, MANIFEST, MOBILE_DATA, FakePage, make_fetcher

URL = "https://example.com/"


def run_context(page=None, fetcher=None, url=URL) -> RunContext:
    return RunContext(url, page=page, fetcher=fetcher)


# =============================================================================
# SEO
# =============================================================================


class TestSEOAnalyzer:
    def test_extracts_page_signals(self):
        result = SEOAnalyzer().analyze_html(GOOD_PAGE, URL)

        assert result.title == "Example Domain - Practical guides for building fast websites"
        assert result.meta_description == "A short description"
        assert result.h1_values == ["Example Domain"]
        assert result.canonical_matches_page
        assert result.images_total == 2
        assert result.images_missing_alt == 1
        assert result.missing_og == ["og:image", "og:url"]
        assert result.json_ld_types == ["WebSite"]
        assert result.links == {"total": 2, "internal": 1, "external": 1, "nofollow": 1}
        assert result.is_indexable and result.is_followable

    def test_robots_directives_from_meta_and_header(self):
        html = '<html><head><meta name="robots" content="noindex"></head></html>'
        result = SEOAnalyzer().analyze_html(html, URL, {"X-Robots-Tag": "nofollow"})

        assert not result.is_indexable
        assert not result.is_followable
        assert result.x_robots_tag == "nofollow"

    def test_robots_none_blocks_everything(self):
        html = '<html><head><meta name="robots" content="none"></head></html>'
        result = SEOAnalyzer().analyze_html(html, URL)

        assert not result.is_indexable
        assert not result.is_followable

    def test_canonical_to_another_page(self):
        html = '<html><head><link rel="canonical" href="/other"></head></html>'
        result = SEOAnalyzer().analyze_html(html, URL)

        assert result.canonical == "/other"
        assert not result.canonical_matches_page

    async def test_writes_seo_slot(self):
        page = FakePage(url=URL, final_url=URL, html=GOOD_PAGE)
        ctx = run_context(page)
        analyzer = SEOAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        assert ctx.get(slots.SEO).title.startswith("Example Domain")


# =============================================================================
# HTML structure
# =============================================================================


class TestHtmlStructureAnalyzer:
    def test_well_formed_page(self):
        result = HtmlStructureAnalyzer().analyze_html(GOOD_PAGE, URL)

        assert result.has_doctype
        assert result.lang == "en"
        assert result.charset == "utf-8"
        assert result.viewport_responsive
        assert result.deprecated_elements == {}
        assert result.duplicate_ids == []

    def test_legacy_page(self):
        html = """<html><head>
        <meta http-equiv="Content-Type" content="text/html; charset=ISO-8859-1">
        </head><body>
        <center><font>a</font><font>b</font></center>
        <div id="x"></div><div id="x"></div>
        <img src="http://cdn.example.com/a.png">
        <link rel="stylesheet" href="http://cdn.example.com/a.css">
        </body></html>"""

        result = HtmlStructureAnalyzer().analyze_html(html, URL)

        assert not result.has_doctype
        assert result.lang is None
        assert result.charset == "ISO-8859-1"
        assert result.deprecated_elements == {"center": 1, "font": 2}
        assert result.duplicate_ids == ["x"]
        assert result.mixed_content == [
            "http://cdn.example.com/a.png",
            "http://cdn.example.com/a.css",
        ]

    def test_no_mixed_content_on_http_pages(self):
        html = '<img src="http://cdn.example.com/a.png">'
        result = HtmlStructureAnalyzer().analyze_html(html, "http://example.com/")

        assert result.mixed_content == []

    def test_viewport_detection(self):
        assert is_responsive_viewport("width=device-width, initial-scale=1")
        assert is_responsive_viewport("width = device-width")
        assert not is_responsive_viewport("width=1024")
        assert not is_responsive_viewport(None)

    async def test_collects_console_errors(self):
        page = FakePage(url=URL, final_url=URL, html=GOOD_PAGE, console_errors=["Uncaught TypeError"])
        ctx = run_context(page)
        analyzer = HtmlStructureAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        assert ctx.get(slots.HTML).console_errors == ["Uncaught TypeError"]


# =============================================================================
# Mobile
# =============================================================================


class TestMobileAnalyzer:
    def test_viewport_parsing(self):
        assert parse_viewport("width=device-width, initial-scale=1") == (True, True)
        assert parse_viewport("width=1024") == (False, True)
        assert parse_viewport("width=device-width, user-scalable=no") == (True, False)
        assert parse_viewport("width=device-width; maximum-scale=1") == (True, False)
        assert parse_viewport(None) == (False, True)

    async def test_good_mobile_page(self):
        page = FakePage(url=URL, final_url=URL, scripts={MOBILE_SCRIPT: MOBILE_DATA})
        ctx = run_context(page)
        analyzer = MobileAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.MOBILE)
        assert result.viewport_responsive is True
        assert result.user_scalable is True
        assert result.text_elements_total == 3
        assert result.small_text_elements == 0
        assert result.average_font_size == 21.3
        assert result.horizontal_scroll is False

    def test_desktop_only_page(self):
        result = MobileAnalyzer().build_result(
            {
                "viewport": None,
                "targets": 12,
                "smallTargets": 8,
                "samples": [{"element": "a.nav", "width": 30, "height": 18, "text": "Home"}],
                "fontSizes": [12, 12, 13, 18],
                "pageWidth": 1280,
                "viewportWidth": 390,
                "plugins": 1,
                "images": 4,
                "nonResponsiveImages": 4,
                "inputs": 2,
                "genericInputs": 1,
            }
        )

        assert result.viewport_responsive is False
        assert result.small_tap_targets == 8
        assert result.small_tap_target_samples[0].element == "a.nav"
        assert result.small_text_elements == 3
        assert result.horizontal_scroll is True
        assert result.plugin_elements == 1

    async def test_rejects_unexpected_data(self):
        page = FakePage(url=URL, final_url=URL, scripts={MOBILE_SCRIPT: "nope"})
        ctx = run_context(page)
        analyzer = MobileAnalyzer()

        with pytest.raises(AnalyzerError):
            await analyzer.run(ctx.scoped(analyzer))


# =============================================================================
# Performance and resources
# =============================================================================


class TestPerformanceAnalyzer:
    async def test_reads_timings(self):
        timings = {"ttfb": 120.44, "fcp": 900, "lcp": 1500, "cls": 0.01234, "loadEnd": 2100}
        page = FakePage(url=URL, final_url=URL, scripts={TIMING_SCRIPT: timings})
        ctx = run_context(page)
        analyzer = PerformanceAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.PERFORMANCE)
        assert result.ttfb_ms == 120.4
        assert result.lcp_ms == 1500
        assert result.cls == 0.0123
        assert result.first_paint_ms is None
        assert result.budget == "default"

    async def test_rejects_unexpected_data(self):
        page = FakePage(url=URL, final_url=URL, scripts={TIMING_SCRIPT: None})
        ctx = run_context(page)
        analyzer = PerformanceAnalyzer()

        with pytest.raises(AnalyzerError):
            await analyzer.run(ctx.scoped(analyzer))


class TestResourceAnalyzer:
    def test_render_blocking_resources(self):
        html = """<html><head>
        <script src="/app.js"></script>
        <script src="/defer.js" defer></script>
        <script src="/module.js" type="module"></script>
        <link rel="stylesheet" href="/site.css">
        <link rel="stylesheet" href="/print.css" media="print">
        </head></html>"""

        assert find_render_blocking(html, URL) == [
            "https://example.com/app.js",
            "https://example.com/site.css",
        ]

    async def test_summarizes_resource_timing(self):
        entries = [
            {"url": "https://example.com/app.js", "initiator": "script",
             "transfer": 40000, "encoded": 40000, "decoded": 40000, "duration": 1200},
            {"url": "https://example.com/site.css", "initiator": "link",
             "transfer": 5000, "encoded": 4800, "decoded": 20000, "duration": 80},
            {"url": "https://example.com/logo.png", "initiator": "img",
             "transfer": 9000, "encoded": 9000, "decoded": 9000, "duration": 60},
        ]
        page = FakePage(
            url=URL,
            final_url=URL,
            html="<html><head></head></html>",
            scripts={RESOURCE_SCRIPT: entries},
            failed_requests=["https://example.com/missing.js"],
        )
        ctx = run_context(page)
        analyzer = ResourceAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.RESOURCES)
        assert result.total_requests == 3
        assert result.total_transfer_bytes == 54000
        assert result.by_type["script"] == {"count": 1, "bytes": 40000}
        assert result.uncompressed == ["https://example.com/app.js"]
        assert result.slow_requests == ["https://example.com/app.js"]
        assert result.failed_requests == ["https://example.com/missing.js"]
        assert result.largest[0].url == "https://example.com/app.js"


# =============================================================================
# Accessibility
# =============================================================================


class TestAccessibilityAnalyzer:
    def test_builtin_rules(self):
        html = """<html><head></head><body>
        <img src="/a.png">
        <input type="text" id="q">
        <button></button>
        <div role="banana" aria-colour="red" tabindex="3">x</div>
        <h1>Title</h1><h3>Skipped</h3>
        </body></html>"""

        failures, passes = run_builtin_rules(html)

        assert set(failures) == {
            "image-alt",
            "html-has-lang",
            "document-title",
            "label",
            "button-name",
            "aria-roles",
            "aria-valid-attr",
            "tabindex",
            "heading-order",
        }
        assert passes == 3

    async def test_builtin_engine_skips_color_contrast(self):
        page = FakePage(url=URL, final_url=URL, html=GOOD_PAGE)
        ctx = run_context(page)
        analyzer = AccessibilityAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.ACCESSIBILITY)
        assert result.engine == "builtin"
        assert "color-contrast" not in result.rules_checked
        assert [v.id for v in result.violations] == ["image-alt"]

    async def test_missing_axe_script_fails(self, tmp_path):
        page = FakePage(url=URL, final_url=URL, html=GOOD_PAGE)
        ctx = run_context(page)
        analyzer = AccessibilityAnalyzer(axe_script_path=str(tmp_path / "axe.min.js"))

        with pytest.raises(AnalyzerError, match="axe-core script not found"):
            await analyzer.run(ctx.scoped(analyzer))

    async def test_axe_results_are_used_as_is(self, tmp_path):
        script = tmp_path / "axe.min.js"
        script.write_text("window.axe = {};")
        axe_data = {
            "violations": [
                {"id": "color-contrast", "impact": "serious", "help": "Contrast", "nodes": 4}
            ],
            "passes": 40,
            "rules": ["color-contrast", "image-alt"],
        }
        page = FakePage(url=URL, final_url=URL, scripts={AXE_SCRIPT: axe_data})
        ctx = run_context(page)
        analyzer = AccessibilityAnalyzer(axe_script_path=str(script))

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.ACCESSIBILITY)
        assert page.injected == [str(script)]
        assert result.engine == "axe-core"
        assert result.violations[0].nodes == 4
        assert result.rules_checked == ["color-contrast", "image-alt"]


# =============================================================================
# Crawl
# =============================================================================


class TestCrawl:
    def test_parse_robots_txt(self):
        parsed = parse_robots_txt(
            "User-agent: Googlebot\nDisallow: /private\n\n"
            "User-agent: *\nDisallow: /  # everything\nCrawl-delay: 5\n"
            "Sitemap: https://example.com/sitemap.xml\n"
        )

        assert parsed["user_agents"] == ["Googlebot", "*"]
        assert parsed["blocks_all"] is True
        assert parsed["crawl_delay"] == 5.0
        assert parsed["sitemaps"] == ["https://example.com/sitemap.xml"]

    def test_disallow_all_for_one_bot_does_not_block_all(self):
        parsed = parse_robots_txt("User-agent: BadBot\nDisallow: /\n\nUser-agent: *\nAllow: /\n")

        assert parsed["blocks_all"] is False

    def test_parse_sitemap(self):
        urlset = (
            '<?xml version="1.0"?><urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            "<url><loc>https://example.com/</loc></url>"
            "<url><loc>https://example.com/about</loc></url></urlset>"
        )
        index = (
            '<?xml version="1.0"?><sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            "<sitemap><loc>https://example.com/s1.xml</loc></sitemap></sitemapindex>"
        )

        assert parse_sitemap(urlset) == (False, 2)
        assert parse_sitemap(index) == (True, 1)
        assert parse_sitemap("<html><body>Not found</body></html>") is None

    async def test_robots_txt_found(self):
        fetcher = make_fetcher(
            {"https://example.com/robots.txt": httpx.Response(200, text="User-agent: *\nAllow: /\n")}
        )
        ctx = run_context(fetcher=fetcher, url="https://example.com/blog/post")
        analyzer = RobotsTxtAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        robots = ctx.get(slots.ROBOTS)
        assert robots.checked and robots.found
        assert robots.url == "https://example.com/robots.txt"

    async def test_robots_txt_missing(self):
        ctx = run_context(fetcher=make_fetcher({}))
        analyzer = RobotsTxtAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        robots = ctx.get(slots.ROBOTS)
        assert robots.checked and not robots.found
        assert robots.status_code == 404

    @pytest.mark.parametrize(
        "route",
        [httpx.Response(503), httpx.ConnectError("connection refused")],
    )
    async def test_robots_txt_unreachable_is_unchecked(self, route):
        ctx = run_context(fetcher=make_fetcher({"https://example.com/robots.txt": route}))
        analyzer = RobotsTxtAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        robots = ctx.get(slots.ROBOTS)
        assert not robots.checked
        assert robots.error

    async def test_sitemap_from_robots_txt_first(self):
        sitemap = (
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            "<url><loc>https://example.com/</loc></url></urlset>"
        )
        fetcher = make_fetcher({"https://example.com/pages.xml": httpx.Response(200, text=sitemap)})
        ctx = run_context(fetcher=fetcher)
        ctx.set(
            slots.ROBOTS,
            RobotsResult(checked=True, found=True, sitemaps=["https://example.com/pages.xml"]),
        )
        analyzer = SitemapAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.SITEMAP)
        assert result.found
        assert result.url == "https://example.com/pages.xml"
        assert result.url_count == 1
        assert result.tried == ["https://example.com/pages.xml"]

    async def test_sitemap_not_found(self):
        ctx = run_context(fetcher=make_fetcher({}))
        analyzer = SitemapAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.SITEMAP)
        assert result.checked and not result.found
        assert result.tried == [
            "https://example.com/sitemap.xml",
            "https://example.com/sitemap_index.xml",
        ]


# =============================================================================
# Security headers
# =============================================================================


class TestSecurityHeadersAnalyzer:
    def test_header_parsing(self):
        assert parse_hsts_max_age("max-age=31536000; includeSubDomains") == 31536000
        assert parse_hsts_max_age("includeSubDomains") is None
        assert parse_csp("default-src 'self'; img-src * data:") == {
            "default-src": ["'self'"],
            "img-src": ["*", "data:"],
        }

    async def test_reads_headers_from_head_request(self):
        headers = {
            "Strict-Transport-Security": "max-age=600",
            "X-Content-Type-Options": "nosniff",
            "Server": "nginx/1.25.3",
        }
        fetcher = make_fetcher({URL: httpx.Response(200, headers=headers)})
        ctx = run_context(fetcher=fetcher)
        analyzer = SecurityHeadersAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.SECURITY)
        assert result.checked and result.https
        assert result.hsts_max_age == 600
        assert "HSTS" in result.present
        assert "CSP" in result.missing
        kinds = {v.type: v.severity for v in result.vulnerabilities}
        assert kinds["Missing CSP"] == "critical"
        assert kinds["Clickjacking"] == "high"
        assert kinds["Information Disclosure"] == "low"
        assert "Missing HSTS" not in kinds

    async def test_unreachable_site_is_unchecked(self):
        fetcher = make_fetcher({URL: httpx.ConnectError("connection refused")})
        ctx = run_context(fetcher=fetcher)
        analyzer = SecurityHeadersAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.SECURITY)
        assert not result.checked
        assert result.error


# =============================================================================
# PWA
# =============================================================================


class TestPwaAnalyzer:
    def test_parse_manifest(self):
        info = parse_manifest("https://example.com/manifest.json", MANIFEST)

        assert info.valid
        assert info.name == "Example"
        assert info.has_192_icon and info.has_512_icon

    def test_parse_invalid_manifest(self):
        assert parse_manifest("https://example.com/m.json", "{not json").errors
        info = parse_manifest("https://example.com/m.json", '{"display": "window"}')
        assert not info.valid
        assert "Invalid display mode: window" in info.errors

    async def test_installable_pwa(self):
        page = FakePage(
            url=URL,
            final_url=URL,
            html=GOOD_PAGE,
            scripts={SERVICE_WORKER_SCRIPT: {"supported": True, "registered": True, "active": True}},
        )
        fetcher = make_fetcher(
            {"https://example.com/manifest.json": httpx.Response(200, text=MANIFEST)}
        )
        ctx = run_context(page, fetcher)
        ctx.set(slots.PERFORMANCE, PerformanceResult(fcp_ms=900, load_event_ms=1800))
        ctx.set(slots.HTML, HtmlStructureResult(viewport_responsive=True))
        analyzer = PwaAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.PWA)
        assert result.installable
        assert result.is_pwa
        assert result.fast_loading is True
        assert result.viewport_responsive is True

    async def test_plain_page_is_not_a_pwa(self):
        page = FakePage(url="http://example.com/", final_url="http://example.com/", html="<html></html>")
        ctx = run_context(page, make_fetcher({}), url="http://example.com/")
        analyzer = PwaAnalyzer()

        await analyzer.run(ctx.scoped(analyzer))

        result = ctx.get(slots.PWA)
        assert not result.manifest.found
        assert not result.is_pwa
        assert "https" in result.missing_requirements
        assert result.fast_loading is None


# =============================================================================
# Screenshot
# =============================================================================


async def test_screenshot_is_saved(tmp_path):
    page = FakePage(url=URL, final_url=URL)
    ctx = run_context(page)
    analyzer = ScreenshotAnalyzer(str(tmp_path))

    await analyzer.run(ctx.scoped(analyzer))

    result = ctx.get(slots.SCREENSHOT)
    assert result.path.startswith(str(tmp_path))
    assert result.bytes == 4
    assert page.screenshots == [result.path]


def test_screenshot_filename():
    name = screenshot_filename("https://example.com/blog/post?id=1", datetime(2024, 5, 1, 12, 30))

    assert name == "example_com_blog_post_20240501_123000.png"
