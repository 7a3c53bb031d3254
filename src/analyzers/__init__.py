"""Lantern analyzers package."""

from analyzers.accessibility import AccessibilityAnalyzer
from analyzers.base import AnalyzerKind, BaseAnalyzer
from analyzers.crawl import RobotsTxtAnalyzer, SitemapAnalyzer
from analyzers.html import HtmlStructureAnalyzer
from analyzers.mobile import MobileAnalyzer
from analyzers.performance import PerformanceAnalyzer
from analyzers.pwa import PwaAnalyzer
from analyzers.resources import ResourceAnalyzer
from analyzers.screenshot import ScreenshotAnalyzer
from analyzers.security import SecurityHeadersAnalyzer
from analyzers.seo import SEOAnalyzer


def default_analyzers(options=None) -> list[BaseAnalyzer]:
    """
    The standard analyzer set, in registration order.

    Args:
        options: AuditOptions; controls the axe-core script and screenshots
    """
    analyzers = [
        PerformanceAnalyzer(),
        ResourceAnalyzer(),
        AccessibilityAnalyzer(axe_script_path=options.axe_script_path if options else None),
        SEOAnalyzer(),
        HtmlStructureAnalyzer(),
        MobileAnalyzer(),
        PwaAnalyzer(),
        RobotsTxtAnalyzer(),
        SitemapAnalyzer(),
        SecurityHeadersAnalyzer(),
    ]
    if options is not None and options.screenshots:
        analyzers.append(ScreenshotAnalyzer(options.screenshot_dir))
    return analyzers


__all__ = [
    "AnalyzerKind",
    "BaseAnalyzer",
    "AccessibilityAnalyzer",
    "HtmlStructureAnalyzer",
    "MobileAnalyzer",
    "PerformanceAnalyzer",
    "PwaAnalyzer",
    "ResourceAnalyzer",
    "RobotsTxtAnalyzer",
    "ScreenshotAnalyzer",
    "SecurityHeadersAnalyzer",
    "SEOAnalyzer",
    "SitemapAnalyzer",
    "default_analyzers",
]
