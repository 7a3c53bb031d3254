"""Typed slot keys for the run context.

A slot binds a name to the one result model allowed in it, so a reader
always knows what it gets back and two analyzers cannot collide on a
loosely spelled key.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

from core.results import (
    AccessibilityResult,
    HtmlStructureResult,
    MobileResult,
    PerformanceResult,
    PwaResult,
    ResourceResult,
    RobotsResult,
    ScreenshotResult,
    SecurityResult,
    SeoResult,
    SitemapResult,
)

T = TypeVar("T", bound=BaseModel)


class Slot(Generic[T]):
    """A named, typed key into a RunContext."""

    __slots__ = ("name", "model")

    def __init__(self, name: str, model: type[T]):
        self.name = name
        self.model = model

    def __repr__(self) -> str:
        return f"Slot({self.name!r}, {self.model.__name__})"


PERFORMANCE: Slot[PerformanceResult] = Slot("performance", PerformanceResult)
RESOURCES: Slot[ResourceResult] = Slot("resources", ResourceResult)
ACCESSIBILITY: Slot[AccessibilityResult] = Slot("accessibility", AccessibilityResult)
SEO: Slot[SeoResult] = Slot("seo", SeoResult)
ROBOTS: Slot[RobotsResult] = Slot("robots_txt", RobotsResult)
SITEMAP: Slot[SitemapResult] = Slot("sitemap", SitemapResult)
SECURITY: Slot[SecurityResult] = Slot("security_headers", SecurityResult)
HTML: Slot[HtmlStructureResult] = Slot("html_structure", HtmlStructureResult)
PWA: Slot[PwaResult] = Slot("pwa", PwaResult)
MOBILE: Slot[MobileResult] = Slot("mobile", MobileResult)
SCREENSHOT: Slot[ScreenshotResult] = Slot("screenshot", ScreenshotResult)

ALL_SLOTS = (
    PERFORMANCE,
    RESOURCES,
    ACCESSIBILITY,
    SEO,
    ROBOTS,
    SITEMAP,
    SECURITY,
    HTML,
    PWA,
    MOBILE,
    SCREENSHOT,
)
