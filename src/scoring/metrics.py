"""Sub-metric scoring rules.

Each metric reads exactly one context slot and turns it into a 0-100 score
plus the issues that explain any lost points. A rule returns ``None`` when
the slot is present but could not measure the metric (for example a fetch
that never got an answer); the aggregator treats that like an absent slot.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from core import slots
from core.budgets import PerformanceBudget
from core.results import (
    AccessibilityResult,
    HtmlStructureResult,
    MobileResult,
    PerformanceResult,
    PwaResult,
    ResourceResult,
    RobotsResult,
    SecurityResult,
    SeoResult,
    SitemapResult,
)
from core.slots import Slot


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


SEVERITY_RANK = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
    Severity.INFO: 3,
}


@dataclass(frozen=True)
class Issue:
    """A discrete finding that cost (or explains) points in one metric."""

    severity: Severity
    message: str
    code: str
    metric: str = ""

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "code": self.code,
        }


@dataclass
class MetricOutcome:
    score: float
    issues: list[Issue] = field(default_factory=list)


@dataclass(frozen=True)
class Metric:
    """Binds a weighted sub-metric to the slot it reads and its rule."""

    category: str
    name: str
    slot: Slot
    rule: Callable[..., MetricOutcome | None]
    uses_budget: bool = False

    def evaluate(self, value: Any, budget: PerformanceBudget) -> MetricOutcome | None:
        if self.uses_budget:
            return self.rule(value, budget)
        return self.rule(value)


# =============================================================================
# Scoring primitives
# =============================================================================


def clamp(score: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, score))


def band_score(value: float, good: float, poor: float) -> float:
    """100 at or below ``good``, 0 at or beyond ``poor``, linear in between."""
    if value <= good:
        return 100.0
    if value >= poor:
        return 0.0
    return 100.0 * (poor - value) / (poor - good)


def ratio_score(part: int, total: int, empty: float = 100.0) -> float:
    """Direct percentage of ``part`` over ``total``; ``empty`` when there is nothing to count."""
    if total <= 0:
        return empty
    return clamp(100.0 * part / total)


def deduction_score(count: int, per_item: float, cap: float = 100.0) -> float:
    """Fixed deduction per item, with the total deduction capped at ``cap``."""
    return clamp(100.0 - min(count * per_item, cap))


def _issue(severity: Severity, code: str, message: str) -> Issue:
    return Issue(severity=severity, message=message, code=code)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# =============================================================================
# Performance
# =============================================================================

WEB_VITALS = {
    # metric: (share of the core_web_vitals score, issue code, label)
    "lcp": (0.35, "slow-lcp", "Largest Contentful Paint"),
    "fcp": (0.25, "slow-fcp", "First Contentful Paint"),
    "cls": (0.25, "high-cls", "Cumulative Layout Shift"),
    "ttfb": (0.15, "slow-ttfb", "Time to First Byte"),
}

SLOW_REQUEST_LIMIT = 5
HEAVY_PAGE_BYTES = 5 * 1024 * 1024
LARGE_PAGE_BYTES = 3 * 1024 * 1024
MAX_REQUESTS = 100
LARGE_SCRIPT_BYTES = 500 * 1024
LARGE_STYLESHEET_BYTES = 150 * 1024


def score_core_web_vitals(perf: PerformanceResult, budget: PerformanceBudget) -> MetricOutcome | None:
    values = {
        "lcp": perf.lcp_ms,
        "fcp": perf.fcp_ms,
        "cls": perf.cls,
        "ttfb": perf.ttfb_ms,
    }

    total = 0.0
    shares = 0.0
    issues = []
    for metric, (share, code, label) in WEB_VITALS.items():
        value = values[metric]
        threshold = budget.thresholds.get(metric)
        if value is None or threshold is None:
            continue

        total += share * threshold.score(value)
        shares += share

        if value > threshold.good:
            severity = Severity.HIGH if value > threshold.needs_work else Severity.MEDIUM
            if threshold.unit == "ms":
                shown = f"{value:.0f} ms (budget {threshold.good:.0f} ms)"
            else:
                shown = f"{value:.3f} (budget {threshold.good:g})"
            issues.append(_issue(severity, code, f"{label} is {shown}"))

    # nothing measurable: the browser reported none of the vitals
    if shares == 0:
        return None

    return MetricOutcome(total / shares, issues)


def score_resource_optimization(res: ResourceResult) -> MetricOutcome:
    score = 100.0
    issues = []

    if res.uncompressed:
        score -= min(len(res.uncompressed) * 5, 30)
        issues.append(
            _issue(
                Severity.MEDIUM,
                "uncompressed-resources",
                f"{_plural(len(res.uncompressed), 'text resource')} served without compression",
            )
        )

    if res.total_requests > MAX_REQUESTS:
        score -= 15
        issues.append(
            _issue(
                Severity.LOW,
                "too-many-requests",
                f"Page makes {res.total_requests} requests (recommend under {MAX_REQUESTS})",
            )
        )

    script_bytes = res.by_type.get("script", {}).get("bytes", 0)
    if script_bytes > LARGE_SCRIPT_BYTES:
        score -= 15
        issues.append(
            _issue(
                Severity.MEDIUM,
                "large-js-bundle",
                f"JavaScript totals {script_bytes // 1024} KB",
            )
        )

    css_bytes = res.by_type.get("stylesheet", {}).get("bytes", 0)
    if css_bytes > LARGE_STYLESHEET_BYTES:
        score -= 10
        issues.append(
            _issue(Severity.LOW, "large-css-bundle", f"CSS totals {css_bytes // 1024} KB")
        )

    if res.total_transfer_bytes > LARGE_PAGE_BYTES:
        score -= 10
        issues.append(
            _issue(
                Severity.LOW,
                "large-page-weight",
                f"Page transfers {res.total_transfer_bytes / (1024 * 1024):.1f} MB",
            )
        )

    return MetricOutcome(clamp(score), issues)


def score_network(res: ResourceResult) -> MetricOutcome:
    score = 100.0
    issues = []

    if len(res.slow_requests) > SLOW_REQUEST_LIMIT:
        score -= 20
        issues.append(
            _issue(
                Severity.MEDIUM,
                "slow-requests",
                f"{len(res.slow_requests)} requests took longer than 1 second",
            )
        )

    if res.failed_requests:
        score -= 30
        issues.append(
            _issue(
                Severity.HIGH,
                "failed-requests",
                f"{_plural(len(res.failed_requests), 'request')} failed",
            )
        )

    if res.total_transfer_bytes > HEAVY_PAGE_BYTES:
        score -= 20
        issues.append(
            _issue(
                Severity.MEDIUM,
                "heavy-network-payload",
                f"Total network payload exceeds {HEAVY_PAGE_BYTES // (1024 * 1024)} MB",
            )
        )

    return MetricOutcome(clamp(score), issues)


def score_render_blocking(res: ResourceResult) -> MetricOutcome:
    count = len(res.render_blocking)
    issues = []
    if count:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "render-blocking-resources",
                f"{_plural(count, 'render-blocking resource')} in the document head",
            )
        )
    return MetricOutcome(deduction_score(count, 10, cap=50), issues)


# =============================================================================
# Accessibility
# =============================================================================

IMPACT_DEDUCTIONS = {
    "critical": 20,
    "serious": 10,
    "moderate": 5,
    "minor": 2,
}

IMPACT_SEVERITY = {
    "critical": Severity.HIGH,
    "serious": Severity.HIGH,
    "moderate": Severity.MEDIUM,
    "minor": Severity.LOW,
}

CONTRAST_RULES = frozenset({"color-contrast", "color-contrast-enhanced"})
KEYBOARD_RULES = frozenset(
    {
        "accesskeys",
        "focus-order-semantics",
        "frame-focusable-content",
        "nested-interactive",
        "scrollable-region-focusable",
        "tabindex",
    }
)


def violation_group(violation) -> str:
    """Which accessibility sub-metric a violation belongs to."""
    if violation.id in CONTRAST_RULES:
        return "color_contrast"
    if violation.id.startswith("aria-"):
        return "aria"
    if violation.id in KEYBOARD_RULES or "cat.keyboard" in violation.tags:
        return "keyboard"
    return "wcag_compliance"


def _violation_issue(violation, code: str) -> Issue:
    severity = IMPACT_SEVERITY.get(violation.impact, Severity.MEDIUM)
    text = violation.help or violation.id
    return _issue(
        severity,
        code,
        f"{text} ({violation.id}, {_plural(violation.nodes, 'element')})",
    )


def score_wcag_compliance(a11y: AccessibilityResult) -> MetricOutcome:
    # aria, contrast and keyboard violations are scored by their own metrics
    found = [v for v in a11y.violations if violation_group(v) == "wcag_compliance"]
    deduction = sum(IMPACT_DEDUCTIONS.get(v.impact, 5) for v in found)
    return MetricOutcome(
        clamp(100.0 - deduction),
        [_violation_issue(v, "accessibility-violation") for v in found],
    )


def score_aria(a11y: AccessibilityResult) -> MetricOutcome:
    found = [v for v in a11y.violations if violation_group(v) == "aria"]
    return MetricOutcome(
        deduction_score(len(found), 15),
        [_violation_issue(v, "aria-violation") for v in found],
    )


def score_color_contrast(a11y: AccessibilityResult) -> MetricOutcome | None:
    if "color-contrast" not in a11y.rules_checked:
        return None
    found = [v for v in a11y.violations if violation_group(v) == "color_contrast"]
    return MetricOutcome(
        deduction_score(len(found), 20),
        [_violation_issue(v, "low-color-contrast") for v in found],
    )


def score_keyboard(a11y: AccessibilityResult) -> MetricOutcome:
    found = [v for v in a11y.violations if violation_group(v) == "keyboard"]
    return MetricOutcome(
        deduction_score(len(found), 15),
        [_violation_issue(v, "keyboard-inaccessible") for v in found],
    )


# =============================================================================
# SEO
# =============================================================================


def score_title(seo: SeoResult) -> MetricOutcome:
    length = seo.title_length
    if not length:
        return MetricOutcome(0.0, [_issue(Severity.HIGH, "missing-title", "Missing title tag")])
    if length < 30:
        return MetricOutcome(
            50.0,
            [
                _issue(
                    Severity.MEDIUM,
                    "title-too-short",
                    f"Title too short ({length} chars, recommend 50-60)",
                )
            ],
        )
    if length > 60:
        return MetricOutcome(
            70.0,
            [
                _issue(
                    Severity.LOW,
                    "title-too-long",
                    f"Title too long ({length} chars, recommend 50-60)",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_meta_description(seo: SeoResult) -> MetricOutcome:
    length = seo.description_length
    if not length:
        return MetricOutcome(
            0.0,
            [_issue(Severity.HIGH, "missing-meta-description", "Missing meta description")],
        )
    if length < 120:
        return MetricOutcome(
            50.0,
            [
                _issue(
                    Severity.MEDIUM,
                    "meta-description-too-short",
                    f"Meta description too short ({length} chars, recommend 150-160)",
                )
            ],
        )
    if length > 160:
        return MetricOutcome(
            70.0,
            [
                _issue(
                    Severity.LOW,
                    "meta-description-too-long",
                    f"Meta description too long ({length} chars, recommend 150-160)",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_headings(seo: SeoResult) -> MetricOutcome:
    count = len(seo.h1_values)
    if count == 0:
        return MetricOutcome(0.0, [_issue(Severity.HIGH, "missing-h1", "Missing H1 heading")])
    if count > 1:
        return MetricOutcome(
            70.0,
            [
                _issue(
                    Severity.MEDIUM,
                    "multiple-h1",
                    f"Multiple H1 tags found ({count}), recommend single H1",
                )
            ],
        )
    if len(seo.h1_values[0]) < 20:
        return MetricOutcome(80.0, [_issue(Severity.LOW, "short-h1", "H1 is very short")])
    return MetricOutcome(100.0)


def score_canonical(seo: SeoResult) -> MetricOutcome:
    if not seo.canonical:
        return MetricOutcome(
            0.0, [_issue(Severity.MEDIUM, "missing-canonical", "Missing canonical URL")]
        )
    if not seo.canonical_matches_page:
        return MetricOutcome(
            100.0,
            [
                _issue(
                    Severity.INFO,
                    "canonical-points-elsewhere",
                    f"Canonical URL points to a different page: {seo.canonical}",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_image_alt(seo: SeoResult) -> MetricOutcome:
    with_alt = seo.images_total - seo.images_missing_alt - seo.images_empty_alt
    issues = []
    if seo.images_missing_alt:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "missing-alt-tags",
                f"{seo.images_missing_alt} images missing alt attribute",
            )
        )
    if seo.images_empty_alt:
        issues.append(
            _issue(
                Severity.LOW,
                "empty-alt-tags",
                f"{seo.images_empty_alt} images have empty alt attribute",
            )
        )
    return MetricOutcome(ratio_score(with_alt, seo.images_total), issues)


def score_structured_data(seo: SeoResult) -> MetricOutcome:
    if seo.json_ld_count == 0:
        return MetricOutcome(
            0.0,
            [
                _issue(
                    Severity.LOW,
                    "missing-structured-data",
                    "No structured data (JSON-LD) found",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_social_tags(seo: SeoResult) -> MetricOutcome:
    if not seo.og_tags:
        return MetricOutcome(
            0.0, [_issue(Severity.LOW, "missing-open-graph", "Missing Open Graph tags")]
        )
    if seo.missing_og:
        return MetricOutcome(
            70.0,
            [
                _issue(
                    Severity.LOW,
                    "incomplete-open-graph",
                    f"Missing OG tags: {', '.join(seo.missing_og)}",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_indexability(seo: SeoResult) -> MetricOutcome:
    issues = []
    score = 100.0
    if not seo.is_indexable:
        score = 0.0
        issues.append(_issue(Severity.HIGH, "page-noindex", "Page is set to noindex"))
    if not seo.is_followable:
        score = min(score, 50.0)
        issues.append(_issue(Severity.MEDIUM, "page-nofollow", "Page is set to nofollow"))
    return MetricOutcome(score, issues)


def score_robots_txt(robots: RobotsResult) -> MetricOutcome | None:
    if not robots.checked:
        return None
    if not robots.found:
        return MetricOutcome(
            0.0, [_issue(Severity.MEDIUM, "missing-robots-txt", "No robots.txt found")]
        )
    if robots.blocks_all:
        return MetricOutcome(
            0.0,
            [
                _issue(
                    Severity.HIGH,
                    "robots-blocks-all",
                    "robots.txt disallows all crawlers from the whole site",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_sitemap(sitemap: SitemapResult) -> MetricOutcome | None:
    if not sitemap.checked:
        return None
    if not sitemap.found:
        return MetricOutcome(
            0.0, [_issue(Severity.MEDIUM, "missing-sitemap", "No XML sitemap found")]
        )
    if sitemap.url_count == 0:
        return MetricOutcome(
            50.0,
            [_issue(Severity.LOW, "empty-sitemap", f"Sitemap {sitemap.url} lists no URLs")],
        )
    return MetricOutcome(100.0)


def score_mobile_friendly(mobile: MobileResult) -> MetricOutcome:
    issues = []
    deduction = 0.0

    if mobile.viewport is None:
        deduction += 30
        issues.append(_issue(Severity.HIGH, "mobile-viewport-missing", "No viewport meta tag"))
    elif not mobile.viewport_responsive:
        deduction += 25
        issues.append(
            _issue(
                Severity.HIGH,
                "mobile-viewport-not-responsive",
                f"Viewport does not use width=device-width ({mobile.viewport})",
            )
        )
    if mobile.viewport is not None and not mobile.user_scalable:
        deduction += 10
        issues.append(_issue(Severity.MEDIUM, "mobile-zoom-disabled", "Viewport disables zooming"))

    if mobile.small_tap_targets:
        deduction += min(mobile.small_tap_targets * 3, 20)
        issues.append(
            _issue(
                Severity.HIGH if mobile.small_tap_targets > 5 else Severity.MEDIUM,
                "small-tap-targets",
                f"{_plural(mobile.small_tap_targets, 'tap target')} smaller than 44x44 px",
            )
        )

    if mobile.small_text_elements > mobile.text_elements_total * 0.3:
        deduction += 15
        issues.append(
            _issue(
                Severity.MEDIUM,
                "small-text",
                f"{mobile.small_text_elements} of {mobile.text_elements_total} text elements "
                "are smaller than 16px",
            )
        )

    if mobile.horizontal_scroll:
        deduction += 10
        issues.append(
            _issue(
                Severity.MEDIUM,
                "horizontal-scroll",
                f"Page is {mobile.page_width}px wide in a {mobile.viewport_width}px viewport",
            )
        )

    if mobile.plugin_elements:
        deduction += 20
        issues.append(
            _issue(
                Severity.HIGH,
                "plugin-content",
                f"{_plural(mobile.plugin_elements, 'plugin element')} (object, embed, applet)",
            )
        )

    if mobile.images_total and mobile.non_responsive_images / mobile.images_total > 0.5:
        deduction += 8
        issues.append(
            _issue(
                Severity.LOW,
                "non-responsive-images",
                f"{mobile.non_responsive_images} of {mobile.images_total} images have no "
                "responsive sizing",
            )
        )

    if mobile.generic_inputs:
        deduction += 5
        issues.append(
            _issue(
                Severity.INFO,
                "generic-input-types",
                f"{_plural(mobile.generic_inputs, 'input')} could use an email, tel or number type",
            )
        )

    return MetricOutcome(clamp(100.0 - deduction), issues)


# =============================================================================
# Best practices
# =============================================================================

ONE_YEAR_SECONDS = 31536000


def _header_rule(header: str, code: str, label: str, severity: Severity):
    """Presence check for one response header: 100 when sent, 0 otherwise."""

    def rule(security: SecurityResult) -> MetricOutcome | None:
        if not security.checked:
            return None
        if header in security.headers:
            return MetricOutcome(100.0)
        return MetricOutcome(0.0, [_issue(severity, code, f"Missing {label} header")])

    rule.__name__ = f"score_{header.replace('-', '_')}"
    return rule


def score_https(security: SecurityResult) -> MetricOutcome | None:
    if not security.checked:
        return None
    if security.https:
        return MetricOutcome(100.0)
    return MetricOutcome(0.0, [_issue(Severity.HIGH, "no-https", "Site does not use HTTPS")])


def score_hsts(security: SecurityResult) -> MetricOutcome | None:
    if not security.checked:
        return None
    if "strict-transport-security" not in security.headers:
        return MetricOutcome(
            0.0,
            [
                _issue(
                    Severity.HIGH,
                    "missing-hsts",
                    "Missing Strict-Transport-Security (HSTS) header",
                )
            ],
        )
    if security.hsts_max_age is None:
        return MetricOutcome(
            50.0,
            [_issue(Severity.MEDIUM, "weak-hsts", "HSTS header missing max-age directive")],
        )
    if security.hsts_max_age < ONE_YEAR_SECONDS:
        return MetricOutcome(
            70.0,
            [
                _issue(
                    Severity.LOW,
                    "weak-hsts",
                    f"HSTS max-age is {security.hsts_max_age}s, "
                    f"recommend at least {ONE_YEAR_SECONDS} (1 year)",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_csp(security: SecurityResult) -> MetricOutcome | None:
    if not security.checked:
        return None
    if "content-security-policy" not in security.headers:
        return MetricOutcome(
            0.0,
            [_issue(Severity.MEDIUM, "missing-csp", "Missing Content-Security-Policy header")],
        )
    scripts = security.csp_directives.get(
        "script-src", security.csp_directives.get("default-src", [])
    )
    if "'unsafe-inline'" in scripts or "'unsafe-eval'" in scripts:
        return MetricOutcome(
            70.0,
            [
                _issue(
                    Severity.LOW,
                    "weak-csp",
                    "Content-Security-Policy allows unsafe-inline or unsafe-eval scripts",
                )
            ],
        )
    return MetricOutcome(100.0)


def score_x_frame_options(security: SecurityResult) -> MetricOutcome | None:
    if not security.checked:
        return None
    if "x-frame-options" in security.headers or "frame-ancestors" in security.csp_directives:
        return MetricOutcome(100.0)
    return MetricOutcome(
        0.0,
        [_issue(Severity.MEDIUM, "missing-x-frame-options", "Missing X-Frame-Options header")],
    )


def score_x_content_type_options(security: SecurityResult) -> MetricOutcome | None:
    if not security.checked:
        return None
    value = security.headers.get("x-content-type-options")
    if value is None:
        return MetricOutcome(
            0.0,
            [
                _issue(
                    Severity.LOW,
                    "missing-x-content-type-options",
                    "Missing X-Content-Type-Options header",
                )
            ],
        )
    if value.strip().lower() != "nosniff":
        return MetricOutcome(
            50.0,
            [
                _issue(
                    Severity.LOW,
                    "missing-x-content-type-options",
                    "X-Content-Type-Options should be 'nosniff'",
                )
            ],
        )
    return MetricOutcome(100.0)


score_referrer_policy = _header_rule(
    "referrer-policy", "missing-referrer-policy", "Referrer-Policy", Severity.LOW
)
score_permissions_policy = _header_rule(
    "permissions-policy", "missing-permissions-policy", "Permissions-Policy", Severity.LOW
)


def score_information_disclosure(security: SecurityResult) -> MetricOutcome | None:
    if not security.checked:
        return None
    score = 100.0
    issues = []
    if security.server_header and re.search(r"\d+\.\d+", security.server_header):
        score -= 30
        issues.append(
            _issue(
                Severity.LOW,
                "server-version-disclosed",
                f"Server header discloses version information: {security.server_header}",
            )
        )
    if security.x_powered_by:
        score -= 20
        issues.append(
            _issue(
                Severity.LOW,
                "x-powered-by-disclosed",
                f"X-Powered-By header discloses technology: {security.x_powered_by}",
            )
        )
    if security.aspnet_version:
        score -= 20
        issues.append(
            _issue(
                Severity.LOW,
                "aspnet-version-disclosed",
                f"ASP.NET version disclosed: {security.aspnet_version}",
            )
        )
    return MetricOutcome(clamp(score), issues)


def score_modern_html(html: HtmlStructureResult) -> MetricOutcome:
    score = 100.0
    issues = []

    if not html.has_doctype:
        score -= 30
        issues.append(_issue(Severity.MEDIUM, "missing-doctype", "Missing <!DOCTYPE html>"))
    if not html.lang:
        score -= 20
        issues.append(
            _issue(Severity.MEDIUM, "missing-lang", "Missing lang attribute on <html>")
        )
    if not html.charset:
        score -= 10
        issues.append(_issue(Severity.LOW, "missing-charset", "No character encoding declared"))
    if html.deprecated_elements:
        score -= min(len(html.deprecated_elements) * 10, 30)
        tags = ", ".join(f"<{tag}>" for tag in sorted(html.deprecated_elements))
        issues.append(_issue(Severity.LOW, "deprecated-html", f"Deprecated elements used: {tags}"))
    if html.duplicate_ids:
        score -= min(len(html.duplicate_ids) * 5, 20)
        issues.append(
            _issue(
                Severity.LOW,
                "duplicate-ids",
                f"{_plural(len(html.duplicate_ids), 'duplicate element id')}",
            )
        )
    if html.mixed_content:
        score -= min(len(html.mixed_content) * 10, 30)
        issues.append(
            _issue(
                Severity.HIGH,
                "mixed-content",
                f"{_plural(len(html.mixed_content), 'resource')} loaded over HTTP on an HTTPS page",
            )
        )

    return MetricOutcome(clamp(score), issues)


def score_console_errors(html: HtmlStructureResult) -> MetricOutcome:
    count = len(html.console_errors)
    issues = []
    if count:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "console-errors",
                f"{_plural(count, 'error')} logged to the browser console",
            )
        )
    return MetricOutcome(deduction_score(count, 10, cap=50), issues)


# =============================================================================
# PWA
# =============================================================================


def score_manifest(pwa: PwaResult) -> MetricOutcome | None:
    manifest = pwa.manifest
    if not manifest.checked:
        return None
    if not manifest.found:
        return MetricOutcome(
            0.0, [_issue(Severity.MEDIUM, "missing-manifest", "No web app manifest found")]
        )
    if not manifest.valid:
        detail = "; ".join(manifest.errors) or "manifest could not be parsed"
        return MetricOutcome(
            40.0, [_issue(Severity.MEDIUM, "invalid-manifest", f"Invalid web app manifest: {detail}")]
        )
    return MetricOutcome(100.0)


def score_service_worker(pwa: PwaResult) -> MetricOutcome:
    if pwa.service_worker_registered:
        return MetricOutcome(100.0)
    return MetricOutcome(
        0.0, [_issue(Severity.MEDIUM, "missing-service-worker", "No service worker registered")]
    )


def score_installability(pwa: PwaResult) -> MetricOutcome | None:
    criteria = pwa.installability_criteria
    if not criteria:
        return None
    met = sum(1 for passed in criteria.values() if passed)
    issues = []
    if pwa.missing_requirements:
        issues.append(
            _issue(
                Severity.MEDIUM,
                "not-installable",
                f"Not installable, missing: {', '.join(pwa.missing_requirements)}",
            )
        )
    return MetricOutcome(ratio_score(met, len(criteria)), issues)


def score_fast_loading(pwa: PwaResult) -> MetricOutcome | None:
    if pwa.fast_loading is None:
        return None
    if pwa.fast_loading:
        return MetricOutcome(100.0)
    return MetricOutcome(
        0.0, [_issue(Severity.LOW, "slow-pwa-loading", "Page does not load fast enough for an app")]
    )


def score_viewport(pwa: PwaResult) -> MetricOutcome | None:
    if pwa.viewport_responsive is None:
        return None
    if pwa.viewport_responsive:
        return MetricOutcome(100.0)
    return MetricOutcome(
        0.0,
        [
            _issue(
                Severity.MEDIUM,
                "missing-viewport",
                "No responsive viewport meta tag (width=device-width)",
            )
        ],
    )


# =============================================================================
# Registry
# =============================================================================

METRICS = {
    "performance": {
        "core_web_vitals": Metric(
            "performance", "core_web_vitals", slots.PERFORMANCE, score_core_web_vitals, uses_budget=True
        ),
        "resource_optimization": Metric(
            "performance", "resource_optimization", slots.RESOURCES, score_resource_optimization
        ),
        "network": Metric("performance", "network", slots.RESOURCES, score_network),
        "render_blocking": Metric(
            "performance", "render_blocking", slots.RESOURCES, score_render_blocking
        ),
    },
    "accessibility": {
        "wcag_compliance": Metric(
            "accessibility", "wcag_compliance", slots.ACCESSIBILITY, score_wcag_compliance
        ),
        "aria": Metric("accessibility", "aria", slots.ACCESSIBILITY, score_aria),
        "color_contrast": Metric(
            "accessibility", "color_contrast", slots.ACCESSIBILITY, score_color_contrast
        ),
        "keyboard": Metric("accessibility", "keyboard", slots.ACCESSIBILITY, score_keyboard),
    },
    "seo": {
        "title": Metric("seo", "title", slots.SEO, score_title),
        "meta_description": Metric("seo", "meta_description", slots.SEO, score_meta_description),
        "headings": Metric("seo", "headings", slots.SEO, score_headings),
        "canonical": Metric("seo", "canonical", slots.SEO, score_canonical),
        "image_alt": Metric("seo", "image_alt", slots.SEO, score_image_alt),
        "structured_data": Metric("seo", "structured_data", slots.SEO, score_structured_data),
        "social_tags": Metric("seo", "social_tags", slots.SEO, score_social_tags),
        "indexability": Metric("seo", "indexability", slots.SEO, score_indexability),
        "robots_txt": Metric("seo", "robots_txt", slots.ROBOTS, score_robots_txt),
        "sitemap": Metric("seo", "sitemap", slots.SITEMAP, score_sitemap),
        "mobile_friendly": Metric("seo", "mobile_friendly", slots.MOBILE, score_mobile_friendly),
    },
    "best_practices": {
        "https": Metric("best_practices", "https", slots.SECURITY, score_https),
        "hsts": Metric("best_practices", "hsts", slots.SECURITY, score_hsts),
        "csp": Metric("best_practices", "csp", slots.SECURITY, score_csp),
        "x_frame_options": Metric(
            "best_practices", "x_frame_options", slots.SECURITY, score_x_frame_options
        ),
        "x_content_type_options": Metric(
            "best_practices", "x_content_type_options", slots.SECURITY, score_x_content_type_options
        ),
        "referrer_policy": Metric(
            "best_practices", "referrer_policy", slots.SECURITY, score_referrer_policy
        ),
        "permissions_policy": Metric(
            "best_practices", "permissions_policy", slots.SECURITY, score_permissions_policy
        ),
        "information_disclosure": Metric(
            "best_practices", "information_disclosure", slots.SECURITY, score_information_disclosure
        ),
        "modern_html": Metric("best_practices", "modern_html", slots.HTML, score_modern_html),
        "console_errors": Metric("best_practices", "console_errors", slots.HTML, score_console_errors),
    },
    "pwa": {
        "manifest": Metric("pwa", "manifest", slots.PWA, score_manifest),
        "service_worker": Metric("pwa", "service_worker", slots.PWA, score_service_worker),
        "installability": Metric("pwa", "installability", slots.PWA, score_installability),
        "fast_loading": Metric("pwa", "fast_loading", slots.PWA, score_fast_loading),
        "viewport": Metric("pwa", "viewport", slots.PWA, score_viewport),
    },
}
