import pytest

from analyzers.accessibility import BUILTIN_RULES
from analyzers.security import SecurityHeadersAnalyzer
from core import slots
from core.budgets import DEFAULT_BUDGET
from core.context import RunContext
from core.results import (
    AccessibilityResult,
    HtmlStructureResult,
    ManifestInfo,
    MobileResult,
    PerformanceResult,
    PwaResult,
    ResourceResult,
    RobotsResult,
    SeoResult,
    SitemapResult,
    Violation,
)
from recommendations import RULES_BY_CODE
from scoring import CATEGORY_WEIGHTS, METRIC_WEIGHTS, Aggregator, Severity, grade_for
from scoring.aggregator import INSTALLABLE_PWA_SCORE
from scoring.metrics import (
    METRICS,
    band_score,
    deduction_score,
    ratio_score,
    score_color_contrast,
    score_core_web_vitals,
    score_mobile_friendly,
    score_wcag_compliance,
    violation_group,
)

URL = "https://example.com/"

SECURE_HEADERS = {
    "strict-transport-security": "max-age=31536000; includeSubDomains",
    "content-security-policy": "default-src 'self'; frame-ancestors 'none'",
    "x-frame-options": "DENY",
    "x-content-type-options": "nosniff",
    "referrer-policy": "strict-origin-when-cross-origin",
    "permissions-policy": "geolocation=()",
}


def installable_pwa() -> PwaResult:
    criteria = {
        "https": True,
        "manifest": True,
        "service_worker": True,
        "icons": True,
        "name": True,
        "start_url": True,
        "display": True,
        "no_related_app_preference": True,
    }
    return PwaResult(
        https=True,
        manifest=ManifestInfo(
            checked=True,
            found=True,
            valid=True,
            url="https://example.com/manifest.json",
            name="Example",
            start_url="/",
            display="standalone",
            has_192_icon=True,
            has_512_icon=True,
        ),
        service_worker_supported=True,
        service_worker_registered=True,
        service_worker_active=True,
        installable=True,
        installability_criteria=criteria,
        is_pwa=True,
    )


def good_seo(**overrides) -> SeoResult:
    values = dict(
        title="Example Domain - Practical guides for building fast websites",
        meta_description="x" * 155,
        h1_values=["Example Domain"],
        canonical=URL,
        canonical_matches_page=True,
        images_total=2,
        og_tags={"og:title": "t", "og:description": "d", "og:image": "i", "og:url": "u"},
        json_ld_types=["WebSite"],
        json_ld_count=1,
    )
    values.update(overrides)
    return SeoResult(**values)


# =============================================================================
# Configuration
# =============================================================================


def test_category_weights_sum_to_100():
    assert sum(CATEGORY_WEIGHTS.values()) == 100


@pytest.mark.parametrize("category", list(METRIC_WEIGHTS))
def test_metric_weights_sum_to_one(category):
    assert sum(METRIC_WEIGHTS[category].values()) == pytest.approx(1.0)


def test_every_weighted_metric_has_a_rule():
    for category, weights in METRIC_WEIGHTS.items():
        assert set(weights) == set(METRICS[category])


# =============================================================================
# Primitives
# =============================================================================


def test_grade_is_monotonic():
    grades = "FDCBA"
    previous = 0
    for tenth in range(0, 1001):
        rank = grades.index(grade_for(tenth / 10))
        assert rank >= previous
        previous = rank


@pytest.mark.parametrize(
    "score, grade",
    [(100, "A"), (90, "A"), (89.9, "B"), (80, "B"), (70, "C"), (60, "D"), (59.9, "F"), (0, "F")],
)
def test_grade_boundaries(score, grade):
    assert grade_for(score) == grade


def test_band_score():
    assert band_score(100, good=200, poor=400) == 100
    assert band_score(300, good=200, poor=400) == 50
    assert band_score(500, good=200, poor=400) == 0


def test_ratio_and_deduction_scores():
    assert ratio_score(3, 4) == 75
    assert ratio_score(0, 0) == 100
    assert deduction_score(2, 10) == 80
    assert deduction_score(20, 10, cap=50) == 50


def test_core_web_vitals_uses_only_measured_vitals():
    fast = score_core_web_vitals(PerformanceResult(lcp_ms=1000, fcp_ms=800), DEFAULT_BUDGET)
    assert fast.score == 100
    assert fast.issues == []

    assert score_core_web_vitals(PerformanceResult(), DEFAULT_BUDGET) is None


def test_core_web_vitals_flags_slow_metrics():
    outcome = score_core_web_vitals(
        PerformanceResult(lcp_ms=5000, fcp_ms=2000, cls=0.05, ttfb_ms=200), DEFAULT_BUDGET
    )

    codes = {issue.code: issue.severity for issue in outcome.issues}
    assert codes == {"slow-lcp": Severity.HIGH, "slow-fcp": Severity.MEDIUM}
    assert outcome.score < 100


def test_violation_groups():
    assert violation_group(Violation(id="color-contrast")) == "color_contrast"
    assert violation_group(Violation(id="aria-roles")) == "aria"
    assert violation_group(Violation(id="tabindex")) == "keyboard"
    assert violation_group(Violation(id="image-alt")) == "wcag_compliance"


def test_color_contrast_is_unmeasured_without_the_rule():
    assert score_color_contrast(AccessibilityResult(rules_checked=["image-alt"])) is None
    assert score_color_contrast(AccessibilityResult(rules_checked=["color-contrast"])).score == 100


def test_wcag_compliance_only_deducts_its_own_violations():
    a11y = AccessibilityResult(
        violations=[
            Violation(id="aria-roles", impact="critical"),
            Violation(id="color-contrast", impact="serious"),
            Violation(id="tabindex", impact="serious"),
        ],
        rules_checked=["color-contrast"],
    )

    assert score_wcag_compliance(a11y).score == 100
    assert score_wcag_compliance(a11y).issues == []

    a11y.violations.append(Violation(id="image-alt", impact="critical"))
    assert score_wcag_compliance(a11y).score == 80


def test_builtin_rules_cap_accessibility_without_contrast():
    ctx = RunContext(URL)
    ctx.set(slots.ACCESSIBILITY, AccessibilityResult(rules_checked=sorted(BUILTIN_RULES)))

    accessibility = Aggregator().aggregate(ctx).categories["accessibility"]

    assert accessibility.missing_metrics == ["color_contrast"]
    assert accessibility.score == 85


# =============================================================================
# Aggregation
# =============================================================================


def test_everything_missing_scores_zero():
    scores = Aggregator().aggregate(RunContext(URL))

    assert scores.overall_score == 0
    assert scores.overall_grade == "F"
    for name, category in scores.categories.items():
        assert category.score == 0
        assert category.missing_metrics == list(METRIC_WEIGHTS[name])


def test_aggregation_is_deterministic():
    ctx = RunContext(URL)
    ctx.set(slots.SEO, good_seo(meta_description=None))
    ctx.set(slots.PERFORMANCE, PerformanceResult(lcp_ms=3000, fcp_ms=1200, cls=0.2))
    ctx.set(slots.RESOURCES, ResourceResult(render_blocking=["https://example.com/app.css"]))

    first = Aggregator().aggregate(ctx)
    second = Aggregator().aggregate(ctx)

    assert first == second


def test_scores_stay_in_bounds_for_a_broken_page():
    ctx = RunContext(URL)
    ctx.set(slots.SEO, SeoResult(is_indexable=False, is_followable=False))
    ctx.set(slots.PERFORMANCE, PerformanceResult(lcp_ms=60000, fcp_ms=60000, cls=5, ttfb_ms=60000))
    ctx.set(
        slots.RESOURCES,
        ResourceResult(
            total_requests=400,
            total_transfer_bytes=50 * 1024 * 1024,
            slow_requests=["x"] * 50,
            failed_requests=["y"] * 50,
            uncompressed=["z"] * 50,
            render_blocking=["w"] * 50,
        ),
    )
    ctx.set(
        slots.ACCESSIBILITY,
        AccessibilityResult(
            violations=[Violation(id=f"rule-{i}", impact="critical") for i in range(30)],
            rules_checked=["color-contrast"],
        ),
    )
    ctx.set(slots.ROBOTS, RobotsResult(checked=True, found=True, blocks_all=True))
    ctx.set(slots.SITEMAP, SitemapResult(checked=True, found=False))
    ctx.set(
        slots.HTML,
        HtmlStructureResult(
            deprecated_elements={"font": 3, "center": 1, "marquee": 1, "blink": 1},
            duplicate_ids=[f"id{i}" for i in range(20)],
            mixed_content=["http://cdn.example.com/a.js"] * 10,
            console_errors=["TypeError"] * 20,
        ),
    )
    ctx.set(slots.SECURITY, SecurityHeadersAnalyzer().evaluate_headers({"server": "nginx/1.2"}, False))
    ctx.set(slots.PWA, PwaResult(manifest=ManifestInfo(checked=True, found=False)))

    scores = Aggregator().aggregate(ctx)

    for category in scores.categories.values():
        assert 0 <= category.score <= 100
        for sub_score in category.metric_scores.values():
            assert 0 <= sub_score <= 100
    assert 0 <= scores.overall_score <= 100


def test_issues_are_ordered_by_severity():
    ctx = RunContext(URL)
    ctx.set(slots.SEO, SeoResult(images_total=3, images_missing_alt=1))

    issues = Aggregator().aggregate(ctx).categories["seo"].issues
    ranks = ["high", "medium", "low", "info"]
    positions = [ranks.index(issue.severity.value) for issue in issues]

    assert positions == sorted(positions)
    assert issues[0].code == "missing-title"


def test_missing_meta_description_is_a_high_severity_seo_issue():
    ctx = RunContext(URL)
    ctx.set(slots.SEO, good_seo(meta_description=None))

    seo = Aggregator().aggregate(ctx).categories["seo"]

    assert seo.metric_scores["meta_description"] == 0
    issue = next(issue for issue in seo.issues if issue.code == "missing-meta-description")
    assert issue.severity == Severity.HIGH
    assert "meta description" in issue.message.lower()
    assert "meta_description" not in seo.missing_metrics


def test_mobile_friendly_page_scores_full_marks():
    outcome = score_mobile_friendly(
        MobileResult(viewport="width=device-width", viewport_responsive=True, text_elements_total=4)
    )

    assert outcome.score == 100
    assert outcome.issues == []


def test_mobile_friendly_deductions():
    zoom_locked = score_mobile_friendly(
        MobileResult(
            viewport="width=device-width, user-scalable=no",
            viewport_responsive=True,
            user_scalable=False,
            small_tap_targets=2,
        )
    )
    assert zoom_locked.score == 84
    assert [(i.code, i.severity) for i in zoom_locked.issues] == [
        ("mobile-zoom-disabled", Severity.MEDIUM),
        ("small-tap-targets", Severity.MEDIUM),
    ]

    desktop_only = score_mobile_friendly(
        MobileResult(
            small_tap_targets=8,
            text_elements_total=10,
            small_text_elements=5,
            horizontal_scroll=True,
            page_width=1280,
            viewport_width=390,
            plugin_elements=1,
            images_total=4,
            non_responsive_images=4,
            generic_inputs=1,
        )
    )
    assert desktop_only.score == 0
    assert [i.code for i in desktop_only.issues] == [
        "mobile-viewport-missing",
        "small-tap-targets",
        "small-text",
        "horizontal-scroll",
        "plugin-content",
        "non-responsive-images",
        "generic-input-types",
    ]

    fixed_width = score_mobile_friendly(MobileResult(viewport="width=1024"))
    assert fixed_width.score == 75
    assert fixed_width.issues[0].code == "mobile-viewport-not-responsive"

    for outcome in (zoom_locked, desktop_only, fixed_width):
        for issue in outcome.issues:
            assert issue.code in RULES_BY_CODE, issue.code


def test_missing_hsts_costs_exactly_its_weight():
    analyzer = SecurityHeadersAnalyzer()
    without_hsts = {k: v for k, v in SECURE_HEADERS.items() if k != "strict-transport-security"}

    secure = RunContext(URL)
    secure.set(slots.SECURITY, analyzer.evaluate_headers(SECURE_HEADERS, True))
    insecure = RunContext(URL)
    result = analyzer.evaluate_headers(without_hsts, True)
    insecure.set(slots.SECURITY, result)

    before = Aggregator().aggregate(secure).categories["best_practices"]
    after = Aggregator().aggregate(insecure).categories["best_practices"]

    assert after.metric_scores["hsts"] == 0
    assert any(v.type == "Missing HSTS" and v.severity == "high" for v in result.vulnerabilities)
    assert any(i.code == "missing-hsts" and i.severity == Severity.HIGH for i in after.issues)
    drop = METRIC_WEIGHTS["best_practices"]["hsts"] * 100
    assert before.score - after.score == pytest.approx(drop, abs=0.2)


def test_installable_pwa_meets_the_threshold():
    ctx = RunContext(URL)
    ctx.set(slots.PWA, installable_pwa())

    pwa = Aggregator().aggregate(ctx).categories["pwa"]

    assert pwa.extras["is_pwa"] is True
    assert pwa.extras["installable"] is True
    assert pwa.score >= INSTALLABLE_PWA_SCORE


def test_failed_performance_analyzer_scores_zero_not_excluded():
    ctx = RunContext(URL)
    ctx.set(slots.SEO, good_seo())
    ctx.set(slots.RESOURCES, ResourceResult())
    ctx.record_error("performance", "Network domain disconnected")

    scores = Aggregator().aggregate(ctx)
    performance = scores.categories["performance"]

    assert performance.missing_metrics == ["core_web_vitals"]
    assert performance.metric_scores["core_web_vitals"] == 0
    assert performance.score == pytest.approx(60.0)
    assert "performance.core_web_vitals" in scores.missing_metrics


def test_every_issue_has_a_catalog_recommendation():
    ctx = RunContext(URL)
    ctx.set(slots.SEO, SeoResult(images_total=2, images_missing_alt=1, images_empty_alt=1))
    ctx.set(slots.PERFORMANCE, PerformanceResult(lcp_ms=9000, fcp_ms=9000, cls=1, ttfb_ms=9000))
    ctx.set(slots.RESOURCES, ResourceResult(failed_requests=["x"], render_blocking=["y"]))
    ctx.set(
        slots.ACCESSIBILITY,
        AccessibilityResult(
            violations=[
                Violation(id="image-alt", impact="critical"),
                Violation(id="aria-roles", impact="serious"),
                Violation(id="color-contrast", impact="serious"),
                Violation(id="tabindex", impact="moderate"),
            ],
            rules_checked=["color-contrast"],
        ),
    )
    ctx.set(slots.ROBOTS, RobotsResult(checked=True, found=False))
    ctx.set(slots.SITEMAP, SitemapResult(checked=True, found=False))
    ctx.set(slots.HTML, HtmlStructureResult(console_errors=["boom"]))
    ctx.set(
        slots.SECURITY,
        SecurityHeadersAnalyzer().evaluate_headers(
            {"server": "Apache/2.4.1", "x-powered-by": "PHP/8.1"}, False
        ),
    )
    ctx.set(slots.PWA, PwaResult(manifest=ManifestInfo(checked=True, found=False)))

    scores = Aggregator().aggregate(ctx)

    assert scores.issues
    for category in scores.categories.values():
        assert len(category.recommendations) == len(category.issues)
        for issue, recommendation in zip(category.issues, category.recommendations):
            assert issue.code in RULES_BY_CODE, issue.code
            assert recommendation.code == issue.code
            assert recommendation.severity == issue.severity.value
            assert recommendation.fix_suggestion == RULES_BY_CODE[issue.code].fix_suggestion
