"""Result models written by analyzers into the run context.

Every model is a plain pydantic model so it serializes straight into the
``audits`` section of the report. Fields that a browser may not report are
optional and stay ``None`` rather than defaulting to zero.
"""

from pydantic import BaseModel, Field


class PerformanceResult(BaseModel):
    """Navigation and paint timings, in milliseconds."""

    ttfb_ms: float | None = None
    fcp_ms: float | None = None
    lcp_ms: float | None = None
    cls: float | None = None
    first_paint_ms: float | None = None
    dom_content_loaded_ms: float | None = None
    load_event_ms: float | None = None
    redirect_ms: float = 0.0
    dns_ms: float = 0.0
    connect_ms: float = 0.0
    budget: str = "default"


class ResourceEntry(BaseModel):
    url: str
    type: str
    transfer_bytes: int = 0
    duration_ms: float = 0.0
    compressed: bool = True


class ResourceResult(BaseModel):
    total_requests: int = 0
    total_transfer_bytes: int = 0
    by_type: dict[str, dict[str, int]] = Field(default_factory=dict)
    slow_requests: list[str] = Field(default_factory=list)
    failed_requests: list[str] = Field(default_factory=list)
    uncompressed: list[str] = Field(default_factory=list)
    render_blocking: list[str] = Field(default_factory=list)
    largest: list[ResourceEntry] = Field(default_factory=list)


class Violation(BaseModel):
    """One accessibility rule violation, shaped like an axe-core result."""

    id: str
    impact: str = "moderate"
    help: str = ""
    help_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    nodes: int = 1
    targets: list[str] = Field(default_factory=list)


class AccessibilityResult(BaseModel):
    engine: str = "builtin"
    violations: list[Violation] = Field(default_factory=list)
    passes: int = 0
    rules_checked: list[str] = Field(default_factory=list)


class SeoResult(BaseModel):
    title: str | None = None
    meta_description: str | None = None
    h1_values: list[str] = Field(default_factory=list)
    heading_counts: dict[str, int] = Field(default_factory=dict)
    canonical: str | None = None
    canonical_matches_page: bool = False
    images_total: int = 0
    images_missing_alt: int = 0
    images_empty_alt: int = 0
    missing_alt_samples: list[str] = Field(default_factory=list)
    og_tags: dict[str, str] = Field(default_factory=dict)
    twitter_tags: dict[str, str] = Field(default_factory=dict)
    missing_og: list[str] = Field(default_factory=list)
    robots_meta: str | None = None
    x_robots_tag: str | None = None
    is_indexable: bool = True
    is_followable: bool = True
    json_ld_types: list[str] = Field(default_factory=list)
    json_ld_count: int = 0
    links: dict[str, int] = Field(default_factory=dict)

    @property
    def title_length(self) -> int:
        return len(self.title) if self.title else 0

    @property
    def description_length(self) -> int:
        return len(self.meta_description) if self.meta_description else 0


class RobotsResult(BaseModel):
    checked: bool = False
    found: bool = False
    url: str = ""
    status_code: int | None = None
    blocks_all: bool = False
    user_agents: list[str] = Field(default_factory=list)
    crawl_delay: float | None = None
    sitemaps: list[str] = Field(default_factory=list)
    error: str | None = None


class SitemapResult(BaseModel):
    checked: bool = False
    found: bool = False
    url: str | None = None
    is_index: bool = False
    url_count: int = 0
    tried: list[str] = Field(default_factory=list)
    error: str | None = None


class Vulnerability(BaseModel):
    severity: str
    type: str
    description: str


class SecurityResult(BaseModel):
    checked: bool = False
    https: bool = False
    status_code: int | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    present: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    hsts_max_age: int | None = None
    csp_directives: dict[str, list[str]] = Field(default_factory=dict)
    server_header: str | None = None
    x_powered_by: str | None = None
    aspnet_version: str | None = None
    vulnerabilities: list[Vulnerability] = Field(default_factory=list)
    error: str | None = None


class HtmlStructureResult(BaseModel):
    has_doctype: bool = False
    lang: str | None = None
    charset: str | None = None
    viewport: str | None = None
    viewport_responsive: bool = False
    deprecated_elements: dict[str, int] = Field(default_factory=dict)
    duplicate_ids: list[str] = Field(default_factory=list)
    mixed_content: list[str] = Field(default_factory=list)
    console_errors: list[str] = Field(default_factory=list)


class TapTarget(BaseModel):
    element: str
    width: int
    height: int
    text: str = ""


class MobileResult(BaseModel):
    viewport: str | None = None
    viewport_responsive: bool = False
    user_scalable: bool = True
    tap_targets_total: int = 0
    small_tap_targets: int = 0
    small_tap_target_samples: list[TapTarget] = Field(default_factory=list)
    text_elements_total: int = 0
    small_text_elements: int = 0
    average_font_size: float | None = None
    horizontal_scroll: bool = False
    page_width: int | None = None
    viewport_width: int | None = None
    plugin_elements: int = 0
    images_total: int = 0
    non_responsive_images: int = 0
    inputs_total: int = 0
    generic_inputs: int = 0


class ManifestInfo(BaseModel):
    checked: bool = True
    found: bool = False
    url: str | None = None
    valid: bool = False
    name: str | None = None
    start_url: str | None = None
    display: str | None = None
    has_192_icon: bool = False
    has_512_icon: bool = False
    prefer_related_applications: bool = False
    errors: list[str] = Field(default_factory=list)


class PwaResult(BaseModel):
    https: bool = False
    manifest: ManifestInfo = Field(default_factory=ManifestInfo)
    service_worker_supported: bool = False
    service_worker_registered: bool = False
    service_worker_active: bool = False
    installable: bool = False
    missing_requirements: list[str] = Field(default_factory=list)
    installability_criteria: dict[str, bool] = Field(default_factory=dict)
    fast_loading: bool | None = None
    viewport_responsive: bool | None = None
    is_pwa: bool = False


class ScreenshotResult(BaseModel):
    path: str | None = None
    bytes: int = 0
