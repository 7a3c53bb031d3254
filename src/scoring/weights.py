"""Category weights and per-category metric sub-weights.

Category weights sum to 100. Sub-weights within each category sum to 1.0,
and their order is the order metrics are evaluated and reported in.
"""

from types import MappingProxyType

CATEGORY_WEIGHTS = MappingProxyType(
    {
        "performance": 30,
        "accessibility": 25,
        "seo": 20,
        "best_practices": 15,
        "pwa": 10,
    }
)

METRIC_WEIGHTS = MappingProxyType(
    {
        "performance": MappingProxyType(
            {
                "core_web_vitals": 0.40,
                "resource_optimization": 0.25,
                "network": 0.20,
                "render_blocking": 0.15,
            }
        ),
        "accessibility": MappingProxyType(
            {
                "wcag_compliance": 0.50,
                "aria": 0.20,
                "color_contrast": 0.15,
                "keyboard": 0.15,
            }
        ),
        "seo": MappingProxyType(
            {
                "title": 0.15,
                "meta_description": 0.15,
                "headings": 0.10,
                "canonical": 0.05,
                "image_alt": 0.10,
                "structured_data": 0.10,
                "social_tags": 0.05,
                "indexability": 0.05,
                "robots_txt": 0.10,
                "sitemap": 0.05,
                "mobile_friendly": 0.10,
            }
        ),
        "best_practices": MappingProxyType(
            {
                "https": 0.15,
                "hsts": 0.15,
                "csp": 0.15,
                "x_frame_options": 0.10,
                "x_content_type_options": 0.10,
                "referrer_policy": 0.05,
                "permissions_policy": 0.05,
                "information_disclosure": 0.05,
                "modern_html": 0.10,
                "console_errors": 0.10,
            }
        ),
        "pwa": MappingProxyType(
            {
                "manifest": 0.25,
                "service_worker": 0.25,
                "installability": 0.30,
                "fast_loading": 0.10,
                "viewport": 0.10,
            }
        ),
    }
)
