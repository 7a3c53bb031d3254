"""Recommendation catalog, keyed by issue code."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    """How to fix one kind of issue."""

    id: str  # issue code
    category: str  # performance, accessibility, seo, best_practices, pwa
    title: str
    description: str
    fix_suggestion: str
    reference_url: str | None = None


# =============================================================================
# Performance Rules
# =============================================================================

PERFORMANCE_RULES = [
    Rule(
        id="slow-lcp",
        category="performance",
        title="Slow Largest Contentful Paint (LCP)",
        description="LCP measures when the largest content element becomes visible. Your LCP is above the budget.",
        fix_suggestion="Shrink and preload the hero image or text block, answer the document request faster, and stop blocking the first render.",
        reference_url="https://web.dev/lcp/",
    ),
    Rule(
        id="high-cls",
        category="performance",
        title="High Cumulative Layout Shift (CLS)",
        description="CLS measures visual stability. A high score indicates layout shifts that can frustrate users.",
        fix_suggestion="Give media width and height attributes, reserve space for late content like ads or banners, and animate with transform rather than layout properties.",
        reference_url="https://web.dev/cls/",
    ),
    Rule(
        id="slow-fcp",
        category="performance",
        title="Slow First Contentful Paint (FCP)",
        description="FCP measures when the first content is painted. Your FCP is above the budget.",
        fix_suggestion="Speed up the server response, defer non-critical CSS and scripts, and preload the fonts used above the fold.",
        reference_url="https://web.dev/fcp/",
    ),
    Rule(
        id="slow-ttfb",
        category="performance",
        title="Slow Server Response (TTFB)",
        description="Time to First Byte measures how long the server takes to start answering.",
        fix_suggestion="Cache rendered pages, use a CDN, and profile slow backend work such as database queries.",
        reference_url="https://web.dev/ttfb/",
    ),
    Rule(
        id="uncompressed-resources",
        category="performance",
        title="Text Resources Served Without Compression",
        description="Scripts, stylesheets or documents are transferred without gzip or brotli compression.",
        fix_suggestion="Enable gzip or brotli compression for text-based responses on your server or CDN.",
        reference_url="https://developer.chrome.com/docs/lighthouse/performance/uses-text-compression/",
    ),
    Rule(
        id="too-many-requests",
        category="performance",
        title="Too Many Requests",
        description="Your page makes a large number of network requests.",
        fix_suggestion="Combine small files, serve over HTTP/2, and drop third-party tags the page does not need.",
    ),
    Rule(
        id="large-js-bundle",
        category="performance",
        title="Large JavaScript Bundle",
        description="More than 500KB of JavaScript is transferred, all of which must be parsed before the page responds.",
        fix_suggestion="Split bundles per route, load non-critical modules on demand, and let the bundler drop unused exports.",
    ),
    Rule(
        id="large-css-bundle",
        category="performance",
        title="Large CSS Bundle",
        description="Your total CSS size exceeds 150KB.",
        fix_suggestion="Remove unused CSS, consider critical CSS extraction, and split CSS by route.",
    ),
    Rule(
        id="large-page-weight",
        category="performance",
        title="Heavy Page Weight",
        description="The page transfers more than 3MB in total.",
        fix_suggestion="Compress and resize images, serve modern formats like WebP or AVIF, and lazy load below-the-fold media.",
        reference_url="https://developer.chrome.com/docs/lighthouse/performance/total-byte-weight/",
    ),
    Rule(
        id="slow-requests",
        category="performance",
        title="Slow Network Requests",
        description="Several requests took longer than a second to complete.",
        fix_suggestion="Serve static assets from a CDN, enable caching headers, and investigate slow third-party origins.",
    ),
    Rule(
        id="failed-requests",
        category="performance",
        title="Failed Network Requests",
        description="Some resources requested by the page failed to load.",
        fix_suggestion="Fix or remove references to missing resources and check third-party availability.",
    ),
    Rule(
        id="heavy-network-payload",
        category="performance",
        title="Enormous Network Payload",
        description="The total network payload exceeds 5MB, which is slow and costly on mobile connections.",
        fix_suggestion="Defer offscreen images, remove unused code, and avoid auto-playing large media.",
        reference_url="https://developer.chrome.com/docs/lighthouse/performance/total-byte-weight/",
    ),
    Rule(
        id="render-blocking-resources",
        category="performance",
        title="Render-Blocking Resources",
        description="Scripts and stylesheets in the document head delay the first paint.",
        fix_suggestion="Add async or defer attributes to non-critical scripts, or move them to the end of the body. Inline critical CSS.",
        reference_url="https://developer.chrome.com/docs/lighthouse/performance/render-blocking-resources/",
    ),
]

# =============================================================================
# Accessibility Rules
# =============================================================================

ACCESSIBILITY_RULES = [
    Rule(
        id="accessibility-violation",
        category="accessibility",
        title="Accessibility Rule Violation",
        description="An element on the page fails a WCAG accessibility rule.",
        fix_suggestion="Review the failing elements and fix issues related to labels, alternative text, landmarks and document structure.",
        reference_url="https://www.w3.org/WAI/WCAG21/quickref/",
    ),
    Rule(
        id="aria-violation",
        category="accessibility",
        title="Invalid ARIA Usage",
        description="ARIA roles or attributes are missing, invalid, or used on the wrong elements.",
        fix_suggestion="Use native HTML elements where possible and make sure every ARIA role has its required attributes.",
        reference_url="https://www.w3.org/WAI/ARIA/apg/",
    ),
    Rule(
        id="low-color-contrast",
        category="accessibility",
        title="Insufficient Color Contrast",
        description="Text does not have enough contrast against its background to be read comfortably.",
        fix_suggestion="Raise the contrast ratio to at least 4.5:1 for normal text and 3:1 for large text.",
        reference_url="https://web.dev/color-and-contrast-accessibility/",
    ),
    Rule(
        id="keyboard-inaccessible",
        category="accessibility",
        title="Keyboard Navigation Problems",
        description="Some interactive content cannot be reached or operated with the keyboard alone.",
        fix_suggestion="Avoid positive tabindex values, make scrollable regions focusable, and do not nest interactive controls.",
        reference_url="https://web.dev/keyboard-access/",
    ),
]

# =============================================================================
# SEO Rules
# =============================================================================

SEO_RULES = [
    Rule(
        id="missing-title",
        category="seo",
        title="Missing Page Title",
        description="The document has no <title>, so search results and browser tabs have nothing to show.",
        fix_suggestion="Give the page its own <title> of roughly 50-60 characters that names what the page is about.",
    ),
    Rule(
        id="title-too-short",
        category="seo",
        title="Page Title Too Short",
        description="The title is under 30 characters and says little about the page.",
        fix_suggestion="Lengthen the title toward 50-60 characters with words that describe the page.",
    ),
    Rule(
        id="title-too-long",
        category="seo",
        title="Page Title Too Long",
        description="The title is over 60 characters and gets cut off in search results.",
        fix_suggestion="Cut the title down to about 60 characters so search results show it in full.",
    ),
    Rule(
        id="missing-meta-description",
        category="seo",
        title="Missing Meta Description",
        description="No meta description is set, so search engines pick their own snippet.",
        fix_suggestion="Write a 150-160 character meta description summarizing the page.",
    ),
    Rule(
        id="meta-description-too-short",
        category="seo",
        title="Meta Description Too Short",
        description="Your meta description is shorter than 120 characters and may not make a good search snippet.",
        fix_suggestion="Expand the meta description to 150-160 characters.",
    ),
    Rule(
        id="meta-description-too-long",
        category="seo",
        title="Meta Description Too Long",
        description="Your meta description exceeds 160 characters and may be truncated in search results.",
        fix_suggestion="Shorten the meta description to 150-160 characters.",
    ),
    Rule(
        id="missing-h1",
        category="seo",
        title="Missing H1 Heading",
        description="The page has no H1, leaving its main topic unstated.",
        fix_suggestion="Open the main content with one H1 naming the page topic.",
    ),
    Rule(
        id="multiple-h1",
        category="seo",
        title="Multiple H1 Headings",
        description="More than one H1 is present, which blurs the outline of the page.",
        fix_suggestion="Keep a single H1 for the page topic and move the other headings down to H2 or below.",
    ),
    Rule(
        id="short-h1",
        category="seo",
        title="H1 Heading Too Short",
        description="Your H1 heading is very short and may not describe the page topic.",
        fix_suggestion="Write an H1 that states the main topic of the page in a few descriptive words.",
    ),
    Rule(
        id="missing-canonical",
        category="seo",
        title="Missing Canonical URL",
        description="No canonical link is declared, so duplicate URLs of this page compete with each other.",
        fix_suggestion="Add <link rel=\"canonical\"> with the preferred URL of the page.",
    ),
    Rule(
        id="canonical-points-elsewhere",
        category="seo",
        title="Canonical URL Points Elsewhere",
        description="The canonical link names a different URL, so search engines will index that page instead.",
        fix_suggestion="Confirm that this page is meant to be a duplicate; otherwise point the canonical link at the page itself.",
        reference_url="https://developers.google.com/search/docs/crawling-indexing/consolidate-duplicate-urls",
    ),
    Rule(
        id="missing-alt-tags",
        category="seo",
        title="Images Missing Alt Attributes",
        description="Images without an alt attribute are invisible to screen readers and image search.",
        fix_suggestion="Give every meaningful image an alt text describing it, and use alt=\"\" for decorative ones.",
    ),
    Rule(
        id="empty-alt-tags",
        category="seo",
        title="Images With Empty Alt Text",
        description="Some images have an empty alt attribute, which hides them from screen readers and image search.",
        fix_suggestion="Keep empty alt only on purely decorative images and describe every meaningful image.",
    ),
    Rule(
        id="missing-open-graph",
        category="seo",
        title="Missing Open Graph Tags",
        description="Without Open Graph tags, shared links show no title, description or image.",
        fix_suggestion="Declare og:title, og:description, og:image and og:url so shared links render a preview.",
    ),
    Rule(
        id="incomplete-open-graph",
        category="seo",
        title="Incomplete Open Graph Tags",
        description="Some of the core Open Graph tags are missing.",
        fix_suggestion="Add the missing og:title, og:description, og:image, or og:url meta tags.",
        reference_url="https://ogp.me/",
    ),
    Rule(
        id="missing-structured-data",
        category="seo",
        title="No Structured Data Found",
        description="No JSON-LD structured data was found, so the page is not eligible for rich results.",
        fix_suggestion="Describe the page with schema.org types in a JSON-LD script block.",
        reference_url="https://developers.google.com/search/docs/appearance/structured-data/intro-structured-data",
    ),
    Rule(
        id="page-noindex",
        category="seo",
        title="Page Blocked From Indexing",
        description="A robots meta tag or X-Robots-Tag header tells search engines not to index this page.",
        fix_suggestion="Remove noindex from the robots meta tag and X-Robots-Tag header if the page should appear in search.",
    ),
    Rule(
        id="page-nofollow",
        category="seo",
        title="Links Not Followed",
        description="A robots directive tells search engines not to follow links on this page.",
        fix_suggestion="Remove nofollow from the robots directives unless you intend to hide all linked pages.",
    ),
    Rule(
        id="missing-robots-txt",
        category="seo",
        title="Missing robots.txt",
        description="No robots.txt file was found at the site root.",
        fix_suggestion="Add a /robots.txt that lists crawl rules and points to your sitemap.",
        reference_url="https://developers.google.com/search/docs/crawling-indexing/robots/intro",
    ),
    Rule(
        id="robots-blocks-all",
        category="seo",
        title="robots.txt Blocks All Crawlers",
        description="robots.txt disallows the whole site for every user agent.",
        fix_suggestion="Replace 'Disallow: /' with rules that only block private paths.",
        reference_url="https://developers.google.com/search/docs/crawling-indexing/robots/create-robots-txt",
    ),
    Rule(
        id="missing-sitemap",
        category="seo",
        title="Missing XML Sitemap",
        description="No XML sitemap was declared in robots.txt or found at /sitemap.xml.",
        fix_suggestion="Generate an XML sitemap and reference it from robots.txt with a Sitemap: line.",
        reference_url="https://developers.google.com/search/docs/crawling-indexing/sitemaps/overview",
    ),
    Rule(
        id="empty-sitemap",
        category="seo",
        title="Empty XML Sitemap",
        description="The sitemap was found but lists no URLs.",
        fix_suggestion="Make sure your sitemap generator includes your public pages.",
    ),
    Rule(
        id="mobile-viewport-missing",
        category="seo",
        title="No Viewport Meta Tag",
        description="Mobile browsers render the page at desktop width and scale it down, which search engines treat as not mobile-friendly.",
        fix_suggestion="Add <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\"> to the document head.",
        reference_url="https://developers.google.com/search/docs/crawling-indexing/mobile/mobile-sites-mobile-first-indexing",
    ),
    Rule(
        id="mobile-viewport-not-responsive",
        category="seo",
        title="Viewport Not Set To Device Width",
        description="The viewport meta tag does not contain width=device-width, so the layout does not adapt to the screen.",
        fix_suggestion="Use width=device-width in the viewport content and size the layout with relative units.",
    ),
    Rule(
        id="mobile-zoom-disabled",
        category="seo",
        title="Zooming Disabled",
        description="The viewport sets user-scalable=no or maximum-scale=1, so visitors cannot zoom in to read.",
        fix_suggestion="Remove user-scalable=no and maximum-scale from the viewport meta tag.",
        reference_url="https://dequeuniversity.com/rules/axe/4.8/meta-viewport",
    ),
    Rule(
        id="small-tap-targets",
        category="seo",
        title="Tap Targets Too Small",
        description="Links and buttons smaller than 44x44 px are hard to hit on touch screens.",
        fix_suggestion="Give interactive elements a min-width and min-height of 44px, using padding if needed, and space them apart.",
        reference_url="https://web.dev/articles/accessible-tap-targets",
    ),
    Rule(
        id="small-text",
        category="seo",
        title="Text Too Small On Mobile",
        description="A large share of the visible text is set below 16px, which is hard to read without zooming.",
        fix_suggestion="Use a base font size of at least 16px for body text.",
        reference_url="https://developer.chrome.com/docs/lighthouse/seo/font-size/",
    ),
    Rule(
        id="horizontal-scroll",
        category="seo",
        title="Content Wider Than The Screen",
        description="The page is wider than the viewport, so mobile visitors have to scroll sideways.",
        fix_suggestion="Find elements with fixed widths and switch them to flexible layouts with max-width: 100%.",
    ),
    Rule(
        id="plugin-content",
        category="seo",
        title="Plugin Content",
        description="The page embeds <object>, <embed> or <applet> content that mobile browsers do not run.",
        fix_suggestion="Replace plugin content with native HTML5 video, audio or canvas.",
        reference_url="https://developer.chrome.com/docs/lighthouse/seo/plugins/",
    ),
    Rule(
        id="non-responsive-images",
        category="seo",
        title="Images Without Responsive Sizing",
        description="Most images have no srcset or sizes attribute and no fluid width.",
        fix_suggestion="Provide srcset and sizes for content images, or style them with max-width: 100%.",
        reference_url="https://developer.mozilla.org/en-US/docs/Learn/HTML/Multimedia_and_embedding/Responsive_images",
    ),
    Rule(
        id="generic-input-types",
        category="seo",
        title="Inputs Without Mobile Keyboard Types",
        description="Email, phone or number fields use a generic input type, so mobile devices show the default keyboard.",
        fix_suggestion="Use type=\"email\", type=\"tel\" or type=\"number\" on the matching fields.",
    ),
]

# =============================================================================
# Best Practices Rules
# =============================================================================

BEST_PRACTICES_RULES = [
    Rule(
        id="no-https",
        category="best_practices",
        title="Site Not Using HTTPS",
        description="The page is served over plain HTTP, so traffic can be read or altered in transit.",
        fix_suggestion="Serve the site over HTTPS with a valid certificate and redirect plain HTTP requests to it.",
        reference_url="https://web.dev/why-https-matters/",
    ),
    Rule(
        id="missing-hsts",
        category="best_practices",
        title="Missing HSTS Header",
        description="Strict-Transport-Security is not sent, so browsers may still try plain HTTP first.",
        fix_suggestion="Send Strict-Transport-Security: max-age=31536000; includeSubDomains once HTTPS works everywhere.",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Strict-Transport-Security",
    ),
    Rule(
        id="weak-hsts",
        category="best_practices",
        title="Weak HSTS Policy",
        description="The HSTS header has no max-age or a max-age shorter than one year.",
        fix_suggestion="Set max-age to at least 31536000 and add includeSubDomains once all subdomains serve HTTPS.",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Strict-Transport-Security",
    ),
    Rule(
        id="missing-csp",
        category="best_practices",
        title="Missing Content Security Policy",
        description="No Content-Security-Policy header limits where scripts may load from.",
        fix_suggestion="Send a Content-Security-Policy header listing the origins allowed to serve scripts, styles and frames.",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/HTTP/CSP",
    ),
    Rule(
        id="weak-csp",
        category="best_practices",
        title="Permissive Content Security Policy",
        description="The policy allows inline or eval'd scripts, which defeats most of its XSS protection.",
        fix_suggestion="Remove 'unsafe-inline' and 'unsafe-eval' from script-src and use nonces or hashes instead.",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/HTTP/CSP",
    ),
    Rule(
        id="missing-x-frame-options",
        category="best_practices",
        title="Missing X-Frame-Options Header",
        description="X-Frame-Options is not sent, so other sites can frame this page.",
        fix_suggestion="Send X-Frame-Options: DENY, or SAMEORIGIN if the site frames its own pages.",
    ),
    Rule(
        id="missing-x-content-type-options",
        category="best_practices",
        title="Missing X-Content-Type-Options Header",
        description="X-Content-Type-Options is not sent, so browsers may guess content types.",
        fix_suggestion="Send X-Content-Type-Options: nosniff on every response.",
    ),
    Rule(
        id="missing-referrer-policy",
        category="best_practices",
        title="Missing Referrer-Policy Header",
        description="Without a Referrer-Policy the full URL may leak to third-party sites.",
        fix_suggestion="Add the header: Referrer-Policy: strict-origin-when-cross-origin",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Referrer-Policy",
    ),
    Rule(
        id="missing-permissions-policy",
        category="best_practices",
        title="Missing Permissions-Policy Header",
        description="The site does not restrict which browser features embedded content may use.",
        fix_suggestion="Add a Permissions-Policy header that disables features you do not use, such as camera=() and geolocation=().",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/HTTP/Headers/Permissions-Policy",
    ),
    Rule(
        id="server-version-disclosed",
        category="best_practices",
        title="Server Version Disclosed",
        description="The Server header reveals the software version running on the host.",
        fix_suggestion="Strip the version number from the Server header in your web server configuration.",
    ),
    Rule(
        id="x-powered-by-disclosed",
        category="best_practices",
        title="Technology Disclosed by X-Powered-By",
        description="The X-Powered-By header reveals the framework behind your site.",
        fix_suggestion="Disable the X-Powered-By header in your framework or reverse proxy.",
    ),
    Rule(
        id="aspnet-version-disclosed",
        category="best_practices",
        title="ASP.NET Version Disclosed",
        description="The X-AspNet-Version header reveals the exact runtime version.",
        fix_suggestion="Set enableVersionHeader=\"false\" on httpRuntime in web.config.",
    ),
    Rule(
        id="missing-doctype",
        category="best_practices",
        title="Missing Doctype",
        description="Without <!DOCTYPE html> the browser renders the page in quirks mode.",
        fix_suggestion="Start the document with <!DOCTYPE html>.",
        reference_url="https://developer.chrome.com/docs/lighthouse/best-practices/doctype/",
    ),
    Rule(
        id="missing-lang",
        category="best_practices",
        title="Missing Document Language",
        description="The <html> element has no lang attribute, so screen readers may use the wrong pronunciation.",
        fix_suggestion="Add a lang attribute such as <html lang=\"en\">.",
    ),
    Rule(
        id="missing-charset",
        category="best_practices",
        title="Missing Character Encoding",
        description="The page does not declare its character encoding.",
        fix_suggestion="Add <meta charset=\"utf-8\"> as the first element of <head>.",
        reference_url="https://developer.chrome.com/docs/lighthouse/best-practices/charset/",
    ),
    Rule(
        id="deprecated-html",
        category="best_practices",
        title="Deprecated HTML Elements",
        description="The page uses elements removed from the HTML standard.",
        fix_suggestion="Replace presentational elements like <font> and <center> with CSS.",
    ),
    Rule(
        id="duplicate-ids",
        category="best_practices",
        title="Duplicate Element IDs",
        description="Several elements share the same id, which breaks label associations and scripts.",
        fix_suggestion="Give every element a unique id.",
    ),
    Rule(
        id="mixed-content",
        category="best_practices",
        title="Mixed Content",
        description="An HTTPS page loads some resources over plain HTTP.",
        fix_suggestion="Load every resource over HTTPS, or add the upgrade-insecure-requests CSP directive.",
        reference_url="https://web.dev/what-is-mixed-content/",
    ),
    Rule(
        id="console-errors",
        category="best_practices",
        title="Browser Console Errors",
        description="Errors logged to the console usually point to broken scripts or failed requests.",
        fix_suggestion="Open the browser console, reproduce the errors and fix their causes.",
        reference_url="https://developer.chrome.com/docs/lighthouse/best-practices/errors-in-console/",
    ),
]

# =============================================================================
# PWA Rules
# =============================================================================

PWA_RULES = [
    Rule(
        id="missing-manifest",
        category="pwa",
        title="Missing Web App Manifest",
        description="The page does not link a web app manifest, so it cannot be installed.",
        fix_suggestion="Add <link rel=\"manifest\" href=\"/manifest.json\"> with name, start_url, display and icons.",
        reference_url="https://web.dev/add-manifest/",
    ),
    Rule(
        id="invalid-manifest",
        category="pwa",
        title="Invalid Web App Manifest",
        description="The manifest could not be parsed or lacks required members.",
        fix_suggestion="Validate the manifest JSON and add the missing members.",
        reference_url="https://developer.mozilla.org/en-US/docs/Web/Manifest",
    ),
    Rule(
        id="missing-service-worker",
        category="pwa",
        title="No Service Worker",
        description="No service worker controls the page, so it cannot work offline or be installed.",
        fix_suggestion="Register a service worker that caches the app shell.",
        reference_url="https://web.dev/service-worker-lifecycle/",
    ),
    Rule(
        id="not-installable",
        category="pwa",
        title="Not Installable",
        description="The page does not meet all the browser's installability criteria.",
        fix_suggestion="Serve over HTTPS and provide a manifest with name, start_url, a standalone display mode and 192px and 512px icons.",
        reference_url="https://web.dev/install-criteria/",
    ),
    Rule(
        id="slow-pwa-loading",
        category="pwa",
        title="Slow Loading for an App",
        description="The page paints or finishes loading too slowly to feel like an installed app.",
        fix_suggestion="Precache the app shell with the service worker and trim the critical rendering path.",
    ),
    Rule(
        id="missing-viewport",
        category="pwa",
        title="Missing Responsive Viewport",
        description="Without a width=device-width viewport the page is not optimized for mobile screens.",
        fix_suggestion="Add <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">.",
        reference_url="https://developer.chrome.com/docs/lighthouse/pwa/viewport/",
    ),
]

# =============================================================================
# All Rules Combined
# =============================================================================

ALL_RULES = (
    PERFORMANCE_RULES
    + ACCESSIBILITY_RULES
    + SEO_RULES
    + BEST_PRACTICES_RULES
    + PWA_RULES
)

RULES_BY_CODE = {rule.id: rule for rule in ALL_RULES}
