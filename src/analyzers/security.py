"""Security header audit engine."""

import logging
import re
from urllib.parse import urlparse

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.errors import FetchError
from core.results import SecurityResult, Vulnerability

logger = logging.getLogger(__name__)


def parse_hsts_max_age(value: str) -> int | None:
    match = re.search(r"max-age\s*=\s*\"?(\d+)", value, re.IGNORECASE)
    return int(match.group(1)) if match else None


def parse_csp(value: str) -> dict[str, list[str]]:
    """Split a Content-Security-Policy value into directive -> sources."""
    directives = {}
    for part in value.split(";"):
        tokens = part.split()
        if tokens:
            directives[tokens[0].lower()] = tokens[1:]
    return directives


class SecurityHeadersAnalyzer(BaseAnalyzer):
    """
    Analyzes the security posture advertised by the page's response headers.

    Checks:
    - HTTPS
    - Security headers (CSP, HSTS, X-Frame-Options, etc.)
    - Server information disclosure
    """

    kind = AnalyzerKind.NETWORK
    writes = frozenset({slots.SECURITY})
    max_requests = 2  # HEAD, then GET

    # Security headers and their importance
    SECURITY_HEADERS = {
        "strict-transport-security": {
            "name": "HSTS",
            "severity": "high",
            "description": "Enforces HTTPS connections",
        },
        "content-security-policy": {
            "name": "CSP",
            "severity": "high",
            "description": "Prevents XSS and injection attacks",
        },
        "x-frame-options": {
            "name": "X-Frame-Options",
            "severity": "medium",
            "description": "Prevents clickjacking attacks",
        },
        "x-content-type-options": {
            "name": "X-Content-Type-Options",
            "severity": "medium",
            "description": "Prevents MIME type sniffing",
        },
        "referrer-policy": {
            "name": "Referrer-Policy",
            "severity": "medium",
            "description": "Controls referrer information",
        },
        "permissions-policy": {
            "name": "Permissions-Policy",
            "severity": "medium",
            "description": "Controls browser features access",
        },
    }

    @property
    def name(self) -> str:
        return "security_headers"

    async def run(self, ctx) -> None:
        url = ctx.url
        is_https = urlparse(url).scheme == "https"

        try:
            response = await self._fetch_headers(ctx.fetcher, url)
        except FetchError as e:
            ctx.set(slots.SECURITY, SecurityResult(checked=False, https=is_https, error=str(e)))
            return

        # Redirects may land on a different scheme
        is_https = response.url.scheme == "https"
        headers = {k.lower(): v for k, v in response.headers.items()}

        result = self.evaluate_headers(headers, is_https)
        result.status_code = response.status_code

        logger.info(
            f"{url}: {len(result.present)} security headers present, "
            f"{len(result.vulnerabilities)} vulnerabilities"
        )
        ctx.set(slots.SECURITY, result)

    async def _fetch_headers(self, fetcher, url: str):
        """HEAD the page, falling back to GET for servers that refuse HEAD."""
        try:
            response = await fetcher.head(url)
            if response.status_code not in (405, 501):
                return response
        except FetchError as e:
            logger.debug(f"HEAD {url} failed, retrying with GET: {e}")
        return await fetcher.get(url)

    def evaluate_headers(self, headers: dict[str, str], is_https: bool) -> SecurityResult:
        """Build the security result from lowercased response headers."""
        present = []
        missing = []
        found = {}

        for header_key, header_info in self.SECURITY_HEADERS.items():
            if header_key in headers:
                present.append(header_info["name"])
                found[header_key] = headers[header_key]
            else:
                missing.append(header_info["name"])

        hsts = found.get("strict-transport-security")
        csp = found.get("content-security-policy")

        result = SecurityResult(
            checked=True,
            https=is_https,
            headers=found,
            present=present,
            missing=missing,
            hsts_max_age=parse_hsts_max_age(hsts) if hsts else None,
            csp_directives=parse_csp(csp) if csp else {},
            server_header=headers.get("server"),
            x_powered_by=headers.get("x-powered-by"),
            aspnet_version=headers.get("x-aspnet-version"),
        )
        result.vulnerabilities = self._identify_vulnerabilities(result)
        return result

    def _identify_vulnerabilities(self, result: SecurityResult) -> list[Vulnerability]:
        vulnerabilities = []

        if "content-security-policy" not in result.headers:
            vulnerabilities.append(
                Vulnerability(
                    severity="critical",
                    type="Missing CSP",
                    description="No Content Security Policy header found",
                )
            )
        if not result.https:
            vulnerabilities.append(
                Vulnerability(
                    severity="critical",
                    type="No HTTPS",
                    description="Site is not served over HTTPS",
                )
            )
        if "strict-transport-security" not in result.headers:
            vulnerabilities.append(
                Vulnerability(
                    severity="high",
                    type="Missing HSTS",
                    description="No Strict-Transport-Security header",
                )
            )
        if "x-frame-options" not in result.headers and "frame-ancestors" not in result.csp_directives:
            vulnerabilities.append(
                Vulnerability(
                    severity="high",
                    type="Clickjacking",
                    description="No X-Frame-Options header or frame-ancestors directive",
                )
            )
        if "x-content-type-options" not in result.headers:
            vulnerabilities.append(
                Vulnerability(
                    severity="medium",
                    type="MIME Sniffing",
                    description="No X-Content-Type-Options header",
                )
            )
        if result.server_header and re.search(r"\d+\.\d+", result.server_header):
            vulnerabilities.append(
                Vulnerability(
                    severity="low",
                    type="Information Disclosure",
                    description="Server header discloses version information",
                )
            )

        return vulnerabilities
