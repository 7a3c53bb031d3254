"""Navigation and paint timing collection."""

import logging

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.errors import AnalyzerError
from core.results import PerformanceResult

logger = logging.getLogger(__name__)

# LCP and layout-shift entries are only exposed to observers, so the
# script waits briefly for buffered entries before resolving.
TIMING_SCRIPT = """
() => new Promise((resolve) => {
  const nav = performance.getEntriesByType('navigation')[0] || {};
  const paint = (name) => {
    const entry = performance.getEntriesByName(name)[0];
    return entry ? entry.startTime : null;
  };
  let lcp = null;
  let cls = 0;
  let clsSupported = true;
  try {
    new PerformanceObserver((list) => {
      const entries = list.getEntries();
      if (entries.length) lcp = entries[entries.length - 1].startTime;
    }).observe({type: 'largest-contentful-paint', buffered: true});
  } catch (e) {}
  try {
    new PerformanceObserver((list) => {
      for (const entry of list.getEntries()) {
        if (!entry.hadRecentInput) cls += entry.value;
      }
    }).observe({type: 'layout-shift', buffered: true});
  } catch (e) {
    clsSupported = false;
  }
  setTimeout(() => resolve({
    ttfb: nav.responseStart || null,
    fcp: paint('first-contentful-paint'),
    lcp: lcp,
    cls: clsSupported ? cls : null,
    firstPaint: paint('first-paint'),
    dcl: nav.domContentLoadedEventEnd || null,
    loadEnd: nav.loadEventEnd || null,
    redirect: nav.redirectEnd ? nav.redirectEnd - nav.redirectStart : 0,
    dns: nav.domainLookupEnd ? nav.domainLookupEnd - nav.domainLookupStart : 0,
    connect: nav.connectEnd ? nav.connectEnd - nav.connectStart : 0,
  }), 250);
})
"""


def _ms(value) -> float | None:
    if value is None:
        return None
    return round(float(value), 1)


class PerformanceAnalyzer(BaseAnalyzer):
    """
    Reads Core Web Vitals and navigation timings from the loaded page.

    Metrics the browser does not report stay ``None``; scoring decides how
    to treat them.
    """

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.PERFORMANCE})

    @property
    def name(self) -> str:
        return "performance"

    async def run(self, ctx) -> None:
        data = await ctx.page.evaluate(TIMING_SCRIPT)
        if not isinstance(data, dict):
            raise AnalyzerError(f"Unexpected timing data from page: {data!r}")

        result = PerformanceResult(
            ttfb_ms=_ms(data.get("ttfb")),
            fcp_ms=_ms(data.get("fcp")),
            lcp_ms=_ms(data.get("lcp")),
            cls=round(float(data["cls"]), 4) if data.get("cls") is not None else None,
            first_paint_ms=_ms(data.get("firstPaint")),
            dom_content_loaded_ms=_ms(data.get("dcl")),
            load_event_ms=_ms(data.get("loadEnd")),
            redirect_ms=_ms(data.get("redirect")) or 0.0,
            dns_ms=_ms(data.get("dns")) or 0.0,
            connect_ms=_ms(data.get("connect")) or 0.0,
            budget=ctx.budget.name,
        )

        logger.info(
            f"Timings for {ctx.url}: ttfb={result.ttfb_ms} fcp={result.fcp_ms} "
            f"lcp={result.lcp_ms} cls={result.cls}"
        )
        ctx.set(slots.PERFORMANCE, result)
