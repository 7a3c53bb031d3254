"""Projects a finished run into the external JSON report."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from analyzers.base import BaseAnalyzer
from core.context import RunContext
from core.errors import PersistenceError
from scoring.aggregator import AuditScores, CategoryScore

logger = logging.getLogger(__name__)

# Bump on any change to field names or nesting.
REPORT_VERSION = "2.1.0"

# Navigation response headers copied into the page section
REPORTED_HEADERS = [
    "content-type",
    "content-length",
    "content-encoding",
    "cache-control",
    "expires",
    "etag",
    "last-modified",
    "server",
    "x-powered-by",
    "vary",
]


class ReportFormatter:
    """
    Renders aggregated scores and raw analyzer results as one document.

    The formatter never scores anything itself; every number it emits was
    computed by the aggregator or recorded by an analyzer.

    Usage:
        formatter = ReportFormatter()
        report = formatter.format(ctx, scores, analyzers=orchestrator.order)
        formatter.write(report, "reports/example.json")
    """

    def format(
        self,
        ctx: RunContext,
        scores: AuditScores,
        analyzers: Iterable[BaseAnalyzer] | None = None,
        timestamp: datetime | None = None,
    ) -> dict:
        timestamp = timestamp or ctx.finished_at or datetime.now(timezone.utc)

        return {
            "version": REPORT_VERSION,
            "timestamp": timestamp.isoformat(),
            "url": ctx.url,
            "overall": {
                "score": scores.overall_score,
                "grade": scores.overall_grade,
                "missing_metrics": scores.missing_metrics,
            },
            "categories": {
                name: self._category(category) for name, category in scores.categories.items()
            },
            "audits": self._audits(ctx, analyzers),
            "page": self._page(ctx),
            "budget": ctx.budget.to_dict(),
            "timing": {
                "started_at": ctx.started_at.isoformat(),
                "finished_at": ctx.finished_at.isoformat() if ctx.finished_at else None,
                "analyzers_ms": dict(ctx.timings),
            },
        }

    def to_json(self, report: dict) -> str:
        return json.dumps(report, indent=2, ensure_ascii=False)

    def write(self, report: dict, path: str | Path) -> Path:
        """
        Persist the report as JSON.

        Raises:
            PersistenceError: if the file could not be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.to_json(report), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(str(path), e.strerror or str(e)) from e

        logger.info(f"Report for {report.get('url')} written to {path}")
        return path

    def _category(self, category: CategoryScore) -> dict:
        return {
            "score": category.score,
            "grade": category.grade,
            "weight": category.weight,
            "issues": [issue.to_dict() for issue in category.issues],
            "recommendations": [rec.to_dict() for rec in category.recommendations],
            "metric_scores": dict(category.metric_scores),
            "missing_metrics": list(category.missing_metrics),
            **category.extras,
        }

    def _audits(self, ctx: RunContext, analyzers: Iterable[BaseAnalyzer] | None) -> dict:
        results = ctx.snapshot()

        if analyzers is None:
            audits = {name: value.model_dump(mode="json") for name, value in results.items()}
            for name, message in ctx.errors.items():
                audits[name] = {"error": message}
            return audits

        audits = {}
        for analyzer in analyzers:
            if analyzer.name in ctx.errors:
                audits[analyzer.name] = {"error": ctx.errors[analyzer.name]}
                continue

            written = [slot for slot in analyzer.writes if slot.name in results]
            if len(written) == 1:
                audits[analyzer.name] = results[written[0].name].model_dump(mode="json")
            else:
                audits[analyzer.name] = {
                    slot.name: results[slot.name].model_dump(mode="json")
                    for slot in sorted(written, key=lambda s: s.name)
                }
        return audits

    def _page(self, ctx: RunContext) -> dict:
        page = ctx.page
        if page is None:
            return {
                "final_url": None,
                "status_code": None,
                "redirect_count": 0,
                "redirect_chain": [],
                "response_time_ms": None,
                "headers": {},
            }
        return {
            "final_url": page.final_url,
            "status_code": page.status_code,
            "redirect_count": len(page.redirect_chain),
            "redirect_chain": list(page.redirect_chain),
            "response_time_ms": page.response_time_ms,
            "headers": {name: page.headers[name] for name in REPORTED_HEADERS if name in page.headers},
        }
