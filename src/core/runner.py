"""One complete audit: navigate, analyze, score, format and save."""

import logging
from dataclasses import dataclass
from pathlib import Path

from analyzers import BaseAnalyzer, default_analyzers
from core.context import RunContext
from core.errors import PersistenceError
from core.options import AuditOptions
from core.orchestrator import AuditOrchestrator
from drivers.base import PageDriver
from drivers.browser import PlaywrightDriver
from drivers.fetcher import HttpFetcher
from reporting.formatter import ReportFormatter
from scoring.aggregator import Aggregator, AuditScores

logger = logging.getLogger(__name__)


@dataclass
class AuditOutcome:
    """
    Result of a run that got past navigation.

    ``persistence_error`` is set when the report was produced but could not
    be written to ``options.output_path``.
    """

    report: dict
    scores: AuditScores
    context: RunContext
    saved_path: Path | None = None
    persistence_error: PersistenceError | None = None

    @property
    def saved(self) -> bool:
        return self.saved_path is not None


async def run_audit(
    options: AuditOptions,
    driver: PageDriver | None = None,
    fetcher: HttpFetcher | None = None,
    analyzers: list[BaseAnalyzer] | None = None,
) -> AuditOutcome:
    """
    Audit ``options.url`` end to end.

    Drivers and fetchers passed in are left open for the caller; ones
    created here are closed before returning.

    Raises:
        NavigationError: if the page could not be loaded
        ValueError: if the options name an unknown budget or an invalid threshold
    """
    budget = options.resolve_budget()
    orchestrator = AuditOrchestrator(analyzers if analyzers is not None else default_analyzers(options))

    owns_driver = driver is None
    owns_fetcher = fetcher is None
    if owns_driver:
        driver = PlaywrightDriver()
    if owns_fetcher:
        fetcher = HttpFetcher()

    ctx = RunContext(options.url, fetcher=fetcher, budget=budget, options=options)
    try:
        await orchestrator.run(ctx, driver)
    finally:
        if owns_driver:
            await driver.close()
        if owns_fetcher:
            await fetcher.close()

    scores = Aggregator().aggregate(ctx)
    formatter = ReportFormatter()
    report = formatter.format(ctx, scores, analyzers=orchestrator.order)
    outcome = AuditOutcome(report=report, scores=scores, context=ctx)

    if options.output_path:
        try:
            outcome.saved_path = formatter.write(report, options.output_path)
        except PersistenceError as e:
            logger.error(f"Audit of {options.url} finished but the report was not saved: {e}")
            outcome.persistence_error = e

    logger.info(
        f"Audit of {options.url} complete: {scores.overall_score} ({scores.overall_grade})"
    )
    return outcome
