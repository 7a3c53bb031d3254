"""Runs registered analyzers against one page and one run context."""

import asyncio
import heapq
import logging
import time
from typing import Iterable

from analyzers.base import AnalyzerKind, BaseAnalyzer
from config import settings
from core.context import RunContext
from core.errors import AnalyzerContractError, AnalyzerGraphError
from drivers.base import PageDriver

logger = logging.getLogger(__name__)


def resolve_order(analyzers: Iterable[BaseAnalyzer]) -> list[BaseAnalyzer]:
    """
    Validate the analyzer graph and return the analyzers in run order.

    Every declared read must be written by another registered analyzer,
    each slot has exactly one writer and analyzer names are unique. The
    order is a topological sort in which ties keep registration order.

    Raises:
        AnalyzerGraphError: if any of the above does not hold or the
            declared reads form a cycle
    """
    analyzers = list(analyzers)

    names: set[str] = set()
    writers: dict[str, int] = {}
    for index, analyzer in enumerate(analyzers):
        if analyzer.name in names:
            raise AnalyzerGraphError(f"Duplicate analyzer name '{analyzer.name}'")
        names.add(analyzer.name)

        for slot in analyzer.writes:
            if slot.name in writers:
                other = analyzers[writers[slot.name]].name
                raise AnalyzerGraphError(
                    f"Slot '{slot.name}' is written by both '{other}' and '{analyzer.name}'"
                )
            writers[slot.name] = index

    dependents: dict[int, list[int]] = {i: [] for i in range(len(analyzers))}
    indegree = [0] * len(analyzers)
    for index, analyzer in enumerate(analyzers):
        producers = set()
        for slot in analyzer.reads:
            producer = writers.get(slot.name)
            if producer is None or producer == index:
                raise AnalyzerGraphError(
                    f"Analyzer '{analyzer.name}' reads '{slot.name}' "
                    "but no other registered analyzer writes it"
                )
            producers.add(producer)
        for producer in producers:
            dependents[producer].append(index)
        indegree[index] = len(producers)

    ready = [i for i, degree in enumerate(indegree) if degree == 0]
    heapq.heapify(ready)
    order = []
    while ready:
        index = heapq.heappop(ready)
        order.append(analyzers[index])
        for dependent in dependents[index]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) != len(analyzers):
        stuck = [a.name for i, a in enumerate(analyzers) if indegree[i] > 0]
        raise AnalyzerGraphError(f"Dependency cycle between analyzers: {', '.join(stuck)}")

    return order


class AuditOrchestrator:
    """
    Executes analyzers for one audit run.

    Page-bound analyzers share the single page and run one at a time in
    resolved order. Network analyzers run as concurrent tasks next to them,
    each starting once the analyzers it depends on have finished and each
    bounded by its own timeout. Any analyzer failure is recorded on the
    context and the run carries on; only navigation failure aborts it.

    Usage:
        orchestrator = AuditOrchestrator(default_analyzers(options))
        await orchestrator.run(ctx, driver)
    """

    def __init__(
        self,
        analyzers: Iterable[BaseAnalyzer],
        request_timeout: float | None = None,
        page_timeout: float | None = None,
        debug: bool | None = None,
    ):
        self.order = resolve_order(analyzers)
        self.request_timeout = request_timeout or settings.fetch_timeout
        self.page_timeout = page_timeout or settings.page_analyzer_timeout
        self.debug = settings.debug if debug is None else debug

        self._producers: dict[str, str] = {
            slot.name: analyzer.name for analyzer in self.order for slot in analyzer.writes
        }

    @property
    def analyzer_names(self) -> list[str]:
        return [analyzer.name for analyzer in self.order]

    def dependencies(self, analyzer: BaseAnalyzer) -> list[str]:
        """Names of the analyzers whose slots ``analyzer`` reads."""
        return sorted({self._producers[slot.name] for slot in analyzer.reads})

    async def run(self, ctx: RunContext, driver: PageDriver) -> RunContext:
        """
        Navigate to the context URL and run every analyzer.

        Raises:
            NavigationError: if the page could not be loaded; no analyzer runs
        """
        logger.info(f"Starting audit of {ctx.url} with {len(self.order)} analyzers")

        ctx.page = await driver.navigate(ctx.url)

        done = {analyzer.name: asyncio.Event() for analyzer in self.order}
        page_bound = [a for a in self.order if a.kind == AnalyzerKind.PAGE]
        network = [a for a in self.order if a.kind == AnalyzerKind.NETWORK]

        tasks = [asyncio.create_task(self._run_page_bound(ctx, page_bound, done))]
        tasks += [
            asyncio.create_task(self._run_network(ctx, analyzer, done)) for analyzer in network
        ]

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        finally:
            ctx.finish()

        logger.info(
            f"Audit of {ctx.url} finished: {len(ctx.snapshot())} results, "
            f"{len(ctx.errors)} analyzer errors"
        )
        return ctx

    def time_limit(self, analyzer: BaseAnalyzer) -> float:
        """
        Seconds ``analyzer`` may run before it is cancelled.

        Network analyzers get one request timeout per sequential request
        plus one spare, so a single slow request times out inside the
        analyzer and leaves it time for its fallbacks.
        """
        if analyzer.timeout:
            return analyzer.timeout
        if analyzer.kind == AnalyzerKind.NETWORK:
            return self.request_timeout * (analyzer.max_requests + 1)
        return self.page_timeout

    async def _wait_for_dependencies(self, analyzer: BaseAnalyzer, done: dict) -> None:
        for name in self.dependencies(analyzer):
            await done[name].wait()

    async def _run_page_bound(self, ctx: RunContext, analyzers: list, done: dict) -> None:
        for analyzer in analyzers:
            await self._wait_for_dependencies(analyzer, done)
            await self._invoke(ctx, analyzer, self.time_limit(analyzer), done)

    async def _run_network(self, ctx: RunContext, analyzer: BaseAnalyzer, done: dict) -> None:
        await self._wait_for_dependencies(analyzer, done)
        await self._invoke(ctx, analyzer, self.time_limit(analyzer), done)

    async def _invoke(
        self, ctx: RunContext, analyzer: BaseAnalyzer, timeout: float, done: dict
    ) -> None:
        name = analyzer.name
        started = time.perf_counter()
        logger.debug(f"Running analyzer {name}")

        try:
            await asyncio.wait_for(analyzer.run(ctx.scoped(analyzer)), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Analyzer {name} timed out after {timeout:g}s")
            ctx.record_error(name, f"timed out after {timeout:g}s")
        except AnalyzerContractError as e:
            logger.exception(f"Analyzer {name} broke its slot contract: {e}")
            ctx.record_error(name, str(e))
            if self.debug:
                raise
        except Exception as e:
            logger.exception(f"Analyzer {name} failed: {e}")
            ctx.record_error(name, str(e) or type(e).__name__)
        finally:
            ctx.record_timing(name, (time.perf_counter() - started) * 1000)
            done[name].set()
