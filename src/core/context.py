"""Per-run shared state that analyzers read from and write to."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from core.budgets import DEFAULT_BUDGET, PerformanceBudget
from core.errors import DuplicateSlotError, UndeclaredSlotError
from core.slots import Slot

if TYPE_CHECKING:
    from analyzers.base import BaseAnalyzer
    from drivers.base import PageHandle
    from drivers.fetcher import HttpFetcher

T = TypeVar("T", bound=BaseModel)


class RunContext:
    """
    Shared state container for one audit run.

    Holds the target URL, the driven page, the out-of-band fetcher and one
    slot per analyzer result. A slot is written at most once; reading an
    absent slot returns ``None`` and never raises.

    A context is created for one run, mutated only while the orchestrator
    runs and then handed read-only to the aggregator and the formatter.
    """

    def __init__(
        self,
        url: str,
        page: "PageHandle | None" = None,
        fetcher: "HttpFetcher | None" = None,
        budget: PerformanceBudget = DEFAULT_BUDGET,
        options: Any = None,
    ):
        self.url = url
        self.page = page
        self.fetcher = fetcher
        self.budget = budget
        self.options = options
        self.errors: dict[str, str] = {}
        self.timings: dict[str, float] = {}
        self.started_at = datetime.now(timezone.utc)
        self.finished_at: datetime | None = None
        self._slots: dict[str, BaseModel] = {}

    def set(self, slot: Slot[T], value: T) -> None:
        """Write an analyzer result. A second write to the same slot fails."""
        if not isinstance(value, slot.model):
            raise TypeError(
                f"Slot '{slot.name}' holds {slot.model.__name__}, got {type(value).__name__}"
            )
        if slot.name in self._slots:
            raise DuplicateSlotError(slot.name)
        self._slots[slot.name] = value

    def get(self, slot: Slot[T]) -> T | None:
        """Return the slot value, or None when the slot was never written."""
        return self._slots.get(slot.name)  # type: ignore[return-value]

    def has(self, slot: Slot) -> bool:
        return slot.name in self._slots

    def record_error(self, analyzer_name: str, message: str) -> None:
        self.errors[analyzer_name] = message

    def record_timing(self, analyzer_name: str, duration_ms: float) -> None:
        self.timings[analyzer_name] = round(duration_ms, 1)

    def finish(self) -> None:
        self.finished_at = datetime.now(timezone.utc)

    def snapshot(self) -> dict[str, BaseModel]:
        """Copy of the written slots keyed by slot name."""
        return dict(self._slots)

    def scoped(self, analyzer: "BaseAnalyzer") -> "ScopedContext":
        return ScopedContext(self, analyzer)


class ScopedContext:
    """
    The view of a RunContext handed to one analyzer.

    Reads are limited to the analyzer's declared reads plus its own writes;
    writes are limited to its declared writes.
    """

    def __init__(self, context: RunContext, analyzer: "BaseAnalyzer"):
        self._context = context
        self._name = analyzer.name
        self._reads = frozenset(s.name for s in analyzer.reads)
        self._writes = frozenset(s.name for s in analyzer.writes)

    @property
    def url(self) -> str:
        return self._context.url

    @property
    def page(self) -> "PageHandle | None":
        return self._context.page

    @property
    def fetcher(self) -> "HttpFetcher | None":
        return self._context.fetcher

    @property
    def budget(self) -> PerformanceBudget:
        return self._context.budget

    @property
    def options(self) -> Any:
        return self._context.options

    def get(self, slot: Slot[T]) -> T | None:
        if slot.name not in self._reads and slot.name not in self._writes:
            raise UndeclaredSlotError(self._name, slot.name, "read")
        return self._context.get(slot)

    def set(self, slot: Slot[T], value: T) -> None:
        if slot.name not in self._writes:
            raise UndeclaredSlotError(self._name, slot.name, "write")
        self._context.set(slot, value)
