"""Base analyzer interface."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from core.slots import Slot

if TYPE_CHECKING:
    from core.context import ScopedContext


class AnalyzerKind(str, Enum):
    """Where an analyzer gets its data from."""

    PAGE = "page"  # drives the shared page, runs serially
    NETWORK = "network"  # out-of-band HTTP only, may run concurrently


class BaseAnalyzer(ABC):
    """
    Abstract base class for all analyzers.

    An analyzer declares the slots it reads and writes, and does its work in
    ``run``. It is written assuming success: anything it raises is caught and
    recorded by the orchestrator, never by the analyzer itself.
    """

    kind: AnalyzerKind = AnalyzerKind.PAGE
    reads: frozenset[Slot] = frozenset()
    writes: frozenset[Slot] = frozenset()
    timeout: float | None = None
    # Most sequential out-of-band requests one run issues
    max_requests: int = 1

    @property
    @abstractmethod
    def name(self) -> str:
        """Return analyzer name."""
        pass

    @abstractmethod
    async def run(self, ctx: "ScopedContext") -> None:
        """
        Inspect the page or the network and write results into the context.

        Args:
            ctx: Context view limited to this analyzer's declared slots
        """
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} ({self.kind.value})>"
