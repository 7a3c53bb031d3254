"""Page driving interface used by page-bound analyzers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class PageHandle(ABC):
    """
    A loaded page owned exclusively by one audit run.

    Navigation details are captured when the page is loaded; console errors
    and failed requests keep accumulating until the handle is closed.
    """

    url: str
    final_url: str
    status_code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    # One {"url", "status", "location"} entry per hop, oldest first
    redirect_chain: list[dict] = field(default_factory=list)
    response_time_ms: float | None = None
    console_errors: list[str] = field(default_factory=list)
    failed_requests: list[str] = field(default_factory=list)

    @abstractmethod
    async def evaluate(self, script: str) -> Any:
        """Run a JavaScript function expression in the page and return its result."""
        pass

    @abstractmethod
    async def content(self) -> str:
        """Return the current serialized DOM."""
        pass

    @abstractmethod
    async def screenshot(self, path: str | None = None) -> bytes:
        """Capture a full-page PNG, optionally saving it to ``path``."""
        pass

    @abstractmethod
    async def add_script(self, path: str) -> None:
        """Inject a local script file into the page."""
        pass


class PageDriver(ABC):
    """Opens pages. Implementations own the browser lifecycle."""

    @abstractmethod
    async def navigate(self, url: str) -> PageHandle:
        """
        Load ``url`` and return a handle to it.

        Raises:
            NavigationError: if the page could not be loaded at all
        """
        pass

    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
