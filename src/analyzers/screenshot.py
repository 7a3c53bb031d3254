"""Full-page screenshot capture."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.results import ScreenshotResult

logger = logging.getLogger(__name__)


def screenshot_filename(url: str, taken_at: datetime) -> str:
    parsed = urlparse(url)
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", f"{parsed.netloc}{parsed.path}").strip("_")
    return f"{slug or 'page'}_{taken_at.strftime('%Y%m%d_%H%M%S')}.png"


class ScreenshotAnalyzer(BaseAnalyzer):
    """Saves a full-page PNG of the audited page into ``output_dir``."""

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.SCREENSHOT})

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)

    @property
    def name(self) -> str:
        return "screenshot"

    async def run(self, ctx) -> None:
        path = self.output_dir / screenshot_filename(ctx.url, datetime.now(timezone.utc))
        data = await ctx.page.screenshot(str(path))

        logger.info(f"Screenshot of {ctx.url} saved to {path}")
        ctx.set(slots.SCREENSHOT, ScreenshotResult(path=str(path), bytes=len(data)))
