"""Daily activity log recording per-page crawl timings.

Each calendar day gets its own append-only text file under the log directory
(``log_YYYY-MM-DD.txt``). Every line is timestamped:

    [2026-10-18T09:15:02.120000+00:00] : Processed page: https://example.org in 1.42 seconds

The log is a diagnostic sink. Write failures are reported through the
module logger and never propagate into the crawl.

Example:
    >>> from pathlib import Path
    >>> from leadcrawl.core.activity_log import ActivityLog
    >>>
    >>> activity = ActivityLog(Path("logs"))
    >>> activity.record_page("https://example.org", elapsed_seconds=1.42)
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityLog:
    """Append-only writer for the daily activity files.

    Attributes:
        log_dir: Directory holding the per-day files
    """

    def __init__(
        self,
        log_dir: Path,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the activity log.

        Args:
            log_dir: Directory where daily files are created
            clock: Source of the current time (injectable for tests)
        """
        self.log_dir = log_dir
        self._clock = clock

    def path_for(self, moment: datetime) -> Path:
        """Return the file path used for the day of ``moment``."""
        return self.log_dir / f"log_{moment.date().isoformat()}.txt"

    def write(self, text: str) -> None:
        """Append one timestamped line, swallowing filesystem errors."""
        now = self._clock()
        path = self.path_for(now)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"[{now.isoformat()}] : {text}\n")
        except OSError as exc:
            logger.warning("Failed to write activity log %s: %s", path, exc)

    def record_page(self, url: str, elapsed_seconds: float) -> None:
        """Record the processing time of one page."""
        self.write(f"Processed page: {url} in {elapsed_seconds:.2f} seconds")
