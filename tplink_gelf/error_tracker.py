"""Bounded record of lines that could not be parsed or delivered."""

import threading
import time
from collections import deque


class ErrorTracker:
    """Keeps the most recent per-line failures for the status endpoint."""

    def __init__(self, max_size: int = 100):
        self._failures: deque[dict] = deque(maxlen=max_size)
        self._total = 0
        self._lock = threading.Lock()

    def record(self, stage: str, host: str, line: str, error: BaseException | str):
        """Remember one failed line. ``stage`` is "parse" or "delivery"."""
        entry = {
            "time": time.time(),
            "stage": stage,
            "host": host,
            "line": line,
            "error": str(error),
        }
        with self._lock:
            self._failures.append(entry)
            self._total += 1

    def get_recent(self, n: int = 10) -> list[dict]:
        """Return up to N failures, oldest first."""
        if n <= 0:
            return []
        with self._lock:
            return list(self._failures)[-n:]

    @property
    def count(self) -> int:
        """Failures currently retained."""
        with self._lock:
            return len(self._failures)

    @property
    def total(self) -> int:
        """Failures seen since start, including evicted ones."""
        with self._lock:
            return self._total
