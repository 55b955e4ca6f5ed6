"""Thread-safe counters for the forwarder."""

import threading
import time
from collections import defaultdict


class Metrics:
    def __init__(self):
        self._lock = threading.Lock()
        self._datagrams_received = 0
        self._lines_forwarded = 0
        self._category_counts: dict[str, int] = defaultdict(int)
        self._parse_failures = 0
        self._delivery_failures = 0
        self._start_time = time.monotonic()

    def record_datagram(self):
        with self._lock:
            self._datagrams_received += 1

    def record_forwarded(self, category: str):
        """Bump the total and per-category counters."""
        with self._lock:
            self._lines_forwarded += 1
            self._category_counts[category.upper()] += 1

    def record_parse_failure(self):
        with self._lock:
            self._parse_failures += 1

    def record_delivery_failure(self):
        with self._lock:
            self._delivery_failures += 1

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all metrics."""
        with self._lock:
            elapsed = time.monotonic() - self._start_time
            forwarded = self._lines_forwarded
            snap = {
                "datagrams_received": self._datagrams_received,
                "lines_forwarded": forwarded,
                "category_distribution": dict(self._category_counts),
                "parse_failures": self._parse_failures,
                "delivery_failures": self._delivery_failures,
            }

        snap["elapsed_seconds"] = round(elapsed, 2)
        snap["lines_per_second"] = round(forwarded / elapsed, 2) if elapsed > 0 else 0.0
        return snap
