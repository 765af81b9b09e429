"""Lightweight in-process metrics for development and tests.

Usage:
    from image_picker.metrics import metrics
    metrics.inc("persistence.writes")
    with metrics.timed("persistence.write_duration"):
        ...
    snapshot = metrics.snapshot()
"""

from __future__ import annotations

import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Any


class _Metrics:
    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, list[float]] = defaultdict(list)

    def inc(self, key: str, amount: int = 1) -> None:
        self._counters[key] += int(amount)

    @contextmanager
    def timed(self, key: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timings[key].append(time.perf_counter() - start)

    def snapshot(self) -> dict[str, Any]:
        return {
            "counters": dict(self._counters),
            "timings": {k: list(v) for k, v in self._timings.items()},
        }

    def reset(self) -> None:
        self._counters.clear()
        self._timings.clear()


metrics = _Metrics()
