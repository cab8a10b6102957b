from __future__ import annotations

import time
from contextlib import contextmanager


class Counter:
    def __init__(self) -> None:
        self.value = 0

    def inc(self, n: int = 1) -> None:
        self.value += n

    def reset(self) -> None:
        self.value = 0


class Timer:
    def __init__(self) -> None:
        self.last_ms: float | None = None
        self._start: float | None = None

    def start(self) -> None:
        self._start = time.perf_counter()

    def record(self, ms: float | None) -> None:
        """Store a duration measured elsewhere."""
        self.last_ms = ms

    def stop(self) -> float | None:
        if self._start is None:
            return None
        end = time.perf_counter()
        self.last_ms = (end - self._start) * 1000
        self._start = None
        return self.last_ms

    @contextmanager
    def time(self):  # noqa: ANN201 (to keep it lightweight)
        self.start()
        try:
            yield
        finally:
            self.stop()


runs_total = Counter()
events_executed_total = Counter()
events_failed_total = Counter()
failures_handled_total = Counter()
failures_discarded_total = Counter()
run_duration_ms = Timer()


def reset_all() -> None:
    """Zero every module-level counter (mainly for tests)."""
    for counter in (
        runs_total,
        events_executed_total,
        events_failed_total,
        failures_handled_total,
        failures_discarded_total,
    ):
        counter.reset()
    run_duration_ms.last_ms = None
