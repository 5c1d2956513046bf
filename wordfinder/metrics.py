import logging
import time
from contextlib import contextmanager

logger = logging.getLogger("wordfinder")


class StageTimer:
    """Per-stage wall-clock timings (ms) for one engine build or find call."""

    def __init__(self, label: str = ""):
        self.label = label
        self.timings: dict[str, float] = {}
        self._start = time.perf_counter()

    @contextmanager
    def stage(self, name: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = round((time.perf_counter() - t0) * 1000, 3)
            # Repeated stages accumulate
            self.timings[name] = self.timings.get(name, 0.0) + elapsed_ms
            if self.label:
                logger.info("%s stage=%s elapsed=%.3fms", self.label, name, elapsed_ms)
            else:
                logger.info("stage=%s elapsed=%.3fms", name, elapsed_ms)

    @property
    def total_ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000, 3)

    def summary(self) -> dict:
        return {**self.timings, "total": self.total_ms}
