import time
from collections import defaultdict
from typing import Dict, List


class EngineMetrics:
    """
    In-process metrics for the priority engine.

    Used for:
    - oracle health (fallback counts, inference latency)
    - escalation accounting
    - experiment evaluation
    """

    def __init__(self):
        self.counters: Dict[str, int] = defaultdict(int)
        self.histograms: Dict[str, List[float]] = defaultdict(list)

    # ---- counters ----
    def inc(self, name: str, value: int = 1) -> None:
        self.counters[name] += value

    # ---- histograms ----
    def observe(self, name: str, value: float) -> None:
        self.histograms[name].append(value)

    def mean(self, name: str) -> float:
        values = self.histograms.get(name)
        if not values:
            return 0.0
        return sum(values) / len(values)

    # ---- timing ----
    def timed(self, name: str) -> "_Timer":
        return _Timer(self, name)


class _Timer:
    __slots__ = ("_metrics", "_name", "_start")

    def __init__(self, metrics: EngineMetrics, name: str):
        self._metrics = metrics
        self._name = name
        self._start = 0.0

    def __enter__(self) -> "_Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, *exc) -> None:
        self._metrics.observe(self._name, time.monotonic() - self._start)
