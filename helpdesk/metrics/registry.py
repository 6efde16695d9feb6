"""Simple in-memory metrics registry."""
from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, Mapping, MutableMapping, Tuple

from .base import CounterMetric, LabelValues


class MetricsRegistry:
    """Registry that owns counter instances by name."""

    def __init__(self) -> None:
        self._metrics: MutableMapping[str, CounterMetric] = {}
        self._lock = Lock()

    def counter(
        self,
        name: str,
        *,
        description: str = "",
        label_names: Iterable[str] | None = None,
    ) -> CounterMetric:
        with self._lock:
            metric = self._metrics.get(name)
            if metric is None:
                metric = self._metrics[name] = CounterMetric(
                    name, description=description, label_names=label_names
                )
            return metric

    def metrics(self) -> Tuple[CounterMetric, ...]:
        with self._lock:
            return tuple(self._metrics.values())

    def snapshot(self) -> Dict[str, Mapping[LabelValues, float]]:
        """Return a serialisable snapshot of all registered metrics."""

        return {metric.name: metric.snapshot() for metric in self.metrics()}
