"""Counter primitive used by the registry."""
from __future__ import annotations

from collections import defaultdict
from threading import Lock
from typing import Iterable, Mapping, MutableMapping, Tuple

LabelValues = Tuple[str, ...]


class CounterMetric:
    """Monotonic counter keyed by an ordered tuple of label values."""

    def __init__(
        self, name: str, *, description: str = "", label_names: Iterable[str] | None = None
    ) -> None:
        self.name = name
        self.description = description
        self.label_names: Tuple[str, ...] = tuple(label_names or ())
        self._values: MutableMapping[LabelValues, float] = defaultdict(float)
        self._lock = Lock()

    def _label_values(self, labels: Mapping[str, str] | None) -> LabelValues:
        labels = labels or {}
        unexpected = set(labels) - set(self.label_names)
        if unexpected:
            raise ValueError(f"Metric '{self.name}' does not accept labels {sorted(unexpected)}")
        missing = [label for label in self.label_names if label not in labels]
        if missing:
            raise ValueError(f"Missing labels {missing} for metric '{self.name}'")
        return tuple(str(labels[label]) for label in self.label_names)

    def inc(self, amount: float = 1.0, *, labels: Mapping[str, str] | None = None) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        key = self._label_values(labels)
        with self._lock:
            self._values[key] += amount

    def value(self, *, labels: Mapping[str, str] | None = None) -> float:
        key = self._label_values(labels)
        with self._lock:
            return self._values.get(key, 0.0)

    def snapshot(self) -> Mapping[LabelValues, float]:
        with self._lock:
            return dict(self._values)
