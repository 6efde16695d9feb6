"""Render registry contents for external monitoring systems."""
from __future__ import annotations

import logging

from .registry import MetricsRegistry

logger = logging.getLogger(__name__)


class PrometheusExporter:
    """Generate Prometheus compatible text format output."""

    def __init__(self, registry: MetricsRegistry) -> None:
        self.registry = registry

    def build_payload(self) -> str:
        lines: list[str] = []
        for metric in self.registry.metrics():
            lines.append(f"# HELP {metric.name} {metric.description}")
            lines.append(f"# TYPE {metric.name} counter")
            for labels, value in sorted(metric.snapshot().items()):
                label_text = ""
                if labels:
                    label_pairs = [
                        f"{name}=\"{label}\"" for name, label in zip(metric.label_names, labels)
                    ]
                    label_text = "{" + ",".join(label_pairs) + "}"
                lines.append(f"{metric.name}{label_text} {value}")
        return "\n".join(lines) + "\n"

    def export(self) -> str:
        payload = self.build_payload()
        logger.debug("Generated metrics payload with %d lines", payload.count("\n"))
        return payload
