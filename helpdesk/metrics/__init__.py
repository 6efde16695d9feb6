"""Application wide metrics utilities."""
from .definitions import DEFAULT_METRIC_DEFINITIONS, MetricDefinition
from .exporters import PrometheusExporter
from .registry import MetricsRegistry


def register_default_metrics(registry: MetricsRegistry) -> MetricsRegistry:
    """Ensure all default metric definitions exist in the registry."""

    for definition in DEFAULT_METRIC_DEFINITIONS:
        registry.counter(
            definition.name,
            description=definition.description,
            label_names=definition.label_names,
        )
    return registry


__all__ = [
    "MetricDefinition",
    "MetricsRegistry",
    "PrometheusExporter",
    "register_default_metrics",
]
