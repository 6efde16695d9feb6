"""Metric definitions used across the application."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

TICKETS_CREATED = "tickets_created_total"
STATUS_CHANGES = "ticket_status_changes_total"
COMMENTS_ADDED = "ticket_comments_total"
OPERATION_FAILURES = "ticket_operation_failures_total"


@dataclass(frozen=True)
class MetricDefinition:
    """Describe a counter that should exist in the registry."""

    name: str
    description: str
    label_names: Tuple[str, ...] = ()


DEFAULT_METRIC_DEFINITIONS: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        name=TICKETS_CREATED,
        description="Total number of tickets created.",
    ),
    MetricDefinition(
        name=STATUS_CHANGES,
        description="Successful status updates by target status.",
        label_names=("status",),
    ),
    MetricDefinition(
        name=COMMENTS_ADDED,
        description="Comments added to tickets by visibility.",
        label_names=("visibility",),
    ),
    MetricDefinition(
        name=OPERATION_FAILURES,
        description="Rejected ticket operations by operation and error code.",
        label_names=("operation", "code"),
    ),
)
