"""Logging and tracing setup for the helpdesk service."""

from __future__ import annotations

import logging
from logging.config import dictConfig

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from helpdesk.core.config import Settings

PACKAGE_LOGGER = "helpdesk"


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a console handler to the ``helpdesk`` logger tree.

    Only the package loggers are configured; the root logger and loggers owned
    by the server (uvicorn, starlette) keep whatever the host process set up.
    """

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"helpdesk": {"format": settings.log_format}},
            "handlers": {
                "helpdesk_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "helpdesk",
                }
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "handlers": ["helpdesk_console"],
                    "level": level,
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(PACKAGE_LOGGER)


def parse_headers(header_string: str | None) -> dict[str, str]:
    """Parse ``key=value`` pairs separated by commas, skipping malformed items."""

    headers: dict[str, str] = {}
    for item in (header_string or "").split(","):
        key, sep, value = item.partition("=")
        if sep and key.strip():
            headers[key.strip()] = value.strip()
    return headers


def _span_exporter(settings: Settings) -> OTLPSpanExporter:
    headers = parse_headers(settings.otel_exporter_otlp_headers)
    return OTLPSpanExporter(
        endpoint=settings.otel_exporter_otlp_endpoint or None,
        headers=headers or None,
    )


def init_tracer(settings: Settings) -> TracerProvider | None:
    """Build and install the tracer provider for ticket operation spans.

    Returns ``None`` when tracing is disabled; the service spans then go to the
    no-op provider. The caller owns the returned provider and must pass it to
    :func:`shutdown_tracer`.
    """

    if not settings.otel_enabled:
        return None

    provider = TracerProvider(
        resource=Resource.create(
            {"service.name": settings.otel_service_name, "deployment.environment": settings.environment}
        )
    )
    provider.add_span_processor(BatchSpanProcessor(_span_exporter(settings)))
    trace.set_tracer_provider(provider)
    return provider


def shutdown_tracer(provider: TracerProvider | None) -> None:
    if provider is not None:
        provider.shutdown()
