"""Logging and tracing setup.

Console logging is always on. Traces and log records are additionally shipped
over OTLP/HTTP when ``otlp_endpoint`` is configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk._logs import LoggerProvider as OtelLoggerProvider
from opentelemetry.sdk._logs import LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import settings

if TYPE_CHECKING:
    from fastapi import FastAPI

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False
_fastapi_instrumented = False


def _resource() -> Resource:
    attributes = {
        "service.name": settings.observability_service_name,
        "deployment.environment": settings.observability_environment,
    }
    return Resource(attributes={k: v for k, v in attributes.items() if v})


def _otlp_handler(resource: Resource, level: int) -> logging.Handler:
    """Install the OTLP trace provider and return a handler exporting log records."""
    endpoint = (settings.otlp_endpoint or "").rstrip("/")

    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"))
    )
    trace.set_tracer_provider(trace_provider)

    logger_provider = OtelLoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(
        BatchLogRecordProcessor(OTLPLogExporter(endpoint=f"{endpoint}/v1/logs"))
    )
    handler = LoggingHandler(logger_provider=logger_provider)
    handler.setLevel(level)
    return handler


def configure_observability() -> None:
    """Configure console logging and, if an endpoint is set, OTLP export. Idempotent."""
    global _configured

    if _configured:
        return

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handlers: list[logging.Handler] = [console_handler]

    if settings.otlp_endpoint:
        handlers.append(_otlp_handler(_resource(), log_level))

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    logging.captureWarnings(True)

    _configured = True
    get_logger().debug(
        f"Observability configured (level={settings.log_level}, "
        f"otlp={'on' if settings.otlp_endpoint else 'off'})"
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Attach OpenTelemetry instrumentation to the FastAPI app."""
    global _fastapi_instrumented

    if _fastapi_instrumented:
        return

    FastAPIInstrumentor.instrument_app(
        app, excluded_urls="health,metrics", exclude_spans=["send", "receive"]
    )
    _fastapi_instrumented = True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-specific logger."""
    return logging.getLogger(name or settings.observability_service_name)


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer from whichever provider is currently installed."""
    return trace.get_tracer(name or settings.observability_service_name)


__all__ = ["configure_observability", "instrument_fastapi", "get_logger", "get_tracer"]
