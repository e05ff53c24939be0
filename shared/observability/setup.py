"""Logging, tracing and /metrics wiring shared by every storefront app instance."""
import logging
import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from shared.config.settings import OTLP_ENDPOINT

_tracer_provider_set = False


def add_otel_ids(logger, log_method, event_dict):
    """Stamps the active span's ids on a log event so logs and traces can be joined."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = trace.format_trace_id(ctx.trace_id)
        event_dict["span_id"] = trace.format_span_id(ctx.span_id)
    return event_dict


def log_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_otel_ids,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(level: int = logging.INFO):
    """One JSON object per line on stdout; events below `level` are dropped."""
    structlog.configure(
        processors=log_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_tracing(app: FastAPI, service_name: str):
    global _tracer_provider_set

    # OpenTelemetry accepts a global provider once per process; later apps only get instrumented
    if not _tracer_provider_set:
        provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
        trace.set_tracer_provider(provider)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT, insecure=True)))
        # outgoing calls from StorefrontClient
        HTTPXClientInstrumentor().instrument()
        _tracer_provider_set = True

    FastAPIInstrumentor.instrument_app(app)


def configure_metrics(app: FastAPI):
    # request latency and status histograms, served at /metrics
    Instrumentator().instrument(app).expose(app)


def setup_observability(app: FastAPI, service_name: str, tracing: bool = True, metrics: bool = True):
    """
    Called from create_app() before the app serves anything. Logging is always
    configured; tracing and /metrics follow ENABLE_TRACING / ENABLE_METRICS
    unless the caller overrides them.
    """
    configure_logging()
    if tracing:
        configure_tracing(app, service_name)
    if metrics:
        configure_metrics(app)
