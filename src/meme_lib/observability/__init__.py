import importlib.util
import logging
import uuid

from opentelemetry import _logs as logs
from opentelemetry import metrics, trace
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, LogExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import (
    SERVICE_INSTANCE_ID,
    SERVICE_NAME,
    SERVICE_NAMESPACE,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from sentry_sdk.integrations.opentelemetry import SentrySpanProcessor

from .config import ObservabilityConfig
from .logfmt import LogfmtFormatter

__all__ = ["setup_observability", "setup_logging", "ObservabilityConfig"]

logger = logging.getLogger(__name__)


def setup_botocore(config: ObservabilityConfig):
    if importlib.util.find_spec("botocore") is None:
        return

    try:
        from opentelemetry.instrumentation.botocore import BotocoreInstrumentor

        BotocoreInstrumentor().instrument()

        logger.info("botocore has been instrumented")
    except ImportError:
        logger.warning(
            "botocore instrumentation is not available, skipping botocore instrumentation"
        )

    if config.suppress_botocore_logs:
        for name in ("boto3", "botocore", "s3transfer", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)
        logger.info("botocore logs have been suppressed")


def setup_logging(level: str = "INFO"):
    LoggingInstrumentor().instrument()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(LogfmtFormatter())
    root_logger.addHandler(console_handler)

    logger.info("Logging has been setup")


def build_resource(
    config: ObservabilityConfig, service_name: str | None = None
) -> Resource:
    return Resource.create(
        attributes={
            SERVICE_INSTANCE_ID: str(uuid.uuid4()),
            SERVICE_NAMESPACE: config.service_namespace,
        }
        | ({SERVICE_NAME: service_name} if service_name else {}),
    )


def log_exporters(config: ObservabilityConfig) -> list[LogExporter]:
    exporters: list[LogExporter] = []

    if config.enable_console_logs:
        from opentelemetry.sdk._logs.export import ConsoleLogExporter

        exporters.append(ConsoleLogExporter())

    if config.enable_otel_logs:
        from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter

        exporters.append(OTLPLogExporter())

    return exporters


def span_exporters(config: ObservabilityConfig) -> list[SpanExporter]:
    exporters: list[SpanExporter] = []

    if config.enable_console_tracer:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        exporters.append(ConsoleSpanExporter())

    if config.enable_otel_tracer:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        exporters.append(OTLPSpanExporter())

    return exporters


def metric_readers(config: ObservabilityConfig) -> list[MetricReader]:
    readers: list[MetricReader] = []

    if config.enable_console_metrics:
        from opentelemetry.sdk.metrics.export import ConsoleMetricExporter

        readers.append(PeriodicExportingMetricReader(ConsoleMetricExporter()))

    if config.enable_otel_metrics:
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
            OTLPMetricExporter,
        )

        readers.append(PeriodicExportingMetricReader(OTLPMetricExporter()))

    return readers


def setup_observability(
    config: ObservabilityConfig = ObservabilityConfig(), service_name: str | None = None
):
    setup_logging(config.log_level)

    resource = build_resource(config, service_name)

    logger_provider = LoggerProvider(resource=resource)
    for log_exporter in log_exporters(config):
        logger_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))
        logger.info("Enabled %s", type(log_exporter).__name__)
    logs.set_logger_provider(logger_provider)
    logging.getLogger().addHandler(LoggingHandler(logger_provider=logger_provider))

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(SentrySpanProcessor())
    for span_exporter in span_exporters(config):
        tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
        logger.info("Enabled %s", type(span_exporter).__name__)
    trace.set_tracer_provider(tracer_provider)

    readers = metric_readers(config)
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=readers))
    logger.info("Enabled %d metric readers", len(readers))

    setup_botocore(config)
