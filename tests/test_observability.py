from opentelemetry.sdk._logs.export import ConsoleLogExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_NAMESPACE
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from meme_lib.observability import (
    ObservabilityConfig,
    build_resource,
    log_exporters,
    metric_readers,
    span_exporters,
)

QUIET = dict(enable_otel_logs=False, enable_otel_tracer=False, enable_otel_metrics=False)


def test_nothing_exported_by_default():
    config = ObservabilityConfig(**QUIET)

    assert log_exporters(config) == []
    assert span_exporters(config) == []
    assert metric_readers(config) == []


def test_console_exporters():
    config = ObservabilityConfig(enable_console_logs=True, enable_console_tracer=True, **QUIET)

    assert [type(e) for e in log_exporters(config)] == [ConsoleLogExporter]
    assert [type(e) for e in span_exporters(config)] == [ConsoleSpanExporter]


def test_resource_attributes():
    resource = build_resource(ObservabilityConfig(**QUIET), service_name="meme-service")

    assert resource.attributes[SERVICE_NAME] == "meme-service"
    assert resource.attributes[SERVICE_NAMESPACE] == "MemeService"
