import os

from pydantic import BaseModel, Field


def otlp_endpoint_configured() -> bool:
    return "OTEL_EXPORTER_OTLP_ENDPOINT" in os.environ


class ObservabilityConfig(BaseModel):
    service_namespace: str = "MemeService"
    log_level: str = "INFO"

    enable_otel_tracer: bool = Field(default_factory=otlp_endpoint_configured)
    enable_console_tracer: bool = False

    enable_otel_metrics: bool = Field(default_factory=otlp_endpoint_configured)
    enable_console_metrics: bool = False

    enable_otel_logs: bool = Field(default_factory=otlp_endpoint_configured)
    enable_console_logs: bool = False

    suppress_botocore_logs: bool = True
