"""
lambda-telemetry-tracer: record Lambda Telemetry API events as OpenTelemetry spans.

Each telemetry batch delivered to the extension becomes one span with one
span event per record, exported over OTLP/HTTP.
"""

from .config import ExtensionConfig, load_config
from .handler import BatchHandler
from .log_parser import parse_function_log
from .records import (
    FunctionLog,
    PlatformInitReport,
    PlatformInitRuntimeDone,
    PlatformInitStart,
    PlatformReport,
    PlatformRuntimeDone,
    PlatformStart,
    TelemetryRecord,
    Unknown,
    parse_batch,
    parse_record,
    to_attribute_value,
)
from .telemetry import (
    ProviderState,
    TelemetryInitError,
    TracerProviderManager,
    TracerUnavailableError,
    init_telemetry,
)
from .translator import translate_record

__version__ = "0.1.0"

__all__ = [
    "BatchHandler",
    "ExtensionConfig",
    "FunctionLog",
    "PlatformInitReport",
    "PlatformInitRuntimeDone",
    "PlatformInitStart",
    "PlatformReport",
    "PlatformRuntimeDone",
    "PlatformStart",
    "ProviderState",
    "TelemetryInitError",
    "TelemetryRecord",
    "TracerProviderManager",
    "TracerUnavailableError",
    "Unknown",
    "init_telemetry",
    "load_config",
    "parse_batch",
    "parse_function_log",
    "parse_record",
    "to_attribute_value",
    "translate_record",
]
