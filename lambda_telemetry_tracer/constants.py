"""Constants for the lambda-telemetry-tracer extension."""


class EnvVars:
    """Environment variable names read by the extension."""

    COLLECTOR_ENDPOINT = "COLLECTOR_ENDPOINT"
    SERVICE_NAME = "SERVICE_NAME"
    EXPORT_TIMEOUT = "EXPORT_TIMEOUT_SECONDS"
    LISTENER_PORT = "TELEMETRY_LISTENER_PORT"
    BUFFER_MAX_ITEMS = "TELEMETRY_BUFFER_MAX_ITEMS"
    BUFFER_MAX_BYTES = "TELEMETRY_BUFFER_MAX_BYTES"
    BUFFER_TIMEOUT_MS = "TELEMETRY_BUFFER_TIMEOUT_MS"
    UNHANDLED_EVENT_MAX_LENGTH = "UNHANDLED_EVENT_MAX_LENGTH"
    RUNTIME_API = "AWS_LAMBDA_RUNTIME_API"
    AWS_LAMBDA_LOG_LEVEL = "AWS_LAMBDA_LOG_LEVEL"
    LOG_LEVEL = "LOG_LEVEL"


class Defaults:
    """Default values used when the environment does not provide one."""

    COLLECTOR_ENDPOINT = "http://localhost:4317"
    SERVICE_NAME = "lambda_extension"
    EXPORT_TIMEOUT = 5
    LISTENER_PORT = 9002
    # Telemetry API buffering limits
    BUFFER_MAX_ITEMS = 1000
    BUFFER_MAX_BYTES = 262144
    BUFFER_TIMEOUT_MS = 100
    UNHANDLED_EVENT_MAX_LENGTH = 4096
    LOG_LEVEL = "INFO"


class BufferingLimits:
    """Inclusive ranges the Telemetry API accepts for buffering settings."""

    MAX_ITEMS = (25, 10000)
    MAX_BYTES = (262144, 1048576)
    TIMEOUT_MS = (25, 30000)


class EventNames:
    """Span event names, one per telemetry record kind."""

    FUNCTION_LOG = "function_log"
    INIT_START = "init_start"
    INIT_RUNTIME_DONE = "init_runtime_done"
    INIT_REPORT = "init_report"
    PLATFORM_START = "platform_start"
    RUNTIME_DONE = "runtime_done"
    PLATFORM_REPORT = "platform_report"
    UNHANDLED_EVENT = "unhandled_event"


class RecordTypes:
    """Telemetry API `type` values with a typed record."""

    FUNCTION = "function"
    PLATFORM_INIT_START = "platform.initStart"
    PLATFORM_INIT_RUNTIME_DONE = "platform.initRuntimeDone"
    PLATFORM_INIT_REPORT = "platform.initReport"
    PLATFORM_START = "platform.start"
    PLATFORM_RUNTIME_DONE = "platform.runtimeDone"
    PLATFORM_REPORT = "platform.report"


class ExtensionApi:
    """Lambda Extensions and Telemetry API paths and headers."""

    REGISTER_PATH = "/2020-01-01/extension/register"
    NEXT_EVENT_PATH = "/2020-01-01/extension/event/next"
    TELEMETRY_PATH = "/2022-07-01/telemetry"
    TELEMETRY_SCHEMA_VERSION = "2022-12-13"
    NAME_HEADER = "Lambda-Extension-Name"
    IDENTIFIER_HEADER = "Lambda-Extension-Identifier"
    SANDBOX_HOST = "sandbox.localdomain"
    INVOKE = "INVOKE"
    SHUTDOWN = "SHUTDOWN"


# Instrumentation scope and span naming
TRACER_NAME = "lambda_extension"
BATCH_SPAN_NAME = "handler"
OTLP_TRACES_PATH = "/v1/traces"
