"""Map telemetry records to span event names and attributes."""

from functools import singledispatch

from .constants import Defaults, EventNames
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
    to_attribute_value,
)

TRUNCATION_MARKER = "..."

SpanEventSpec = tuple[str, dict[str, str]]


def _truncate(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


@singledispatch
def translate_record(
    record: TelemetryRecord,
    max_unhandled_length: int = Defaults.UNHANDLED_EVENT_MAX_LENGTH,
) -> SpanEventSpec:
    """Return the span event name and attributes for a telemetry record.

    Record kinds without a registered translation fall through to
    ``unhandled_event`` with a dump of the record in the ``event`` attribute.
    """
    raw = record.raw if isinstance(record, Unknown) else record
    dump = to_attribute_value(raw)
    return EventNames.UNHANDLED_EVENT, {"event": _truncate(dump, max_unhandled_length)}


@translate_record.register
def _(record: FunctionLog, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.FUNCTION_LOG, parse_function_log(record.text)


@translate_record.register
def _(record: PlatformInitStart, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.INIT_START, {
        "init_type": to_attribute_value(record.init_type),
        "phase": to_attribute_value(record.phase),
        "runtime_version": to_attribute_value(record.runtime_version),
        "runtime_version_arn": to_attribute_value(record.runtime_version_arn),
    }


@translate_record.register
def _(record: PlatformInitRuntimeDone, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.INIT_RUNTIME_DONE, {
        "init_type": to_attribute_value(record.init_type),
        "phase": to_attribute_value(record.phase),
    }


@translate_record.register
def _(record: PlatformInitReport, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.INIT_REPORT, {
        "init_type": to_attribute_value(record.init_type),
        "phase": to_attribute_value(record.phase),
        "duration": to_attribute_value(record.duration_ms),
    }


@translate_record.register
def _(record: PlatformStart, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.PLATFORM_START, {
        "request_id": to_attribute_value(record.request_id),
    }


@translate_record.register
def _(record: PlatformRuntimeDone, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.RUNTIME_DONE, {
        "request_id": to_attribute_value(record.request_id),
        "duration": to_attribute_value(record.duration_metrics),
    }


@translate_record.register
def _(record: PlatformReport, max_unhandled_length: int = 0) -> SpanEventSpec:
    return EventNames.PLATFORM_REPORT, {
        "request_id": to_attribute_value(record.request_id),
        "duration": to_attribute_value(record.duration_ms),
    }
