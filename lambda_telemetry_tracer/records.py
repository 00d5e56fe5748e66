"""
Typed telemetry records decoded from Lambda Telemetry API payloads.

Each Telemetry API event is a JSON object of the form::

    {"time": "2024-01-01T00:00:00.000Z", "type": "platform.start", "record": {...}}

The kinds we know about get their own dataclass. Everything else, including
objects that do not match the expected shape, is kept verbatim in an
``Unknown`` record so a batch never fails to decode.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from .constants import RecordTypes


def to_attribute_value(value: Any) -> str:
    """Render a field value as a span attribute string.

    Strings are returned unchanged. Everything else is rendered as compact
    JSON so ``None`` becomes ``null``, ``True`` becomes ``true`` and mappings
    keep their key order.
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


@dataclass(frozen=True)
class TelemetryRecord:
    """Base class for all telemetry records."""

    time: Optional[str] = None


@dataclass(frozen=True)
class FunctionLog(TelemetryRecord):
    text: str = ""


@dataclass(frozen=True)
class PlatformInitStart(TelemetryRecord):
    init_type: Optional[str] = None
    phase: Optional[str] = None
    runtime_version: Optional[str] = None
    runtime_version_arn: Optional[str] = None


@dataclass(frozen=True)
class PlatformInitRuntimeDone(TelemetryRecord):
    init_type: Optional[str] = None
    phase: Optional[str] = None


@dataclass(frozen=True)
class PlatformInitReport(TelemetryRecord):
    init_type: Optional[str] = None
    phase: Optional[str] = None
    duration_ms: Optional[float] = None


@dataclass(frozen=True)
class PlatformStart(TelemetryRecord):
    request_id: Optional[str] = None


@dataclass(frozen=True)
class PlatformRuntimeDone(TelemetryRecord):
    request_id: Optional[str] = None
    duration_metrics: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class PlatformReport(TelemetryRecord):
    request_id: Optional[str] = None
    duration_ms: Optional[float] = None


@dataclass(frozen=True)
class Unknown(TelemetryRecord):
    """A record we have no typed representation for."""

    raw: Any = None


def _metrics(record: Mapping[str, Any]) -> Mapping[str, Any]:
    metrics = record.get("metrics")
    return metrics if isinstance(metrics, Mapping) else {}


def _function_log(time, record) -> TelemetryRecord:
    if isinstance(record, str):
        return FunctionLog(time=time, text=record)
    # JSON log format delivers the log line as an object
    return FunctionLog(time=time, text=to_attribute_value(record))


def _init_start(time, record) -> TelemetryRecord:
    return PlatformInitStart(
        time=time,
        init_type=record.get("initializationType"),
        phase=record.get("phase"),
        runtime_version=record.get("runtimeVersion"),
        runtime_version_arn=record.get("runtimeVersionArn"),
    )


def _init_runtime_done(time, record) -> TelemetryRecord:
    return PlatformInitRuntimeDone(
        time=time,
        init_type=record.get("initializationType"),
        phase=record.get("phase"),
    )


def _init_report(time, record) -> TelemetryRecord:
    return PlatformInitReport(
        time=time,
        init_type=record.get("initializationType"),
        phase=record.get("phase"),
        duration_ms=_metrics(record).get("durationMs"),
    )


def _start(time, record) -> TelemetryRecord:
    return PlatformStart(time=time, request_id=record.get("requestId"))


def _runtime_done(time, record) -> TelemetryRecord:
    metrics = record.get("metrics")
    return PlatformRuntimeDone(
        time=time,
        request_id=record.get("requestId"),
        duration_metrics=dict(metrics) if isinstance(metrics, Mapping) else None,
    )


def _report(time, record) -> TelemetryRecord:
    return PlatformReport(
        time=time,
        request_id=record.get("requestId"),
        duration_ms=_metrics(record).get("durationMs"),
    )


# Decoders for platform records expect a mapping in the "record" field
_PLATFORM_DECODERS = {
    RecordTypes.PLATFORM_INIT_START: _init_start,
    RecordTypes.PLATFORM_INIT_RUNTIME_DONE: _init_runtime_done,
    RecordTypes.PLATFORM_INIT_REPORT: _init_report,
    RecordTypes.PLATFORM_START: _start,
    RecordTypes.PLATFORM_RUNTIME_DONE: _runtime_done,
    RecordTypes.PLATFORM_REPORT: _report,
}


def parse_record(raw: Any) -> TelemetryRecord:
    """Decode one Telemetry API event.

    Args:
        raw: The decoded JSON value for a single event

    Returns:
        TelemetryRecord: A typed record, or ``Unknown`` when the event kind is
        not modelled or its shape does not match
    """
    if not isinstance(raw, Mapping):
        return Unknown(raw=raw)

    time = raw.get("time")
    if not isinstance(time, str):
        time = None
    record_type = raw.get("type")
    record = raw.get("record")
    if not isinstance(record_type, str):
        return Unknown(time=time, raw=raw)

    if record_type == RecordTypes.FUNCTION and record is not None:
        return _function_log(time, record)

    decoder = _PLATFORM_DECODERS.get(record_type)
    if decoder is None or not isinstance(record, Mapping):
        return Unknown(time=time, raw=raw)
    return decoder(time, record)


def parse_batch(payload: Any) -> list[TelemetryRecord]:
    """Decode a Telemetry API batch, keeping the order of events."""
    if isinstance(payload, list):
        return [parse_record(item) for item in payload]
    return [parse_record(payload)]
