"""Tests for translating telemetry records into span events."""

import pytest

from lambda_telemetry_tracer.records import (
    FunctionLog,
    PlatformInitReport,
    PlatformInitRuntimeDone,
    PlatformInitStart,
    PlatformReport,
    PlatformRuntimeDone,
    PlatformStart,
    TelemetryRecord,
    Unknown,
)
from lambda_telemetry_tracer.translator import TRUNCATION_MARKER, translate_record


def test_function_log():
    """Test that function logs use the log parser."""
    name, attrs = translate_record(FunctionLog(text='msg {"user": "bob", "n": 2}'))
    assert name == "function_log"
    assert attrs == {"user": "bob", "n": "2"}


def test_function_log_plain_text():
    """Test that plain function logs keep the raw text."""
    name, attrs = translate_record(FunctionLog(text="just text"))
    assert name == "function_log"
    assert attrs == {"raw_log": "just text"}


def test_init_start():
    """Test the init_start event."""
    name, attrs = translate_record(
        PlatformInitStart(
            init_type="on-demand",
            phase="init",
            runtime_version="python:3.12",
            runtime_version_arn="arn:x",
        )
    )
    assert name == "init_start"
    assert attrs == {
        "init_type": "on-demand",
        "phase": "init",
        "runtime_version": "python:3.12",
        "runtime_version_arn": "arn:x",
    }


def test_init_start_missing_fields():
    """Test that missing fields render as null."""
    name, attrs = translate_record(PlatformInitStart(init_type="snap-start"))
    assert name == "init_start"
    assert attrs == {
        "init_type": "snap-start",
        "phase": "null",
        "runtime_version": "null",
        "runtime_version_arn": "null",
    }


def test_init_runtime_done():
    """Test the init_runtime_done event."""
    name, attrs = translate_record(PlatformInitRuntimeDone(init_type="on-demand", phase="init"))
    assert name == "init_runtime_done"
    assert attrs == {"init_type": "on-demand", "phase": "init"}


def test_init_report():
    """Test the init_report event."""
    name, attrs = translate_record(
        PlatformInitReport(init_type="on-demand", phase="init", duration_ms=250.5)
    )
    assert name == "init_report"
    assert attrs == {"init_type": "on-demand", "phase": "init", "duration": "250.5"}


def test_platform_start():
    """Test the platform_start event."""
    assert translate_record(PlatformStart(request_id="req-1")) == (
        "platform_start",
        {"request_id": "req-1"},
    )


def test_runtime_done():
    """Test that runtime_done renders the whole metrics mapping."""
    name, attrs = translate_record(
        PlatformRuntimeDone(
            request_id="req-1",
            duration_metrics={"durationMs": 10.5, "producedBytes": 42},
        )
    )
    assert name == "runtime_done"
    assert attrs == {
        "request_id": "req-1",
        "duration": '{"durationMs":10.5,"producedBytes":42}',
    }


def test_platform_report():
    """Test the platform_report event."""
    name, attrs = translate_record(PlatformReport(request_id="req-1", duration_ms=12.0))
    assert name == "platform_report"
    assert attrs == {"request_id": "req-1", "duration": "12.0"}


def test_unknown_record():
    """Test that unknown records produce a single event attribute."""
    raw = {"type": "platform.logsDropped", "record": {"reason": "full"}}
    name, attrs = translate_record(Unknown(raw=raw))
    assert name == "unhandled_event"
    assert attrs == {
        "event": '{"type":"platform.logsDropped","record":{"reason":"full"}}'
    }


def test_unknown_record_is_truncated():
    """Test that long dumps are cut at the limit and marked."""
    raw = {"type": "x", "record": "y" * 500}
    name, attrs = translate_record(Unknown(raw=raw), max_unhandled_length=50)
    assert name == "unhandled_event"
    assert len(attrs["event"]) == 50 + len(TRUNCATION_MARKER)
    assert attrs["event"].endswith(TRUNCATION_MARKER)


def test_unknown_record_truncation_disabled():
    """Test that a non-positive limit keeps the whole dump."""
    raw = {"type": "x", "record": "y" * 500}
    _, attrs = translate_record(Unknown(raw=raw), max_unhandled_length=0)
    assert not attrs["event"].endswith(TRUNCATION_MARKER)
    assert len(attrs["event"]) > 500


@pytest.mark.parametrize(
    "record",
    [
        TelemetryRecord(time="t"),
        Unknown(raw=None),
        Unknown(raw=[1, 2, 3]),
        None,
        "not a record",
    ],
)
def test_unregistered_values_fall_back(record):
    """Test that anything without a translation becomes unhandled_event."""
    name, attrs = translate_record(record)
    assert name == "unhandled_event"
    assert list(attrs) == ["event"]
    assert isinstance(attrs["event"], str)
