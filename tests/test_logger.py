"""Tests for the logger module."""

import logging
import os
from unittest.mock import patch

from lambda_telemetry_tracer.logger import LOG_FORMAT, ROOT_LOGGER_NAME, create_logger


def test_logger_is_namespaced():
    """Test that loggers live under the package namespace."""
    assert create_logger("component").name == f"{ROOT_LOGGER_NAME}.component"


def test_level_from_aws_lambda_log_level():
    """Test that AWS_LAMBDA_LOG_LEVEL takes precedence over LOG_LEVEL."""
    with patch.dict(os.environ, {"AWS_LAMBDA_LOG_LEVEL": "DEBUG", "LOG_LEVEL": "ERROR"}):
        create_logger("level")
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG


def test_level_from_log_level():
    """Test that LOG_LEVEL is used when AWS_LAMBDA_LOG_LEVEL is unset."""
    with patch.dict(os.environ, {"LOG_LEVEL": "warning"}, clear=True):
        create_logger("level")
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    """Test that an unknown level name means INFO."""
    with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}, clear=True):
        create_logger("level")
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.INFO


def test_single_handler():
    """Test that repeated calls do not stack handlers."""
    create_logger("a")
    create_logger("b")
    ours = [
        h
        for h in logging.getLogger(ROOT_LOGGER_NAME).handlers
        if isinstance(h, logging.StreamHandler)
        and h.formatter is not None
        and h.formatter._fmt == LOG_FORMAT
    ]
    assert len(ours) == 1


def test_stdout_handler_added_alongside_foreign_handlers():
    """Test that a handler attached by someone else does not suppress ours."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    foreign = logging.NullHandler()
    saved = list(root.handlers)
    for h in saved:
        root.removeHandler(h)
    root.addHandler(foreign)
    try:
        create_logger("c")
        assert foreign in root.handlers
        assert any(
            h.formatter is not None and h.formatter._fmt == LOG_FORMAT
            for h in root.handlers
        )
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved:
            root.addHandler(h)
