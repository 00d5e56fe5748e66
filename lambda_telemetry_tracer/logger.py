"""Logging setup for the extension.

All loggers live under the ``lambda_telemetry_tracer`` namespace and write
to stdout, which Lambda forwards to CloudWatch. The level is taken from
``AWS_LAMBDA_LOG_LEVEL`` (set by Lambda's advanced logging controls), then
``LOG_LEVEL``, then INFO.
"""

import logging
import os
import sys

from .constants import Defaults, EnvVars

ROOT_LOGGER_NAME = "lambda_telemetry_tracer"
LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def _resolve_level() -> int:
    value = (
        os.environ.get(EnvVars.AWS_LAMBDA_LOG_LEVEL)
        or os.environ.get(EnvVars.LOG_LEVEL)
        or Defaults.LOG_LEVEL
    )
    level = logging.getLevelName(value.strip().upper())
    # getLevelName returns a string for unknown names
    return level if isinstance(level, int) else logging.INFO


_stdout_handler = logging.StreamHandler(sys.stdout)
_stdout_handler.setFormatter(logging.Formatter(LOG_FORMAT))


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    # Other handlers (e.g. test capture) may already be attached
    if _stdout_handler not in root.handlers:
        root.addHandler(_stdout_handler)
        root.propagate = False
    root.setLevel(_resolve_level())
    return root


def create_logger(name: str) -> logging.Logger:
    """Create a logger scoped under the extension's namespace.

    Args:
        name: Component name, e.g. ``"config"`` or ``"handler"``

    Returns:
        logging.Logger: Logger named ``lambda_telemetry_tracer.<name>``
    """
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
