"""Configuration loading from environment variables.

Precedence for every setting is: environment variable, then the value
passed in code, then the built-in default. Empty or whitespace-only
environment values count as unset. Invalid values are logged and ignored.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from .constants import BufferingLimits, Defaults, EnvVars
from .logger import create_logger

logger = create_logger("config")


def _read_env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _fallback(config_value, default):
    return config_value if config_value is not None else default


def get_int_env(
    name: str,
    config_value: Optional[int] = None,
    default: int = 0,
    validator: Optional[Callable[[int], bool]] = None,
) -> int:
    """Read an integer from the environment, optionally validated."""
    value = _read_env(name)
    if value is None:
        return _fallback(config_value, default)

    try:
        parsed = int(value)
    except ValueError:
        logger.warning(
            "Invalid integer for %s: %r, using %r",
            name,
            value,
            _fallback(config_value, default),
        )
        return _fallback(config_value, default)

    if validator is not None and not validator(parsed):
        logger.warning(
            "Value %r for %s failed validation, using %r",
            parsed,
            name,
            _fallback(config_value, default),
        )
        return _fallback(config_value, default)
    return parsed


def get_str_env(
    name: str,
    config_value: Optional[str] = None,
    default: str = "",
    validator: Optional[Callable[[str], bool]] = None,
) -> str:
    """Read a string from the environment, optionally validated."""
    value = _read_env(name)
    if value is None:
        return _fallback(config_value, default)

    if validator is not None and not validator(value):
        logger.warning(
            "Value %r for %s failed validation, using %r",
            value,
            name,
            _fallback(config_value, default),
        )
        return _fallback(config_value, default)
    return value


def _is_port(value: int) -> bool:
    return 0 < value < 65536


def _is_positive(value: int) -> bool:
    return value > 0


def _within(bounds: tuple[int, int]) -> Callable[[int], bool]:
    low, high = bounds
    return lambda value: low <= value <= high


@dataclass(frozen=True)
class ExtensionConfig:
    """Settings consumed by the tracer provider and the extension runtime."""

    collector_endpoint: str = Defaults.COLLECTOR_ENDPOINT
    service_name: str = Defaults.SERVICE_NAME
    export_timeout: int = Defaults.EXPORT_TIMEOUT
    listener_port: int = Defaults.LISTENER_PORT
    buffer_max_items: int = Defaults.BUFFER_MAX_ITEMS
    buffer_max_bytes: int = Defaults.BUFFER_MAX_BYTES
    buffer_timeout_ms: int = Defaults.BUFFER_TIMEOUT_MS
    max_unhandled_length: int = Defaults.UNHANDLED_EVENT_MAX_LENGTH
    runtime_api: Optional[str] = None


def load_config() -> ExtensionConfig:
    """Build an ExtensionConfig from the current environment."""
    config = ExtensionConfig(
        collector_endpoint=get_str_env(
            EnvVars.COLLECTOR_ENDPOINT, None, Defaults.COLLECTOR_ENDPOINT
        ),
        service_name=get_str_env(EnvVars.SERVICE_NAME, None, Defaults.SERVICE_NAME),
        export_timeout=get_int_env(
            EnvVars.EXPORT_TIMEOUT, None, Defaults.EXPORT_TIMEOUT, _is_positive
        ),
        listener_port=get_int_env(
            EnvVars.LISTENER_PORT, None, Defaults.LISTENER_PORT, _is_port
        ),
        buffer_max_items=get_int_env(
            EnvVars.BUFFER_MAX_ITEMS,
            None,
            Defaults.BUFFER_MAX_ITEMS,
            _within(BufferingLimits.MAX_ITEMS),
        ),
        buffer_max_bytes=get_int_env(
            EnvVars.BUFFER_MAX_BYTES,
            None,
            Defaults.BUFFER_MAX_BYTES,
            _within(BufferingLimits.MAX_BYTES),
        ),
        buffer_timeout_ms=get_int_env(
            EnvVars.BUFFER_TIMEOUT_MS,
            None,
            Defaults.BUFFER_TIMEOUT_MS,
            _within(BufferingLimits.TIMEOUT_MS),
        ),
        max_unhandled_length=get_int_env(
            EnvVars.UNHANDLED_EVENT_MAX_LENGTH,
            None,
            Defaults.UNHANDLED_EVENT_MAX_LENGTH,
        ),
        runtime_api=get_str_env(EnvVars.RUNTIME_API) or None,
    )
    logger.debug("Loaded configuration: %s", config)
    return config
