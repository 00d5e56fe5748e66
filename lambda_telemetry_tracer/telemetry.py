"""Tracer provider lifecycle for the extension process."""

import threading
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from requests import Session

from .config import ExtensionConfig
from .constants import OTLP_TRACES_PATH, TRACER_NAME
from .logger import create_logger

logger = create_logger("telemetry")


class TelemetryInitError(RuntimeError):
    """The tracer provider could not be built. The extension cannot run."""


class TracerUnavailableError(RuntimeError):
    """A tracer was requested while no provider is active."""


class ProviderState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


def resolve_traces_endpoint(endpoint: str) -> str:
    """Validate a collector URL and point it at the OTLP traces path.

    A URL without a path gets ``/v1/traces`` appended. A URL that already
    has a path is used as given.

    Raises:
        TelemetryInitError: If the URL is not an absolute http(s) URL
    """
    parts = urlsplit(endpoint.strip())
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise TelemetryInitError(f"invalid collector endpoint: {endpoint!r}")
    try:
        parts.port
    except ValueError as e:
        raise TelemetryInitError(f"invalid collector endpoint: {endpoint!r}") from e

    if parts.path in ("", "/"):
        parts = parts._replace(path=OTLP_TRACES_PATH)
    return urlunsplit(parts)


class TracerProviderManager:
    """Owns the process-wide tracer provider.

    The provider is built once by :meth:`start`, read by every batch through
    :attr:`tracer`, and flushed and released once by :meth:`shutdown`.
    Exporter and span processor can be injected, which is how tests swap the
    OTLP exporter for an in-memory one.
    """

    def __init__(
        self,
        config: ExtensionConfig,
        exporter: Optional[SpanExporter] = None,
        span_processor: Optional[SpanProcessor] = None,
        install_global: bool = True,
    ):
        self.config = config
        self._exporter = exporter
        self._span_processor = span_processor
        self._install_global = install_global
        self._provider: Optional[TracerProvider] = None
        self._state = ProviderState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def state(self) -> ProviderState:
        return self._state

    @property
    def tracer_provider(self) -> Optional[TracerProvider]:
        return self._provider

    @property
    def tracer(self) -> trace.Tracer:
        if self._state is not ProviderState.ACTIVE or self._provider is None:
            raise TracerUnavailableError(f"tracer provider is {self._state.value}")
        return self._provider.get_tracer(TRACER_NAME)

    def _build_exporter(self) -> SpanExporter:
        endpoint = resolve_traces_endpoint(self.config.collector_endpoint)
        logger.info("Initializing OpenTelemetry with endpoint: %s", endpoint)
        return OTLPSpanExporter(
            endpoint=endpoint,
            timeout=self.config.export_timeout,
            session=Session(),
        )

    def start(self) -> TracerProvider:
        """Build the provider and, if configured, install it globally.

        Raises:
            TelemetryInitError: If called twice or if the exporter cannot be built
        """
        with self._lock:
            if self._state is not ProviderState.UNINITIALIZED:
                raise TelemetryInitError(
                    f"tracer provider already {self._state.value}"
                )
            try:
                resource = Resource.create({SERVICE_NAME: self.config.service_name})
                provider = TracerProvider(resource=resource)
                processor = self._span_processor or BatchSpanProcessor(
                    self._exporter or self._build_exporter()
                )
                provider.add_span_processor(processor)
            except TelemetryInitError:
                raise
            except Exception as e:
                raise TelemetryInitError(f"failed to build tracer provider: {e}") from e

            if self._install_global:
                trace.set_tracer_provider(provider)
            self._provider = provider
            self._state = ProviderState.ACTIVE

        logger.info("OpenTelemetry initialized successfully")
        return provider

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Export buffered spans now. Returns True when nothing is active."""
        if self._state is not ProviderState.ACTIVE or self._provider is None:
            return True
        return self._provider.force_flush(timeout_millis)

    def shutdown(self) -> None:
        """Flush buffered spans and release the provider.

        Safe to call more than once and before :meth:`start`.
        """
        with self._lock:
            if self._state is ProviderState.UNINITIALIZED:
                self._state = ProviderState.TERMINATED
                return
            if self._state is not ProviderState.ACTIVE:
                logger.debug("Tracer provider already %s", self._state.value)
                return
            self._state = ProviderState.SHUTTING_DOWN

        logger.info("Shutting down tracer provider")
        try:
            self._provider.force_flush()
            self._provider.shutdown()
        finally:
            self._state = ProviderState.TERMINATED


def init_telemetry(
    config: ExtensionConfig,
    exporter: Optional[SpanExporter] = None,
    install_global: bool = True,
) -> TracerProviderManager:
    """Create and start a tracer provider manager for ``config``.

    Raises:
        TelemetryInitError: If the provider cannot be built
    """
    manager = TracerProviderManager(
        config, exporter=exporter, install_global=install_global
    )
    manager.start()
    return manager
