"""Turn a telemetry batch into one span with one event per record."""

from collections.abc import Sequence
from typing import Optional

from opentelemetry import trace
from opentelemetry.trace import SpanKind

from .constants import BATCH_SPAN_NAME, Defaults
from .logger import create_logger
from .records import TelemetryRecord
from .telemetry import TracerUnavailableError
from .translator import translate_record

logger = create_logger("handler")


class BatchHandler:
    """Records telemetry batches as spans.

    Each call to :meth:`handle` opens a span, adds one span event per record
    in arrival order and ends the span once the last record is processed.
    The handler keeps no state between batches, so concurrent calls against
    the same tracer are independent.
    """

    def __init__(
        self,
        tracer: Optional[trace.Tracer],
        max_unhandled_length: int = Defaults.UNHANDLED_EVENT_MAX_LENGTH,
    ):
        self._tracer = tracer
        self._max_unhandled_length = max_unhandled_length

    def handle(self, batch: Sequence[TelemetryRecord]) -> int:
        """Emit a span for ``batch``.

        Args:
            batch: Records in the order they were delivered

        Returns:
            int: Number of span events recorded

        Raises:
            TracerUnavailableError: If the handler has no tracer
        """
        if self._tracer is None:
            raise TracerUnavailableError("no tracer available to record telemetry batch")

        logger.debug("Handler received %d events", len(batch))
        with self._tracer.start_as_current_span(
            BATCH_SPAN_NAME,
            kind=SpanKind.INTERNAL,
            attributes={"telemetry.batch.size": len(batch)},
        ) as span:
            for record in batch:
                name, attributes = translate_record(
                    record, max_unhandled_length=self._max_unhandled_length
                )
                logger.debug("Recording %s event", name)
                span.add_event(name, attributes)
        return len(batch)
