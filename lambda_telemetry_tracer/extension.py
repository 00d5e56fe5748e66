"""Lambda Extensions API client and the extension event loop."""

import asyncio
from typing import Any, Optional

import aiohttp

from .config import ExtensionConfig
from .constants import ExtensionApi
from .handler import BatchHandler
from .listener import TelemetryListener
from .logger import create_logger
from .telemetry import TracerProviderManager

logger = create_logger("extension")

DEFAULT_EXTENSION_NAME = "lambda-telemetry-tracer"


class ExtensionApiError(RuntimeError):
    """A call to the Extensions or Telemetry API failed."""


class ExtensionClient:
    """Talks to the Lambda Extensions and Telemetry APIs.

    Args:
        runtime_api: Host and port from ``AWS_LAMBDA_RUNTIME_API``
        session: aiohttp session used for every request
        name: Extension name sent at registration; Lambda expects it to
            match the executable's file name
    """

    def __init__(
        self,
        runtime_api: str,
        session: aiohttp.ClientSession,
        name: str = DEFAULT_EXTENSION_NAME,
    ):
        self.base_url = f"http://{runtime_api}"
        self.session = session
        self.name = name
        self.extension_id: Optional[str] = None

    def _id_headers(self) -> dict[str, str]:
        if self.extension_id is None:
            raise ExtensionApiError("extension is not registered")
        return {ExtensionApi.IDENTIFIER_HEADER: self.extension_id}

    @staticmethod
    async def _check(response: aiohttp.ClientResponse, action: str) -> None:
        if response.status >= 300:
            body = await response.text()
            raise ExtensionApiError(f"{action} failed with {response.status}: {body}")

    async def register(self) -> str:
        """Register for INVOKE and SHUTDOWN events and return the extension id."""
        try:
            async with self.session.post(
                self.base_url + ExtensionApi.REGISTER_PATH,
                headers={ExtensionApi.NAME_HEADER: self.name},
                json={"events": [ExtensionApi.INVOKE, ExtensionApi.SHUTDOWN]},
            ) as response:
                await self._check(response, "register")
                extension_id = response.headers.get(ExtensionApi.IDENTIFIER_HEADER)
        except aiohttp.ClientError as e:
            raise ExtensionApiError(f"register failed: {e}") from e

        if not extension_id:
            raise ExtensionApiError("register response has no extension identifier")
        self.extension_id = extension_id
        logger.info("Registered extension %s", self.name)
        return extension_id

    async def subscribe_telemetry(
        self,
        destination_uri: str,
        max_items: int,
        max_bytes: int,
        timeout_ms: int,
    ) -> None:
        """Subscribe to platform and function telemetry."""
        subscription = {
            "schemaVersion": ExtensionApi.TELEMETRY_SCHEMA_VERSION,
            "types": ["platform", "function"],
            "buffering": {
                "maxItems": max_items,
                "maxBytes": max_bytes,
                "timeoutMs": timeout_ms,
            },
            "destination": {"protocol": "HTTP", "URI": destination_uri},
        }
        try:
            async with self.session.put(
                self.base_url + ExtensionApi.TELEMETRY_PATH,
                headers=self._id_headers(),
                json=subscription,
            ) as response:
                await self._check(response, "telemetry subscription")
        except aiohttp.ClientError as e:
            raise ExtensionApiError(f"telemetry subscription failed: {e}") from e
        logger.info("Subscribed to telemetry at %s", destination_uri)

    async def next_event(self) -> dict[str, Any]:
        """Block until Lambda sends the next INVOKE or SHUTDOWN event."""
        try:
            # No client timeout: Lambda freezes the sandbox while this waits
            async with self.session.get(
                self.base_url + ExtensionApi.NEXT_EVENT_PATH,
                headers=self._id_headers(),
                timeout=aiohttp.ClientTimeout(total=None),
            ) as response:
                await self._check(response, "next event")
                event = await response.json(content_type=None)
        except (aiohttp.ClientError, ValueError) as e:
            raise ExtensionApiError(f"next event failed: {e}") from e

        if not isinstance(event, dict):
            raise ExtensionApiError(f"unexpected next event payload: {event!r}")
        return event


async def run_extension(
    config: ExtensionConfig,
    manager: TracerProviderManager,
    session: Optional[aiohttp.ClientSession] = None,
    name: str = DEFAULT_EXTENSION_NAME,
) -> None:
    """Run the extension until Lambda sends SHUTDOWN.

    Starts the telemetry listener, registers the extension, subscribes the
    listener to the Telemetry API and then waits on the event loop. Batches
    are recorded by the listener while this coroutine waits for events.

    Raises:
        ExtensionApiError: If the runtime API is unknown or a call fails
        OSError: If the listener cannot bind its port
    """
    if not config.runtime_api:
        raise ExtensionApiError("AWS_LAMBDA_RUNTIME_API is not set")

    handler = BatchHandler(manager.tracer, config.max_unhandled_length)
    listener = TelemetryListener(handler, port=config.listener_port)
    own_session = session is None
    if own_session:
        session = aiohttp.ClientSession()

    try:
        await listener.start()
        client = ExtensionClient(config.runtime_api, session, name=name)
        await client.register()
        await client.subscribe_telemetry(
            f"http://{ExtensionApi.SANDBOX_HOST}:{config.listener_port}",
            config.buffer_max_items,
            config.buffer_max_bytes,
            config.buffer_timeout_ms,
        )

        while True:
            event = await client.next_event()
            event_type = event.get("eventType")
            if event_type == ExtensionApi.SHUTDOWN:
                logger.info(
                    "Received SHUTDOWN (reason: %s)", event.get("shutdownReason")
                )
                break
            logger.debug("Received %s event", event_type)

        # The last buffered batch can arrive after SHUTDOWN
        await asyncio.sleep(config.buffer_timeout_ms / 1000)
    finally:
        await listener.stop()
        if own_session:
            await session.close()
