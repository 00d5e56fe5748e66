"""HTTP listener that receives Telemetry API batches.

The Telemetry API pushes batches as ``POST`` requests with a JSON array
body to the destination URI given at subscription time. Each request is
decoded and handed to the :class:`BatchHandler` as one batch.
"""

import json
from typing import Optional

from aiohttp import web

from .handler import BatchHandler
from .logger import create_logger
from .records import parse_batch

logger = create_logger("listener")


class TelemetryListener:
    """aiohttp server that feeds telemetry batches into a BatchHandler."""

    def __init__(self, handler: BatchHandler, host: str = "0.0.0.0", port: int = 9002):
        self.handler = handler
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_post("/", self._handle_batch)
        self.app.router.add_get("/health", self._handle_health)

    async def start(self) -> None:
        """Start accepting telemetry batches."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info("Telemetry listener on http://%s:%d", self.host, self.port)

    async def stop(self) -> None:
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Telemetry listener stopped")

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    async def _handle_batch(self, request: web.Request) -> web.Response:
        body = await request.read()
        try:
            # json.loads detects UTF-8/16/32 itself; the declared charset is ignored
            payload = json.loads(body)
        except (ValueError, RecursionError) as e:
            logger.warning("Discarding telemetry batch with invalid JSON: %s", e)
            return web.json_response({"error": "invalid JSON"}, status=400)

        records = parse_batch(payload)
        count = self.handler.handle(records)
        logger.debug("Recorded %d telemetry events", count)
        return web.json_response({"accepted": count})
