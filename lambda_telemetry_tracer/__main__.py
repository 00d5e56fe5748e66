"""Entry point for running the extension as a Lambda external extension."""

import asyncio
import sys

from .config import load_config
from .extension import ExtensionApiError, run_extension
from .logger import create_logger
from .telemetry import TelemetryInitError, TracerProviderManager

logger = create_logger("main")


def main() -> int:
    logger.info("Lambda Extension starting up")
    config = load_config()

    manager = TracerProviderManager(config)
    try:
        manager.start()
    except TelemetryInitError as e:
        logger.error("Failed to initialize OpenTelemetry: %s", e)
        return 1

    try:
        asyncio.run(run_extension(config, manager))
    except ExtensionApiError as e:
        logger.error("Extension stopped: %s", e)
        return 1
    except OSError as e:
        logger.error("Telemetry listener failed: %s", e)
        return 1
    finally:
        logger.info("Lambda Extension shutting down")
        manager.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
