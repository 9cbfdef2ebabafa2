"""
Task Bridge - Main Application Entry Point

Builds the service container and runs the scheduler until interrupted.
"""

import asyncio
import logging
import sys

from config import settings
from .container import ServiceContainer

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


async def run() -> None:
    """Start scheduled jobs and wait forever."""
    logger.info(f"Starting {settings.app_name}...")
    container = ServiceContainer.create(settings)
    container.scheduler.start()

    try:
        await asyncio.Event().wait()
    finally:
        container.scheduler.stop()
        logger.info(f"{settings.app_name} stopped")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
