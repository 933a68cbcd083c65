"""
Luma Circadian Lighting Service - Main Entry Point
"""
import asyncio
import sys
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from luma.api import create_app
from luma.config import get_settings
from luma.database import close_database, init_database
from luma.logging_config import setup_logging

logger = structlog.get_logger(__name__)


class LumaDaemon:
    """Service controller: database, API and lifecycle"""

    def __init__(self):
        self.settings = get_settings()
        self.app: Optional[FastAPI] = None

    async def startup(self):
        """Initialize all service components"""
        logger.info("luma_daemon_starting", version=self.settings.api_version)

        logger.info("initializing_database")
        await init_database(
            self.settings.database_url,
            create_tables=self.settings.database_create_tables,
        )

        self.app = create_app(self.settings)

        logger.info("luma_daemon_ready", port=self.settings.daemon_port)

    async def shutdown(self):
        """Gracefully shutdown all components"""
        logger.info("luma_daemon_shutting_down")

        await close_database()

        logger.info("luma_daemon_stopped")


async def main_async():
    """Async main function"""
    daemon = LumaDaemon()

    try:
        await daemon.startup()

        config = uvicorn.Config(
            daemon.app,
            host="0.0.0.0",
            port=daemon.settings.daemon_port,
            log_level=daemon.settings.log_level.lower(),
            access_log=True,
        )
        server = uvicorn.Server(config)
        await server.serve()

    except Exception as e:
        logger.error("daemon_error", error=str(e), exc_info=True)
        sys.exit(1)
    finally:
        await daemon.shutdown()


def main():
    """Entry point for the service"""
    # Initialize logging first
    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        log_file=settings.log_file,
    )

    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        logger.info("interrupted_by_user")
        sys.exit(0)


if __name__ == "__main__":
    main()
