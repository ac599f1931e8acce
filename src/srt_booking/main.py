"""Main entry point for the SRT booking API server."""

import asyncio
import logging
import sys

import uvicorn

from srt_booking.adapters.config import AppConfig
from srt_booking.adapters.web import create_api_app
from srt_booking.bootstrap import build_ticketing_client, create_http_session

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    # One aiohttp session for every user; cookies are sent per request
    async with create_http_session() as http_session:
        client = build_ticketing_client(config, http_session)
        app = create_api_app(client, rate_limit_per_minute=config.rate_limit_per_minute)

        server_config = uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            reload=config.reload,
            log_level=config.log_level.lower(),
        )
        server = uvicorn.Server(server_config)

        logger.info(f"Serving SRT booking API on {config.host}:{config.port}")
        try:
            await server.serve()
        except KeyboardInterrupt:
            logger.info("Shutting down...")


def run() -> None:
    """Synchronous entry point for the server command."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
