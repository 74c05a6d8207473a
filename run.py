"""Entry point for the Wanderlust web application.

Starts the FastAPI app under uvicorn.  Host and port are read from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``8080``); everything else (database path, session secret, image
service credentials) comes from the environment or a ``.env`` file, see
``wanderlust/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from wanderlust.app.core.config import settings


async def main() -> None:
    """Serve the application until interrupted."""
    config = Config(
        app="wanderlust.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logging.getLogger(__name__).info("Server running on port %s", settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
