"""Entry point for the Usuarios API.

Starts the FastAPI application under Uvicorn.  Intended to be executed
from the project root, for example under Docker, where you only
specify a single Python file to run.

Configuration (database path, storage backend, log level, host and
port) is read from environment variables; see
``usuarios_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from usuarios_api.app.core.config import settings
from usuarios_api.app.main import app


async def main() -> None:
    """Serve the API on ``API_HOST``:``API_PORT`` (default ``0.0.0.0:8001``)."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
