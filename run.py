"""Entry point for the Book Inventory API.

Starts the FastAPI application with Uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (defaults
``127.0.0.1`` and ``3000``); see ``book_inventory_api.app.core.config``
for the remaining settings.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from book_inventory_api.app.core.config import settings
from book_inventory_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
