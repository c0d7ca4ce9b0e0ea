"""
Main entrypoint for the Book Inventory API.

This module assembles the FastAPI application, sets up logging, wires
the connection pool into the book service and registers the error
handlers.  ``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn book_inventory_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import book_router, router as root_router
from .core.config import Settings, settings as default_settings
from .core.db import ConnectionPool, get_database_path, init_db
from .core.errors import BadInputError, BookServiceError, status_for_error
from .core.logging_config import setup_logging
from .services.book_service import BookService

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to build the app with.  Defaults to the settings read
        from the environment at import time.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  The database pool is
        opened when the application starts and closed when it stops.
    """
    cfg = app_settings or default_settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(cfg.log_level, cfg.log_file, debug=cfg.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db_path = get_database_path(cfg.database_url)
        pool = ConnectionPool(db_path, size=cfg.database_pool_size, timeout=cfg.database_pool_timeout)
        try:
            # Apply migrations; creates the database file if it does not exist.
            init_db(pool)
            app.state.pool = pool
            app.state.book_service = BookService(pool, min_stock=cfg.book_min_stock)
            logger.info("Serving books from %s", db_path)
            yield
        finally:
            pool.close()

    app = FastAPI(
        title=cfg.project_name,
        version=cfg.api_version,
        debug=cfg.debug,
        lifespan=lifespan,
    )

    app.include_router(root_router)
    app.include_router(book_router, prefix=cfg.api_prefix)

    @app.exception_handler(BookServiceError)
    async def handle_service_error(request: Request, exc: BookServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=status_for_error(exc),
            content={"detail": exc.public_message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies and path parameters are bad input like an empty title.
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": BadInputError.public_message,
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
