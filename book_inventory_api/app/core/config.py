"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
service starts against a local SQLite file without any setup.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    """Return the integer value of an environment variable, or ``None`` if unset."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return int(raw)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Book Inventory API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  A relative path is resolved
    # relative to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "books.db")
    database_pool_size: int = int(os.getenv("DATABASE_POOL_SIZE", "5"))
    # Seconds to wait for a free pooled connection before failing the request.
    database_pool_timeout: float = float(os.getenv("DATABASE_POOL_TIMEOUT", "30"))

    # Lower bound for ``stock``.  Unset means no bound.
    book_min_stock: Optional[int] = _optional_int("BOOK_MIN_STOCK")

    # Prefix the book routes are mounted under, e.g. ``/api/v1``.
    api_prefix: str = os.getenv("API_PREFIX", "")

    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
