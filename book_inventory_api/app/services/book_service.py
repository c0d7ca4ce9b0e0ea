"""
Service layer for books.

``BookService`` implements the four operations on the ``books`` table.
Each operation validates its input before touching storage, borrows a
single connection from the pool and issues one parameterized statement
(plus a read-back of the affected row when a record must be returned).

Failures are reported with the exceptions from ``core.errors``:
``BadInputError`` for invalid payloads, ``NotFoundError`` for ids that do
not exist and ``InternalError`` for any store failure.  Store errors are
logged with their traceback here and never reach the client.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

from book_inventory_api.app.core.db import ConnectionPool
from book_inventory_api.app.core.errors import BadInputError, InternalError, NotFoundError
from book_inventory_api.app.schemas.book import SQLITE_INT_MAX, SQLITE_INT_MIN, BookPayload, BookRead

logger = logging.getLogger(__name__)

# Column widths from the books migration.
TITLE_MAX_LENGTH = 225
AUTHOR_MAX_LENGTH = 50


class BookService:
    """Create, read, update and delete books through a connection pool."""

    def __init__(self, pool: ConnectionPool, min_stock: Optional[int] = None) -> None:
        self.pool = pool
        self.min_stock = min_stock

    def validate(self, data: BookPayload) -> BookPayload:
        """Return a normalized copy of ``data`` or raise ``BadInputError``.

        ``title`` and ``author`` are stripped again here because payloads
        built with ``model_construct`` skip the schema validators.
        """
        title = (data.title or "").strip()
        if not title:
            raise BadInputError("title must not be empty")
        if len(title) > TITLE_MAX_LENGTH:
            raise BadInputError(f"title must be at most {TITLE_MAX_LENGTH} characters")
        author = data.author.strip() if data.author is not None else None
        author = author or None
        if author is not None and len(author) > AUTHOR_MAX_LENGTH:
            raise BadInputError(f"author must be at most {AUTHOR_MAX_LENGTH} characters")
        if not SQLITE_INT_MIN <= data.stock <= SQLITE_INT_MAX:
            raise BadInputError("stock is out of range")
        if self.min_stock is not None and data.stock < self.min_stock:
            raise BadInputError(f"stock must be at least {self.min_stock}")
        return data.model_copy(update={"title": title, "author": author})

    @staticmethod
    def check_id(book_id: int) -> None:
        """Raise ``NotFoundError`` for ids no INTEGER PRIMARY KEY can hold."""
        if not SQLITE_INT_MIN <= book_id <= SQLITE_INT_MAX:
            raise NotFoundError(book_id)

    async def list_books(self) -> List[BookRead]:
        """Return every book in insertion order."""
        try:
            with self.pool.connection() as conn:
                rows = conn.execute("SELECT * FROM books ORDER BY id ASC").fetchall()
        except sqlite3.Error as exc:
            logger.exception("Failed to list books")
            raise InternalError("list books") from exc
        return [self._row_to_book_read(row) for row in rows]

    async def create_book(self, data: BookPayload) -> BookRead:
        """Insert a new book and return the stored record."""
        data = self.validate(data)
        try:
            with self.pool.connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO books (title, author, stock, published_date)
                    VALUES (?, ?, ?, ?)
                    """,
                    (data.title, data.author, data.stock, self._date_param(data)),
                )
                book_id = cursor.lastrowid
                row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.exception("Failed to create book '%s'", data.title)
            raise InternalError("create book") from exc
        logger.info("Created book %s", book_id)
        return self._row_to_book_read(row)

    async def get_book(self, book_id: int) -> BookRead:
        """Retrieve a single book by its ID."""
        self.check_id(book_id)
        try:
            with self.pool.connection() as conn:
                row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.exception("Failed to fetch book %s", book_id)
            raise InternalError("get book") from exc
        if row is None:
            logger.info("Book %s not found", book_id)
            raise NotFoundError(book_id)
        return self._row_to_book_read(row)

    async def update_book(self, book_id: int, data: BookPayload) -> BookRead:
        """Replace the mutable fields of a book.

        ``id`` and ``created_at`` are never written.  Raises
        ``NotFoundError`` when the statement affects no row.
        """
        data = self.validate(data)
        self.check_id(book_id)
        try:
            with self.pool.connection() as conn:
                cursor = conn.execute(
                    """
                    UPDATE books
                    SET title = ?, author = ?, published_date = ?, stock = ?
                    WHERE id = ?
                    """,
                    (data.title, data.author, self._date_param(data), data.stock, book_id),
                )
                if cursor.rowcount == 0:
                    row = None
                else:
                    row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.exception("Failed to update book %s", book_id)
            raise InternalError("update book") from exc
        if row is None:
            logger.info("Book %s not found for update", book_id)
            raise NotFoundError(book_id)
        logger.info("Updated book %s", book_id)
        return self._row_to_book_read(row)

    async def delete_book(self, book_id: int) -> None:
        """Delete a book by ID.

        Succeeds only if exactly one row was removed.
        """
        self.check_id(book_id)
        try:
            with self.pool.connection() as conn:
                affected = conn.execute("DELETE FROM books WHERE id = ?", (book_id,)).rowcount
        except sqlite3.Error as exc:
            logger.exception("Failed to delete book %s", book_id)
            raise InternalError("delete book") from exc
        if affected != 1:
            logger.info("Book %s not found for delete", book_id)
            raise NotFoundError(book_id)
        logger.info("Deleted book %s", book_id)

    @staticmethod
    def _date_param(data: BookPayload) -> Optional[str]:
        # Stored as ISO text; sqlite3's implicit date adapter is deprecated.
        return data.published_date.isoformat() if data.published_date is not None else None

    @staticmethod
    def _row_to_book_read(row: sqlite3.Row) -> BookRead:
        """Convert a database row to a BookRead schema instance."""
        return BookRead(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            published_date=row["published_date"],
            stock=row["stock"],
            created_at=row["created_at"],
        )
