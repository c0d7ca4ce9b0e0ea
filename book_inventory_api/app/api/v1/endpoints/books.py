"""
Book endpoints for API v1.

These routes expose CRUD operations for books.  Handlers only translate
between HTTP and ``BookService`` calls; service errors propagate to the
application's exception handler, which maps them to status codes.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status

from book_inventory_api.app.schemas.book import BookPayload, BookRead
from book_inventory_api.app.services.book_service import BookService

router = APIRouter()


def get_book_service(request: Request) -> BookService:
    """Return the service bound to the application's connection pool."""
    return request.app.state.book_service


@router.get("", response_model=List[BookRead])
async def list_books(service: BookService = Depends(get_book_service)) -> List[BookRead]:
    """Return all books in insertion order."""
    return await service.list_books()


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_in: BookPayload,
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Create a new book.

    Returns HTTP 400 if the title is empty after trimming.
    """
    return await service.create_book(book_in)


@router.get("/{book_id}", response_model=BookRead)
async def get_book(book_id: int, service: BookService = Depends(get_book_service)) -> BookRead:
    """Retrieve a single book by ID."""
    return await service.get_book(book_id)


@router.put("/{book_id}", response_model=BookRead)
async def update_book(
    book_id: int,
    book_in: BookPayload,
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Replace title, author, published date and stock of a book."""
    return await service.update_book(book_id, book_in)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: int, service: BookService = Depends(get_book_service)) -> None:
    """Delete a book.  A second delete of the same id returns 404."""
    await service.delete_book(book_id)
    return None
