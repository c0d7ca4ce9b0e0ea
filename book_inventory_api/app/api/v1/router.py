"""
Top‑level router for version 1 of the API.

The welcome route always lives at the site root; ``book_router`` is
mounted by ``main.create_app`` under the configured prefix.
"""

from fastapi import APIRouter

from .endpoints import books, welcome

router = APIRouter()
router.include_router(welcome.router, tags=["welcome"])

book_router = APIRouter()
book_router.include_router(books.router, prefix="/books", tags=["books"])
