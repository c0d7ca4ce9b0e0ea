"""
Top‑level package for the Book Inventory API.

This file makes ``book_inventory_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``book_inventory_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
