"""
Application package initializer.

The Book resource is split into the usual layers: storage access in
``core/db.py``, payload schemas in ``schemas``, business rules in
``services`` and HTTP handlers in ``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
