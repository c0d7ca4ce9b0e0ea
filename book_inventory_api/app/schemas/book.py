"""
Pydantic schemas for book data.

``BookPayload`` is the request body for both create and update; every
mutable field is replaced on update, so a single shape serves both.
``BookRead`` is the response representation of a stored record.

Whitespace around ``title`` and ``author`` is stripped on parse and an
author that is empty after stripping becomes ``None``.  Whether the
title is empty is decided by the service layer, so the rule also holds
for callers that bypass HTTP.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


SERVER_MANAGED_FIELDS = ("id", "created_at")

# Range of an SQLite INTEGER column.
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


class BookPayload(BaseModel):
    """Schema for creating or replacing a book."""

    title: str = Field(..., examples=["Dune"])
    author: Optional[str] = Field(None, examples=["Frank Herbert"])
    stock: int = Field(..., ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX, examples=[5])
    published_date: Optional[date] = Field(None, examples=["1965-08-01"])

    @model_validator(mode="before")
    @classmethod
    def reject_server_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            supplied = [name for name in SERVER_MANAGED_FIELDS if name in data]
            if supplied:
                raise ValueError(f"{', '.join(supplied)} cannot be set by the client")
        return data

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()

    @field_validator("author")
    @classmethod
    def normalize_author(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class BookRead(BaseModel):
    """Schema for reading a book from the API."""

    id: int
    title: str
    author: Optional[str]
    published_date: Optional[date]
    stock: int
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
