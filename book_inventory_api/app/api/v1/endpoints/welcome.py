"""
Welcome endpoint.

A plain-text greeting at the site root, usable as a liveness check.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def welcome() -> str:
    return "hello world"
