"""
Error taxonomy for the Book service.

Every failure a handler can report is one of three kinds: the client
sent bad input, the addressed book does not exist, or the store failed.
``status_for_error`` is the only place these kinds are turned into HTTP
status codes.
"""

from fastapi import status


class BookServiceError(Exception):
    """Base class for errors raised by the service layer."""

    #: Message safe to show to API clients.
    public_message = "Request failed"


class BadInputError(BookServiceError):
    """Client supplied data that fails validation."""

    public_message = "Invalid book payload"


class NotFoundError(BookServiceError):
    """No book matches the requested id."""

    public_message = "Book not found"


class InternalError(BookServiceError):
    """The store failed for a reason unrelated to the request data."""

    public_message = "Internal server error"


_STATUS_BY_ERROR = {
    BadInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for_error(exc: BookServiceError) -> int:
    """Map a service error to its HTTP status code.

    Unknown subclasses are treated as internal errors.
    """
    for error_type, code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
