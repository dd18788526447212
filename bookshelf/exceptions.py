"""
Errors raised by bookshelf store operations.
Each error carries the localized message and the HTTP status it maps to.
"""


class BookshelfError(Exception):
    """Base exception for bookshelf errors."""

    status_code = 500
    kind = "BookshelfError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookshelfError):
    """Payload is missing a name, cannot be coerced, or overflows its page count."""

    status_code = 400
    kind = "ValidationError"


class NotFoundError(BookshelfError):
    """Requested bookId does not exist in the collection."""

    status_code = 404
    kind = "NotFoundError"


class InternalError(BookshelfError):
    """Collection failed a post-write consistency check."""

    status_code = 500
    kind = "InternalError"
