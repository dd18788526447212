"""
In-memory book store.

BookStore owns the ordered book collection for one application instance and
exposes the create/list/get/update/delete operations used by the API. Every
operation returns a Result; domain errors are converted here and never
propagate to the caller.
"""

import secrets
import threading
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional

from bookshelf.exceptions import BookshelfError, InternalError, NotFoundError, ValidationError
from bookshelf.models import Action, Book, BookFilters, BookPayload, Messages, Result
from utilities.logger import StoreLogger

# Attempts at drawing an unused id before giving up
MAX_ID_ATTEMPTS = 5


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_book_id(length: int = 16) -> str:
    """Generate a URL-safe random id of exactly ``length`` characters."""
    return secrets.token_urlsafe(length)[:length]


class BookStore:
    """Process-local book collection guarded by a single lock."""

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], str]] = None,
        id_length: int = 16,
        logger: Optional[StoreLogger] = None,
    ):
        self._books: List[Book] = []
        self._lock = threading.RLock()
        self._id_factory = id_factory or (lambda: generate_book_id(id_length))
        self._clock = clock or utc_timestamp
        self._log = logger or StoreLogger()

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def _find_index(self, book_id: str) -> Optional[int]:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None

    def _append(self, book: Book) -> None:
        self._books.append(book)

    def _new_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            book_id = self._id_factory()
            if self._find_index(book_id) is None:
                return book_id
        raise InternalError(Messages.BOOK_ADD_FAILED)

    def _fail(self, operation: str, error: BookshelfError, book_id: Optional[str] = None) -> Result:
        if isinstance(error, ValidationError):
            self._log.log_validation_failure(operation, error.message, book_id=book_id)
        elif isinstance(error, NotFoundError):
            self._log.log_not_found(operation, book_id)
        else:
            self._log.log_internal_error(operation, error.message, book_id=book_id)
        return Result.failure(error)

    def create_book(self, raw: Optional[Mapping[str, Any]]) -> Result:
        """
        Validate a payload and append a new book.

        Args:
            raw: Decoded request body

        Returns:
            201 Result with ``{"bookId": ...}``, or a fail Result
        """
        try:
            payload = BookPayload.parse(raw, Action.ADD)
        except ValidationError as e:
            return self._fail("create", e)

        with self._lock:
            try:
                book_id = self._new_id()
            except InternalError as e:
                return self._fail("create", e)

            book = Book.from_payload(book_id, payload, self._clock())
            self._append(book)
            stored = self._find_index(book_id) is not None
            total = len(self._books)

        if not stored:
            return self._fail("create", InternalError(Messages.BOOK_ADD_FAILED), book_id)

        self._log.log_book_created(book_id, book.name, total)
        return Result.success(201, Messages.BOOK_ADDED, {"bookId": book_id})

    def list_books(self, filters: Optional[BookFilters] = None) -> Result:
        """Return ``{id, name, publisher}`` projections in insertion order."""
        with self._lock:
            books = list(self._books)

        if filters is not None and not filters.is_empty:
            books = [book for book in books if filters.matches(book)]

        return Result.success(
            200,
            data={"books": [book.to_summary().model_dump() for book in books]},
        )

    def get_book(self, book_id: str) -> Result:
        with self._lock:
            index = self._find_index(book_id)
            book = self._books[index] if index is not None else None

        if book is None:
            return self._fail("get", NotFoundError(Messages.BOOK_NOT_FOUND), book_id)

        return Result.success(200, data={"book": book.to_dict()})

    def update_book(self, book_id: str, raw: Optional[Mapping[str, Any]]) -> Result:
        """
        Replace the mutable fields of an existing book.

        The payload is validated before the lookup, so an invalid payload is
        rejected even for unknown ids. ``finished`` keeps its creation value.

        Args:
            book_id: Id of the book to update
            raw: Decoded request body

        Returns:
            200 Result carrying the updated record, or a fail Result
        """
        try:
            payload = BookPayload.parse(raw, Action.UPDATE)
        except ValidationError as e:
            return self._fail("update", e, book_id)

        with self._lock:
            index = self._find_index(book_id)
            if index is None:
                return self._fail("update", NotFoundError(Messages.BOOK_UPDATE_NOT_FOUND), book_id)

            book = self._books[index].with_payload(payload, self._clock())
            self._books[index] = book

        self._log.log_book_updated(book_id, book.name)
        return Result.success(200, Messages.BOOK_UPDATED, book.to_dict())

    def delete_book(self, book_id: str) -> Result:
        with self._lock:
            index = self._find_index(book_id)
            if index is None:
                return self._fail("delete", NotFoundError(Messages.BOOK_DELETE_NOT_FOUND), book_id)

            del self._books[index]
            total = len(self._books)

        self._log.log_book_deleted(book_id, total)
        return Result.success(200, Messages.BOOK_DELETED)
