"""
Pydantic models for book records, inbound payloads and operation results.
Fields serialize in camelCase to match the public JSON contract.
"""

import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from bookshelf.exceptions import BookshelfError, ValidationError


class Action(str, Enum):
    """Mutating action a payload is parsed for; selects the message prefix."""
    ADD = "menambahkan"
    UPDATE = "memperbarui"

    @property
    def prefix(self) -> str:
        return f"Gagal {self.value} buku."

    @property
    def name_required(self) -> str:
        return f"{self.prefix} Mohon isi nama buku"

    @property
    def page_overflow(self) -> str:
        return f"{self.prefix} readPage tidak boleh lebih besar dari pageCount"


class Messages:
    """Localized response messages."""
    BOOK_ADDED = "Buku berhasil ditambahkan"
    BOOK_ADD_FAILED = "Buku gagal ditambahkan"
    BOOK_UPDATED = "Buku berhasil diperbarui"
    BOOK_UPDATE_NOT_FOUND = "Gagal memperbarui buku. Id tidak ditemukan"
    BOOK_NOT_FOUND = "Buku tidak ditemukan"
    BOOK_DELETED = "Buku berhasil dihapus"
    BOOK_DELETE_NOT_FOUND = "Buku gagal dihapus. Id tidak ditemukan"


# pydantic error type -> localized problem description
_FIELD_PROBLEMS = {
    "int_type": "harus berupa bilangan bulat",
    "int_parsing": "harus berupa bilangan bulat",
    "int_from_float": "harus berupa bilangan bulat",
    "bool_type": "harus berupa boolean",
    "bool_parsing": "harus berupa boolean",
    "string_type": "harus berupa teks",
    "greater_than_equal": "tidak boleh negatif",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BookPayload(BaseModel):
    """
    Typed request built from a loosely-typed create/update payload.

    Numeric fields accept integer strings, ``reading`` accepts boolean-ish
    values. Anything that cannot be coerced is rejected instead of being
    silently turned into a default.
    """
    # camelCase keys only; snake_case wire keys are ignored
    model_config = ConfigDict(alias_generator=to_camel, extra="ignore")

    name: str = Field(..., min_length=1, description="Book title")
    year: Optional[int] = Field(None, description="Publication year")
    author: Optional[str] = Field(None, description="Book author")
    summary: Optional[str] = Field(None, description="Short summary")
    publisher: Optional[str] = Field(None, description="Publisher name")
    page_count: int = Field(0, ge=0, description="Total number of pages")
    read_page: int = Field(0, ge=0, description="Last page read")
    reading: bool = Field(False, description="Whether the book is being read")

    @classmethod
    def parse(cls, raw: Optional[Mapping[str, Any]], action: Action) -> "BookPayload":
        """
        Validate a raw payload in the order the API reports problems.

        Args:
            raw: Decoded JSON body; anything that is not a mapping counts as empty
            action: Whether the payload creates or updates a book

        Returns:
            Parsed BookPayload

        Raises:
            ValidationError: name missing, a field not coercible, or readPage > pageCount
        """
        if not isinstance(raw, Mapping):
            raw = {}

        name = raw.get("name")
        if name is None or name == "":
            raise ValidationError(action.name_required)

        try:
            payload = cls.model_validate({k: v for k, v in raw.items() if v is not None})
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "payload"
            problem = _FIELD_PROBLEMS.get(error["type"], "tidak valid")
            raise ValidationError(f"{action.prefix} {field} {problem}") from e

        if payload.read_page > payload.page_count:
            raise ValidationError(action.page_overflow)

        return payload


class Book(_CamelModel):
    """A single catalog entry held by the store."""
    id: str = Field(..., description="Unique book identifier")
    name: str = Field(..., description="Book title")
    year: Optional[int] = Field(None, description="Publication year")
    author: Optional[str] = Field(None, description="Book author")
    summary: Optional[str] = Field(None, description="Short summary")
    publisher: Optional[str] = Field(None, description="Publisher name")
    page_count: int = Field(..., ge=0, description="Total number of pages")
    read_page: int = Field(..., ge=0, description="Last page read")
    finished: bool = Field(..., description="Read to the last page at creation time")
    reading: bool = Field(..., description="Whether the book is being read")
    inserted_at: str = Field(..., description="Creation timestamp (ISO 8601)")
    updated_at: str = Field(..., description="Last update timestamp (ISO 8601)")

    @classmethod
    def from_payload(cls, book_id: str, payload: BookPayload, timestamp: str) -> "Book":
        """Build a new record; ``finished`` is derived here and only here."""
        return cls(
            id=book_id,
            finished=payload.page_count == payload.read_page,
            inserted_at=timestamp,
            updated_at=timestamp,
            **payload.model_dump(),
        )

    def with_payload(self, payload: BookPayload, timestamp: str) -> "Book":
        """Return a copy with every mutable field replaced. ``finished`` is left as stored."""
        return self.model_copy(update={**payload.model_dump(), "updated_at": timestamp})

    def to_summary(self) -> "BookSummary":
        return BookSummary(id=self.id, name=self.name, publisher=self.publisher)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class BookSummary(BaseModel):
    """Abbreviated projection returned by book listings."""
    id: str
    name: str
    publisher: Optional[str] = None


# Numeric text accepted by JavaScript's Number(); everything else is NaN
_NUMBER_PATTERN = re.compile(
    r"[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|Infinity)"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
)


def parse_flag(value: Optional[str]) -> bool:
    """
    Interpret a boolean-ish query value.

    The text is read with JavaScript ``Number()`` rules:
    nonzero is true, zero is false, and anything that is not a number
    (``true``, ``inf``, ``abc``) is false.
    """
    text = (value or "").strip()
    if not _NUMBER_PATTERN.fullmatch(text):
        return False
    if text[:2].lower() in ("0x", "0o", "0b"):
        return int(text, 0) != 0
    return float(text) != 0


class BookFilters(BaseModel):
    """Conjunctive filters for book listings. ``None`` means not supplied."""
    name: Optional[str] = None
    reading: Optional[bool] = None
    finished: Optional[bool] = None

    @classmethod
    def from_query(
        cls,
        name: Optional[str] = None,
        reading: Optional[str] = None,
        finished: Optional[str] = None,
    ) -> "BookFilters":
        """Build filters from raw query strings; empty strings are treated as absent."""
        return cls(
            name=name or None,
            reading=parse_flag(reading) if reading else None,
            finished=parse_flag(finished) if finished else None,
        )

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.reading is None and self.finished is None

    def matches(self, book: Book) -> bool:
        if self.name is not None and self.name.lower() not in book.name.lower():
            return False
        if self.reading is not None and book.reading != self.reading:
            return False
        if self.finished is not None and book.finished != self.finished:
            return False
        return True


class ResultStatus(str, Enum):
    """Envelope status values."""
    SUCCESS = "success"
    FAIL = "fail"


class Result(BaseModel):
    """Tagged outcome of a store operation."""
    status: ResultStatus = Field(..., description="success or fail")
    code: int = Field(..., description="HTTP status code")
    message: Optional[str] = Field(None, description="Human-readable message")
    data: Optional[Dict[str, Any]] = Field(None, description="Operation payload")
    error: Optional[str] = Field(None, description="Error kind for failed results")

    @classmethod
    def success(
        cls,
        code: int = 200,
        message: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> "Result":
        return cls(status=ResultStatus.SUCCESS, code=code, message=message, data=data)

    @classmethod
    def failure(cls, exc: BookshelfError) -> "Result":
        return cls(
            status=ResultStatus.FAIL,
            code=exc.status_code,
            message=exc.message,
            error=exc.kind,
        )

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def envelope(self) -> Dict[str, Any]:
        """Response body: status plus message/data when present."""
        body: Dict[str, Any] = {"status": self.status.value}
        if self.message is not None:
            body["message"] = self.message
        if self.data is not None:
            body["data"] = self.data
        return body
