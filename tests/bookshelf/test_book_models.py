"""
Unit tests for bookshelf models.
Tests payload parsing, filters, projections and result envelopes.
"""

import pytest

from bookshelf.exceptions import NotFoundError, ValidationError
from bookshelf.models import (
    Action, Book, BookFilters, BookPayload, Result, ResultStatus, parse_flag
)


class TestBookPayload:
    """Test cases for BookPayload parsing."""

    def test_valid_payload(self, sample_payload):
        """Test parsing a well-typed payload."""
        payload = BookPayload.parse(sample_payload, Action.ADD)

        assert payload.name == "Buku A"
        assert payload.year == 2010
        assert payload.page_count == 100
        assert payload.read_page == 25
        assert payload.reading is False

    def test_coerces_numeric_strings_and_booleans(self, sample_payload):
        """Test that loosely-typed fields are coerced."""
        sample_payload.update(year="2010", pageCount="300", readPage="12", reading="true")

        payload = BookPayload.parse(sample_payload, Action.ADD)

        assert payload.year == 2010
        assert payload.page_count == 300
        assert payload.read_page == 12
        assert payload.reading is True

    def test_defaults_for_missing_fields(self):
        """Test that only the name is required."""
        payload = BookPayload.parse({"name": "Tipis"}, Action.ADD)

        assert payload.year is None
        assert payload.publisher is None
        assert payload.page_count == 0
        assert payload.read_page == 0
        assert payload.reading is False

    def test_null_values_treated_as_absent(self):
        payload = BookPayload.parse({"name": "Tipis", "pageCount": None, "reading": None}, Action.ADD)

        assert payload.page_count == 0
        assert payload.reading is False

    def test_snake_case_keys_ignored(self):
        """Test that only camelCase wire keys are read."""
        payload = BookPayload.parse(
            {"name": "S", "page_count": 50, "read_page": 50, "pageCount": 10}, Action.ADD
        )

        assert payload.page_count == 10
        assert payload.read_page == 0

    @pytest.mark.parametrize("raw",[{}, {"name": ""}, {"name": None}, None, ["name"], "Buku A"])
    def test_missing_name(self, raw):
        """Test that a missing or empty name is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(raw, Action.ADD)

        assert exc_info.value.message == "Gagal menambahkan buku. Mohon isi nama buku"
        assert exc_info.value.status_code == 400

    def test_update_messages_use_update_prefix(self):
        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse({"name": ""}, Action.UPDATE)

        assert exc_info.value.message == "Gagal memperbarui buku. Mohon isi nama buku"

    def test_page_overflow(self, sample_payload):
        """Test that readPage may not exceed pageCount."""
        sample_payload.update(pageCount=10, readPage=11)

        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(sample_payload, Action.ADD)

        assert exc_info.value.message == (
            "Gagal menambahkan buku. readPage tidak boleh lebih besar dari pageCount"
        )

    def test_name_checked_before_overflow(self, sample_payload):
        sample_payload.update(name="", pageCount=10, readPage=11)

        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(sample_payload, Action.UPDATE)

        assert exc_info.value.message == "Gagal memperbarui buku. Mohon isi nama buku"

    def test_uncoercible_number_rejected(self, sample_payload):
        """Test that a non-numeric page count fails instead of becoming NaN."""
        sample_payload["pageCount"] = "abc"

        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(sample_payload, Action.ADD)

        assert exc_info.value.message == "Gagal menambahkan buku. pageCount harus berupa bilangan bulat"

    def test_negative_page_count_rejected(self, sample_payload):
        sample_payload.update(pageCount=-1, readPage=0)

        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(sample_payload, Action.ADD)

        assert exc_info.value.message == "Gagal menambahkan buku. pageCount tidak boleh negatif"

    def test_uncoercible_boolean_rejected(self, sample_payload):
        sample_payload["reading"] = "sometimes"

        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(sample_payload, Action.ADD)

        assert exc_info.value.message == "Gagal menambahkan buku. reading harus berupa boolean"

    def test_non_string_name_rejected(self, sample_payload):
        sample_payload["name"] = 42

        with pytest.raises(ValidationError) as exc_info:
            BookPayload.parse(sample_payload, Action.ADD)

        assert exc_info.value.message == "Gagal menambahkan buku. name harus berupa teks"


class TestBook:
    """Test cases for the Book record."""

    def test_from_payload_derives_finished(self, sample_payload):
        sample_payload.update(pageCount=100, readPage=100)
        payload = BookPayload.parse(sample_payload, Action.ADD)

        book = Book.from_payload("abc", payload, "2026-10-19T08:00:00.000Z")

        assert book.finished is True
        assert book.inserted_at == book.updated_at == "2026-10-19T08:00:00.000Z"

    def test_with_payload_keeps_identity_and_finished(self, sample_payload):
        sample_payload.update(pageCount=100, readPage=100)
        book = Book.from_payload("abc", BookPayload.parse(sample_payload, Action.ADD), "t1")

        sample_payload.update(name="Buku B", pageCount=200, readPage=50)
        updated = book.with_payload(BookPayload.parse(sample_payload, Action.UPDATE), "t2")

        assert updated.id == "abc"
        assert updated.name == "Buku B"
        assert updated.page_count == 200
        assert updated.inserted_at == "t1"
        assert updated.updated_at == "t2"
        assert updated.finished is True
        assert book.name == "Buku A"

    def test_to_dict_uses_camel_case(self, sample_payload):
        book = Book.from_payload("abc", BookPayload.parse(sample_payload, Action.ADD), "t1")

        data = book.to_dict()

        assert set(data) == {
            "id", "name", "year", "author", "summary", "publisher", "pageCount",
            "readPage", "finished", "reading", "insertedAt", "updatedAt",
        }
        assert data["pageCount"] == 100

    def test_to_summary(self, sample_payload):
        book = Book.from_payload("abc", BookPayload.parse(sample_payload, Action.ADD), "t1")

        assert book.to_summary().model_dump() == {
            "id": "abc", "name": "Buku A", "publisher": "Dicoding Indonesia"
        }


class TestFilters:
    """Test cases for list filters."""

    @pytest.mark.parametrize("value,expected", [
        ("1", True), ("2", True), ("-1", True), ("0", False), ("0.0", False),
        ("1e3", True), (".5", True), ("0x10", True), ("0x0", False), (" 1 ", True),
        ("Infinity", True), ("-Infinity", True),
        ("true", False), ("false", False), ("inf", False), ("infinity", False),
        ("abc", False), ("nan", False), ("1_0", False), ("-0x10", False), (None, False),
    ])
    def test_parse_flag(self, value, expected):
        assert parse_flag(value) is expected

    def test_empty_query_has_no_filters(self):
        filters = BookFilters.from_query(name="", reading="", finished=None)

        assert filters.is_empty

    def test_from_query(self):
        filters = BookFilters.from_query(name="Laut", reading="1", finished="0")

        assert filters.name == "Laut"
        assert filters.reading is True
        assert filters.finished is False
        assert not filters.is_empty

    def test_matches_is_conjunctive(self, sample_payload):
        sample_payload.update(name="Laut Bercerita", reading=True)
        book = Book.from_payload("abc", BookPayload.parse(sample_payload, Action.ADD), "t1")

        assert BookFilters(name="LAUT").matches(book)
        assert BookFilters(name="laut", reading=True, finished=False).matches(book)
        assert not BookFilters(name="laut", reading=False).matches(book)
        assert not BookFilters(name="gunung").matches(book)


class TestResult:
    """Test cases for Result envelopes."""

    def test_success_envelope_omits_missing_keys(self):
        result = Result.success(200, message="Buku berhasil dihapus")

        assert result.ok
        assert result.envelope() == {"status": "success", "message": "Buku berhasil dihapus"}

    def test_success_with_data(self):
        result = Result.success(201, "ok", {"bookId": "abc"})

        assert result.code == 201
        assert result.envelope()["data"] == {"bookId": "abc"}

    def test_failure_from_error(self):
        result = Result.failure(NotFoundError("Buku tidak ditemukan"))

        assert not result.ok
        assert result.status == ResultStatus.FAIL
        assert result.code == 404
        assert result.error == "NotFoundError"
        assert result.envelope() == {"status": "fail", "message": "Buku tidak ditemukan"}
