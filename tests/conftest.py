"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from bookshelf.store import BookStore
from utilities.config import BookshelfConfig


class FakeClock:
    """Returns a new timestamp, one second apart, on every call."""

    def __init__(self, start: datetime = datetime(2026, 10, 19, 8, 0, 0, tzinfo=timezone.utc)):
        self.current = start
        self.calls = 0

    def __call__(self) -> str:
        value = self.current.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        self.current += timedelta(seconds=1)
        self.calls += 1
        return value


class SequentialIds:
    """Deterministic id factory: book-0001, book-0002, ..."""

    def __init__(self):
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"book-{self.count:04d}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def book_store(clock):
    """Create an empty store with deterministic ids and timestamps."""
    return BookStore(id_factory=SequentialIds(), clock=clock)


@pytest.fixture
def sample_payload():
    """Create a valid create/update payload."""
    return {
        "name": "Buku A",
        "year": 2010,
        "author": "John Doe",
        "summary": "Lorem ipsum dolor sit amet",
        "publisher": "Dicoding Indonesia",
        "pageCount": 100,
        "readPage": 25,
        "reading": False,
    }


@pytest.fixture
def test_config():
    """Configuration isolated from the environment and any .env file."""
    return BookshelfConfig(_env_file=None, log_format="console")


@pytest.fixture
def client(book_store, test_config):
    """Create test client serving the fixture store."""
    app = create_app(settings=test_config, store=book_store)
    return TestClient(app)
