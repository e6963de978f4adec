"""
Pytest configuration and fixtures for bookstore services tests.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bookstore.api.main import create_app
from bookstore.api.dependencies import Settings
from bookstore.storage.database import create_db_engine


# =============================================================================
# Test Settings
# =============================================================================

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings configured for testing, one SQLite file per test."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'bookstore.db'}",
        database_echo=False,
        rabbitmq_url=None,
        jwt_secret_key="test-secret",
        environment="test",
        debug=False,
    )


# =============================================================================
# Event Sinks
# =============================================================================

class RecordingSink:
    """Notification sink that keeps every published event."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []
        self.closed = False

    def publish(self, routing_key: str, payload: dict) -> None:
        self.events.append((routing_key, payload))

    def close(self) -> None:
        self.closed = True

    def keys(self) -> list[str]:
        return [key for key, _ in self.events]


class FailingSink:
    """Notification sink whose broker is always down."""

    def __init__(self):
        self.attempts = 0

    def publish(self, routing_key: str, payload: dict) -> None:
        self.attempts += 1
        raise ConnectionError("broker unreachable")

    def close(self) -> None:
        pass


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def engine(tmp_path):
    """Engine on a throwaway SQLite file with all tables created."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'repo.db'}")
    yield engine
    engine.dispose()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app(test_settings, recording_sink):
    """Create FastAPI application for testing with all four services mounted."""
    application = create_app(test_settings, notification_sink=recording_sink)
    yield application
    application.state.services.close()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_book_data() -> dict:
    """Sample book data for testing."""
    return {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "description": "A story of decadence and excess in the Jazz Age.",
        "category": "Classic",
        "price": 9.99,
        "stock": 3,
    }


@pytest.fixture
def sample_books_batch() -> list[dict]:
    """Multiple sample books for list and search tests."""
    return [
        {
            "title": "1984",
            "author": "George Orwell",
            "description": "Big Brother is watching.",
            "category": "Dystopian",
            "price": 8.5,
            "stock": 10,
        },
        {
            "title": "Animal Farm",
            "author": "George Orwell",
            "description": "All animals are equal.",
            "category": "Satire",
            "price": 6.0,
            "stock": 4,
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "description": "A romance of manners.",
            "category": "Romance",
            "price": 7.25,
            "stock": 2,
        },
    ]


@pytest.fixture
def sample_user_data() -> dict:
    return {
        "email": "reader@bookstore.io",
        "password": "secret123",
        "name": "Avid Reader",
    }
