"""
Pytest configuration and fixtures for the editorial backend tests.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Set test environment before importing app modules
os.environ["EDITORIAL_DATA_FILE"] = str(Path(tempfile.mkdtemp()) / "db.json")
os.environ["EDITORIAL_LOG_LEVEL"] = "WARNING"

from editorial.core.types import Category, Database, Network  # noqa: E402
from editorial.storage.document import DocumentStore  # noqa: E402


SEED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path: Path) -> DocumentStore:
    """An empty store in a temporary directory."""
    return DocumentStore(tmp_path / "db.json")


@pytest.fixture
def seeded_store(store: DocumentStore) -> DocumentStore:
    """
    Store with two categories ("1" tech, "2" sport) and one network ("10").

    Numeric-looking ids let import tests send references as numbers.
    """
    store.write(Database(
        categories=[
            Category(id="1", name="Tech", slug="tech", created_at=SEED_TIME, updated_at=SEED_TIME),
            Category(id="2", name="Sport", slug="sport", color="#00FF00", created_at=SEED_TIME, updated_at=SEED_TIME),
        ],
        networks=[
            Network(id="10", name="Le Monde", slug="le-monde", created_at=SEED_TIME, updated_at=SEED_TIME),
        ],
    ))
    return store


@pytest.fixture
def article_data():
    """Factory for valid article create payloads (camelCase, as sent by clients)."""
    def _article_data(**overrides) -> dict:
        data = {
            "title": "Hello World",
            "excerpt": "A short summary of the article.",
            "content": "The full body of the article, long enough.",
            "authorName": "Jane Doe",
        }
        data.update(overrides)
        return data
    return _article_data


@pytest.fixture
def import_records() -> list[dict]:
    """Three heterogeneous import records; all valid against seeded_store."""
    return [
        {
            "title": "Budget vote tonight",
            "content": "<p>The assembly votes on the <b>budget</b> tonight.</p>",
            "categoryId": 1,
            "networkId": 10,
        },
        {
            "title": "Cup final preview",
            "content": "Both teams arrive unbeaten in the competition.",
            "categoryIds": ["2"],
            "summary": "Who will lift the cup?",
            "imageUrl": "https://cdn.example.com/cup.jpg",
            "featured": "true",
        },
        {
            "title": "New chip announced",
            "content": "A manufacturer announced a faster chip today.",
            "categoryIds": [1, 2],
            "status": "published",
            "authorName": "Tech Desk",
        },
    ]
