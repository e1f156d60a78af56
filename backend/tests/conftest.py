"""
Blog API Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── memory_store: In-memory DocumentStore (no MongoDB needed)
    ├── mock_store: AsyncMock DocumentStore for call assertions
    ├── mock_collection: Mocked PyMongo collection for MongoDocumentStore tests
    ├── sample_post_document: A stored post document
    └── test_client: HTTPX AsyncClient bound to an app serving memory_store
"""

import copy
import os
from datetime import datetime, timezone
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any blogapi import so the settings singleton never points at a real server
os.environ["MONGO_URI"] = "mongodb://localhost:27017"
os.environ["MONGO_DATABASE"] = "blog_test"
os.environ["LOG_LEVEL"] = "WARNING"

from blogapi.config import Settings  # noqa: E402
from blogapi.exceptions import StoreFailureError  # noqa: E402
from blogapi.main import create_app  # noqa: E402
from blogapi.store.base import Document, DocumentStore  # noqa: E402
from blogapi.store.query import AllDocuments, ById, SetFields  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class InMemoryDocumentStore(DocumentStore):
    """
    DocumentStore backed by a dict, preserving insertion order.

    Setting `fail_with` makes every CRUD call raise StoreFailureError with
    that text, to exercise the 500 paths. `calls` records each CRUD method
    name so tests can assert the store was never touched.
    """

    def __init__(self) -> None:
        self.documents: Dict[ObjectId, Document] = {}
        self.connected = False
        self.fail_with: Optional[str] = None
        self.calls: List[str] = []

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise StoreFailureError(message=self.fail_with, operation=operation)

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def ping(self) -> bool:
        return self.connected and self.fail_with is None

    async def insert_one(self, document: Document) -> ObjectId:
        self._enter("insert_one")
        stored = copy.deepcopy(document)
        object_id = stored.setdefault("_id", ObjectId())
        self.documents[object_id] = stored
        return object_id

    async def find_one(self, query: ById) -> Optional[Document]:
        self._enter("find_one")
        document = self.documents.get(query.object_id)
        return copy.deepcopy(document) if document is not None else None

    async def find_many(self, query: AllDocuments) -> List[Document]:
        self._enter("find_many")
        return [copy.deepcopy(document) for document in self.documents.values()]

    async def update_one(self, query: ById, update: SetFields) -> Optional[Document]:
        self._enter("update_one")
        document = self.documents.get(query.object_id)
        if document is None:
            return None
        document.update(update.to_update()["$set"])
        return copy.deepcopy(document)

    async def delete_one(self, query: ById) -> int:
        self._enter("delete_one")
        return 1 if self.documents.pop(query.object_id, None) is not None else 0


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_store():
    """A connected, empty in-memory store."""
    store = InMemoryDocumentStore()
    store.connected = True
    return store


@pytest.fixture
def mock_store():
    """
    AsyncMock standing in for a DocumentStore.

    Usage:
        mock_store.find_one.return_value = sample_post_document
        result = await PostService(mock_store).get_post(str(oid))
    """
    store = MagicMock(spec=DocumentStore)
    store.connect = AsyncMock()
    store.close = AsyncMock()
    store.ping = AsyncMock(return_value=True)
    store.insert_one = AsyncMock()
    store.find_one = AsyncMock()
    store.find_many = AsyncMock(return_value=[])
    store.update_one = AsyncMock()
    store.delete_one = AsyncMock()
    return store


@pytest.fixture
def mock_collection():
    """
    A mocked PyMongo AsyncCollection.

    find() is synchronous in PyMongo and returns a cursor whose to_list() is awaited.
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.delete_one = AsyncMock()
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    return collection


@pytest.fixture
def sample_post_document():
    """A post document as MongoDB returns it (tz_aware=True)."""
    created = datetime(2024, 3, 13, 10, 0, 0, 123000, tzinfo=timezone.utc)
    return {
        "_id": ObjectId("65f1c0ffee0ddba11ca7b0b5"),
        "title": "Hello",
        "content": "World",
        "created_at": created,
        "updated_at": created,
    }


@pytest.fixture
def test_settings():
    return Settings(log_level="WARNING")


@pytest_asyncio.fixture
async def test_client(memory_store, test_settings):
    """
    HTTPX AsyncClient talking to an app that serves memory_store.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/posts")
            assert response.status_code == 200
    """
    app = create_app(document_store=memory_store, app_settings=test_settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
