"""
Blog API Backend — Abstract Document Store Interface
======================================================

What:  Abstract base class defining the contract for document persistence.
How:   Concrete stores (MongoDocumentStore) inherit from DocumentStore and
       implement every abstract method in terms of the typed queries in
       blogapi.store.query.
Who:   Called by PostService; constructed by the application lifespan.
When:  connect() once at startup, CRUD methods per request, close() at shutdown.

Contract:
    - Documents are plain dicts keyed by "_id" (an ObjectId).
    - "Nothing matched" is reported through return values (None / 0),
      never through exceptions.
    - Every other failure is raised as StoreFailureError.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bson import ObjectId

from blogapi.store.query import AllDocuments, ById, SetFields

Document = Dict[str, Any]


class DocumentStore(ABC):
    """Abstract interface over a single collection of post documents."""

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the client and verify the server is reachable.

        Must complete within the configured connect timeout or raise
        StoreFailureError.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the client and its connection pool. Safe to call twice."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the store answers a lightweight probe."""

    @abstractmethod
    async def insert_one(self, document: Document) -> ObjectId:
        """Insert a document without `_id` and return the generated id."""

    @abstractmethod
    async def find_one(self, query: ById) -> Optional[Document]:
        """Return the matching document, or None."""

    @abstractmethod
    async def find_many(self, query: AllDocuments) -> List[Document]:
        """Return every matching document in natural order (possibly empty)."""

    @abstractmethod
    async def update_one(self, query: ById, update: SetFields) -> Optional[Document]:
        """
        Atomically apply `update` to the matching document.

        Returns the document as it is after the update, or None when no
        document matched.
        """

    @abstractmethod
    async def delete_one(self, query: ById) -> int:
        """Delete the matching document and return the number deleted (0 or 1)."""
