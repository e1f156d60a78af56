"""
Blog API Backend — MongoDB Document Store
===========================================

What:  DocumentStore implementation backed by PyMongo's asyncio client.
How:   One AsyncMongoClient per process, created in connect() and released in
       close(). Each CRUD method is a single awaited driver call on the posts
       collection; driver errors are wrapped in StoreFailureError.
Who:   Constructed by the application lifespan from settings.
When:  connect() at startup, CRUD per request, close() at shutdown.

Connection Settings:
    tz_aware=True:            datetimes come back as UTC-aware values
    serverSelectionTimeoutMS: equal to the connect timeout, so the startup
                              probe and the driver give up at the same time

    The connection pool is owned by the driver; CRUD calls carry no
    deadline of their own beyond the driver defaults.
"""

import asyncio
import logging
from typing import Any, List, Optional

from bson import ObjectId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from blogapi.config import Settings
from blogapi.exceptions import StoreFailureError
from blogapi.store.base import Document, DocumentStore
from blogapi.store.query import AllDocuments, ById, SetFields

logger = logging.getLogger(__name__)


class MongoDocumentStore(DocumentStore):
    """
    Posts collection on a MongoDB server.

    Usage:
        store = MongoDocumentStore.from_settings(settings)
        await store.connect()
        ...
        await store.close()
    """

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        connect_timeout: float = 10.0,
    ):
        self.uri = uri
        self.database_name = database
        self.collection_name = collection
        self.connect_timeout = connect_timeout
        self._client: Optional[AsyncMongoClient] = None
        self._collection: Any = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDocumentStore":
        return cls(
            uri=settings.mongo_uri,
            database=settings.mongo_database,
            collection=settings.mongo_collection,
            connect_timeout=settings.mongo_connect_timeout,
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        if self._client is not None:
            return

        client = AsyncMongoClient(
            self.uri,
            tz_aware=True,
            serverSelectionTimeoutMS=int(self.connect_timeout * 1000),
        )
        try:
            await asyncio.wait_for(
                client.admin.command("ping"), timeout=self.connect_timeout
            )
        except (PyMongoError, asyncio.TimeoutError) as e:
            await client.close()
            logger.error(
                "Could not reach MongoDB within %.1fs: %s", self.connect_timeout, e
            )
            raise StoreFailureError(
                message=str(e) or "Timed out connecting to the document store",
                operation="connect",
            ) from e

        self._client = client
        self._collection = client[self.database_name][self.collection_name]
        logger.info(
            "Connected to MongoDB collection %s.%s",
            self.database_name,
            self.collection_name,
        )

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client, self._collection = self._client, None, None
        await client.close()
        logger.info("MongoDB client closed")

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False
        return True

    # ── CRUD ──────────────────────────────────────────────────────────────

    def _require_collection(self, operation: str) -> Any:
        if self._collection is None:
            raise StoreFailureError(
                message="Document store is not connected",
                operation=operation,
            )
        return self._collection

    async def insert_one(self, document: Document) -> ObjectId:
        collection = self._require_collection("insert_one")
        try:
            result = await collection.insert_one(dict(document))
        except PyMongoError as e:
            raise StoreFailureError(message=str(e), operation="insert_one") from e
        return result.inserted_id

    async def find_one(self, query: ById) -> Optional[Document]:
        collection = self._require_collection("find_one")
        try:
            return await collection.find_one(query.to_filter())
        except PyMongoError as e:
            raise StoreFailureError(message=str(e), operation="find_one") from e

    async def find_many(self, query: AllDocuments) -> List[Document]:
        collection = self._require_collection("find_many")
        try:
            cursor = collection.find(query.to_filter())
            return await cursor.to_list()
        except PyMongoError as e:
            raise StoreFailureError(message=str(e), operation="find_many") from e

    async def update_one(self, query: ById, update: SetFields) -> Optional[Document]:
        collection = self._require_collection("update_one")
        try:
            return await collection.find_one_and_update(
                query.to_filter(),
                update.to_update(),
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreFailureError(message=str(e), operation="update_one") from e

    async def delete_one(self, query: ById) -> int:
        collection = self._require_collection("delete_one")
        try:
            result = await collection.delete_one(query.to_filter())
        except PyMongoError as e:
            raise StoreFailureError(message=str(e), operation="delete_one") from e
        return result.deleted_count
