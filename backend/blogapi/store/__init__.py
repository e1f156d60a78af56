# Store package init
"""
Blog API Backend — Document Store Layer
=========================================

What:  Persistence layer between services and the document database.

Store Inventory:
    - DocumentStore (abstract): Interface every store adapter implements
    - MongoDocumentStore: Concrete implementation using PyMongo's asyncio client
    - ById / AllDocuments / SetFields: Typed queries accepted by the interface
"""

from blogapi.store.base import Document, DocumentStore
from blogapi.store.mongo import MongoDocumentStore
from blogapi.store.query import AllDocuments, ById, SetFields

__all__ = [
    "AllDocuments",
    "ById",
    "Document",
    "DocumentStore",
    "MongoDocumentStore",
    "SetFields",
]
