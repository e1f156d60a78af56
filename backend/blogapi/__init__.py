"""
Blog API Backend — Application Package Initializer
===================================================

What: Marks the `blogapi` directory as a Python package.
Who:  Used by uvicorn (`uvicorn blogapi.main:app`), pytest, and the store adapters.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← id parsing, timestamps
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← stored documents + Pydantic
    ├─────────────────────────────────────┤
    │     Store (Document Persistence)    │  ← DocumentStore / MongoDB
    └─────────────────────────────────────┘

    Routes handle status codes and headers, services perform exactly one
    store call per operation, and the store layer is reached only through
    the typed query objects in `blogapi.store.query`.
"""

__version__ = "1.0.0"
