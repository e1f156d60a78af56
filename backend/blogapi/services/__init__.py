# Services package init
"""
Blog API Backend — Services Layer
===================================

What:  Business logic layer sitting between routes (HTTP) and the document store.
How:   Services receive a DocumentStore, apply the post rules (id parsing,
       server-owned timestamps, not-found detection) and return schemas.
       They're injected into routes via FastAPI's dependency injection.

Service Inventory:
    - PostService: list / get / create / update / delete for blog posts
"""
