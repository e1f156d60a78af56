# Middleware package init
"""
Blog API Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID
    3. CORS: Answer OPTIONS with 204 before routing; add CORS headers otherwise

    Responses travel back through the same chain in reverse, so CORS headers
    are added before the request is logged and the request ID is attached last.
"""
