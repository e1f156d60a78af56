# Routes package init
"""
Blog API Backend — API Routes Package
=======================================

Route Inventory:
    - posts.py:   GET    /api/posts          (list posts)
                  GET    /api/posts/{id}     (single post)
                  POST   /api/posts          (create)
                  PUT    /api/posts/{id}     (update)
                  DELETE /api/posts/{id}     (delete)
    - health.py:  GET    /health             (service health check)

Routes are thin: they take the path/body, call PostService, and let the
global exception handlers turn errors into status codes.
"""
