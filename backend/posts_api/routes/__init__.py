# Routes package init
"""
Posts API — Routes Package
===========================

Route Inventory:
    - posts.py:   /api/posts, /api/posts/{id}  (CRUD)
    - health.py:  GET /api/health              (liveness)

`api_router` mounts both under the /api prefix; main.py includes it and
adds the root `GET /` server-info endpoint itself.

Design Principle:
    Routes stay thin: read the request, call PostService, wrap the result.
"""

from fastapi import APIRouter

from posts_api.routes import health, posts

api_router = APIRouter(prefix="/api")
api_router.include_router(posts.router)
api_router.include_router(health.router)
