"""
Posts API — Application Package
================================

A REST API over a single `posts` table in a hosted PostgreSQL database.

Architecture Note:

    ┌─────────────────────────────────────┐
    │     Middleware + Routes (HTTP)      │  ← origin check, logging, routing
    ├─────────────────────────────────────┤
    │     Services (Business Logic)       │  ← validation, queries, pagination
    ├─────────────────────────────────────┤
    │   Models, Schemas & Utils (Data)    │  ← ORM mapping, envelope, validators
    ├─────────────────────────────────────┤
    │   Database adapter (Persistence)    │  ← async SQLAlchemy, injected
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
