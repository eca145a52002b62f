# Services package init
"""
Posts API — Services Layer
===========================

What:  Business logic layer sitting between routes (HTTP) and the database.
Why:   Routes handle HTTP, services handle validation and persistence rules.

Service Inventory:
    - PostService: list/get/create/update/delete over the `posts` table

Services can be unit-tested with a mocked AsyncSession, without HTTP.
"""
