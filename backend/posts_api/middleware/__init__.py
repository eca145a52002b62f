# Middleware package init
"""
Posts API — Middleware Package
===============================

Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Origin allow-list] → [CORS] → [GZip] → Route

    1. Request ID sets the correlation id used by every later log line
    2. Logging records status and duration once the response is ready
    3. Origin allow-list rejects unknown origins before any handler runs
    4. CORS answers preflights and adds Access-Control-* headers
"""
