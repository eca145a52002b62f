# Utilities package init
"""
Posts API — Utilities
======================

Pure helper functions shared by the route and service layers:
    - validation.py:  id, pagination and post payload checks, string trimming
    - responses.py:   the `{success, data, error}` envelope and shared messages
"""
