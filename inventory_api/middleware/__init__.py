"""
Inventory API — Middleware Package
====================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the access log line can carry the request's ID.
"""
