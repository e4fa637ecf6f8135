# Middleware package init
"""
Hebrew Reader Backend — Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Responses travel the chain in reverse:
    - Request ID is added to the response headers
    - Logging records status and duration once the handler returns
"""
