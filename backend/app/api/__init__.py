"""API Layer — FastAPI routes, request dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response is a JSON envelope; errors are mapped by type, never by text

Design Decisions:
    - Thin routes: authenticate, authorize, delegate to a service, wrap the result
"""
