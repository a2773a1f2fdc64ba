"""Database Package — declarative Base and the standalone session factory.

Invariants:
    - Request-scoped sessions come from infrastructure/database.py, not from here

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests
"""
