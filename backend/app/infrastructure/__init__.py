"""Infrastructure Layer — database sessions, logging setup, password and token handling.

Invariants:
    - Only the imperative shell (api/, services/) imports from here
    - Core never imports infrastructure
"""
