"""API Schemas — Pydantic request/response models, one module per resource.

Invariants:
    - Schemas validate shape and field-level rules only; business rules that need
      stored state (offer activity, ownership) live in core/ and services/
"""
