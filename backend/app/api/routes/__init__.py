"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic (delegate to services and core predicates)
    - Literal sub-paths (/available, /admin, /investor) are declared before /{id}
"""
