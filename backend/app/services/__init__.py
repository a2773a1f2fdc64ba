"""Services — request-scoped business operations over the async session.

Invariants:
    - Each service wraps one AsyncSession and owns the commit for its operation
    - Rules with no IO are delegated to core/; services raise MarketplaceError subclasses
"""
