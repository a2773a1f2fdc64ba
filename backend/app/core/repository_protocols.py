"""Boundary Protocols — structural contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Core predicates and rule checks accept anything shaped like these protocols
      (ORM rows, Pydantic models, test doubles)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Attributes typed loosely where the ORM and the schemas disagree (str vs Enum)
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID


class UserLike(Protocol):
    """Anything carrying an identity and a role."""
    id: UUID
    role: str


class OfferLike(Protocol):
    """Offer fields the investment rules read."""
    id: UUID
    status: str
    end_at: datetime
    minimum_investment: int


class InvestmentLike(Protocol):
    """Investment fields the transition rules read."""
    id: UUID
    user_id: UUID
    status: str
