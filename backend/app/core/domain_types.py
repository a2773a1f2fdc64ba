"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, OfferId, InvestmentId wrap UUIDs — never use bare UUID in domain logic
    - MinorUnits is an integer amount (grosze); major-unit amounts are Decimal
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to the stored column value
    - AdminInvestmentStatus kept separate from InvestmentStatus: the admin API speaks
      "closed" while storage speaks "completed" (ADR: mapping lives in one place)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
OfferId = NewType("OfferId", UUID)
InvestmentId = NewType("InvestmentId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

MinorUnits = NewType("MinorUnits", int)   # amount x 100, persisted


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles — admins manage offers and investments, signers invest."""
    ADMIN = "admin"
    SIGNER = "signer"


class OfferStatus(str, Enum):
    """Offer lifecycle states — maps to DB `status` column."""
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class InvestmentStatus(str, Enum):
    """Investment lifecycle states — maps to DB `status` column."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class AdminInvestmentStatus(str, Enum):
    """Target statuses an admin may request through the API."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CLOSED = "closed"


class OfferSortField(str, Enum):
    """Columns the available-offers listing may sort on (always descending)."""
    NAME = "name"
    TARGET_AMOUNT = "target_amount"
    MINIMUM_INVESTMENT = "minimum_investment"
    END_AT = "end_at"
    CREATED_AT = "created_at"


class Environment(str, Enum):
    """Deployment environment — selects the feature flag column."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class FeatureName(str, Enum):
    """Named features that can be switched off per environment."""
    AUTH = "auth"
    OFFERS_LIST = "offers-list"
    OFFERS_CREATE = "offers-create"
    OFFER_DETAILS = "offer-details"
