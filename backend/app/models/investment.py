"""Investment ORM — a user's monetary commitment against an offer.

Invariants:
    - amount is minor units (grosze, BIGINT)
    - status is one of: pending, accepted, rejected, cancelled, completed
    - reason holds the rejection or cancellation justification
    - completed_at is stamped only on the transition to completed
    - deleted_at marks a soft delete; soft-deleted rows are invisible to every read

Design Decisions:
    - user and offer relationships are lazy="raise": listings load them with explicit
      joins so the query count per page stays constant
    - No aggregate guard on offer funding totals: concurrent investments against one
      offer are not serialized (ADR: not a requirement of the current system)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Investment(Base):
    """Investment entity — owned by a user, targets one offer."""
    __tablename__ = "investments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True,
    )
    offer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("offers.id"), nullable=False, index=True,
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    user: Mapped["User"] = relationship("User", lazy="raise")
    offer: Mapped["Offer"] = relationship("Offer", lazy="raise")
