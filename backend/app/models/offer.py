"""Offer ORM — a fundraising campaign investors can commit money to.

Invariants:
    - target_amount and minimum_investment are minor units (grosze, BIGINT)
    - minimum_investment <= target_amount is enforced at create/update time only
    - status is one of: draft, active, closed (always created as draft)
    - Images are child rows ordered by order_index; index 0 is the primary image

Design Decisions:
    - images relationship is lazy="raise": image reads go through one batched
      query in the service, never an implicit per-row load
    - passive_deletes: the FK cascade removes images together with their offer
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Offer(Base):
    """Offer aggregate — owns its images."""
    __tablename__ = "offers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    minimum_investment: Mapped[int] = mapped_column(BigInteger, nullable=False)
    end_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="draft", index=True,
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

    images: Mapped[list["OfferImage"]] = relationship(
        "OfferImage", back_populates="offer",
        cascade="all, delete-orphan", passive_deletes=True, lazy="raise",
    )
