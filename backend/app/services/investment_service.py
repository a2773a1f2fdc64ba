"""Investment Service — creation checks, admin transitions, cancellation and listings.

Invariants:
    - Creation checks run through core/enforce_investments in fixed order; the first
      failure short-circuits and nothing is written
    - Stored amounts are minor units; every response converts back to major units once
    - Admin status changes follow the transition table; "closed" is stored as
      "completed" and stamps completed_at
    - Only the owner may cancel, and only while pending
    - Soft-deleted rows (deleted_at set) are invisible to every read
    - Listings are newest first; total counts the filtered set, not the table

Design Decisions:
    - Listings load offer/user identity with explicit joins: constant query count
      per page (relationships are lazy="raise")
    - Free-text filter is a case-insensitive contains on user email or offer name,
      with LIKE wildcards in the input escaped
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import messages
from app.core.currency import to_major_units, to_minor_units
from app.core.domain_types import InvestmentStatus
from app.core.enforce_investments import (
    check_cancellable, check_status_transition, validate_new_investment,
)
from app.core.errors import ErrorContext, ForbiddenError, ResourceNotFoundError
from app.core.pagination import page_bounds, pagination_meta
from app.core.repository_protocols import UserLike
from app.core.roles import can_view_investment
from app.models.investment import Investment
from app.models.offer import Offer
from app.models.user import User
from app.schemas.common import Page, PaginationMeta
from app.schemas.investment import (
    InvestmentCancel, InvestmentCreate, InvestmentDetails, InvestmentQueryParams,
    InvestmentResponse, InvestmentStatusUpdate, InvestmentWithOfferName,
    InvestmentWithRelations, OfferSummary, UserSummary,
)
from app.services.offer_service import OfferService, to_offer_response

logger = logging.getLogger(__name__)


def _investment_fields(investment: Investment) -> dict:
    return {
        "id": investment.id,
        "user_id": investment.user_id,
        "offer_id": investment.offer_id,
        "amount": to_major_units(investment.amount),
        "status": investment.status,
        "reason": investment.reason,
        "completed_at": investment.completed_at,
        "created_at": investment.created_at,
        "updated_at": investment.updated_at,
        "deleted_at": investment.deleted_at,
    }


def _user_summary(user: User) -> UserSummary:
    return UserSummary(
        id=user.id, email=user.email, role=user.role,
        first_name=user.first_name, last_name=user.last_name,
    )


class InvestmentService:
    """Investment operations for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Writes ──────────────────────────────────────────────────

    async def create_investment(
        self, data: InvestmentCreate, user_id: UUID,
        now: datetime | None = None,
    ) -> InvestmentResponse:
        offer = await OfferService(self.db).get_offer_model(data.offer_id)
        validate_new_investment(
            offer, data.amount, now or datetime.now(timezone.utc),
            ErrorContext(user_id=user_id, offer_id=offer.id),
        )

        investment = Investment(
            user_id=user_id,
            offer_id=offer.id,
            amount=to_minor_units(data.amount),
            status=InvestmentStatus.PENDING.value,
        )
        self.db.add(investment)
        await self.db.commit()
        logger.info(
            f"Investment created: {investment.amount} minor units",
            extra={
                "investment_id": investment.id, "offer_id": offer.id,
                "user_id": user_id,
            },
        )
        return InvestmentResponse(**_investment_fields(investment))

    async def update_investment_status(
        self, investment_id: UUID, data: InvestmentStatusUpdate,
    ) -> InvestmentResponse:
        """Admin transition: accepted, rejected or closed (stored as completed)."""
        investment = await self._get_visible(investment_id)
        previous = investment.status
        target = check_status_transition(
            previous, data.status, ErrorContext(investment_id=investment.id),
        )

        investment.status = target.value
        # Every admin decision replaces the note; no reason clears it
        investment.reason = data.reason
        if target == InvestmentStatus.COMPLETED:
            investment.completed_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"Investment status {previous} -> {target.value}",
            extra={"investment_id": investment.id},
        )
        return InvestmentResponse(**_investment_fields(investment))

    async def cancel_investment(
        self, investment_id: UUID, user: UserLike, data: InvestmentCancel,
    ) -> InvestmentResponse:
        investment = await self._get_visible(investment_id)
        check_cancellable(investment, user)

        investment.status = InvestmentStatus.CANCELLED.value
        investment.reason = data.reason
        await self.db.commit()
        logger.info(
            "Investment cancelled by owner",
            extra={"investment_id": investment.id, "user_id": user.id},
        )
        return InvestmentResponse(**_investment_fields(investment))

    # ─── Reads ───────────────────────────────────────────────────

    async def get_investment_details(
        self, investment_id: UUID, user: UserLike,
    ) -> InvestmentDetails:
        """Investment with its full offer and owner; owner or admin only."""
        result = await self.db.execute(
            select(Investment, Offer, User)
            .join(Offer, Investment.offer_id == Offer.id)
            .join(User, Investment.user_id == User.id)
            .where(Investment.id == investment_id, Investment.deleted_at.is_(None)),
        )
        row = result.first()
        if row is None:
            raise ResourceNotFoundError(
                "Investment", str(investment_id), messages.INVESTMENT_NOT_FOUND,
                ErrorContext(user_id=user.id, investment_id=investment_id),
            )
        investment, offer, owner = row
        if not can_view_investment(user, investment.user_id):
            raise ForbiddenError(
                messages.INVESTMENT_VIEW_FORBIDDEN,
                ErrorContext(user_id=user.id, investment_id=investment.id),
            )

        images = await OfferService(self.db).fetch_images([offer.id])
        return InvestmentDetails(
            **_investment_fields(investment),
            offer=to_offer_response(offer, images.get(offer.id, [])),
            user=_user_summary(owner),
            status_label=messages.investment_status_label(investment.status),
        )

    async def get_user_investments(
        self, user_id: UUID, params: InvestmentQueryParams,
    ) -> Page[InvestmentWithOfferName]:
        """The caller's own investments with offer names."""
        query = (
            select(Investment, Offer.name)
            .join(Offer, Investment.offer_id == Offer.id)
            .where(Investment.user_id == user_id, Investment.deleted_at.is_(None))
        )
        if params.status:
            query = query.where(Investment.status == params.status.value)
        rows, total = await self._paginate(query, params)
        return Page[InvestmentWithOfferName](
            data=[
                InvestmentWithOfferName(**_investment_fields(inv), offer_name=name)
                for inv, name in rows
            ],
            pagination=PaginationMeta(
                **pagination_meta(params.page, params.limit, total),
            ),
        )

    async def get_all_investments(
        self, params: InvestmentQueryParams,
    ) -> Page[InvestmentWithOfferName]:
        """Every investment (admin), filterable by status and offer."""
        query = (
            select(Investment, Offer.name)
            .join(Offer, Investment.offer_id == Offer.id)
            .where(Investment.deleted_at.is_(None))
        )
        if params.status:
            query = query.where(Investment.status == params.status.value)
        if params.offer_id:
            query = query.where(Investment.offer_id == params.offer_id)
        rows, total = await self._paginate(query, params)
        return Page[InvestmentWithOfferName](
            data=[
                InvestmentWithOfferName(**_investment_fields(inv), offer_name=name)
                for inv, name in rows
            ],
            pagination=PaginationMeta(
                **pagination_meta(params.page, params.limit, total),
            ),
        )

    async def get_admin_investments(
        self, params: InvestmentQueryParams,
    ) -> Page[InvestmentWithRelations]:
        """Admin-relations listing: joined offer and owner identity."""
        query = (
            select(Investment, Offer, User)
            .join(Offer, Investment.offer_id == Offer.id)
            .join(User, Investment.user_id == User.id)
            .where(Investment.deleted_at.is_(None))
        )
        if params.status:
            query = query.where(Investment.status == params.status.value)
        if params.offer_id:
            query = query.where(Investment.offer_id == params.offer_id)
        if params.filter:
            query = query.where(or_(
                User.email.icontains(params.filter, autoescape=True),
                Offer.name.icontains(params.filter, autoescape=True),
            ))
        rows, total = await self._paginate(query, params)
        return Page[InvestmentWithRelations](
            data=[
                InvestmentWithRelations(
                    **_investment_fields(inv),
                    offer=OfferSummary(id=offer.id, name=offer.name),
                    user=_user_summary(owner),
                )
                for inv, offer, owner in rows
            ],
            pagination=PaginationMeta(
                **pagination_meta(params.page, params.limit, total),
            ),
        )

    # ─── Helpers ─────────────────────────────────────────────────

    async def _get_visible(self, investment_id: UUID) -> Investment:
        result = await self.db.execute(
            select(Investment).where(
                Investment.id == investment_id, Investment.deleted_at.is_(None),
            ),
        )
        investment = result.scalar_one_or_none()
        if investment is None:
            raise ResourceNotFoundError(
                "Investment", str(investment_id), messages.INVESTMENT_NOT_FOUND,
                ErrorContext(investment_id=investment_id),
            )
        return investment

    async def _paginate(
        self, query: Select, params: InvestmentQueryParams,
    ) -> tuple[list, int]:
        total = await self.db.scalar(
            select(func.count()).select_from(
                query.with_only_columns(Investment.id).subquery(),
            ),
        )
        offset, _ = page_bounds(params.page, params.limit)
        result = await self.db.execute(
            query.order_by(Investment.created_at.desc(), Investment.id)
            .offset(offset).limit(params.limit),
        )
        return result.all(), total or 0
