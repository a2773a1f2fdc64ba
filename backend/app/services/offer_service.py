"""Offer Service — CRUD, status overwrite and image ordering for offers.

Invariants:
    - Amounts are converted exactly once per direction: schemas carry major units,
      rows carry minor units, responses carry major units again
    - New offers are always stored as draft, whatever the client sends
    - Offer and image rows are written in one transaction; an image failure rolls
      back the offer insert too
    - images=None on update leaves image rows untouched; a list (even empty) replaces
      them wholesale with order_index = list position
    - Image reads are one batched query per call; a failed image read degrades to
      empty image lists instead of failing the whole read

Design Decisions:
    - Status overwrite is unconditional: offers have no transition graph
      (ADR: admins may reopen or close offers freely)
    - Available offers are filtered in SQL (status=active, end_at > now) and sorted
      descending by the requested column
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import messages
from app.core.currency import to_major_units, to_minor_units
from app.core.domain_types import OfferSortField, OfferStatus
from app.core.errors import DatabaseError, ErrorContext, ResourceNotFoundError
from app.core.pagination import page_bounds, pagination_meta
from app.models.offer import Offer
from app.models.offer_image import OfferImage
from app.schemas.common import Page, PaginationMeta
from app.schemas.offer import OfferCreate, OfferResponse, OfferUpdate

logger = logging.getLogger(__name__)


def to_offer_response(offer: Offer, images: list[str]) -> OfferResponse:
    """Shape a stored offer for the API, amounts back in major units."""
    return OfferResponse(
        id=offer.id,
        name=offer.name,
        description=offer.description,
        target_amount=to_major_units(offer.target_amount),
        minimum_investment=to_major_units(offer.minimum_investment),
        end_at=offer.end_at,
        status=offer.status,
        created_at=offer.created_at,
        updated_at=offer.updated_at,
        images=images,
    )


class OfferService:
    """Offer persistence operations for one request-scoped session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_offer(self, data: OfferCreate) -> OfferResponse:
        offer = Offer(
            name=data.name,
            description=data.description,
            target_amount=to_minor_units(data.target_amount),
            minimum_investment=to_minor_units(data.minimum_investment),
            end_at=data.end_at,
            status=OfferStatus.DRAFT.value,
        )
        self.db.add(offer)
        await self.db.flush()
        offer_id = offer.id
        try:
            self._add_images(offer_id, data.images)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(
                f"Image insert failed, rolling back offer: {e}",
                extra={"offer_id": offer_id},
            )
            await self.db.rollback()
            raise DatabaseError(
                messages.OFFER_IMAGES_SAVE_FAILED, "insert_images",
                ErrorContext(offer_id=offer_id),
            )
        await self.db.commit()
        logger.info(f"Offer created: {offer.name}", extra={"offer_id": offer.id})
        return to_offer_response(offer, list(data.images))

    async def list_offers(self) -> list[OfferResponse]:
        """Every offer regardless of status, newest first (admin view)."""
        result = await self.db.execute(
            select(Offer).order_by(Offer.created_at.desc()),
        )
        offers = result.scalars().all()
        images = await self.fetch_images([o.id for o in offers])
        return [to_offer_response(o, images.get(o.id, [])) for o in offers]

    async def get_offer_model(self, offer_id: UUID) -> Offer:
        offer = await self.db.get(Offer, offer_id)
        if offer is None:
            raise ResourceNotFoundError(
                "Offer", str(offer_id), messages.OFFER_NOT_FOUND,
                ErrorContext(offer_id=offer_id),
            )
        return offer

    async def get_offer_by_id(self, offer_id: UUID) -> OfferResponse:
        offer = await self.get_offer_model(offer_id)
        images = await self.fetch_images([offer.id])
        return to_offer_response(offer, images.get(offer.id, []))

    async def update_offer(
        self, offer_id: UUID, data: OfferUpdate,
    ) -> OfferResponse:
        """Full replace of scalar fields; images replaced only when provided."""
        offer = await self.get_offer_model(offer_id)
        offer.name = data.name
        offer.description = data.description
        offer.target_amount = to_minor_units(data.target_amount)
        offer.minimum_investment = to_minor_units(data.minimum_investment)
        offer.end_at = data.end_at

        if data.images is not None:
            await self.db.execute(
                delete(OfferImage).where(OfferImage.offer_id == offer.id),
            )
            self._add_images(offer.id, data.images)

        await self.db.commit()
        logger.info("Offer updated", extra={"offer_id": offer.id})
        if data.images is not None:
            return to_offer_response(offer, list(data.images))
        images = await self.fetch_images([offer.id])
        return to_offer_response(offer, images.get(offer.id, []))

    async def update_offer_status(
        self, offer_id: UUID, status: OfferStatus,
    ) -> OfferResponse:
        offer = await self.get_offer_model(offer_id)
        previous = offer.status
        offer.status = OfferStatus(status).value
        await self.db.commit()
        logger.info(
            f"Offer status {previous} -> {offer.status}",
            extra={"offer_id": offer.id},
        )
        images = await self.fetch_images([offer.id])
        return to_offer_response(offer, images.get(offer.id, []))

    async def get_available_offers(
        self,
        page: int,
        limit: int,
        sort: OfferSortField = OfferSortField.CREATED_AT,
        now: datetime | None = None,
    ) -> Page[OfferResponse]:
        """Active, unexpired offers, sorted descending by `sort`, one page."""
        now = now or datetime.now(timezone.utc)
        query = select(Offer).where(
            Offer.status == OfferStatus.ACTIVE.value, Offer.end_at > now,
        )
        total = await self.db.scalar(
            select(func.count()).select_from(query.subquery()),
        )
        offset, _ = page_bounds(page, limit)
        sort_column = getattr(Offer, OfferSortField(sort).value)
        result = await self.db.execute(
            query.order_by(sort_column.desc(), Offer.id)
            .offset(offset).limit(limit),
        )
        offers = result.scalars().all()
        images = await self.fetch_images([o.id for o in offers])
        return Page[OfferResponse](
            data=[to_offer_response(o, images.get(o.id, [])) for o in offers],
            pagination=PaginationMeta(**pagination_meta(page, limit, total or 0)),
        )

    # ─── Images ──────────────────────────────────────────────────

    def _add_images(self, offer_id: UUID, urls: list[str]) -> None:
        for index, url in enumerate(urls):
            self.db.add(OfferImage(offer_id=offer_id, url=url, order_index=index))

    async def fetch_images(self, offer_ids: list[UUID]) -> dict[UUID, list[str]]:
        """Ordered image URLs per offer; empty on read failure."""
        if not offer_ids:
            return {}
        try:
            result = await self.db.execute(
                select(OfferImage.offer_id, OfferImage.url)
                .where(OfferImage.offer_id.in_(offer_ids))
                .order_by(OfferImage.offer_id, OfferImage.order_index),
            )
        except SQLAlchemyError as e:
            logger.warning(f"Image fetch failed for {len(offer_ids)} offers: {e}")
            return {}
        grouped: dict[UUID, list[str]] = defaultdict(list)
        for offer_id, url in result.all():
            grouped[offer_id].append(url)
        return grouped
