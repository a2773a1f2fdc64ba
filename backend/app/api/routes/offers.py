"""Offer Routes — admin CRUD plus the investor-facing available listing.

Invariants:
    - Create, update and status change pass can_create_offer; the full listing
      is admin-only
    - The available listing is public; offer details require a signed-in user
    - Create is gated by feature "offers-create", the available listing by
      "offers-list", details by "offer-details"
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_current_user, require_admin, require_feature, require_permission,
)
from app.core import messages
from app.core.domain_types import FeatureName
from app.core.roles import can_create_offer
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.common import Envelope, Page
from app.schemas.offer import (
    OfferCreate, OfferQueryParams, OfferResponse, OfferStatusUpdate, OfferUpdate,
)
from app.services.offer_service import OfferService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/offers", tags=["offers"])

offer_manager = Depends(
    require_permission(can_create_offer, messages.OFFER_MUTATION_FORBIDDEN),
)


@router.post(
    "",
    response_model=Envelope[OfferResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_feature(FeatureName.OFFERS_CREATE))],
)
async def create_offer(
    body: OfferCreate,
    admin: User = offer_manager,
    db: AsyncSession = Depends(get_db),
):
    offer = await OfferService(db).create_offer(body)
    return Envelope(data=offer, message=messages.OFFER_CREATED)


@router.get("", response_model=Envelope[list[OfferResponse]])
async def list_offers(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All offers, any status (admin table)."""
    return Envelope(data=await OfferService(db).list_offers())


@router.get(
    "/available",
    response_model=Page[OfferResponse],
    dependencies=[Depends(require_feature(FeatureName.OFFERS_LIST))],
)
async def get_available_offers(
    params: Annotated[OfferQueryParams, Query()],
    db: AsyncSession = Depends(get_db),
):
    return await OfferService(db).get_available_offers(
        params.page, params.limit, params.sort,
    )


@router.get(
    "/{offer_id}",
    response_model=Envelope[OfferResponse],
    dependencies=[Depends(require_feature(FeatureName.OFFER_DETAILS))],
)
async def get_offer(
    offer_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return Envelope(data=await OfferService(db).get_offer_by_id(offer_id))


@router.put("/{offer_id}", response_model=Envelope[OfferResponse])
async def update_offer(
    offer_id: UUID,
    body: OfferUpdate,
    admin: User = offer_manager,
    db: AsyncSession = Depends(get_db),
):
    offer = await OfferService(db).update_offer(offer_id, body)
    return Envelope(data=offer, message=messages.OFFER_UPDATED)


@router.put("/{offer_id}/status", response_model=Envelope[OfferResponse])
async def update_offer_status(
    offer_id: UUID,
    body: OfferStatusUpdate,
    admin: User = offer_manager,
    db: AsyncSession = Depends(get_db),
):
    offer = await OfferService(db).update_offer_status(offer_id, body.status)
    return Envelope(data=offer, message=messages.OFFER_UPDATED)
