"""Investment Routes — creation, listings, details, admin status changes, cancellation.

Invariants:
    - POST / creates for the caller; can_invest admits any signed-in user
    - GET / (all) and GET /admin (with relations) are admin-only
    - GET /investor lists the caller's own investments
    - GET /{id}: owner or admin; PUT /{id}: status change gated by
      can_manage_investments; PUT /{id}/cancel: owner while pending
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_current_user, get_investor, require_admin, require_permission,
)
from app.core import messages
from app.core.roles import can_manage_investments
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.common import Envelope, Page
from app.schemas.investment import (
    InvestmentCancel, InvestmentCreate, InvestmentDetails, InvestmentQueryParams,
    InvestmentResponse, InvestmentStatusUpdate, InvestmentWithOfferName,
    InvestmentWithRelations,
)
from app.services.investment_service import InvestmentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/investments", tags=["investments"])


@router.post(
    "",
    response_model=Envelope[InvestmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_investment(
    body: InvestmentCreate,
    user: User = Depends(get_investor),
    db: AsyncSession = Depends(get_db),
):
    investment = await InvestmentService(db).create_investment(body, user.id)
    return Envelope(data=investment, message=messages.INVESTMENT_CREATED)


@router.get("", response_model=Page[InvestmentWithOfferName])
async def get_all_investments(
    params: Annotated[InvestmentQueryParams, Query()],
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await InvestmentService(db).get_all_investments(params)


@router.get("/admin", response_model=Page[InvestmentWithRelations])
async def get_admin_investments(
    params: Annotated[InvestmentQueryParams, Query()],
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await InvestmentService(db).get_admin_investments(params)


@router.get("/investor", response_model=Page[InvestmentWithOfferName])
async def get_user_investments(
    params: Annotated[InvestmentQueryParams, Query()],
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await InvestmentService(db).get_user_investments(user.id, params)


@router.get("/{investment_id}", response_model=Envelope[InvestmentDetails])
async def get_investment(
    investment_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    details = await InvestmentService(db).get_investment_details(investment_id, user)
    return Envelope(data=details)


@router.put("/{investment_id}", response_model=Envelope[InvestmentResponse])
async def update_investment_status(
    investment_id: UUID,
    body: InvestmentStatusUpdate,
    admin: User = Depends(
        require_permission(can_manage_investments, messages.INVESTMENT_MANAGE_FORBIDDEN),
    ),
    db: AsyncSession = Depends(get_db),
):
    investment = await InvestmentService(db).update_investment_status(
        investment_id, body,
    )
    return Envelope(data=investment)


@router.put("/{investment_id}/cancel", response_model=Envelope[InvestmentResponse])
async def cancel_investment(
    investment_id: UUID,
    body: InvestmentCancel,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    investment = await InvestmentService(db).cancel_investment(
        investment_id, user, body,
    )
    return Envelope(data=investment)
