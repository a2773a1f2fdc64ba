"""User Routes — admin listing of accounts."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.infrastructure.database import get_db
from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.common import Page
from app.schemas.user import UserQueryParams
from app.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=Page[UserResponse])
async def list_users(
    params: Annotated[UserQueryParams, Query()],
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).list_users(params)
