"""User Service — admin listing of accounts with sorting and text filter.

Invariants:
    - sort is "field:order" over created_at | updated_at | email; order defaults to asc;
      no sort at all means newest first
    - filter is a case-insensitive contains over email, first name, last name and role
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.pagination import page_bounds, pagination_meta
from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.common import Page, PaginationMeta
from app.schemas.user import UserQueryParams
from app.services.auth_service import to_user_response

logger = logging.getLogger(__name__)


def parse_sort(sort: str | None) -> tuple[str, bool]:
    """Return (column name, descending) for a "field:order" string."""
    if not sort:
        return "created_at", True
    field, _, order = sort.partition(":")
    return field, order == "desc"


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self, params: UserQueryParams) -> Page[UserResponse]:
        query = select(User)
        if params.filter:
            pattern = params.filter
            query = query.where(or_(
                User.email.icontains(pattern, autoescape=True),
                User.first_name.icontains(pattern, autoescape=True),
                User.last_name.icontains(pattern, autoescape=True),
                User.role.icontains(pattern, autoescape=True),
            ))
        total = await self.db.scalar(
            select(func.count()).select_from(query.subquery()),
        )
        field, descending = parse_sort(params.sort)
        column = getattr(User, field)
        offset, _ = page_bounds(params.page, params.limit)
        result = await self.db.execute(
            query.order_by(column.desc() if descending else column.asc(), User.id)
            .offset(offset).limit(params.limit),
        )
        users = result.scalars().all()
        logger.debug(f"Listed {len(users)} of {total} users")
        return Page[UserResponse](
            data=[to_user_response(u) for u in users],
            pagination=PaginationMeta(
                **pagination_meta(params.page, params.limit, total or 0),
            ),
        )
