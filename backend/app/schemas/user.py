"""User listing query parameters (admin view)."""

from pydantic import Field, field_validator

from app.core import messages
from app.schemas.common import PageQuery

SORTABLE_USER_FIELDS = ("created_at", "updated_at", "email")


class UserQueryParams(PageQuery):
    sort: str | None = None
    filter: str | None = Field(None, max_length=100)

    @field_validator("sort")
    @classmethod
    def sort_format(cls, v: str | None) -> str | None:
        if not v:
            return None
        field, _, order = v.partition(":")
        if field not in SORTABLE_USER_FIELDS or order not in ("", "asc", "desc"):
            raise ValueError(messages.SORT_FORMAT)
        return v

    @field_validator("filter", mode="before")
    @classmethod
    def strip_filter(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v
