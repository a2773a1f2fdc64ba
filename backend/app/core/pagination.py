"""Pagination math shared by every paginated listing."""

import math


def page_bounds(page: int, limit: int) -> tuple[int, int]:
    """Inclusive row range (offset, last) for a 1-based page."""
    offset = (page - 1) * limit
    return offset, offset + limit - 1


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages(total, limit),
    }
