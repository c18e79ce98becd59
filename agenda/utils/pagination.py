"""Pagination arithmetic."""

import math

from agenda.schemas.common import PaginationMeta


def calculate_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    """Compute page metadata for ``total`` rows split into pages of ``limit``."""
    total_pages = math.ceil(total / limit) if limit else 0
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_more=page < total_pages,
    )


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based page."""
    return (page - 1) * limit
