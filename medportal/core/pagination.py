"""
Core pagination utilities for API endpoints.
"""
import math
from typing import Any, List, Tuple

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery


class PageParams:
    """
    Page parameters for pagination.

    Attributes:
        page: Page number (1-indexed)
        limit: Number of items per page
    """
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page"),
    ):
        self.page = page
        self.limit = limit
        self.offset = (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total > 0 else 0


def paginate(query: SQLAlchemyQuery, page_params: PageParams) -> Tuple[List[Any], int, int]:
    """
    Paginate a SQLAlchemy query.

    Args:
        query: SQLAlchemy query to paginate (already ordered)
        page_params: Pagination parameters

    Returns:
        Tuple containing the page items, the total count and the number of pages
    """
    total = query.order_by(None).count()
    items = query.offset(page_params.offset).limit(page_params.limit).all()
    return items, total, total_pages(total, page_params.limit)
