"""Helpers shared by the search services."""
from __future__ import annotations

import math
from typing import Any

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from discuss_board.schemas.common import DateRangeRequest, PageRequest, Pagination


def apply_created_range(query: Query, column: Any, request: DateRangeRequest) -> Query:
    """Restrict ``query`` to rows whose ``column`` falls in the request's window."""
    if request.created_from is not None:
        query = query.filter(column >= request.created_from)
    if request.created_to is not None:
        query = query.filter(column <= request.created_to)
    return query


def apply_sort(query: Query, column: Any, request: PageRequest, tiebreaker: Any = None) -> Query:
    """Order ``query`` by ``column`` in the request's direction."""
    direction = asc if request.sort_order == "asc" else desc
    query = query.order_by(direction(column))
    if tiebreaker is not None:
        query = query.order_by(direction(tiebreaker))
    return query


def paginate(query: Query, request: PageRequest) -> dict[str, Any]:
    """Execute ``query`` for one page and return the page envelope.

    Returns:
        ``{"pagination": Pagination, "data": [...]}`` ready for a ``Page`` response model.
    """
    records = query.order_by(None).count()
    rows = query.offset((request.page - 1) * request.limit).limit(request.limit).all()
    return {
        "pagination": Pagination(
            current=request.page,
            limit=request.limit,
            records=records,
            pages=math.ceil(records / request.limit),
        ),
        "data": rows,
    }
