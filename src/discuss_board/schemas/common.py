"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import AfterValidator, BaseModel, Field, model_validator

from discuss_board.core.settings import settings
from discuss_board.db.time import as_utc

ItemT = TypeVar("ItemT")

SortOrder = Literal["asc", "desc"]

# Naive input is read as UTC so comparisons with stored values never mix kinds.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class Pagination(BaseModel):
    """Position of a page within the full result set."""

    current: int = Field(..., description="Current page number, starting at 1")
    limit: int = Field(..., description="Maximum records per page")
    records: int = Field(..., description="Total number of matching records")
    pages: int = Field(..., description="Total number of pages")


class Page(BaseModel, Generic[ItemT]):
    """One page of search results."""

    pagination: Pagination
    data: list[ItemT]


class PageRequest(BaseModel):
    """Paging fields accepted by every search endpoint."""

    page: int = Field(1, ge=1, description="Page number, starting at 1")
    limit: int = Field(
        settings.page_size_default,
        ge=1,
        le=settings.page_size_max,
        description="Records per page",
    )
    sort_order: SortOrder = Field("desc", description="Sort direction")


class DateRangeRequest(PageRequest):
    """Paging fields plus an inclusive creation-time window."""

    created_from: UtcDatetime | None = Field(None, description="Earliest creation time")
    created_to: UtcDatetime | None = Field(None, description="Latest creation time")

    @model_validator(mode="after")
    def _check_range(self) -> DateRangeRequest:
        if self.created_from and self.created_to and self.created_from > self.created_to:
            raise ValueError("created_from must not be after created_to")
        return self
