"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from discuss_board.schemas.common import DateRangeRequest


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200, description="Post title")
    body: str = Field(..., min_length=1, description="Post body")
    tags: list[str] = Field(default_factory=list, description="Tag names")


class PostUpdate(BaseModel):
    """Schema for editing a post; omitted fields stay unchanged."""

    title: str | None = Field(None, min_length=1, max_length=200)
    body: str | None = Field(None, min_length=1)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    author_member_id: str
    title: str
    body: str
    business_status: str
    is_locked: bool
    tags: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("tag_names", "tags")
    )
    like_count: int
    dislike_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostSummary(BaseModel):
    """Post fields shown in search results."""

    id: str
    author_member_id: str
    title: str
    business_status: str
    is_locked: bool
    like_count: int
    dislike_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostSearchRequest(DateRangeRequest):
    """Filters accepted by the post search."""

    keyword: str | None = Field(None, description="Substring of the title or body")
    author_id: str | None = Field(None, description="Author member id")
    status: str | None = Field(None, description="Business status")
    tag: str | None = Field(None, description="Tag name")
    sort_by: Literal["created_at", "updated_at", "title"] = "created_at"


class PostEditHistoryResponse(BaseModel):
    id: str
    post_id: str
    editor_member_id: str
    title_before: str
    title_after: str
    body_before: str
    body_after: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
