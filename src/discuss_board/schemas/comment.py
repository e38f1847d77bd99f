"""Comment and reaction schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from discuss_board.schemas.common import PageRequest


class CommentCreate(BaseModel):
    """Schema for replying to a post or another comment."""

    content: str = Field(..., description="Comment text")
    parent_id: str | None = Field(None, description="Comment being replied to")


class CommentUpdate(BaseModel):
    """Schema for editing a comment inside its edit window."""

    content: str = Field(..., description="Replacement text")
    edit_reason: str | None = Field(None, max_length=500)


class CommentResponse(BaseModel):
    id: str
    post_id: str
    parent_id: str | None
    author_member_id: str
    content: str
    is_locked: bool
    like_count: int
    dislike_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentSearchRequest(PageRequest):
    """Comments default to oldest first so threads read top-down."""

    author_id: str | None = None
    parent_id: str | None = None
    sort_order: Literal["asc", "desc"] = "asc"


class CommentEditHistoryResponse(BaseModel):
    id: str
    comment_id: str
    editor_member_id: str
    content_before: str
    content_after: str
    edit_reason: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentReactionCreate(BaseModel):
    comment_id: str
    reaction_type: Literal["like", "dislike"]


class PostReactionCreate(BaseModel):
    post_id: str
    reaction_type: Literal["like", "dislike"]


class ReactionResponse(BaseModel):
    """Reaction row; exactly one of ``post_id`` and ``comment_id`` is set."""

    id: str
    member_id: str
    reaction_type: str
    post_id: str | None = None
    comment_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
