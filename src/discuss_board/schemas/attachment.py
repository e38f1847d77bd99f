"""Attachment schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from discuss_board.schemas.common import DateRangeRequest


class AttachmentCreate(BaseModel):
    """Metadata for a file already stored at ``file_url``."""

    file_name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1, max_length=2048)
    content_type: str = Field(..., min_length=1, max_length=100, description="MIME type")
    size_bytes: int = Field(..., description="File size in bytes")


class AttachmentResponse(BaseModel):
    id: str
    post_id: str | None
    comment_id: str | None
    uploaded_by_member_id: str
    file_name: str
    file_url: str
    content_type: str
    size_bytes: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttachmentSearchRequest(DateRangeRequest):
    post_id: str | None = None
    comment_id: str | None = None
    uploaded_by_id: str | None = None
    content_type: str | None = None
