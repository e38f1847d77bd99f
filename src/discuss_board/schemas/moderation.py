"""Schemas for reports, moderation actions, bans, appeals and forbidden words."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discuss_board.schemas.common import DateRangeRequest, UtcDatetime

ActionType = Literal["warn", "mute", "remove", "restore", "restrict", "edit", "escalate"]


class ContentReportCreate(BaseModel):
    """A member's report; exactly one of ``post_id`` and ``comment_id`` must be set."""

    content_type: Literal["post", "comment"]
    post_id: str | None = None
    comment_id: str | None = None
    reason: str = Field(..., min_length=1, max_length=500)
    details: str | None = None


class ContentReportUpdate(BaseModel):
    status: Literal["under_review", "resolved", "dismissed"]


class ContentReportResponse(BaseModel):
    id: str
    reporter_member_id: str
    content_type: str
    post_id: str | None
    comment_id: str | None
    reason: str
    details: str | None
    status: str
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContentReportSearchRequest(DateRangeRequest):
    reporter_member_id: str | None = None
    content_type: Literal["post", "comment"] | None = None
    status: str | None = None
    reason: str | None = Field(None, description="Substring of the reason")
    sort_by: Literal["created_at", "status", "reason"] = "created_at"


class ModerationActionCreate(BaseModel):
    """Schema for recording a moderation action."""

    moderator_id: str | None = Field(
        None, description="Must match the authenticated moderator when given"
    )
    action_type: ActionType
    action_reason: str = Field(..., min_length=1, max_length=500)
    details: str | None = None
    target_member_id: str | None = None
    target_post_id: str | None = None
    target_comment_id: str | None = None
    content_report_id: str | None = None
    effective_from: UtcDatetime | None = None
    effective_until: UtcDatetime | None = None


class ModerationActionResponse(BaseModel):
    id: str
    moderator_id: str
    target_member_id: str | None
    target_post_id: str | None
    target_comment_id: str | None
    content_report_id: str | None
    action_type: str
    action_reason: str
    details: str | None
    status: str
    effective_from: datetime
    effective_until: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ModerationActionSearchRequest(DateRangeRequest):
    moderator_id: str | None = None
    target_member_id: str | None = None
    target_post_id: str | None = None
    target_comment_id: str | None = None
    action_type: ActionType | None = None
    status: str | None = None
    sort_by: Literal["created_at", "action_type", "effective_from"] = "created_at"


class BanCreate(BaseModel):
    member_id: str
    ban_reason: str = Field(..., min_length=1, max_length=500)
    permanent: bool = False
    expires_at: UtcDatetime | None = None


class BanResponse(BaseModel):
    id: str
    member_id: str
    moderator_id: str
    ban_reason: str
    permanent: bool
    expires_at: datetime | None
    lifted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BanSearchRequest(DateRangeRequest):
    member_id: str | None = None
    moderator_id: str | None = None
    active: bool | None = Field(None, description="Only bans in force (true) or not (false)")
    sort_by: Literal["created_at", "expires_at"] = "created_at"


class AppealCreate(BaseModel):
    moderation_action_id: str
    appeal_reason: str = Field(..., min_length=1, max_length=2000)


class AppealUpdate(BaseModel):
    appeal_reason: str = Field(..., min_length=1, max_length=2000)


class AppealResolution(BaseModel):
    status: Literal["accepted", "rejected"]
    resolution_comment: str | None = Field(None, max_length=2000)


class AppealResponse(BaseModel):
    id: str
    moderation_action_id: str
    appellant_member_id: str
    appeal_reason: str
    status: str
    resolution_comment: str | None
    resolved_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AppealSearchRequest(DateRangeRequest):
    status: str | None = None
    sort_by: Literal["created_at", "status"] = "created_at"


class ForbiddenWordCreate(BaseModel):
    expression: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class ForbiddenWordUpdate(BaseModel):
    expression: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)

    @field_validator("expression")
    @classmethod
    def _expression_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("expression may be omitted but not null")
        return value


class ForbiddenWordResponse(BaseModel):
    id: str
    expression: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ForbiddenWordSearchRequest(DateRangeRequest):
    expression: str | None = Field(None, description="Substring of the expression")
    sort_by: Literal["created_at", "expression"] = "created_at"
