"""Notification and preference schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discuss_board.schemas.common import DateRangeRequest, UtcDatetime


class NotificationResponse(BaseModel):
    id: str
    user_account_id: str
    event_type: str
    delivery_channel: str
    subject: str
    body: str
    delivery_status: str
    post_id: str | None
    comment_id: str | None
    delivered_at: datetime | None
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationSearchRequest(DateRangeRequest):
    """Filters for a member's own notifications."""

    event_type: str | None = None
    delivery_status: Literal["pending", "delivered", "read"] | None = None
    q: str | None = Field(None, description="Substring of the subject or body")
    sort_by: Literal["created_at", "event_type"] = "created_at"


class AdminNotificationSearchRequest(NotificationSearchRequest):
    user_account_id: str | None = None
    delivery_channel: Literal["in_app", "email"] | None = None


class NotificationPreferenceUpdate(BaseModel):
    in_app_enabled: bool | None = None
    email_enabled: bool | None = None
    mute_until: UtcDatetime | None = None

    @field_validator("in_app_enabled", "email_enabled")
    @classmethod
    def _not_null(cls, value: bool | None) -> bool:
        if value is None:
            raise ValueError("Channel flags may be omitted but not null")
        return value


class NotificationPreferenceResponse(BaseModel):
    id: str
    user_account_id: str
    in_app_enabled: bool
    email_enabled: bool
    mute_until: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
