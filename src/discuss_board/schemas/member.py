"""Member, moderator and administrator schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discuss_board.schemas.auth import TokenResponse
from discuss_board.schemas.common import DateRangeRequest


class MemberResponse(BaseModel):
    """Public member profile."""

    id: str
    user_account_id: str
    nickname: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MemberAuthorized(MemberResponse):
    """Member profile returned from join/login/refresh."""

    email: str
    token: TokenResponse


class MemberUpdate(BaseModel):
    nickname: str | None = Field(None, min_length=1, max_length=32)

    @field_validator("nickname")
    @classmethod
    def _nickname_not_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("nickname may be omitted but not null")
        return value


class MemberSearchRequest(DateRangeRequest):
    """Filters for the administrator member search."""

    nickname: str | None = Field(None, description="Substring of the nickname")
    email: str | None = Field(None, description="Exact account email")
    status: str | None = None
    sort_by: Literal["created_at", "nickname"] = "created_at"


class AccountUpdate(BaseModel):
    """Administrator changes to a login account."""

    status: Literal["active", "suspended"] | None = None
    email_verified: bool | None = None

    @field_validator("status", "email_verified")
    @classmethod
    def _not_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field may be omitted but not null")
        return value


class AccountResponse(BaseModel):
    id: str
    email: str
    email_verified: bool
    status: str
    last_login_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ModeratorResponse(BaseModel):
    """Moderator record."""

    id: str
    member_id: str
    status: str
    assigned_at: datetime
    revoked_at: datetime | None
    suspended_until: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ModeratorAuthorized(ModeratorResponse):
    token: TokenResponse


class ModeratorSearchRequest(DateRangeRequest):
    member_id: str | None = None
    status: str | None = None
    sort_by: Literal["created_at", "assigned_at"] = "created_at"


class AdministratorResponse(BaseModel):
    """Administrator record."""

    id: str
    member_id: str
    escalated_by_administrator_id: str | None
    status: str
    escalated_at: datetime
    revoked_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdministratorAuthorized(AdministratorResponse):
    token: TokenResponse


class AdministratorSearchRequest(DateRangeRequest):
    member_id: str | None = None
    status: str | None = None
    sort_by: Literal["created_at", "escalated_at"] = "created_at"
