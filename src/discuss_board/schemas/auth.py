"""Authentication request and response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TokenResponse(BaseModel):
    """Access/refresh pair handed to clients."""

    access: str = Field(..., description="Bearer token for API calls")
    refresh: str = Field(..., description="Token used to obtain a new pair")
    expired_at: datetime = Field(..., description="Access token expiry")
    refreshable_until: datetime = Field(..., description="Refresh token expiry")


class ConsentInput(BaseModel):
    """A single policy consent given at registration."""

    policy_type: str = Field(..., min_length=1, max_length=64)
    policy_version: str = Field(..., min_length=1, max_length=32)
    consent_action: Literal["granted", "revoked"] = Field(...)


class MemberJoinRequest(BaseModel):
    """Schema for registering a new member."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    nickname: str = Field(..., min_length=1, max_length=32)
    consent: list[ConsentInput] = Field(default_factory=list)


class AdministratorJoinRequest(BaseModel):
    """Schema for registering a new administrator."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    nickname: str = Field(..., min_length=1, max_length=32)


class LoginRequest(BaseModel):
    """Email and password login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class GuestResponse(BaseModel):
    """Anonymous guest identity."""

    id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestAuthorized(GuestResponse):
    """Guest record returned with its token."""

    token: TokenResponse
