"""Audit log schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from discuss_board.schemas.common import DateRangeRequest


class AuditLogResponse(BaseModel):
    id: str
    actor_id: str | None
    actor_role: str
    action_type: str
    target_table: str
    target_id: str | None
    description: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuditLogSearchRequest(DateRangeRequest):
    """Filters accepted by the audit log search."""

    actor_role: str | None = None
    actor_id: str | None = None
    action_type: str | None = None
    target_table: str | None = None
    target_id: str | None = None
    description: str | None = Field(None, description="Substring of the description")
    sort_by: Literal["created_at", "action_type", "actor_role"] = "created_at"
