"""Poll schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discuss_board.schemas.common import UtcDatetime


class PollCreate(BaseModel):
    """Schema for attaching a poll to a post."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    multi_choice: bool = False
    options: list[str] = Field(..., min_length=2, max_length=10)
    closed_at: UtcDatetime | None = Field(None, description="When voting stops")

    @field_validator("options")
    @classmethod
    def _distinct_options(cls, value: list[str]) -> list[str]:
        labels = [label.strip() for label in value]
        if any(not label for label in labels):
            raise ValueError("Option labels must not be blank")
        if len({label.lower() for label in labels}) != len(labels):
            raise ValueError("Option labels must be distinct")
        return labels


class PollUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    multi_choice: bool | None = None
    closed_at: UtcDatetime | None = None

    @field_validator("title", "multi_choice")
    @classmethod
    def _not_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field may be omitted but not null")
        return value


class PollOptionResponse(BaseModel):
    id: str
    label: str
    position: int
    vote_count: int

    model_config = ConfigDict(from_attributes=True)


class PollResponse(BaseModel):
    id: str
    post_id: str
    title: str
    description: str | None
    multi_choice: bool
    closed_at: datetime | None
    options: list[PollOptionResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PollVoteCreate(BaseModel):
    option_ids: list[str] = Field(..., min_length=1)


class PollVoteResponse(BaseModel):
    id: str
    poll_id: str
    option_id: str
    member_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
