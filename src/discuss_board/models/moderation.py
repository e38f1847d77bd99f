# src/discuss_board/models/moderation.py
"""Models tracking reports, moderation actions, bans, appeals and word filters."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from discuss_board.db.session import Base
from discuss_board.db.time import utcnow
from discuss_board.db.types import UTCDateTime, new_id

REPORT_STATUS_PENDING = "pending"
REPORT_STATUS_UNDER_REVIEW = "under_review"
REPORT_STATUS_RESOLVED = "resolved"
REPORT_STATUS_DISMISSED = "dismissed"

ACTION_WARN = "warn"
ACTION_MUTE = "mute"
ACTION_REMOVE = "remove"
ACTION_RESTORE = "restore"
ACTION_RESTRICT = "restrict"
ACTION_EDIT = "edit"
ACTION_ESCALATE = "escalate"

ACTION_STATUS_ACTIVE = "active"
ACTION_STATUS_REVERSED = "reversed"

APPEAL_STATUS_PENDING = "pending"
APPEAL_STATUS_ACCEPTED = "accepted"
APPEAL_STATUS_REJECTED = "rejected"


class ContentReport(Base):
    """A member's complaint about exactly one post or comment."""

    __tablename__ = "content_report"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    reporter_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False, index=True
    )
    content_type: Mapped[str] = mapped_column(String(16), nullable=False)
    # Exactly one of these is set.
    post_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("post.id"), nullable=True)
    comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comment.id"), nullable=True
    )
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), default=REPORT_STATUS_PENDING, nullable=False
    )
    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class ModerationAction(Base):
    """An enforcement step taken by a moderator against members or content."""

    __tablename__ = "moderation_action"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    moderator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("moderator.id"), nullable=False, index=True
    )
    target_member_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=True, index=True
    )
    target_post_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("post.id"), nullable=True
    )
    target_comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comment.id"), nullable=True
    )
    content_report_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("content_report.id"), nullable=True
    )
    action_type: Mapped[str] = mapped_column(String(32), nullable=False)
    action_reason: Mapped[str] = mapped_column(String(500), nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), default=ACTION_STATUS_ACTIVE, nullable=False
    )
    effective_from: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    effective_until: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class Ban(Base):
    """Account-level ban; permanent or until ``expires_at``."""

    __tablename__ = "ban"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False, index=True
    )
    moderator_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("moderator.id"), nullable=False
    )
    ban_reason: Mapped[str] = mapped_column(String(500), nullable=False)
    permanent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    lifted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class Appeal(Base):
    """A member's request to reverse a moderation action taken against them."""

    __tablename__ = "appeal"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    moderation_action_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("moderation_action.id", ondelete="CASCADE"), nullable=False
    )
    appellant_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False, index=True
    )
    appeal_reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(32), default=APPEAL_STATUS_PENDING, nullable=False
    )
    resolution_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class ForbiddenWord(Base):
    """Expression rejected anywhere in user-written text."""

    __tablename__ = "forbidden_word"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # Stored lower-cased; matching is case-insensitive.
    expression: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
