# src/discuss_board/models/comment.py
"""SQLAlchemy models for comments, their edit history and reactions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from discuss_board.db.session import Base
from discuss_board.db.time import utcnow
from discuss_board.db.types import UTCDateTime, new_id
from discuss_board.models.post import REACTION_DISLIKE, REACTION_LIKE, count_reactions


class Comment(Base):
    """Reply attached to a post, optionally nested under another comment."""

    __tablename__ = "comment"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comment.id"), nullable=True
    )
    author_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    reactions: Mapped[list[CommentReaction]] = relationship(back_populates="comment")

    @property
    def like_count(self) -> int:
        return count_reactions(self.reactions, REACTION_LIKE)

    @property
    def dislike_count(self) -> int:
        return count_reactions(self.reactions, REACTION_DISLIKE)


class CommentEditHistory(Base):
    """Audit row written for every comment edit."""

    __tablename__ = "comment_edit_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    comment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("comment.id", ondelete="CASCADE"), nullable=False, index=True
    )
    editor_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False
    )
    content_before: Mapped[str] = mapped_column(Text, nullable=False)
    content_after: Mapped[str] = mapped_column(Text, nullable=False)
    edit_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)


class CommentReaction(Base):
    """A member's like or dislike on a comment; one row per member and comment."""

    __tablename__ = "comment_reaction"
    __table_args__ = (UniqueConstraint("comment_id", "member_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    comment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("comment.id", ondelete="CASCADE"), nullable=False
    )
    member_id: Mapped[str] = mapped_column(String(36), ForeignKey("member.id"), nullable=False)
    reaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    comment: Mapped[Comment] = relationship(back_populates="reactions")
