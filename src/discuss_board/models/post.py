# src/discuss_board/models/post.py
"""SQLAlchemy models for posts and related attributes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, ForeignKey, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from discuss_board.db.session import Base
from discuss_board.db.time import utcnow
from discuss_board.db.types import UTCDateTime, new_id
from discuss_board.models.account import Member

POST_STATUS_PUBLIC = "public"

REACTION_LIKE = "like"
REACTION_DISLIKE = "dislike"

post_tag = Table(
    "post_tag",
    Base.metadata,
    Column("post_id", String(36), ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    """Lower-cased label attached to posts."""

    __tablename__ = "tag"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)


class Post(Base):
    """Top-level discussion thread written by a member."""

    __tablename__ = "post"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    author_member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("member.id"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    business_status: Mapped[str] = mapped_column(
        String(32), default=POST_STATUS_PUBLIC, nullable=False
    )
    # Locked posts accept no edits, comments or attachments.
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    author: Mapped[Member] = relationship()
    tags: Mapped[list[Tag]] = relationship(secondary=post_tag, order_by=Tag.name)
    reactions: Mapped[list[PostReaction]] = relationship(back_populates="post")

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    @property
    def like_count(self) -> int:
        return count_reactions(self.reactions, REACTION_LIKE)

    @property
    def dislike_count(self) -> int:
        return count_reactions(self.reactions, REACTION_DISLIKE)


class PostEditHistory(Base):
    """Snapshot of a post before and after an edit."""

    __tablename__ = "post_edit_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True
    )
    editor_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False
    )
    title_before: Mapped[str] = mapped_column(String(200), nullable=False)
    title_after: Mapped[str] = mapped_column(String(200), nullable=False)
    body_before: Mapped[str] = mapped_column(Text, nullable=False)
    body_after: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)


class PostReaction(Base):
    """A member's like or dislike on a post; one row per member and post."""

    __tablename__ = "post_reaction"
    __table_args__ = (UniqueConstraint("post_id", "member_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("post.id", ondelete="CASCADE"), nullable=False
    )
    member_id: Mapped[str] = mapped_column(String(36), ForeignKey("member.id"), nullable=False)
    reaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    post: Mapped[Post] = relationship(back_populates="reactions")


def count_reactions(reactions: list, reaction_type: str) -> int:
    return sum(
        1
        for reaction in reactions
        if reaction.deleted_at is None and reaction.reaction_type == reaction_type
    )
