# src/discuss_board/models/attachment.py
"""File metadata attached to posts or comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from discuss_board.db.session import Base
from discuss_board.db.time import utcnow
from discuss_board.db.types import UTCDateTime, new_id


class Attachment(Base):
    """Uploaded file reference; the bytes live behind ``file_url``."""

    __tablename__ = "attachment"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("post.id"), nullable=True, index=True
    )
    comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comment.id"), nullable=True, index=True
    )
    uploaded_by_member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("member.id"), nullable=False
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
