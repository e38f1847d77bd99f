# src/discuss_board/models/account.py
"""SQLAlchemy models for accounts, role records and login sessions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from discuss_board.db.session import Base
from discuss_board.db.time import utcnow
from discuss_board.db.types import UTCDateTime, new_id

STATUS_ACTIVE = "active"
STATUS_SUSPENDED = "suspended"
STATUS_REVOKED = "revoked"

ROLE_MEMBER = "member"
ROLE_MODERATOR = "moderator"
ROLE_ADMINISTRATOR = "administrator"
ROLE_GUEST = "guest"


class UserAccount(Base):
    """Login identity: one email and password per person."""

    __tablename__ = "user_account"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=STATUS_ACTIVE, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    member: Mapped[Member | None] = relationship(back_populates="account", uselist=False)


class Member(Base):
    """Public board identity attached to exactly one account."""

    __tablename__ = "member"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("user_account.id"),
        unique=True,
        nullable=False,
    )
    nickname: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=STATUS_ACTIVE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    account: Mapped[UserAccount] = relationship(back_populates="member")

    @property
    def email(self) -> str:
        """Return the email of the owning account."""
        return self.account.email


class Moderator(Base):
    """Moderator privileges granted to a member."""

    __tablename__ = "moderator"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("member.id"),
        unique=True,
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(32), default=STATUS_ACTIVE, nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    # Temporary suspension; privileges return once this passes.
    suspended_until: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    member: Mapped[Member] = relationship()


class Administrator(Base):
    """Administrator privileges granted to a member."""

    __tablename__ = "administrator"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("member.id"),
        unique=True,
        nullable=False,
    )
    # Self-referencing for the first administrator who joined directly.
    escalated_by_administrator_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("administrator.id"),
        nullable=True,
    )
    status: Mapped[str] = mapped_column(String(32), default=STATUS_ACTIVE, nullable=False)
    escalated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    member: Mapped[Member] = relationship()


class Guest(Base):
    """Anonymous visitor holding a guest token."""

    __tablename__ = "guest"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)


class ConsentRecord(Base):
    """Policy consent captured at registration."""

    __tablename__ = "consent_record"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("user_account.id"),
        nullable=False,
    )
    policy_type: Mapped[str] = mapped_column(String(64), nullable=False)
    policy_version: Mapped[str] = mapped_column(String(32), nullable=False)
    consent_action: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)


class JwtSession(Base):
    """One issued access/refresh pair; rotated on refresh, revoked on logout."""

    __tablename__ = "jwt_session"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    # Primary key of the role record named by ``role``.
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_account_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("user_account.id"),
        nullable=True,
        index=True,
    )
    jwt_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    refresh_token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    issued_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    revoked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
