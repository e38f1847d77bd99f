"""Issuing, rotating and revoking JWT sessions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from discuss_board.core import security
from discuss_board.core.settings import settings
from discuss_board.db.time import utcnow
from discuss_board.db.types import new_id
from discuss_board.models import JwtSession
from discuss_board.schemas.auth import TokenResponse

logger = logging.getLogger(__name__)

__all__ = [
    "ClientInfo",
    "issue_session",
    "rotate_session",
    "find_live_session",
    "revoke_session",
    "revoke_account_sessions",
]


@dataclass(frozen=True)
class ClientInfo:
    """Request metadata stored alongside a session."""

    user_agent: str | None = None
    ip_address: str | None = None


def _encode_pair(
    *, subject: str, role: str, role_id: str, jwt_id: str, issued_at: datetime
) -> TokenResponse:
    access_expires = issued_at + timedelta(minutes=settings.access_token_expire_minutes)
    refresh_expires = issued_at + timedelta(days=settings.refresh_token_expire_days)
    common = {"subject": subject, "role": role, "role_id": role_id, "jwt_id": jwt_id}
    return TokenResponse(
        access=security.create_token(
            **common,
            token_type=security.ACCESS_TOKEN,
            issued_at=issued_at,
            expires_at=access_expires,
        ),
        refresh=security.create_token(
            **common,
            token_type=security.REFRESH_TOKEN,
            issued_at=issued_at,
            expires_at=refresh_expires,
        ),
        expired_at=access_expires,
        refreshable_until=refresh_expires,
    )


def issue_session(
    db: Session,
    *,
    role: str,
    subject: str,
    role_id: str,
    user_account_id: str | None,
    client: ClientInfo | None = None,
) -> tuple[JwtSession, TokenResponse]:
    """Create a session row and the token pair bound to it.

    The row is staged only; the caller commits it together with the login.
    """
    client = client or ClientInfo()
    issued_at = utcnow()
    jwt_id = new_id()
    token = _encode_pair(
        subject=subject, role=role, role_id=role_id, jwt_id=jwt_id, issued_at=issued_at
    )
    session_row = JwtSession(
        role=role,
        subject_id=role_id,
        user_account_id=user_account_id,
        jwt_id=jwt_id,
        refresh_token_hash=security.hash_token(token.refresh),
        user_agent=client.user_agent,
        ip_address=client.ip_address,
        issued_at=issued_at,
        expires_at=token.refreshable_until,
    )
    db.add(session_row)
    return session_row, token


def rotate_session(db: Session, session_row: JwtSession, *, subject: str) -> TokenResponse:
    """Give ``session_row`` a fresh jwt id and token pair, invalidating the old pair."""
    issued_at = utcnow()
    jwt_id = new_id()
    token = _encode_pair(
        subject=subject,
        role=session_row.role,
        role_id=session_row.subject_id,
        jwt_id=jwt_id,
        issued_at=issued_at,
    )
    session_row.jwt_id = jwt_id
    session_row.refresh_token_hash = security.hash_token(token.refresh)
    session_row.issued_at = issued_at
    session_row.expires_at = token.refreshable_until
    return token


def find_live_session(db: Session, jwt_id: str) -> JwtSession | None:
    """Return the session for ``jwt_id`` unless it is revoked, deleted or expired."""
    session_row = db.query(JwtSession).filter(JwtSession.jwt_id == jwt_id).first()
    if session_row is None:
        return None
    if session_row.revoked_at is not None or session_row.deleted_at is not None:
        return None
    if session_row.expires_at <= utcnow():
        return None
    return session_row


def revoke_session(db: Session, jwt_id: str) -> None:
    session_row = db.query(JwtSession).filter(JwtSession.jwt_id == jwt_id).first()
    if session_row is not None and session_row.revoked_at is None:
        session_row.revoked_at = utcnow()


def revoke_account_sessions(db: Session, user_account_id: str) -> int:
    """Revoke every live session of an account; returns how many were revoked."""
    now = utcnow()
    sessions = (
        db.query(JwtSession)
        .filter(
            JwtSession.user_account_id == user_account_id,
            JwtSession.revoked_at.is_(None),
        )
        .all()
    )
    for session_row in sessions:
        session_row.revoked_at = now
    if sessions:
        logger.info("Revoked %d sessions for account %s", len(sessions), user_account_id)
    return len(sessions)
