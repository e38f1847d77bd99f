"""Account bans issued by moderators."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Ban, Member, Moderator
from discuss_board.models.account import ROLE_MODERATOR
from discuss_board.schemas.moderation import BanCreate, BanSearchRequest
from discuss_board.services import audit_service, notification_service, session_service
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)

__all__ = ["active_ban", "create_ban", "search_bans", "get_ban", "lift_ban"]


def _active_clause():
    now = utcnow()
    return and_(
        Ban.lifted_at.is_(None),
        or_(Ban.permanent.is_(True), Ban.expires_at > now),
    )


def active_ban(db: Session, member_id: str) -> Ban | None:
    """Return the ban currently in force for ``member_id``.

    A ban is in force while it has not been lifted and is either permanent
    or not yet expired.
    """
    return db.query(Ban).filter(Ban.member_id == member_id, _active_clause()).first()


def create_ban(db: Session, moderator: Moderator, payload: BanCreate) -> Ban:
    """Ban a member and end all of their sessions.

    Raises:
        NotFoundError: If the member does not exist or is deleted.
        InvalidRequestError: On a self-ban or inconsistent expiry.
        ConflictError: If the member already has a ban in force.
    """
    member = db.get(Member, payload.member_id)
    if member is None or member.deleted_at is not None:
        raise NotFoundError("Member not found")
    if member.id == moderator.member_id:
        raise InvalidRequestError("Moderators cannot ban themselves")
    if payload.permanent:
        if payload.expires_at is not None:
            raise InvalidRequestError("Permanent bans cannot have an expiry")
    else:
        if payload.expires_at is None:
            raise InvalidRequestError("Temporary bans require expires_at")
        if payload.expires_at <= utcnow():
            raise InvalidRequestError("expires_at must be in the future")
    if active_ban(db, member.id) is not None:
        raise ConflictError("Member already has an active ban")

    ban = Ban(
        member_id=member.id,
        moderator_id=moderator.id,
        ban_reason=payload.ban_reason,
        permanent=payload.permanent,
        expires_at=payload.expires_at,
    )
    db.add(ban)
    db.flush()
    session_service.revoke_account_sessions(db, member.user_account_id)
    until = "permanently" if ban.permanent else f"until {ban.expires_at.isoformat()}"
    notification_service.notify(
        db,
        user_account_id=member.user_account_id,
        event_type="ban",
        subject="Your account has been banned",
        body=f"You have been banned {until}. Reason: {ban.ban_reason}",
    )
    audit_service.record(
        db,
        actor_id=moderator.id,
        actor_role=ROLE_MODERATOR,
        action_type="ban_create",
        target_table="ban",
        target_id=ban.id,
        description=f"Banned member {member.id}",
    )
    db.commit()
    db.refresh(ban)
    logger.info("Moderator %s banned member %s", moderator.id, member.id)
    return ban


def search_bans(db: Session, request: BanSearchRequest) -> dict[str, Any]:
    query = db.query(Ban)
    if request.member_id:
        query = query.filter(Ban.member_id == request.member_id)
    if request.moderator_id:
        query = query.filter(Ban.moderator_id == request.moderator_id)
    if request.active is True:
        query = query.filter(_active_clause())
    elif request.active is False:
        query = query.filter(~_active_clause())
    query = apply_created_range(query, Ban.created_at, request)
    sort_column = Ban.expires_at if request.sort_by == "expires_at" else Ban.created_at
    query = apply_sort(query, sort_column, request, Ban.id)
    return paginate(query, request)


def get_ban(db: Session, ban_id: str) -> Ban:
    ban = db.get(Ban, ban_id)
    if ban is None:
        raise NotFoundError("Ban not found")
    return ban


def lift_ban(db: Session, ban_id: str, *, actor_id: str, actor_role: str) -> Ban:
    """End a ban early.

    Raises:
        NotFoundError: If the ban does not exist.
        ConflictError: If the ban is no longer in force.
    """
    ban = get_ban(db, ban_id)
    now = utcnow()
    expired = not ban.permanent and ban.expires_at is not None and ban.expires_at <= now
    if ban.lifted_at is not None or expired:
        raise ConflictError("Ban is not active")
    ban.lifted_at = now
    audit_service.record(
        db,
        actor_id=actor_id,
        actor_role=actor_role,
        action_type="ban_lift",
        target_table="ban",
        target_id=ban.id,
    )
    db.commit()
    db.refresh(ban)
    logger.info("%s %s lifted ban %s", actor_role, actor_id, ban.id)
    return ban
