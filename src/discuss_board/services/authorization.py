"""Role standing checks shared by the request dependencies and token refresh.

Each check loads the role record named in a token and confirms it may still
act: not soft-deleted, not revoked, active, and for members not banned.
Every failure is a ``ForbiddenError``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from discuss_board.core.errors import ForbiddenError
from discuss_board.db.time import utcnow
from discuss_board.models import Administrator, Guest, Member, Moderator
from discuss_board.models.account import ROLE_ADMINISTRATOR, ROLE_MODERATOR, STATUS_ACTIVE
from discuss_board.services.ban_service import active_ban

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller of an endpoint shared by several roles."""

    role: str
    role_id: str
    member_id: str
    user_account_id: str

    @property
    def is_staff(self) -> bool:
        return self.role in (ROLE_MODERATOR, ROLE_ADMINISTRATOR)


def ensure_member_standing(db: Session, member: Member | None) -> Member:
    """Confirm the member and its account are live and the member is not banned."""
    if member is None or member.deleted_at is not None or member.status != STATUS_ACTIVE:
        raise ForbiddenError("Member not found or inactive")
    account = member.account
    if account.deleted_at is not None or account.status != STATUS_ACTIVE:
        raise ForbiddenError("Account is not active")
    if active_ban(db, member.id) is not None:
        logger.warning("Rejected banned member %s", member.id)
        raise ForbiddenError("Account is banned")
    return member


def moderator_is_active(moderator: Moderator | None) -> bool:
    if moderator is None:
        return False
    if moderator.deleted_at is not None or moderator.revoked_at is not None:
        return False
    if moderator.status != STATUS_ACTIVE:
        return False
    return moderator.suspended_until is None or moderator.suspended_until <= utcnow()


def administrator_is_active(administrator: Administrator | None) -> bool:
    if administrator is None:
        return False
    if administrator.deleted_at is not None or administrator.revoked_at is not None:
        return False
    return administrator.status == STATUS_ACTIVE


def authorize_member(db: Session, member_id: str) -> Member:
    return ensure_member_standing(db, db.get(Member, member_id))


def authorize_moderator(db: Session, moderator_id: str) -> Moderator:
    moderator = db.get(Moderator, moderator_id)
    if not moderator_is_active(moderator):
        logger.warning("Rejected inactive moderator %s", moderator_id)
        raise ForbiddenError("Moderator privileges not present")
    ensure_member_standing(db, moderator.member)
    return moderator


def authorize_administrator(db: Session, administrator_id: str) -> Administrator:
    administrator = db.get(Administrator, administrator_id)
    if not administrator_is_active(administrator):
        logger.warning("Rejected inactive administrator %s", administrator_id)
        raise ForbiddenError("Administrator privileges not present")
    return administrator


def authorize_guest(db: Session, guest_id: str) -> Guest:
    guest = db.get(Guest, guest_id)
    if guest is None or guest.deleted_at is not None:
        raise ForbiddenError("Guest not found")
    return guest


def moderator_for_member(db: Session, member_id: str) -> Moderator | None:
    """Return the member's moderator record whether or not it is active."""
    return db.query(Moderator).filter(Moderator.member_id == member_id).first()


def administrator_for_member(db: Session, member_id: str) -> Administrator | None:
    return db.query(Administrator).filter(Administrator.member_id == member_id).first()
