"""Granting and revoking moderator and administrator privileges."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Administrator, Moderator
from discuss_board.models.account import ROLE_ADMINISTRATOR, STATUS_ACTIVE, STATUS_REVOKED
from discuss_board.schemas.member import AdministratorSearchRequest, ModeratorSearchRequest
from discuss_board.services import audit_service, authorization, member_service
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)


def assign_moderator(
    db: Session, member_id: str, *, administrator_id: str
) -> tuple[Moderator, bool]:
    """Grant moderator privileges to a member.

    Idempotent: an already active moderator is returned unchanged, a revoked
    or deleted record is reactivated, and otherwise a new record is created.

    Returns:
        The moderator record and whether it was created by this call.

    Raises:
        NotFoundError: If the member does not exist or is deleted.
        InvalidRequestError: If the member is not active.
    """
    member = member_service.get_member(db, member_id)
    if member.status != STATUS_ACTIVE:
        raise InvalidRequestError("Member is not active")

    moderator = authorization.moderator_for_member(db, member.id)
    if authorization.moderator_is_active(moderator):
        return moderator, False

    created = moderator is None
    now = utcnow()
    if moderator is None:
        moderator = Moderator(member_id=member.id, status=STATUS_ACTIVE, assigned_at=now)
        db.add(moderator)
        db.flush()
    else:
        moderator.status = STATUS_ACTIVE
        moderator.assigned_at = now
        moderator.revoked_at = None
        moderator.deleted_at = None
        moderator.suspended_until = None
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="moderator_assign",
        target_table="moderator",
        target_id=moderator.id,
    )
    db.commit()
    db.refresh(moderator)
    logger.info("Administrator %s assigned moderator %s", administrator_id, moderator.id)
    return moderator, created


def revoke_moderator(db: Session, member_id: str, *, administrator_id: str) -> Moderator:
    moderator = authorization.moderator_for_member(db, member_id)
    if moderator is None or moderator.revoked_at is not None or moderator.deleted_at is not None:
        raise NotFoundError("Active moderator not found")
    moderator.revoked_at = utcnow()
    moderator.status = STATUS_REVOKED
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="moderator_revoke",
        target_table="moderator",
        target_id=moderator.id,
    )
    db.commit()
    db.refresh(moderator)
    logger.info("Administrator %s revoked moderator %s", administrator_id, moderator.id)
    return moderator


def search_moderators(db: Session, request: ModeratorSearchRequest) -> dict[str, Any]:
    query = db.query(Moderator).filter(Moderator.deleted_at.is_(None))
    if request.member_id:
        query = query.filter(Moderator.member_id == request.member_id)
    if request.status:
        query = query.filter(Moderator.status == request.status)
    query = apply_created_range(query, Moderator.created_at, request)
    sort_column = Moderator.assigned_at if request.sort_by == "assigned_at" else Moderator.created_at
    query = apply_sort(query, sort_column, request, Moderator.id)
    return paginate(query, request)


def get_moderator(db: Session, moderator_id: str) -> Moderator:
    moderator = db.get(Moderator, moderator_id)
    if moderator is None or moderator.deleted_at is not None:
        raise NotFoundError("Moderator not found")
    return moderator


def escalate_administrator(
    db: Session, member_id: str, *, administrator_id: str
) -> Administrator:
    """Make a member an administrator, recording who escalated them."""
    member = member_service.get_member(db, member_id)
    if member.status != STATUS_ACTIVE:
        raise InvalidRequestError("Member is not active")

    administrator = authorization.administrator_for_member(db, member.id)
    if authorization.administrator_is_active(administrator):
        raise ConflictError("Member is already an administrator")

    now = utcnow()
    if administrator is None:
        administrator = Administrator(member_id=member.id)
        db.add(administrator)
    administrator.status = STATUS_ACTIVE
    administrator.escalated_by_administrator_id = administrator_id
    administrator.escalated_at = now
    administrator.revoked_at = None
    administrator.deleted_at = None
    db.flush()
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="administrator_escalate",
        target_table="administrator",
        target_id=administrator.id,
    )
    db.commit()
    db.refresh(administrator)
    logger.info("Administrator %s escalated member %s", administrator_id, member.id)
    return administrator


def search_administrators(db: Session, request: AdministratorSearchRequest) -> dict[str, Any]:
    query = db.query(Administrator).filter(Administrator.deleted_at.is_(None))
    if request.member_id:
        query = query.filter(Administrator.member_id == request.member_id)
    if request.status:
        query = query.filter(Administrator.status == request.status)
    query = apply_created_range(query, Administrator.created_at, request)
    sort_column = (
        Administrator.escalated_at if request.sort_by == "escalated_at" else Administrator.created_at
    )
    query = apply_sort(query, sort_column, request, Administrator.id)
    return paginate(query, request)


def get_administrator(db: Session, administrator_id: str) -> Administrator:
    administrator = db.get(Administrator, administrator_id)
    if administrator is None or administrator.deleted_at is not None:
        raise NotFoundError("Administrator not found")
    return administrator


def revoke_administrator(
    db: Session, target_id: str, *, administrator_id: str
) -> Administrator:
    """Revoke another administrator's privileges.

    Raises:
        NotFoundError: If the administrator does not exist.
        InvalidRequestError: On self-revocation or when it would leave no active administrator.
    """
    administrator = get_administrator(db, target_id)
    if administrator.id == administrator_id:
        raise InvalidRequestError("Administrators cannot revoke themselves")
    if not authorization.administrator_is_active(administrator):
        raise NotFoundError("Active administrator not found")
    remaining = (
        db.query(Administrator)
        .filter(
            Administrator.status == STATUS_ACTIVE,
            Administrator.revoked_at.is_(None),
            Administrator.deleted_at.is_(None),
            Administrator.id != administrator.id,
        )
        .count()
    )
    if remaining == 0:
        raise InvalidRequestError("Cannot revoke the last active administrator")
    administrator.revoked_at = utcnow()
    administrator.status = STATUS_REVOKED
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="administrator_revoke",
        target_table="administrator",
        target_id=administrator.id,
    )
    db.commit()
    db.refresh(administrator)
    logger.info("Administrator %s revoked administrator %s", administrator_id, administrator.id)
    return administrator
