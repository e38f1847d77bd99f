"""Appeals against moderation actions."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Appeal, Comment, Member, ModerationAction, Post
from discuss_board.models.moderation import (
    ACTION_STATUS_REVERSED,
    APPEAL_STATUS_ACCEPTED,
    APPEAL_STATUS_PENDING,
)
from discuss_board.schemas.moderation import (
    AppealCreate,
    AppealResolution,
    AppealSearchRequest,
    AppealUpdate,
)
from discuss_board.services import audit_service, notification_service
from discuss_board.services.authorization import Actor
from discuss_board.services.moderation_service import ModerationService
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)


def _affected_member_id(db: Session, action: ModerationAction) -> str | None:
    if action.target_member_id is not None:
        return action.target_member_id
    # Content-only actions affect the content's author.
    if action.target_post_id is not None:
        post = db.get(Post, action.target_post_id)
        return post.author_member_id if post else None
    if action.target_comment_id is not None:
        comment = db.get(Comment, action.target_comment_id)
        return comment.author_member_id if comment else None
    return None


def create_appeal(db: Session, appellant: Member, payload: AppealCreate) -> Appeal:
    """Open an appeal against an action that affected ``appellant``.

    Raises:
        NotFoundError: If the moderation action does not exist
        ForbiddenError: If the action does not target the appellant
        InvalidRequestError: If the action was already reversed
        ConflictError: If an appeal for the action is still pending
    """
    action = ModerationService.get_action(db, payload.moderation_action_id)
    if _affected_member_id(db, action) != appellant.id:
        raise ForbiddenError("You can only appeal actions taken against you")
    if action.status == ACTION_STATUS_REVERSED:
        raise InvalidRequestError("Moderation action is already reversed")
    pending = (
        db.query(Appeal)
        .filter(
            Appeal.moderation_action_id == action.id,
            Appeal.status == APPEAL_STATUS_PENDING,
        )
        .first()
    )
    if pending is not None:
        raise ConflictError("An appeal for this action is already pending")

    appeal = Appeal(
        moderation_action_id=action.id,
        appellant_member_id=appellant.id,
        appeal_reason=payload.appeal_reason,
    )
    db.add(appeal)
    db.commit()
    db.refresh(appeal)
    logger.info("Member %s appealed action %s", appellant.id, action.id)
    return appeal


def search_appeals(db: Session, actor: Actor, request: AppealSearchRequest) -> dict[str, Any]:
    """Members see their own appeals; moderators and administrators see all."""
    query = db.query(Appeal)
    if not actor.is_staff:
        query = query.filter(Appeal.appellant_member_id == actor.member_id)
    if request.status:
        query = query.filter(Appeal.status == request.status)
    query = apply_created_range(query, Appeal.created_at, request)
    sort_column = Appeal.status if request.sort_by == "status" else Appeal.created_at
    query = apply_sort(query, sort_column, request, Appeal.id)
    return paginate(query, request)


def get_appeal(db: Session, actor: Actor, appeal_id: str) -> Appeal:
    appeal = db.get(Appeal, appeal_id)
    if appeal is None:
        raise NotFoundError("Appeal not found")
    if not actor.is_staff and appeal.appellant_member_id != actor.member_id:
        raise ForbiddenError("Only the appellant or a moderator can view this appeal")
    return appeal


def update_appeal(db: Session, appellant: Member, appeal_id: str, payload: AppealUpdate) -> Appeal:
    appeal = db.get(Appeal, appeal_id)
    if appeal is None:
        raise NotFoundError("Appeal not found")
    if appeal.appellant_member_id != appellant.id:
        raise ForbiddenError("Only the appellant can edit this appeal")
    if appeal.status != APPEAL_STATUS_PENDING:
        raise InvalidRequestError("Only pending appeals can be edited")
    appeal.appeal_reason = payload.appeal_reason
    appeal.updated_at = utcnow()
    db.commit()
    db.refresh(appeal)
    return appeal


def resolve_appeal(db: Session, actor: Actor, appeal_id: str, payload: AppealResolution) -> Appeal:
    """Accept or reject a pending appeal.

    Accepting reverses the underlying action: removed content comes back
    and restricted content is unlocked. The appellant is notified either way.
    """
    appeal = get_appeal(db, actor, appeal_id)
    if appeal.status != APPEAL_STATUS_PENDING:
        raise InvalidRequestError("Appeal is already resolved")

    appeal.status = payload.status
    appeal.resolution_comment = payload.resolution_comment
    appeal.resolved_at = utcnow()
    if payload.status == APPEAL_STATUS_ACCEPTED:
        action = ModerationService.get_action(db, appeal.moderation_action_id)
        ModerationService.reverse_action(db, action)

    appellant = db.get(Member, appeal.appellant_member_id)
    if appellant is not None and appellant.deleted_at is None:
        notification_service.notify(
            db,
            user_account_id=appellant.user_account_id,
            event_type="appeal_resolved",
            subject=f"Your appeal was {payload.status}",
            body=payload.resolution_comment or f"Your appeal has been {payload.status}.",
        )
    audit_service.record(
        db,
        actor_id=actor.role_id,
        actor_role=actor.role,
        action_type="appeal_resolve",
        target_table="appeal",
        target_id=appeal.id,
        description=f"status={payload.status}",
    )
    db.commit()
    db.refresh(appeal)
    logger.info("%s %s %s appeal %s", actor.role, actor.role_id, payload.status, appeal.id)
    return appeal
