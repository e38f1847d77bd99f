# src/discuss_board/services/moderation_service.py
"""Moderation actions and their effects on members and content."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Appeal, Comment, Member, ModerationAction, Moderator, Post
from discuss_board.models.account import ROLE_ADMINISTRATOR, ROLE_MODERATOR
from discuss_board.models.moderation import (
    ACTION_REMOVE,
    ACTION_RESTORE,
    ACTION_RESTRICT,
    ACTION_STATUS_REVERSED,
    REPORT_STATUS_RESOLVED,
)
from discuss_board.schemas.moderation import ModerationActionCreate, ModerationActionSearchRequest
from discuss_board.services import audit_service, notification_service, report_service
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "created_at": ModerationAction.created_at,
    "action_type": ModerationAction.action_type,
    "effective_from": ModerationAction.effective_from,
}


class ModerationService:
    """Service recording moderation actions and applying their effects."""

    @staticmethod
    def _load_target(db: Session, model: type, target_id: str | None, label: str, allow_deleted: bool):
        if target_id is None:
            return None
        target = db.get(model, target_id)
        if target is None or (target.deleted_at is not None and not allow_deleted):
            raise NotFoundError(f"Target {label} not found")
        return target

    @staticmethod
    def _apply_effect(action_type: str, content: list[Post | Comment]) -> None:
        now = utcnow()
        for item in content:
            if action_type == ACTION_REMOVE:
                item.deleted_at = now
            elif action_type == ACTION_RESTORE:
                item.deleted_at = None
            elif action_type == ACTION_RESTRICT:
                item.is_locked = True

    @staticmethod
    def create_action(db: Session, moderator: Moderator, payload: ModerationActionCreate) -> ModerationAction:
        """Record a moderation action and apply it.

        ``remove`` soft-deletes the targeted content, ``restore`` brings it
        back and ``restrict`` locks it. A ``mute`` takes effect through the
        content policy while the action is in force; the other types are
        recorded only.

        Args:
            db: Database session
            moderator: Acting moderator
            payload: Action details and targets

        Returns:
            The persisted action.

        Raises:
            ForbiddenError: If ``moderator_id`` names someone other than the caller
            InvalidRequestError: Without targets or with an inverted effective range,
                or when the linked report concerns other content
            NotFoundError: If a target or the linked report is missing
        """
        if payload.moderator_id is not None and payload.moderator_id != moderator.id:
            raise ForbiddenError("moderator_id does not match the authenticated moderator")
        if not (payload.target_member_id or payload.target_post_id or payload.target_comment_id):
            raise InvalidRequestError("At least one target must be provided")

        effective_from = payload.effective_from or utcnow()
        if payload.effective_until is not None and payload.effective_until <= effective_from:
            raise InvalidRequestError("effective_until must be after effective_from")

        allow_deleted = payload.action_type == ACTION_RESTORE
        member = ModerationService._load_target(
            db, Member, payload.target_member_id, "member", allow_deleted=False
        )
        post = ModerationService._load_target(
            db, Post, payload.target_post_id, "post", allow_deleted
        )
        comment = ModerationService._load_target(
            db, Comment, payload.target_comment_id, "comment", allow_deleted
        )
        report = None
        if payload.content_report_id is not None:
            report = report_service.get_report(db, payload.content_report_id)
            if (report.post_id is not None and report.post_id != payload.target_post_id) or (
                report.comment_id is not None and report.comment_id != payload.target_comment_id
            ):
                raise InvalidRequestError("Linked report does not concern the targeted content")

        action = ModerationAction(
            moderator_id=moderator.id,
            target_member_id=payload.target_member_id,
            target_post_id=payload.target_post_id,
            target_comment_id=payload.target_comment_id,
            content_report_id=payload.content_report_id,
            action_type=payload.action_type,
            action_reason=payload.action_reason,
            details=payload.details,
            effective_from=effective_from,
            effective_until=payload.effective_until,
        )
        db.add(action)
        db.flush()

        ModerationService._apply_effect(action.action_type, [c for c in (post, comment) if c])
        if report is not None and report.status != REPORT_STATUS_RESOLVED:
            report_service.close_report(db, report, REPORT_STATUS_RESOLVED)

        recipient = member
        if recipient is None:
            author_id = (post or comment).author_member_id
            recipient = db.get(Member, author_id)
        if recipient is not None and recipient.deleted_at is None:
            notification_service.notify(
                db,
                user_account_id=recipient.user_account_id,
                event_type="moderation_action",
                subject=f"Moderation action: {action.action_type}",
                body=action.action_reason,
                post_id=action.target_post_id,
                comment_id=action.target_comment_id,
            )

        audit_service.record(
            db,
            actor_id=moderator.id,
            actor_role=ROLE_MODERATOR,
            action_type=f"moderation_{action.action_type}",
            target_table="moderation_action",
            target_id=action.id,
            description=action.action_reason,
        )
        db.commit()
        db.refresh(action)
        logger.info(
            "Moderator %s recorded %s action %s", moderator.id, action.action_type, action.id
        )
        return action

    @staticmethod
    def search_actions(db: Session, request: ModerationActionSearchRequest) -> dict[str, Any]:
        query = db.query(ModerationAction)
        if request.moderator_id:
            query = query.filter(ModerationAction.moderator_id == request.moderator_id)
        if request.target_member_id:
            query = query.filter(ModerationAction.target_member_id == request.target_member_id)
        if request.target_post_id:
            query = query.filter(ModerationAction.target_post_id == request.target_post_id)
        if request.target_comment_id:
            query = query.filter(ModerationAction.target_comment_id == request.target_comment_id)
        if request.action_type:
            query = query.filter(ModerationAction.action_type == request.action_type)
        if request.status:
            query = query.filter(ModerationAction.status == request.status)
        query = apply_created_range(query, ModerationAction.created_at, request)
        query = apply_sort(query, _SORT_COLUMNS[request.sort_by], request, ModerationAction.id)
        return paginate(query, request)

    @staticmethod
    def get_action(db: Session, action_id: str) -> ModerationAction:
        action = db.get(ModerationAction, action_id)
        if action is None:
            raise NotFoundError("Moderation action not found")
        return action

    @staticmethod
    def reverse_action(db: Session, action: ModerationAction) -> None:
        """Undo the effect of ``action`` and mark it reversed. Does not commit."""
        action.status = ACTION_STATUS_REVERSED
        action.updated_at = utcnow()
        content = [
            item
            for item in (
                db.get(Post, action.target_post_id) if action.target_post_id else None,
                db.get(Comment, action.target_comment_id) if action.target_comment_id else None,
            )
            if item is not None
        ]
        for item in content:
            if action.action_type == ACTION_REMOVE:
                item.deleted_at = None
            elif action.action_type == ACTION_RESTRICT:
                item.is_locked = False

    @staticmethod
    def delete_action(db: Session, action_id: str, *, administrator_id: str) -> None:
        """Permanently erase an action together with its appeals."""
        action = ModerationService.get_action(db, action_id)
        db.query(Appeal).filter(Appeal.moderation_action_id == action.id).delete(
            synchronize_session=False
        )
        audit_service.record(
            db,
            actor_id=administrator_id,
            actor_role=ROLE_ADMINISTRATOR,
            action_type="moderation_action_delete",
            target_table="moderation_action",
            target_id=action.id,
        )
        db.delete(action)
        db.commit()
        logger.info("Administrator %s erased moderation action %s", administrator_id, action_id)
