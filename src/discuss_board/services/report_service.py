"""Member reports about posts and comments."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Comment, ContentReport, Member, Moderator, Post
from discuss_board.models.account import ROLE_MODERATOR
from discuss_board.models.moderation import (
    REPORT_STATUS_DISMISSED,
    REPORT_STATUS_PENDING,
    REPORT_STATUS_RESOLVED,
)
from discuss_board.schemas.moderation import (
    ContentReportCreate,
    ContentReportSearchRequest,
    ContentReportUpdate,
)
from discuss_board.services import audit_service, notification_service
from discuss_board.services.authorization import Actor
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)

_CLOSED_STATUSES = (REPORT_STATUS_RESOLVED, REPORT_STATUS_DISMISSED)

_SORT_COLUMNS = {
    "created_at": ContentReport.created_at,
    "status": ContentReport.status,
    "reason": ContentReport.reason,
}


def create_report(db: Session, reporter: Member, payload: ContentReportCreate) -> ContentReport:
    """File a report against exactly one post or comment.

    Args:
        db: Database session
        reporter: Member filing the report
        payload: Target, reason and optional details

    Returns:
        The new report in ``pending`` state.

    Raises:
        InvalidRequestError: If both or neither target ids are given, or the id
            does not match ``content_type``
        NotFoundError: If the referenced post or comment does not exist
        ConflictError: If the member already reported the same target
    """
    if (payload.post_id is None) == (payload.comment_id is None):
        raise InvalidRequestError("Exactly one of post_id or comment_id must be provided")
    if payload.content_type == "post" and payload.post_id is None:
        raise InvalidRequestError("content_type 'post' requires post_id")
    if payload.content_type == "comment" and payload.comment_id is None:
        raise InvalidRequestError("content_type 'comment' requires comment_id")

    query = db.query(ContentReport).filter(ContentReport.reporter_member_id == reporter.id)
    if payload.post_id is not None:
        if db.get(Post, payload.post_id) is None:
            raise NotFoundError("Post not found")
        query = query.filter(ContentReport.post_id == payload.post_id)
    else:
        if db.get(Comment, payload.comment_id) is None:
            raise NotFoundError("Comment not found")
        query = query.filter(ContentReport.comment_id == payload.comment_id)
    if query.first() is not None:
        raise ConflictError("You have already reported this content")

    report = ContentReport(
        reporter_member_id=reporter.id,
        content_type=payload.content_type,
        post_id=payload.post_id,
        comment_id=payload.comment_id,
        reason=payload.reason,
        details=payload.details,
        status=REPORT_STATUS_PENDING,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("Member %s filed report %s", reporter.id, report.id)
    return report


def search_reports(db: Session, request: ContentReportSearchRequest) -> dict[str, Any]:
    query = db.query(ContentReport)
    if request.reporter_member_id:
        query = query.filter(ContentReport.reporter_member_id == request.reporter_member_id)
    if request.content_type:
        query = query.filter(ContentReport.content_type == request.content_type)
    if request.status:
        query = query.filter(ContentReport.status == request.status)
    if request.reason:
        query = query.filter(ContentReport.reason.icontains(request.reason))
    query = apply_created_range(query, ContentReport.created_at, request)
    query = apply_sort(query, _SORT_COLUMNS[request.sort_by], request, ContentReport.id)
    return paginate(query, request)


def get_report(db: Session, report_id: str) -> ContentReport:
    report = db.get(ContentReport, report_id)
    if report is None:
        raise NotFoundError("Content report not found")
    return report


def get_report_for(db: Session, actor: Actor, report_id: str) -> ContentReport:
    """Return a report visible to ``actor``: its reporter or any staff member."""
    report = get_report(db, report_id)
    if not actor.is_staff and report.reporter_member_id != actor.member_id:
        raise ForbiddenError("Only the reporter or a moderator can view this report")
    return report


def close_report(db: Session, report: ContentReport, status: str) -> None:
    """Move ``report`` to a closed status and tell the reporter. Does not commit."""
    report.status = status
    report.resolved_at = utcnow()
    reporter = db.get(Member, report.reporter_member_id)
    if reporter is None or reporter.deleted_at is not None:
        return
    notification_service.notify(
        db,
        user_account_id=reporter.user_account_id,
        event_type=f"report_{status}",
        subject=f"Your report was {status}",
        body=f"Your report ({report.reason}) has been {status} by a moderator.",
        post_id=report.post_id,
        comment_id=report.comment_id,
    )


def update_status(
    db: Session, moderator: Moderator, report_id: str, payload: ContentReportUpdate
) -> ContentReport:
    report = get_report(db, report_id)
    if payload.status in _CLOSED_STATUSES:
        close_report(db, report, payload.status)
    else:
        report.status = payload.status
        report.resolved_at = None
    audit_service.record(
        db,
        actor_id=moderator.id,
        actor_role=ROLE_MODERATOR,
        action_type="report_update",
        target_table="content_report",
        target_id=report.id,
        description=f"status={payload.status}",
    )
    db.commit()
    db.refresh(report)
    logger.info("Moderator %s set report %s to %s", moderator.id, report.id, payload.status)
    return report
