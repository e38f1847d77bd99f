"""Comment creation, editing and removal."""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.core.settings import settings
from discuss_board.db.time import utcnow
from discuss_board.models import Comment, CommentEditHistory, Member, Post
from discuss_board.schemas.comment import CommentCreate, CommentSearchRequest, CommentUpdate
from discuss_board.services import audit_service, content_policy, notification_service, post_service
from discuss_board.services.authorization import Actor
from discuss_board.services.pagination import apply_sort, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "search_comments",
    "get_comment",
    "create_comment",
    "update_comment",
    "delete_comment",
    "list_edit_histories",
    "get_edit_history",
]


def _validated_content(content: str) -> str:
    return content_policy.normalize_text(
        content,
        field="Content",
        min_length=settings.comment_min_length,
        max_length=settings.comment_max_length,
    )


def _within_edit_window(comment: Comment) -> bool:
    window = timedelta(minutes=settings.comment_edit_window_minutes)
    return utcnow() - comment.created_at <= window


def search_comments(db: Session, post_id: str, request: CommentSearchRequest) -> dict[str, Any]:
    """Return one page of a post's live comments, oldest first by default."""
    post = post_service.get_post(db, post_id)
    query = db.query(Comment).filter(Comment.post_id == post.id, Comment.deleted_at.is_(None))
    if request.author_id:
        query = query.filter(Comment.author_member_id == request.author_id)
    if request.parent_id:
        query = query.filter(Comment.parent_id == request.parent_id)
    query = apply_sort(query, Comment.created_at, request, Comment.id)
    return paginate(query, request)


def get_comment(db: Session, post_id: str, comment_id: str) -> Comment:
    """Return a live comment that belongs to ``post_id``."""
    comment = db.get(Comment, comment_id)
    if comment is None or comment.deleted_at is not None or comment.post_id != post_id:
        raise NotFoundError("Comment not found")
    return comment


def _notify_thread(db: Session, post: Post, comment: Comment, parent: Comment | None) -> None:
    recipients: dict[str, tuple[str, str]] = {}
    if post.author_member_id != comment.author_member_id:
        recipients[post.author_member_id] = (
            "comment_on_post",
            f'New comment on "{post.title}"',
        )
    if parent is not None and parent.author_member_id != comment.author_member_id:
        recipients.setdefault(
            parent.author_member_id,
            ("reply_to_comment", "New reply to your comment"),
        )
    for member_id, (event_type, subject) in recipients.items():
        member = db.get(Member, member_id)
        if member is None or member.deleted_at is not None:
            continue
        notification_service.notify(
            db,
            user_account_id=member.user_account_id,
            event_type=event_type,
            subject=subject,
            body=comment.content[:500],
            post_id=post.id,
            comment_id=comment.id,
        )


def create_comment(db: Session, author: Member, post_id: str, comment_data: CommentCreate) -> Comment:
    """Add a comment to a post.

    Args:
        db: Database session
        author: Member writing the comment
        post_id: Post being commented on
        comment_data: Content and optional parent comment

    Returns:
        The persisted comment.

    Raises:
        NotFoundError: If the post or parent comment is missing
        ForbiddenError: If the post is locked or the author is muted
        InvalidRequestError: On length violations, forbidden expressions or a foreign parent
    """
    post = post_service.get_post(db, post_id)
    if post.is_locked:
        raise ForbiddenError("Post is locked")
    content_policy.ensure_not_muted(db, author.id)

    parent: Comment | None = None
    if comment_data.parent_id is not None:
        parent = db.get(Comment, comment_data.parent_id)
        if parent is None or parent.deleted_at is not None:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post.id:
            raise InvalidRequestError("Parent comment belongs to a different post")

    content = _validated_content(comment_data.content)
    content_policy.ensure_allowed(db, content)

    comment = Comment(
        post_id=post.id,
        parent_id=parent.id if parent else None,
        author_member_id=author.id,
        content=content,
    )
    db.add(comment)
    db.flush()
    _notify_thread(db, post, comment, parent)
    db.commit()
    db.refresh(comment)
    logger.info("Member %s commented %s on post %s", author.id, comment.id, post.id)
    return comment


def update_comment(
    db: Session,
    editor: Member,
    post_id: str,
    comment_id: str,
    update_data: CommentUpdate,
) -> Comment:
    """Edit a comment inside its edit window.

    The comment must belong to the editor, must not be locked and must be
    younger than the edit window. The new text passes the length and
    forbidden-expression checks, and the previous text is kept in one
    edit-history row.

    Raises:
        NotFoundError: If the comment is missing or deleted
        ForbiddenError: If the editor is not the author, the comment is locked,
            the edit window has passed or the editor is muted
        InvalidRequestError: On length violations or forbidden expressions
    """
    comment = get_comment(db, post_id, comment_id)
    if comment.author_member_id != editor.id:
        raise ForbiddenError("Only the author can edit this comment")
    if comment.is_locked:
        raise ForbiddenError("Comment is locked")
    if not _within_edit_window(comment):
        raise ForbiddenError("Edit window has expired")
    content_policy.ensure_not_muted(db, editor.id)

    content = _validated_content(update_data.content)
    content_policy.ensure_allowed(db, content)

    db.add(
        CommentEditHistory(
            comment_id=comment.id,
            editor_member_id=editor.id,
            content_before=comment.content,
            content_after=content,
            edit_reason=update_data.edit_reason,
        )
    )
    comment.content = content
    comment.updated_at = utcnow()
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, actor: Actor, post_id: str, comment_id: str) -> None:
    """Soft-delete a comment.

    Authors may delete inside the edit window; moderators and administrators
    at any time.
    """
    comment = get_comment(db, post_id, comment_id)
    if not actor.is_staff:
        if comment.author_member_id != actor.member_id:
            raise ForbiddenError("Only the author or a moderator can delete this comment")
        if not _within_edit_window(comment):
            raise ForbiddenError("Edit window has expired")
    comment.deleted_at = utcnow()
    audit_service.record(
        db,
        actor_id=actor.role_id,
        actor_role=actor.role,
        action_type="comment_delete",
        target_table="comment",
        target_id=comment.id,
    )
    db.commit()
    logger.info("%s %s deleted comment %s", actor.role, actor.role_id, comment.id)


def _ensure_history_access(comment: Comment, actor: Actor) -> None:
    if not actor.is_staff and comment.author_member_id != actor.member_id:
        raise ForbiddenError("Only the author or a moderator can view edit history")


def list_edit_histories(
    db: Session, actor: Actor, post_id: str, comment_id: str
) -> list[CommentEditHistory]:
    comment = get_comment(db, post_id, comment_id)
    _ensure_history_access(comment, actor)
    return (
        db.query(CommentEditHistory)
        .filter(CommentEditHistory.comment_id == comment.id)
        .order_by(CommentEditHistory.created_at.asc())
        .all()
    )


def get_edit_history(
    db: Session, actor: Actor, post_id: str, comment_id: str, history_id: str
) -> CommentEditHistory:
    comment = get_comment(db, post_id, comment_id)
    _ensure_history_access(comment, actor)
    history = db.get(CommentEditHistory, history_id)
    if history is None or history.comment_id != comment.id:
        raise NotFoundError("Edit history not found")
    return history
