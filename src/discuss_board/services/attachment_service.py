"""File attachments on posts and comments."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.core.settings import settings
from discuss_board.db.time import utcnow
from discuss_board.models import Attachment
from discuss_board.schemas.attachment import AttachmentCreate, AttachmentSearchRequest
from discuss_board.services import comment_service, post_service
from discuss_board.services.authorization import Actor
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)


def _validate_file(db: Session, payload: AttachmentCreate) -> None:
    if payload.content_type.lower() not in settings.attachment_allowed_types:
        raise InvalidRequestError(f"Unsupported content type: {payload.content_type}")
    if payload.size_bytes <= 0 or payload.size_bytes > settings.attachment_max_bytes:
        raise InvalidRequestError(
            f"File size must be between 1 and {settings.attachment_max_bytes} bytes"
        )
    duplicate = (
        db.query(Attachment)
        .filter(Attachment.file_url == payload.file_url, Attachment.deleted_at.is_(None))
        .first()
    )
    if duplicate is not None:
        raise ConflictError("An attachment with this file_url already exists")


def _store(
    db: Session, actor: Actor, payload: AttachmentCreate, *, post_id: str | None, comment_id: str | None
) -> Attachment:
    attachment = Attachment(
        post_id=post_id,
        comment_id=comment_id,
        uploaded_by_member_id=actor.member_id,
        file_name=payload.file_name,
        file_url=payload.file_url,
        content_type=payload.content_type.lower(),
        size_bytes=payload.size_bytes,
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    logger.info("%s %s attached %s", actor.role, actor.role_id, attachment.id)
    return attachment


def attach_to_post(db: Session, actor: Actor, post_id: str, payload: AttachmentCreate) -> Attachment:
    """Attach a file to a post.

    Only the post's author or a moderator/administrator may upload, and
    locked posts accept no attachments.
    """
    post = post_service.get_post(db, post_id)
    if not actor.is_staff and post.author_member_id != actor.member_id:
        raise ForbiddenError("Only the author or a moderator can attach files")
    if post.is_locked:
        raise ForbiddenError("Post is locked")
    _validate_file(db, payload)
    return _store(db, actor, payload, post_id=post.id, comment_id=None)


def attach_to_comment(
    db: Session, actor: Actor, post_id: str, comment_id: str, payload: AttachmentCreate
) -> Attachment:
    """Attach a file to a comment; same ownership and lock rules as posts."""
    post = post_service.get_post(db, post_id)
    comment = comment_service.get_comment(db, post.id, comment_id)
    if not actor.is_staff and comment.author_member_id != actor.member_id:
        raise ForbiddenError("Only the author or a moderator can attach files")
    if post.is_locked or comment.is_locked:
        raise ForbiddenError("Comment is locked")
    _validate_file(db, payload)
    return _store(db, actor, payload, post_id=None, comment_id=comment.id)


def search_attachments(db: Session, request: AttachmentSearchRequest) -> dict[str, Any]:
    query = db.query(Attachment).filter(Attachment.deleted_at.is_(None))
    if request.post_id:
        query = query.filter(Attachment.post_id == request.post_id)
    if request.comment_id:
        query = query.filter(Attachment.comment_id == request.comment_id)
    if request.uploaded_by_id:
        query = query.filter(Attachment.uploaded_by_member_id == request.uploaded_by_id)
    if request.content_type:
        query = query.filter(Attachment.content_type == request.content_type.lower())
    query = apply_created_range(query, Attachment.created_at, request)
    query = apply_sort(query, Attachment.created_at, request, Attachment.id)
    return paginate(query, request)


def get_attachment(db: Session, attachment_id: str) -> Attachment:
    attachment = db.get(Attachment, attachment_id)
    if attachment is None or attachment.deleted_at is not None:
        raise NotFoundError("Attachment not found")
    return attachment


def delete_attachment(db: Session, actor: Actor, attachment_id: str) -> None:
    attachment = get_attachment(db, attachment_id)
    if not actor.is_staff and attachment.uploaded_by_member_id != actor.member_id:
        raise ForbiddenError("Only the uploader or a moderator can delete this attachment")
    attachment.deleted_at = utcnow()
    db.commit()
