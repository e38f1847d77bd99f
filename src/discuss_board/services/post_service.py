"""Service-level helpers for posts and their edit history."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from discuss_board.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.core.settings import settings
from discuss_board.db.time import utcnow
from discuss_board.models import Member, Post, PostEditHistory, Tag
from discuss_board.models.account import ROLE_MEMBER
from discuss_board.schemas.post import PostCreate, PostSearchRequest, PostUpdate
from discuss_board.services import audit_service, content_policy
from discuss_board.services.authorization import Actor
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "search_posts",
    "get_post",
    "create_post",
    "update_post",
    "delete_post",
    "list_edit_histories",
    "get_edit_history",
]

_SORT_COLUMNS = {
    "created_at": Post.created_at,
    "updated_at": Post.updated_at,
    "title": Post.title,
}


def search_posts(db: Session, request: PostSearchRequest) -> dict[str, Any]:
    """Return one page of live posts matching the filters."""
    query = db.query(Post).filter(Post.deleted_at.is_(None))
    if request.keyword:
        query = query.filter(
            or_(Post.title.icontains(request.keyword), Post.body.icontains(request.keyword))
        )
    if request.author_id:
        query = query.filter(Post.author_member_id == request.author_id)
    if request.status:
        query = query.filter(Post.business_status == request.status)
    if request.tag:
        query = query.filter(Post.tags.any(Tag.name == request.tag.strip().lower()))
    query = apply_created_range(query, Post.created_at, request)
    query = apply_sort(query, _SORT_COLUMNS[request.sort_by], request, Post.id)
    return paginate(query, request)


def get_post(db: Session, post_id: str) -> Post:
    """Return a live post or raise ``NotFoundError``."""
    post = db.get(Post, post_id)
    if post is None or post.deleted_at is not None:
        raise NotFoundError("Post not found")
    return post


def _resolve_tags(db: Session, names: list[str]) -> list[Tag]:
    normalized: list[str] = []
    for name in names:
        cleaned = name.strip().lower()
        if cleaned and cleaned not in normalized:
            normalized.append(cleaned)
    if len(normalized) > settings.post_max_tags:
        raise InvalidRequestError(f"A post can have at most {settings.post_max_tags} tags")
    if any(len(name) > 64 for name in normalized):
        raise InvalidRequestError("Tag names must be at most 64 characters")

    tags: list[Tag] = []
    for name in normalized:
        tag = db.query(Tag).filter(Tag.name == name).first()
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
            db.flush()
        tags.append(tag)
    return tags


def _validated_title(title: str) -> str:
    return content_policy.normalize_text(
        title, field="Title", min_length=1, max_length=settings.post_title_max_length
    )


def _validated_body(body: str) -> str:
    return content_policy.normalize_text(
        body, field="Body", min_length=1, max_length=settings.post_body_max_length
    )


def create_post(db: Session, author: Member, post_data: PostCreate) -> Post:
    """Create a new post.

    Args:
        db: Database session
        author: Member writing the post
        post_data: Title, body and tags

    Returns:
        The persisted post.

    Raises:
        ForbiddenError: If the author is muted
        InvalidRequestError: On length violations, too many tags or forbidden expressions
    """
    content_policy.ensure_not_muted(db, author.id)
    title = _validated_title(post_data.title)
    body = _validated_body(post_data.body)
    content_policy.ensure_allowed(db, title, body)

    post = Post(author_member_id=author.id, title=title, body=body)
    post.tags = _resolve_tags(db, post_data.tags)
    db.add(post)
    db.flush()
    audit_service.record(
        db,
        actor_id=author.id,
        actor_role=ROLE_MEMBER,
        action_type="post_create",
        target_table="post",
        target_id=post.id,
    )
    db.commit()
    db.refresh(post)
    logger.info("Member %s created post %s", author.id, post.id)
    return post


def update_post(db: Session, editor: Member, post_id: str, update_data: PostUpdate) -> Post:
    """Edit a post and record the previous version.

    Raises:
        NotFoundError: If the post is missing or deleted
        ForbiddenError: If the editor is not the author, is muted, or the post is locked
        InvalidRequestError: On length violations or forbidden expressions
    """
    post = get_post(db, post_id)
    if post.author_member_id != editor.id:
        raise ForbiddenError("Only the author can edit this post")
    if post.is_locked:
        raise ForbiddenError("Post is locked")
    content_policy.ensure_not_muted(db, editor.id)

    title = _validated_title(update_data.title) if update_data.title is not None else post.title
    body = _validated_body(update_data.body) if update_data.body is not None else post.body
    content_policy.ensure_allowed(db, title, body)

    db.add(
        PostEditHistory(
            post_id=post.id,
            editor_member_id=editor.id,
            title_before=post.title,
            title_after=title,
            body_before=post.body,
            body_after=body,
        )
    )
    post.title = title
    post.body = body
    post.updated_at = utcnow()
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, actor: Actor, post_id: str) -> None:
    """Soft-delete a post; allowed for its author and for moderators or administrators."""
    post = get_post(db, post_id)
    if not actor.is_staff and post.author_member_id != actor.member_id:
        raise ForbiddenError("Only the author or a moderator can delete this post")
    post.deleted_at = utcnow()
    audit_service.record(
        db,
        actor_id=actor.role_id,
        actor_role=actor.role,
        action_type="post_delete",
        target_table="post",
        target_id=post.id,
    )
    db.commit()
    logger.info("%s %s deleted post %s", actor.role, actor.role_id, post.id)


def _ensure_history_access(post: Post, actor: Actor) -> None:
    if not actor.is_staff and post.author_member_id != actor.member_id:
        raise ForbiddenError("Only the author or a moderator can view edit history")


def list_edit_histories(db: Session, actor: Actor, post_id: str) -> list[PostEditHistory]:
    post = get_post(db, post_id)
    _ensure_history_access(post, actor)
    return (
        db.query(PostEditHistory)
        .filter(PostEditHistory.post_id == post.id)
        .order_by(PostEditHistory.created_at.asc())
        .all()
    )


def get_edit_history(db: Session, actor: Actor, post_id: str, history_id: str) -> PostEditHistory:
    post = get_post(db, post_id)
    _ensure_history_access(post, actor)
    history = db.get(PostEditHistory, history_id)
    if history is None or history.post_id != post.id:
        raise NotFoundError("Edit history not found")
    return history
