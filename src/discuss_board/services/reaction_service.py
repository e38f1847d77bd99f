"""Likes and dislikes on comments and posts."""
from __future__ import annotations

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Comment, CommentReaction, Member, Post, PostReaction

__all__ = [
    "react_to_comment",
    "remove_comment_reaction",
    "react_to_post",
    "remove_post_reaction",
]


def react_to_comment(db: Session, member: Member, comment_id: str, reaction_type: str) -> CommentReaction:
    """Record a member's reaction to a comment.

    A member holds at most one live reaction per comment. A previously
    withdrawn reaction is revived with the new type instead of inserting a
    second row.

    Raises:
        NotFoundError: If the comment is missing or deleted
        ForbiddenError: If the comment is locked
        InvalidRequestError: If the member reacts to their own comment
        ConflictError: If the member already has a live reaction
    """
    comment = db.get(Comment, comment_id)
    if comment is None or comment.deleted_at is not None:
        raise NotFoundError("Comment not found")
    if comment.is_locked:
        raise ForbiddenError("Comment is locked")
    if comment.author_member_id == member.id:
        raise InvalidRequestError("Members cannot react to their own comments")

    existing = next((r for r in comment.reactions if r.member_id == member.id), None)
    if existing is not None and existing.deleted_at is None:
        raise ConflictError("Reaction already exists")
    if existing is not None:
        existing.reaction_type = reaction_type
        existing.deleted_at = None
        existing.updated_at = utcnow()
        reaction = existing
    else:
        reaction = CommentReaction(member_id=member.id, reaction_type=reaction_type)
        comment.reactions.append(reaction)
    db.commit()
    db.refresh(reaction)
    return reaction


def remove_comment_reaction(db: Session, member: Member, reaction_id: str) -> None:
    reaction = db.get(CommentReaction, reaction_id)
    if reaction is None or reaction.deleted_at is not None:
        raise NotFoundError("Reaction not found")
    if reaction.member_id != member.id:
        raise ForbiddenError("Only the owner can remove this reaction")
    reaction.deleted_at = utcnow()
    db.commit()


def react_to_post(db: Session, member: Member, post_id: str, reaction_type: str) -> PostReaction:
    """Record a member's reaction to a post; same rules as comment reactions."""
    post = db.get(Post, post_id)
    if post is None or post.deleted_at is not None:
        raise NotFoundError("Post not found")
    if post.is_locked:
        raise ForbiddenError("Post is locked")
    if post.author_member_id == member.id:
        raise InvalidRequestError("Members cannot react to their own posts")

    existing = next((r for r in post.reactions if r.member_id == member.id), None)
    if existing is not None and existing.deleted_at is None:
        raise ConflictError("Reaction already exists")
    if existing is not None:
        existing.reaction_type = reaction_type
        existing.deleted_at = None
        existing.updated_at = utcnow()
        reaction = existing
    else:
        reaction = PostReaction(member_id=member.id, reaction_type=reaction_type)
        post.reactions.append(reaction)
    db.commit()
    db.refresh(reaction)
    return reaction


def remove_post_reaction(db: Session, member: Member, reaction_id: str) -> None:
    reaction = db.get(PostReaction, reaction_id)
    if reaction is None or reaction.deleted_at is not None:
        raise NotFoundError("Reaction not found")
    if reaction.member_id != member.id:
        raise ForbiddenError("Only the owner can remove this reaction")
    reaction.deleted_at = utcnow()
    db.commit()
