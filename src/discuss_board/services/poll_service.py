"""Polls attached to posts and the votes cast on them."""
from __future__ import annotations

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import Member, Poll, PollOption, PollVote
from discuss_board.schemas.poll import PollCreate, PollUpdate, PollVoteCreate
from discuss_board.services import post_service
from discuss_board.services.authorization import Actor


def _is_closed(poll: Poll) -> bool:
    return poll.closed_at is not None and poll.closed_at <= utcnow()


def create_poll(db: Session, author: Member, post_id: str, payload: PollCreate) -> Poll:
    """Attach a poll to a post written by ``author``."""
    post = post_service.get_post(db, post_id)
    if post.author_member_id != author.id:
        raise ForbiddenError("Only the post author can add a poll")
    if post.is_locked:
        raise ForbiddenError("Post is locked")
    if payload.closed_at is not None and payload.closed_at <= utcnow():
        raise InvalidRequestError("closed_at must be in the future")

    poll = Poll(
        post_id=post.id,
        title=payload.title,
        description=payload.description,
        multi_choice=payload.multi_choice,
        closed_at=payload.closed_at,
    )
    poll.options = [
        PollOption(label=label, position=position)
        for position, label in enumerate(payload.options)
    ]
    db.add(poll)
    db.commit()
    db.refresh(poll)
    return poll


def get_poll(db: Session, post_id: str, poll_id: str) -> Poll:
    poll = db.get(Poll, poll_id)
    if poll is None or poll.deleted_at is not None or poll.post_id != post_id:
        raise NotFoundError("Poll not found")
    return poll


def update_poll(db: Session, actor: Actor, post_id: str, poll_id: str, payload: PollUpdate) -> Poll:
    """Edit an open poll.

    Raises:
        NotFoundError: If the post or poll is missing
        ForbiddenError: If the actor is neither author nor staff, or the post is locked
        InvalidRequestError: If the poll has already closed
    """
    post = post_service.get_post(db, post_id)
    poll = get_poll(db, post.id, poll_id)
    if not actor.is_staff and post.author_member_id != actor.member_id:
        raise ForbiddenError("Only the author or a moderator can edit this poll")
    if post.is_locked:
        raise ForbiddenError("Post is locked")
    if _is_closed(poll):
        raise InvalidRequestError("Poll is closed")

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(poll, key, value)
    poll.updated_at = utcnow()
    db.commit()
    db.refresh(poll)
    return poll


def cast_votes(db: Session, member: Member, poll_id: str, payload: PollVoteCreate) -> list[PollVote]:
    """Vote for one option, or several on a multi-choice poll.

    Raises:
        NotFoundError: If the poll is missing, deleted or closed
        InvalidRequestError: On foreign options or several options on a single-choice poll
        ConflictError: If the member already voted for one of the options
    """
    poll = db.get(Poll, poll_id)
    if poll is None or poll.deleted_at is not None or _is_closed(poll):
        raise NotFoundError("Poll not found or closed")

    option_ids = list(dict.fromkeys(payload.option_ids))
    options = {option.id: option for option in poll.options}
    if any(option_id not in options for option_id in option_ids):
        raise InvalidRequestError("Option does not belong to this poll")
    if not poll.multi_choice:
        already_voted = any(vote.member_id == member.id for o in poll.options for vote in o.votes)
        if len(option_ids) != 1 or already_voted:
            raise InvalidRequestError("Single-choice polls take exactly one vote")

    votes: list[PollVote] = []
    for option_id in option_ids:
        option = options[option_id]
        if any(vote.member_id == member.id for vote in option.votes):
            raise ConflictError("Already voted for this option")
        vote = PollVote(poll_id=poll.id, option_id=option.id, member_id=member.id)
        option.votes.append(vote)
        votes.append(vote)
    db.commit()
    for vote in votes:
        db.refresh(vote)
    return votes
