# src/discuss_board/api/v1/endpoints/polls.py
"""Poll endpoints."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import ActorDep, MemberDep, SessionDep
from discuss_board.schemas.poll import (
    PollCreate,
    PollResponse,
    PollUpdate,
    PollVoteCreate,
    PollVoteResponse,
)
from discuss_board.services import poll_service

router = APIRouter(tags=["polls"])


@router.post(
    "/posts/{post_id}/polls", response_model=PollResponse, status_code=status.HTTP_201_CREATED
)
async def create_poll(
    post_id: str, payload: PollCreate, db: SessionDep, member: MemberDep
) -> PollResponse:
    """Attach a poll to one of the caller's posts."""
    return PollResponse.model_validate(poll_service.create_poll(db, member, post_id, payload))


@router.get("/posts/{post_id}/polls/{poll_id}", response_model=PollResponse)
async def get_poll(post_id: str, poll_id: str, db: SessionDep) -> PollResponse:
    return PollResponse.model_validate(poll_service.get_poll(db, post_id, poll_id))


@router.put("/posts/{post_id}/polls/{poll_id}", response_model=PollResponse)
async def update_poll(
    post_id: str, poll_id: str, payload: PollUpdate, db: SessionDep, actor: ActorDep
) -> PollResponse:
    poll = poll_service.update_poll(db, actor, post_id, poll_id, payload)
    return PollResponse.model_validate(poll)


@router.post(
    "/polls/{poll_id}/votes",
    response_model=list[PollVoteResponse],
    status_code=status.HTTP_201_CREATED,
)
async def cast_votes(
    poll_id: str, payload: PollVoteCreate, db: SessionDep, member: MemberDep
) -> list[PollVoteResponse]:
    """Vote on an open poll.

    Raises:
        NotFoundError: If the poll is missing or closed
        InvalidRequestError: On foreign options or a second choice on a single-choice poll
        ConflictError: On a repeated vote for the same option
    """
    votes = poll_service.cast_votes(db, member, poll_id, payload)
    return [PollVoteResponse.model_validate(vote) for vote in votes]
