# src/discuss_board/api/v1/endpoints/reactions.py
"""Like/dislike endpoints for comments and posts."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import MemberDep, SessionDep
from discuss_board.schemas.comment import (
    CommentReactionCreate,
    PostReactionCreate,
    ReactionResponse,
)
from discuss_board.services import reaction_service

router = APIRouter(tags=["reactions"])


@router.post(
    "/comment-reactions", response_model=ReactionResponse, status_code=status.HTTP_201_CREATED
)
async def react_to_comment(
    reaction_data: CommentReactionCreate, db: SessionDep, member: MemberDep
) -> ReactionResponse:
    """React to another member's comment.

    Raises:
        NotFoundError: If the comment is missing or deleted
        ForbiddenError: If the comment is locked
        InvalidRequestError: If the comment is the caller's own
        ConflictError: If the caller already reacted
    """
    reaction = reaction_service.react_to_comment(
        db, member, reaction_data.comment_id, reaction_data.reaction_type
    )
    return ReactionResponse.model_validate(reaction)


@router.delete("/comment-reactions/{reaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment_reaction(reaction_id: str, db: SessionDep, member: MemberDep) -> None:
    reaction_service.remove_comment_reaction(db, member, reaction_id)


@router.post(
    "/post-reactions", response_model=ReactionResponse, status_code=status.HTTP_201_CREATED
)
async def react_to_post(
    reaction_data: PostReactionCreate, db: SessionDep, member: MemberDep
) -> ReactionResponse:
    reaction = reaction_service.react_to_post(
        db, member, reaction_data.post_id, reaction_data.reaction_type
    )
    return ReactionResponse.model_validate(reaction)


@router.delete("/post-reactions/{reaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_post_reaction(reaction_id: str, db: SessionDep, member: MemberDep) -> None:
    reaction_service.remove_post_reaction(db, member, reaction_id)
