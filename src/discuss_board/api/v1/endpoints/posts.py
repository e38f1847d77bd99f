# src/discuss_board/api/v1/endpoints/posts.py
"""Post-related endpoints for the discussion board API."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import ActorDep, MemberDep, SessionDep
from discuss_board.schemas.common import Page
from discuss_board.schemas.post import (
    PostCreate,
    PostEditHistoryResponse,
    PostResponse,
    PostSearchRequest,
    PostSummary,
    PostUpdate,
)
from discuss_board.services import post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.patch("", response_model=Page[PostSummary])
async def search_posts(request: PostSearchRequest, db: SessionDep) -> dict:
    """Search live posts.

    Args:
        request: Keyword, author, status, tag and date filters plus paging
        db: Database session

    Returns:
        One page of post summaries
    """
    return post_service.search_posts(db, request)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: SessionDep) -> PostResponse:
    """Get a specific post by ID.

    Raises:
        NotFoundError: If the post is missing or deleted
    """
    return PostResponse.model_validate(post_service.get_post(db, post_id))


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(post_data: PostCreate, db: SessionDep, member: MemberDep) -> PostResponse:
    """Create a new post.

    Args:
        post_data: Title, body and tag names
        db: Database session
        member: Authorized member writing the post

    Returns:
        Created post

    Raises:
        InvalidRequestError: On length violations, too many tags or forbidden expressions
        ForbiddenError: If the member is muted
    """
    return PostResponse.model_validate(post_service.create_post(db, member, post_data))


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str, update_data: PostUpdate, db: SessionDep, member: MemberDep
) -> PostResponse:
    post = post_service.update_post(db, member, post_id, update_data)
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, db: SessionDep, actor: ActorDep) -> None:
    """Soft-delete a post; its author, moderators and administrators may do so."""
    post_service.delete_post(db, actor, post_id)


@router.get("/{post_id}/edit-histories", response_model=list[PostEditHistoryResponse])
async def list_post_edit_histories(
    post_id: str, db: SessionDep, actor: ActorDep
) -> list[PostEditHistoryResponse]:
    histories = post_service.list_edit_histories(db, actor, post_id)
    return [PostEditHistoryResponse.model_validate(history) for history in histories]


@router.get(
    "/{post_id}/edit-histories/{history_id}", response_model=PostEditHistoryResponse
)
async def get_post_edit_history(
    post_id: str, history_id: str, db: SessionDep, actor: ActorDep
) -> PostEditHistoryResponse:
    history = post_service.get_edit_history(db, actor, post_id, history_id)
    return PostEditHistoryResponse.model_validate(history)
