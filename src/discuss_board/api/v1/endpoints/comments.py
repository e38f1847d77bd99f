# src/discuss_board/api/v1/endpoints/comments.py
"""Comment endpoints nested under their post."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import ActorDep, MemberDep, SessionDep
from discuss_board.schemas.comment import (
    CommentCreate,
    CommentEditHistoryResponse,
    CommentResponse,
    CommentSearchRequest,
    CommentUpdate,
)
from discuss_board.schemas.common import Page
from discuss_board.services import comment_service

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])


@router.patch("", response_model=Page[CommentResponse])
async def search_comments(
    post_id: str, request: CommentSearchRequest, db: SessionDep
) -> dict:
    return comment_service.search_comments(db, post_id, request)


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(post_id: str, comment_id: str, db: SessionDep) -> CommentResponse:
    return CommentResponse.model_validate(comment_service.get_comment(db, post_id, comment_id))


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str, comment_data: CommentCreate, db: SessionDep, member: MemberDep
) -> CommentResponse:
    """Comment on a post or reply to one of its comments.

    Args:
        post_id: Post being commented on
        comment_data: Comment text and optional parent
        db: Database session
        member: Authorized member writing the comment

    Returns:
        Created comment
    """
    comment = comment_service.create_comment(db, member, post_id, comment_data)
    return CommentResponse.model_validate(comment)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    post_id: str,
    comment_id: str,
    update_data: CommentUpdate,
    db: SessionDep,
    member: MemberDep,
) -> CommentResponse:
    """Edit a comment within its edit window.

    Raises:
        NotFoundError: If the comment is missing or deleted
        ForbiddenError: If the caller is not the author, the comment is locked
            or the edit window has passed
        InvalidRequestError: On length violations or forbidden expressions
    """
    comment = comment_service.update_comment(db, member, post_id, comment_id, update_data)
    return CommentResponse.model_validate(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(post_id: str, comment_id: str, db: SessionDep, actor: ActorDep) -> None:
    comment_service.delete_comment(db, actor, post_id, comment_id)


@router.get(
    "/{comment_id}/edit-histories", response_model=list[CommentEditHistoryResponse]
)
async def list_comment_edit_histories(
    post_id: str, comment_id: str, db: SessionDep, actor: ActorDep
) -> list[CommentEditHistoryResponse]:
    histories = comment_service.list_edit_histories(db, actor, post_id, comment_id)
    return [CommentEditHistoryResponse.model_validate(history) for history in histories]


@router.get(
    "/{comment_id}/edit-histories/{history_id}",
    response_model=CommentEditHistoryResponse,
)
async def get_comment_edit_history(
    post_id: str, comment_id: str, history_id: str, db: SessionDep, actor: ActorDep
) -> CommentEditHistoryResponse:
    history = comment_service.get_edit_history(db, actor, post_id, comment_id, history_id)
    return CommentEditHistoryResponse.model_validate(history)
