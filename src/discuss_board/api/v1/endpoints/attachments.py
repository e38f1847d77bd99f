# src/discuss_board/api/v1/endpoints/attachments.py
"""Attachment endpoints."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import ActorDep, SessionDep
from discuss_board.schemas.attachment import (
    AttachmentCreate,
    AttachmentResponse,
    AttachmentSearchRequest,
)
from discuss_board.schemas.common import Page
from discuss_board.services import attachment_service

router = APIRouter(tags=["attachments"])


@router.post(
    "/posts/{post_id}/attachments",
    response_model=AttachmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def attach_to_post(
    post_id: str, payload: AttachmentCreate, db: SessionDep, actor: ActorDep
) -> AttachmentResponse:
    """Register a file on a post.

    Args:
        post_id: Target post
        payload: File name, URL, MIME type and size
        db: Database session
        actor: Post author, moderator or administrator

    Returns:
        Created attachment
    """
    attachment = attachment_service.attach_to_post(db, actor, post_id, payload)
    return AttachmentResponse.model_validate(attachment)


@router.post(
    "/posts/{post_id}/comments/{comment_id}/attachments",
    response_model=AttachmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def attach_to_comment(
    post_id: str, comment_id: str, payload: AttachmentCreate, db: SessionDep, actor: ActorDep
) -> AttachmentResponse:
    attachment = attachment_service.attach_to_comment(db, actor, post_id, comment_id, payload)
    return AttachmentResponse.model_validate(attachment)


@router.patch("/attachments", response_model=Page[AttachmentResponse])
async def search_attachments(
    request: AttachmentSearchRequest, db: SessionDep, actor: ActorDep
) -> dict:
    return attachment_service.search_attachments(db, request)


@router.get("/attachments/{attachment_id}", response_model=AttachmentResponse)
async def get_attachment(attachment_id: str, db: SessionDep) -> AttachmentResponse:
    return AttachmentResponse.model_validate(attachment_service.get_attachment(db, attachment_id))


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(attachment_id: str, db: SessionDep, actor: ActorDep) -> None:
    attachment_service.delete_attachment(db, actor, attachment_id)
