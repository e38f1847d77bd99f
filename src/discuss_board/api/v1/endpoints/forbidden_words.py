# src/discuss_board/api/v1/endpoints/forbidden_words.py
"""Administrator management of forbidden expressions."""

from fastapi import APIRouter, status

from discuss_board.api.v1.dependencies import AdministratorDep, SessionDep
from discuss_board.schemas.common import Page
from discuss_board.schemas.moderation import (
    ForbiddenWordCreate,
    ForbiddenWordResponse,
    ForbiddenWordSearchRequest,
    ForbiddenWordUpdate,
)
from discuss_board.services import forbidden_word_service

router = APIRouter(prefix="/forbidden-words", tags=["forbidden-words"])


@router.post("", response_model=ForbiddenWordResponse, status_code=status.HTTP_201_CREATED)
async def create_forbidden_word(
    payload: ForbiddenWordCreate, db: SessionDep, administrator: AdministratorDep
) -> ForbiddenWordResponse:
    word = forbidden_word_service.create_word(db, payload, administrator_id=administrator.id)
    return ForbiddenWordResponse.model_validate(word)


@router.patch("", response_model=Page[ForbiddenWordResponse])
async def search_forbidden_words(
    request: ForbiddenWordSearchRequest, db: SessionDep, administrator: AdministratorDep
) -> dict:
    return forbidden_word_service.search_words(db, request)


@router.get("/{word_id}", response_model=ForbiddenWordResponse)
async def get_forbidden_word(
    word_id: str, db: SessionDep, administrator: AdministratorDep
) -> ForbiddenWordResponse:
    return ForbiddenWordResponse.model_validate(forbidden_word_service.get_word(db, word_id))


@router.put("/{word_id}", response_model=ForbiddenWordResponse)
async def update_forbidden_word(
    word_id: str, payload: ForbiddenWordUpdate, db: SessionDep, administrator: AdministratorDep
) -> ForbiddenWordResponse:
    return ForbiddenWordResponse.model_validate(
        forbidden_word_service.update_word(db, word_id, payload)
    )


@router.delete("/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_forbidden_word(
    word_id: str, db: SessionDep, administrator: AdministratorDep
) -> None:
    forbidden_word_service.delete_word(db, word_id, administrator_id=administrator.id)
