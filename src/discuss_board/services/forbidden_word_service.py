"""Administration of the forbidden-expression list."""
from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import ConflictError, NotFoundError
from discuss_board.db.time import utcnow
from discuss_board.models import ForbiddenWord
from discuss_board.models.account import ROLE_ADMINISTRATOR
from discuss_board.schemas.moderation import (
    ForbiddenWordCreate,
    ForbiddenWordSearchRequest,
    ForbiddenWordUpdate,
)
from discuss_board.services import audit_service, content_policy
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate


def _normalize(expression: str) -> str:
    text = content_policy.normalize_text(
        expression, field="Expression", min_length=1, max_length=100
    )
    return text.lower()


def create_word(db: Session, payload: ForbiddenWordCreate, *, administrator_id: str) -> ForbiddenWord:
    """Add an expression; a previously deleted identical expression is revived."""
    expression = _normalize(payload.expression)
    existing = db.query(ForbiddenWord).filter(ForbiddenWord.expression == expression).first()
    if existing is not None and existing.deleted_at is None:
        raise ConflictError("Forbidden expression already exists")
    if existing is not None:
        existing.deleted_at = None
        existing.description = payload.description
        existing.updated_at = utcnow()
        word = existing
    else:
        word = ForbiddenWord(expression=expression, description=payload.description)
        db.add(word)
        db.flush()
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="forbidden_word_create",
        target_table="forbidden_word",
        target_id=word.id,
        description=expression,
    )
    db.commit()
    db.refresh(word)
    return word


def search_words(db: Session, request: ForbiddenWordSearchRequest) -> dict[str, Any]:
    query = db.query(ForbiddenWord).filter(ForbiddenWord.deleted_at.is_(None))
    if request.expression:
        query = query.filter(ForbiddenWord.expression.icontains(request.expression.strip()))
    query = apply_created_range(query, ForbiddenWord.created_at, request)
    sort_column = (
        ForbiddenWord.expression if request.sort_by == "expression" else ForbiddenWord.created_at
    )
    query = apply_sort(query, sort_column, request, ForbiddenWord.id)
    return paginate(query, request)


def get_word(db: Session, word_id: str) -> ForbiddenWord:
    word = db.get(ForbiddenWord, word_id)
    if word is None or word.deleted_at is not None:
        raise NotFoundError("Forbidden word not found")
    return word


def update_word(db: Session, word_id: str, payload: ForbiddenWordUpdate) -> ForbiddenWord:
    word = get_word(db, word_id)
    update_dict = payload.model_dump(exclude_unset=True)
    if update_dict.get("expression") is not None:
        expression = _normalize(update_dict["expression"])
        clash = (
            db.query(ForbiddenWord)
            .filter(ForbiddenWord.expression == expression, ForbiddenWord.id != word.id)
            .first()
        )
        if clash is not None:
            raise ConflictError("Forbidden expression already exists")
        update_dict["expression"] = expression
    for key, value in update_dict.items():
        setattr(word, key, value)
    word.updated_at = utcnow()
    db.commit()
    db.refresh(word)
    return word


def delete_word(db: Session, word_id: str, *, administrator_id: str) -> None:
    word = get_word(db, word_id)
    word.deleted_at = utcnow()
    audit_service.record(
        db,
        actor_id=administrator_id,
        actor_role=ROLE_ADMINISTRATOR,
        action_type="forbidden_word_delete",
        target_table="forbidden_word",
        target_id=word.id,
        description=word.expression,
    )
    db.commit()
