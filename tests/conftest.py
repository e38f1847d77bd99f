# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-discuss-board-suite")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from discuss_board.core.security import hash_password
from discuss_board.db.session import Base
from discuss_board.db.session import get_db as app_get_session
from discuss_board.db.time import utcnow
from discuss_board.main import app as fastapi_app
from discuss_board.models import (
    Administrator,
    Comment,
    Guest,
    Member,
    Moderator,
    Post,
    UserAccount,
)
from discuss_board.models.account import (
    ROLE_ADMINISTRATOR,
    ROLE_GUEST,
    ROLE_MEMBER,
    ROLE_MODERATOR,
)
from discuss_board.services import session_service

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "Corr3ct-Horse-Battery"

_MEMBER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _bearer(db_session: Session, role: str, role_id: str, user_account_id: str | None) -> dict[str, str]:
    _, token = session_service.issue_session(
        db_session,
        role=role,
        subject=user_account_id or role_id,
        role_id=role_id,
        user_account_id=user_account_id,
    )
    db_session.flush()
    return {"Authorization": f"Bearer {token.access}"}


@pytest.fixture()
def make_member(db_session: Session) -> Callable[..., Member]:
    """Return a factory persisting a member with its login account."""

    def _make(
        nickname: str | None = None,
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> Member:
        number = next(_MEMBER_COUNTER)
        account = UserAccount(
            email=email or f"member{number}@example.com",
            password_hash=hash_password(password),
        )
        member = Member(account=account, nickname=nickname or f"member{number}")
        db_session.add(member)
        db_session.flush()
        db_session.refresh(member)
        return member

    return _make


@pytest.fixture()
def member(make_member: Callable[..., Member]) -> Member:
    """Create the primary test member."""
    return make_member(nickname="alice", email="alice@example.com")


@pytest.fixture()
def other_member(make_member: Callable[..., Member]) -> Member:
    """Create a second member."""
    return make_member(nickname="bob", email="bob@example.com")


@pytest.fixture()
def member_headers(db_session: Session, member: Member) -> dict[str, str]:
    """Return authorization headers for the primary member."""
    return _bearer(db_session, ROLE_MEMBER, member.id, member.user_account_id)


@pytest.fixture()
def other_member_headers(db_session: Session, other_member: Member) -> dict[str, str]:
    return _bearer(db_session, ROLE_MEMBER, other_member.id, other_member.user_account_id)


@pytest.fixture()
def moderator(db_session: Session, make_member: Callable[..., Member]) -> Moderator:
    """Create a member holding an active moderator record."""
    base = make_member(nickname="mod", email="mod@example.com")
    moderator = Moderator(member_id=base.id)
    db_session.add(moderator)
    db_session.flush()
    db_session.refresh(moderator)
    return moderator


@pytest.fixture()
def moderator_headers(db_session: Session, moderator: Moderator) -> dict[str, str]:
    return _bearer(db_session, ROLE_MODERATOR, moderator.id, moderator.member.user_account_id)


@pytest.fixture()
def administrator(db_session: Session, make_member: Callable[..., Member]) -> Administrator:
    """Create a member holding an active administrator record."""
    base = make_member(nickname="admin", email="admin@example.com")
    administrator = Administrator(member_id=base.id)
    db_session.add(administrator)
    db_session.flush()
    db_session.refresh(administrator)
    return administrator


@pytest.fixture()
def administrator_headers(db_session: Session, administrator: Administrator) -> dict[str, str]:
    return _bearer(
        db_session,
        ROLE_ADMINISTRATOR,
        administrator.id,
        administrator.member.user_account_id,
    )


@pytest.fixture()
def guest(db_session: Session) -> Guest:
    guest = Guest(user_agent="pytest", ip_address="127.0.0.1")
    db_session.add(guest)
    db_session.flush()
    db_session.refresh(guest)
    return guest


@pytest.fixture()
def guest_headers(db_session: Session, guest: Guest) -> dict[str, str]:
    return _bearer(db_session, ROLE_GUEST, guest.id, None)


@pytest.fixture()
def post(db_session: Session, member: Member) -> Post:
    """Create a post written by the primary member."""
    post = Post(
        author_member_id=member.id,
        title="First post",
        body="Hello discussion board!",
    )
    db_session.add(post)
    db_session.flush()
    db_session.refresh(post)
    return post


@pytest.fixture()
def comment(db_session: Session, post: Post, member: Member) -> Comment:
    """Create a comment by the primary member on ``post``."""
    comment = Comment(post_id=post.id, author_member_id=member.id, content="Nice thread")
    db_session.add(comment)
    db_session.flush()
    db_session.refresh(comment)
    return comment


@pytest.fixture()
def other_comment(db_session: Session, post: Post, other_member: Member) -> Comment:
    """Create a comment by the second member on ``post``."""
    comment = Comment(post_id=post.id, author_member_id=other_member.id, content="Agreed!")
    db_session.add(comment)
    db_session.flush()
    db_session.refresh(comment)
    return comment


@pytest.fixture()
def backdate(db_session: Session) -> Callable[[Post | Comment, int], None]:
    """Return a helper moving a row's ``created_at`` into the past."""

    def _backdate(row: Post | Comment, minutes: int) -> None:
        row.created_at = utcnow() - timedelta(minutes=minutes)
        db_session.flush()

    return _backdate
