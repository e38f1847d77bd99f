# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

from datetime import timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from discuss_board.api.v1.dependencies import (
    TokenClaims,
    actor_authorize,
    admin_authorize,
    get_token_claims,
    guest_authorize,
)
from discuss_board.core import security
from discuss_board.core.errors import ForbiddenError
from discuss_board.db.time import utcnow
from discuss_board.models import Ban
from discuss_board.models.account import ROLE_ADMINISTRATOR, ROLE_GUEST, ROLE_MEMBER, ROLE_MODERATOR
from discuss_board.services import session_service


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetTokenClaims:
    """Test the get_token_claims dependency function."""

    def test_valid_access_token(self, db_session, member):
        _, token = session_service.issue_session(
            db_session,
            role=ROLE_MEMBER,
            subject=member.user_account_id,
            role_id=member.id,
            user_account_id=member.user_account_id,
        )
        db_session.flush()

        claims = get_token_claims(_credentials(token.access), db_session)
        assert claims.role == ROLE_MEMBER
        assert claims.role_id == member.id
        assert claims.subject == member.user_account_id

    def test_missing_credentials(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_token_claims(None, db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Not authenticated"

    def test_garbage_token(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_token_claims(_credentials("not.a.jwt"), db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Could not validate credentials" in exc_info.value.detail

    def test_refresh_token_is_not_accepted(self, db_session, member):
        _, token = session_service.issue_session(
            db_session,
            role=ROLE_MEMBER,
            subject=member.user_account_id,
            role_id=member.id,
            user_account_id=member.user_account_id,
        )
        db_session.flush()

        with pytest.raises(HTTPException) as exc_info:
            get_token_claims(_credentials(token.refresh), db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_without_session(self, db_session, member):
        """A well-signed token whose session row does not exist is rejected."""
        now = utcnow()
        token = security.create_token(
            subject=member.user_account_id,
            role=ROLE_MEMBER,
            role_id=member.id,
            jwt_id="no-such-session",
            token_type=security.ACCESS_TOKEN,
            issued_at=now,
            expires_at=now + timedelta(minutes=5),
        )
        with pytest.raises(HTTPException) as exc_info:
            get_token_claims(_credentials(token), db_session)
        assert exc_info.value.detail == "Session is no longer valid"


class TestRoleGuards:
    def test_member_token_on_administrator_route(self, client, member_headers):
        r = client.patch("/api/v1/members", json={}, headers=member_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.json()["detail"] == "You're not administrator"

    def test_guest_token_on_member_route(self, client, guest_headers):
        r = client.get("/api/v1/notification-preferences/me", headers=guest_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_member_token_on_staff_route(self, client, member_headers):
        r = client.patch("/api/v1/bans", json={}, headers=member_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.json()["detail"] == "You're not moderator or administrator"

    def test_banned_member_is_refused(self, client, db_session, member, moderator, member_headers):
        """A ban in force blocks the member even with a live session."""
        db_session.add(
            Ban(member_id=member.id, moderator_id=moderator.id, ban_reason="spam", permanent=True)
        )
        db_session.flush()

        r = client.get("/api/v1/notification-preferences/me", headers=member_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.json()["detail"] == "Account is banned"

    def test_expired_ban_does_not_block(self, client, db_session, member, moderator, member_headers):
        db_session.add(
            Ban(
                member_id=member.id,
                moderator_id=moderator.id,
                ban_reason="spam",
                expires_at=utcnow() - timedelta(days=1),
            )
        )
        db_session.flush()

        r = client.get("/api/v1/notification-preferences/me", headers=member_headers)
        assert r.status_code == status.HTTP_200_OK

    def test_revoked_moderator_is_refused(self, client, db_session, moderator, moderator_headers):
        moderator.revoked_at = utcnow()
        db_session.flush()

        r = client.patch("/api/v1/content-reports", json={}, headers=moderator_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN

    def test_suspended_moderator_is_refused(self, client, db_session, moderator, moderator_headers):
        moderator.suspended_until = utcnow() + timedelta(days=1)
        db_session.flush()

        r = client.patch("/api/v1/content-reports", json={}, headers=moderator_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.json()["detail"] == "Moderator privileges not present"

    def test_lapsed_suspension_allows_moderator(self, client, db_session, moderator, moderator_headers):
        moderator.suspended_until = utcnow() - timedelta(minutes=1)
        db_session.flush()

        r = client.patch("/api/v1/content-reports", json={}, headers=moderator_headers)
        assert r.status_code == status.HTTP_200_OK


def test_actor_for_moderator_carries_member_id(db_session, moderator):
    claims = TokenClaims(
        subject=moderator.member.user_account_id,
        role=ROLE_MODERATOR,
        role_id=moderator.id,
        jwt_id="unused",
    )
    actor = actor_authorize(claims, db_session)
    assert actor.role_id == moderator.id
    assert actor.member_id == moderator.member_id
    assert actor.is_staff


def _claims(role: str, role_id: str) -> TokenClaims:
    return TokenClaims(subject=role_id, role=role, role_id=role_id, jwt_id="unused")


class TestAdminAndGuestProviders:
    def test_admin_authorize_accepts_administrator(self, db_session, administrator):
        result = admin_authorize(_claims(ROLE_ADMINISTRATOR, administrator.id), db_session)
        assert result.id == administrator.id

    def test_admin_authorize_rejects_member_token(self, db_session, member):
        with pytest.raises(HTTPException) as exc_info:
            admin_authorize(_claims(ROLE_MEMBER, member.id), db_session)
        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_authorize_rejects_revoked_administrator(self, db_session, administrator):
        administrator.revoked_at = utcnow()
        db_session.flush()

        with pytest.raises(ForbiddenError):
            admin_authorize(_claims(ROLE_ADMINISTRATOR, administrator.id), db_session)

    def test_guest_authorize_accepts_guest(self, db_session, guest):
        assert guest_authorize(_claims(ROLE_GUEST, guest.id), db_session).id == guest.id

    def test_guest_authorize_rejects_member_token(self, db_session, member):
        with pytest.raises(HTTPException) as exc_info:
            guest_authorize(_claims(ROLE_MEMBER, member.id), db_session)
        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN
        assert exc_info.value.detail == "You're not guest"

    def test_deleted_guest_is_refused(self, client, db_session, guest, guest_headers):
        guest.deleted_at = utcnow()
        db_session.flush()

        r = client.get("/api/v1/auth/guest/me", headers=guest_headers)
        assert r.status_code == status.HTTP_403_FORBIDDEN
        assert r.json()["detail"] == "Guest not found"
