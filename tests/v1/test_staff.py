# mypy: ignore-errors
# tests/v1/test_staff.py
"""Tests for administrator management of staff and accounts."""

import pytest
from fastapi import status

from discuss_board.models import Administrator


def test_search_moderators(client, moderator, administrator_headers) -> None:
    r = client.patch("/api/v1/moderators", json={}, headers=administrator_headers)
    assert r.status_code == status.HTTP_200_OK
    assert [m["id"] for m in r.json()["data"]] == [moderator.id]


def test_get_moderator(client, moderator, administrator_headers) -> None:
    r = client.get(f"/api/v1/moderators/{moderator.id}", headers=administrator_headers)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["member_id"] == moderator.member_id


def test_get_missing_moderator(client, administrator_headers) -> None:
    r = client.get("/api/v1/moderators/missing", headers=administrator_headers)
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_search_administrators_by_status(client, administrator, administrator_headers) -> None:
    r = client.patch(
        "/api/v1/administrators", json={"status": "active"}, headers=administrator_headers
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["pagination"]["records"] == 1
    assert r.json()["data"][0]["id"] == administrator.id


def test_administrator_cannot_revoke_self(client, administrator, administrator_headers) -> None:
    r = client.delete(f"/api/v1/administrators/{administrator.id}", headers=administrator_headers)
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_revoke_other_administrator(client, db_session, make_member, administrator_headers) -> None:
    other = Administrator(member_id=make_member().id)
    db_session.add(other)
    db_session.flush()

    r = client.delete(f"/api/v1/administrators/{other.id}", headers=administrator_headers)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "revoked"
    assert r.json()["revoked_at"] is not None


def test_suspend_account_revokes_sessions(
    client, member, member_headers, administrator_headers
) -> None:
    """A suspended account can no longer use its existing token."""
    r = client.put(
        f"/api/v1/administrator/accounts/{member.user_account_id}",
        json={"status": "suspended"},
        headers=administrator_headers,
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "suspended"

    r = client.get("/api/v1/notification-preferences/me", headers=member_headers)
    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_verify_account_email(client, member, administrator_headers) -> None:
    r = client.put(
        f"/api/v1/administrator/accounts/{member.user_account_id}",
        json={"email_verified": True},
        headers=administrator_headers,
    )
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["email_verified"] is True


@pytest.mark.parametrize("payload", [{"status": None}, {"email_verified": None}])
def test_account_update_rejects_null(client, member, administrator_headers, payload) -> None:
    r = client.put(
        f"/api/v1/administrator/accounts/{member.user_account_id}",
        json=payload,
        headers=administrator_headers,
    )
    assert r.status_code == 422
