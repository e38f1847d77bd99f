# mypy: ignore-errors
# tests/v1/test_attachments.py
"""Tests for attachments on posts and comments."""

from fastapi import status


def _file(**overrides) -> dict:
    payload = {
        "file_name": "diagram.png",
        "file_url": "https://files.example.com/diagram.png",
        "content_type": "image/png",
        "size_bytes": 2048,
    }
    payload.update(overrides)
    return payload


def test_author_attaches_to_post(client, post, member, member_headers) -> None:
    r = client.post(f"/api/v1/posts/{post.id}/attachments", json=_file(), headers=member_headers)
    assert r.status_code == status.HTTP_201_CREATED
    body = r.json()
    assert body["post_id"] == post.id
    assert body["comment_id"] is None
    assert body["uploaded_by_member_id"] == member.id

    r = client.get(f"/api/v1/attachments/{body['id']}")
    assert r.status_code == status.HTTP_200_OK


def test_other_member_cannot_attach(client, post, other_member_headers) -> None:
    r = client.post(
        f"/api/v1/posts/{post.id}/attachments", json=_file(), headers=other_member_headers
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_moderator_can_attach(client, post, moderator_headers) -> None:
    r = client.post(f"/api/v1/posts/{post.id}/attachments", json=_file(), headers=moderator_headers)
    assert r.status_code == status.HTTP_201_CREATED


def test_unsupported_type_and_size(client, post, member_headers) -> None:
    url = f"/api/v1/posts/{post.id}/attachments"
    r = client.post(url, json=_file(content_type="application/x-msdownload"), headers=member_headers)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    r = client.post(url, json=_file(size_bytes=0), headers=member_headers)
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    r = client.post(url, json=_file(size_bytes=50 * 1024 * 1024), headers=member_headers)
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_duplicate_file_url_conflicts(client, post, member_headers) -> None:
    url = f"/api/v1/posts/{post.id}/attachments"
    client.post(url, json=_file(), headers=member_headers)
    r = client.post(url, json=_file(file_name="copy.png"), headers=member_headers)
    assert r.status_code == status.HTTP_409_CONFLICT


def test_attach_to_locked_post(client, db_session, post, member_headers) -> None:
    post.is_locked = True
    db_session.flush()
    r = client.post(f"/api/v1/posts/{post.id}/attachments", json=_file(), headers=member_headers)
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_attach_to_comment(client, post, comment, member_headers) -> None:
    r = client.post(
        f"/api/v1/posts/{post.id}/comments/{comment.id}/attachments",
        json=_file(file_name="notes.pdf", file_url="https://files.example.com/notes.pdf",
                   content_type="application/pdf"),
        headers=member_headers,
    )
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["comment_id"] == comment.id
    assert r.json()["post_id"] is None


def test_search_and_delete(client, post, member_headers, other_member_headers) -> None:
    created = client.post(
        f"/api/v1/posts/{post.id}/attachments", json=_file(), headers=member_headers
    ).json()

    r = client.patch("/api/v1/attachments", json={"post_id": post.id}, headers=member_headers)
    assert r.status_code == status.HTTP_200_OK
    assert [a["id"] for a in r.json()["data"]] == [created["id"]]

    r = client.delete(f"/api/v1/attachments/{created['id']}", headers=other_member_headers)
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.delete(f"/api/v1/attachments/{created['id']}", headers=member_headers)
    assert r.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/attachments/{created['id']}").status_code == status.HTTP_404_NOT_FOUND
