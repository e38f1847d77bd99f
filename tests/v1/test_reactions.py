# mypy: ignore-errors
# tests/v1/test_reactions.py
"""Tests for post and comment reactions."""

from fastapi import status


def test_like_comment_and_count(client, post, comment, other_member_headers) -> None:
    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "like"},
        headers=other_member_headers,
    )
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["comment_id"] == comment.id

    r = client.get(f"/api/v1/posts/{post.id}/comments/{comment.id}")
    assert r.json()["like_count"] == 1
    assert r.json()["dislike_count"] == 0


def test_cannot_react_to_own_comment(client, comment, member_headers) -> None:
    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "like"},
        headers=member_headers,
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_duplicate_reaction_conflicts(client, comment, other_member_headers) -> None:
    payload = {"comment_id": comment.id, "reaction_type": "like"}
    client.post("/api/v1/comment-reactions", json=payload, headers=other_member_headers)
    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "dislike"},
        headers=other_member_headers,
    )
    assert r.status_code == status.HTTP_409_CONFLICT


def test_withdrawn_reaction_is_revived(client, post, comment, other_member_headers) -> None:
    """Re-reacting after a withdrawal reuses the same row with the new type."""
    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "like"},
        headers=other_member_headers,
    )
    reaction_id = r.json()["id"]
    r = client.delete(f"/api/v1/comment-reactions/{reaction_id}", headers=other_member_headers)
    assert r.status_code == status.HTTP_204_NO_CONTENT

    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "dislike"},
        headers=other_member_headers,
    )
    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["id"] == reaction_id
    assert r.json()["reaction_type"] == "dislike"

    body = client.get(f"/api/v1/posts/{post.id}/comments/{comment.id}").json()
    assert (body["like_count"], body["dislike_count"]) == (0, 1)


def test_cannot_react_to_locked_comment(client, db_session, comment, other_member_headers) -> None:
    comment.is_locked = True
    db_session.flush()
    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "like"},
        headers=other_member_headers,
    )
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_only_owner_removes_reaction(client, comment, other_member_headers, member_headers) -> None:
    r = client.post(
        "/api/v1/comment-reactions",
        json={"comment_id": comment.id, "reaction_type": "like"},
        headers=other_member_headers,
    )
    r = client.delete(f"/api/v1/comment-reactions/{r.json()['id']}", headers=member_headers)
    assert r.status_code == status.HTTP_403_FORBIDDEN


def test_post_reactions(client, post, member_headers, other_member_headers) -> None:
    r = client.post(
        "/api/v1/post-reactions",
        json={"post_id": post.id, "reaction_type": "dislike"},
        headers=other_member_headers,
    )
    assert r.status_code == status.HTTP_201_CREATED
    assert client.get(f"/api/v1/posts/{post.id}").json()["dislike_count"] == 1

    r = client.post(
        "/api/v1/post-reactions",
        json={"post_id": post.id, "reaction_type": "like"},
        headers=member_headers,
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_react_to_missing_post(client, member_headers) -> None:
    r = client.post(
        "/api/v1/post-reactions",
        json={"post_id": "missing", "reaction_type": "like"},
        headers=member_headers,
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND
