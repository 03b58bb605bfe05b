"""API tests for reviews, photos and the admin moderation queue."""

from collections.abc import Callable

from fastapi import status
from fastapi.testclient import TestClient

from pintwatch.models import Profile, Pub
from tests.conftest import ADMIN_USER_ID, TRUSTED_USER_ID, USER_ID


def post_review(
    client: TestClient, headers: dict[str, str], pub: Pub, **ratings: int
) -> dict:
    payload = {"pub_id": pub.id, "comment": "Creamy pint, great snug", **(ratings or {"pint_quality": 5, "ambience": 4})}
    response = client.post("/api/v1/reviews", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def test_untrusted_review_is_hidden_until_approved(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    profiles: dict[str, Profile],
) -> None:
    review = post_review(client, auth_headers(USER_ID), pub)
    assert review["is_approved"] is False
    assert review["average_rating"] == 4.5

    assert client.get(f"/api/v1/pubs/{pub.id}/reviews").json() == []

    queue = client.get("/api/v1/admin/queue", headers=auth_headers(ADMIN_USER_ID)).json()
    assert [item["id"] for item in queue["reviews"]] == [review["id"]]

    response = client.post(
        f"/api/v1/admin/review/{review['id']}/decision",
        json={"decision": "approve"},
        headers=auth_headers(ADMIN_USER_ID),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_approved"] is True

    visible = client.get(f"/api/v1/pubs/{pub.id}/reviews").json()
    assert [item["id"] for item in visible] == [review["id"]]


def test_trusted_review_is_visible_immediately(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    profiles: dict[str, Profile],
) -> None:
    review = post_review(client, auth_headers(TRUSTED_USER_ID), pub)

    assert review["is_approved"] is True
    assert len(client.get(f"/api/v1/pubs/{pub.id}/reviews").json()) == 1


def test_review_without_content_is_rejected(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
) -> None:
    response = client.post(
        "/api/v1/reviews", json={"pub_id": pub.id}, headers=auth_headers(USER_ID)
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_review_requires_authentication(client: TestClient, pub: Pub) -> None:
    response = client.post("/api/v1/reviews", json={"pub_id": pub.id, "pint_quality": 4})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_reject_photo_returns_no_content(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    profiles: dict[str, Profile],
) -> None:
    photo = client.post(
        "/api/v1/photos",
        json={"pub_id": pub.id, "storage_path": "pubs/1/front.jpg", "caption": "Front"},
        headers=auth_headers(USER_ID),
    ).json()
    assert photo["is_approved"] is False

    response = client.post(
        f"/api/v1/admin/photo/{photo['id']}/decision",
        json={"decision": "reject"},
        headers=auth_headers(ADMIN_USER_ID),
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT

    queue = client.get("/api/v1/admin/queue", headers=auth_headers(ADMIN_USER_ID)).json()
    assert queue["photos"] == []


def test_deciding_twice_is_a_conflict(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    profiles: dict[str, Profile],
) -> None:
    review = post_review(client, auth_headers(USER_ID), pub)
    url = f"/api/v1/admin/review/{review['id']}/decision"

    client.post(url, json={"decision": "approve_and_trust"}, headers=auth_headers(ADMIN_USER_ID))
    response = client.post(url, json={"decision": "approve"}, headers=auth_headers(ADMIN_USER_ID))

    assert response.status_code == status.HTTP_409_CONFLICT

    follow_up = post_review(client, auth_headers(USER_ID), pub, ambience=3)
    assert follow_up["is_approved"] is True


def test_admin_endpoints_reject_non_admins(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    profiles: dict[str, Profile],
) -> None:
    response = client.get("/api/v1/admin/queue", headers=auth_headers(TRUSTED_USER_ID))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_can_revoke_trust(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    profiles: dict[str, Profile],
) -> None:
    response = client.patch(
        f"/api/v1/admin/profiles/{TRUSTED_USER_ID}",
        json={"is_trusted": False},
        headers=auth_headers(ADMIN_USER_ID),
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["is_trusted"] is False
    assert body["is_admin"] is False
