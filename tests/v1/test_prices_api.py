"""API tests for price endpoints."""

from collections.abc import Callable

from fastapi import status
from fastapi.testclient import TestClient

from pintwatch.models import Drink, Profile, Pub
from tests.conftest import OTHER_USER_ID, TRUSTED_USER_ID, USER_ID


def create_price(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drink: Drink,
    amount: float = 6.2,
) -> dict:
    response = client.post(
        "/api/v1/prices/",
        json={"pub_id": pub.id, "drink_id": drink.id, "price": amount},
        headers=auth_headers(USER_ID),
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def test_submit_price_requires_authentication(client: TestClient, pub: Pub, drinks: dict[str, Drink]) -> None:
    response = client.post(
        "/api/v1/prices/",
        json={"pub_id": pub.id, "drink_id": drinks["Guinness"].id, "price": 6.2},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_rejected(client: TestClient, pub: Pub, drinks: dict[str, Drink]) -> None:
    response = client.post(
        "/api/v1/prices/",
        json={"pub_id": pub.id, "drink_id": drinks["Guinness"].id, "price": 6.2},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_submit_and_read_price(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drinks: dict[str, Drink],
    profiles: dict[str, Profile],
) -> None:
    created = create_price(client, auth_headers, pub, drinks["Guinness"])

    assert created["price"] == 6.2
    assert created["freshness"] == "fresh"
    assert created["confidence"]["level"] == "low"

    response = client.get(f"/api/v1/prices/{created['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == created["id"]


def test_non_positive_price_is_rejected_with_field(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drinks: dict[str, Drink],
) -> None:
    response = client.post(
        "/api/v1/prices/",
        json={"pub_id": pub.id, "drink_id": drinks["Guinness"].id, "price": 0},
        headers=auth_headers(USER_ID),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["field"] == "price"


def test_missing_price_is_404(client: TestClient) -> None:
    assert client.get("/api/v1/prices/12345").status_code == status.HTTP_404_NOT_FOUND


def test_vote_toggle_cycle(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drinks: dict[str, Drink],
) -> None:
    price = create_price(client, auth_headers, pub, drinks["Guinness"])
    url = f"/api/v1/prices/{price['id']}/votes"
    headers = auth_headers(OTHER_USER_ID)

    first = client.post(url, json={"vote_type": "up"}, headers=headers).json()
    assert first["applied"] == "added"
    assert first["counts"] == {"up": 1, "down": 0}

    second = client.post(url, json={"vote_type": "down"}, headers=headers).json()
    assert second["applied"] == "replaced"
    assert second["counts"] == {"up": 0, "down": 1}

    third = client.post(url, json={"vote_type": "down"}, headers=headers).json()
    assert third["applied"] == "removed"
    assert third["current"] is None
    assert third["total"] == 0

    detail = client.get(f"/api/v1/prices/{price['id']}").json()
    assert detail["score"] == 0


def test_verifications_raise_confidence(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drinks: dict[str, Drink],
) -> None:
    price = create_price(client, auth_headers, pub, drinks["Guinness"])
    url = f"/api/v1/prices/{price['id']}/verifications"

    for voter in (USER_ID, OTHER_USER_ID, TRUSTED_USER_ID):
        response = client.post(url, json={"is_accurate": True}, headers=auth_headers(voter))
        assert response.status_code == status.HTTP_200_OK

    detail = client.get(f"/api/v1/prices/{price['id']}").json()
    assert detail["verification_count"] == 3
    assert detail["confidence"]["level"] == "high"


def test_dispute_surfaces_proposal_without_overwriting(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drinks: dict[str, Drink],
) -> None:
    price = create_price(client, auth_headers, pub, drinks["Guinness"])

    response = client.post(
        f"/api/v1/prices/{price['id']}/verifications",
        json={"is_accurate": False, "proposed_price": 6.5},
        headers=auth_headers(OTHER_USER_ID),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["proposed_price"] == 6.5

    detail = client.get(f"/api/v1/prices/{price['id']}").json()
    assert detail["price"] == 6.2
    assert detail["confidence"]["dissent_count"] == 1
    assert detail["confidence"]["proposed_price"] == 6.5


def test_price_history(
    client: TestClient,
    auth_headers: Callable[[str], dict[str, str]],
    pub: Pub,
    drinks: dict[str, Drink],
) -> None:
    first = create_price(client, auth_headers, pub, drinks["Guinness"], 6.0)
    second = create_price(client, auth_headers, pub, drinks["Guinness"], 6.3)
    create_price(client, auth_headers, pub, drinks["Bulmers"], 6.8)

    response = client.get(
        f"/api/v1/pubs/{pub.id}/prices/history", params={"drink_id": drinks["Guinness"].id}
    )

    assert response.status_code == status.HTTP_200_OK
    assert [row["id"] for row in response.json()] == [first["id"], second["id"]]
