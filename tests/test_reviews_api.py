from datetime import datetime, timedelta, timezone

import pytest

from storefront_service.app.crud.reviews_crud import parse_rating
from storefront_service.app.schemas.review_schemas import Review
from storefront_service.app.stores.review_store import FileReviewStore, SqlReviewStore


def review_payload(**overrides):
    payload = {
        "name": "Sana",
        "email": "sana@example.com",
        "rating": 5,
        "comment": "Beautiful finish, arrived quickly.",
    }
    payload.update(overrides)
    return payload


def test_new_product_has_no_reviews(client):
    response = client.get("/api/products/j1/reviews")

    assert response.status_code == 200
    assert response.json() == {"reviews": [], "summary": {"average": 0, "count": 0}}


def test_create_review_returns_review_and_summary(client):
    response = client.post("/api/products/j1/reviews",
                           json=review_payload(name="  Sana  ", comment=" Lovely "))

    assert response.status_code == 201
    body = response.json()
    assert body["review"]["id"].startswith("REV-")
    assert body["review"]["productId"] == "j1"
    assert body["review"]["name"] == "Sana"
    assert body["review"]["comment"] == "Lovely"
    assert body["summary"] == {"average": 5, "count": 1}


def test_reviews_are_listed_newest_first_per_product(client):
    client.post("/api/products/j1/reviews", json=review_payload(rating=4, comment="first"))
    client.post("/api/products/j1/reviews", json=review_payload(rating=1, comment="second"))
    client.post("/api/products/c1/reviews", json=review_payload(comment="other product"))

    response = client.get("/api/products/j1/reviews")

    body = response.json()
    assert [r["comment"] for r in body["reviews"]] == ["second", "first"]
    assert body["summary"] == {"average": 2.5, "count": 2}


def test_rating_given_as_string_is_accepted(client):
    response = client.post("/api/products/j1/reviews", json=review_payload(rating="3"))

    assert response.status_code == 201
    assert response.json()["review"]["rating"] == 3


@pytest.mark.parametrize("overrides, message", [
    ({"name": "   "}, "Name and comment are required."),
    ({"comment": ""}, "Name and comment are required."),
    ({"rating": 0}, "Rating must be between 1 and 5."),
    ({"rating": 6}, "Rating must be between 1 and 5."),
    ({"rating": "great"}, "Rating must be between 1 and 5."),
    ({"rating": None}, "Rating must be between 1 and 5."),
])
def test_create_review_validation(client, review_store, overrides, message):
    response = client.post("/api/products/j1/reviews", json=review_payload(**overrides))

    assert response.status_code == 400
    assert response.json()["message"] == message
    assert review_store.list_for_product("j1") == []


@pytest.mark.parametrize("value, expected", [
    (1, 1), (5, 5), ("4", 4), (3.0, 3),
    (2.5, None), (True, None), ("", None), (None, None), (10, None),
])
def test_parse_rating(value, expected):
    assert parse_rating(value) == expected


@pytest.fixture(params=["file", "sql"])
def any_review_store(request, tmp_path, sql_session_factory):
    if request.param == "file":
        return FileReviewStore.in_dir(str(tmp_path))
    return SqlReviewStore(sql_session_factory)


def make_review(review_id, product_id, rating, minutes_ago):
    return Review(
        id=review_id,
        product_id=product_id,
        name="Hina",
        rating=rating,
        comment="ok",
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


def test_review_store_orders_limits_and_summarizes(any_review_store):
    any_review_store.create(make_review("R1", "j1", 5, minutes_ago=30))
    any_review_store.create(make_review("R2", "j1", 3, minutes_ago=10))
    any_review_store.create(make_review("R3", "j1", 4, minutes_ago=20))
    any_review_store.create(make_review("R4", "c1", 1, minutes_ago=5))

    assert [r.id for r in any_review_store.list_for_product("j1")] == ["R2", "R3", "R1"]
    assert [r.id for r in any_review_store.list_for_product("j1", limit=1)] == ["R2"]

    summary = any_review_store.rating_summary("j1")
    assert summary.count == 3
    assert summary.average == pytest.approx(4.0)
    assert any_review_store.rating_summary("missing").count == 0
