from uuid import uuid4

from conftest import signup


def test_add_and_list_reviews(client, make_product):
    p = make_product()
    headers = signup(client, name="Reviewer One")
    res = client.post(
        f"/api/items/{p['id']}/reviews", json={"rating": 4, "comment": "  solid  "}, headers=headers
    )
    assert res.status_code == 201
    review = res.json()["review"]
    assert review["rating"] == 4
    assert review["comment"] == "solid"
    assert review["user"]["name"] == "Reviewer One"

    res = client.get(f"/api/items/{p['id']}/reviews")
    assert res.status_code == 200
    reviews = res.json()["reviews"]
    assert [r["id"] for r in reviews] == [review["id"]]


def test_one_review_per_user(client, make_product):
    p = make_product()
    headers = signup(client)
    client.post(f"/api/items/{p['id']}/reviews", json={"rating": 5, "comment": "great"}, headers=headers)
    res = client.post(
        f"/api/items/{p['id']}/reviews", json={"rating": 1, "comment": "changed my mind"}, headers=headers
    )
    assert res.status_code == 400
    assert res.json()["error"] == "already_exists"
    assert len(client.get(f"/api/items/{p['id']}/reviews").json()["reviews"]) == 1


def test_review_validation(client, make_product):
    p = make_product()
    headers = signup(client)
    url = f"/api/items/{p['id']}/reviews"
    assert client.post(url, json={"rating": 6, "comment": "x"}, headers=headers).status_code == 400
    assert client.post(url, json={"rating": 0, "comment": "x"}, headers=headers).status_code == 400
    assert client.post(url, json={"rating": 3, "comment": "   "}, headers=headers).status_code == 400
    assert client.post(url, json={"comment": "no rating"}, headers=headers).status_code == 400
    assert client.post(url, json={"rating": 3, "comment": "anon"}).status_code == 401


def test_review_missing_or_inactive_product(client, make_product):
    headers = signup(client)
    res = client.post(f"/api/items/{uuid4().hex}/reviews", json={"rating": 3, "comment": "x"}, headers=headers)
    assert res.status_code == 404
    assert client.get(f"/api/items/{uuid4().hex}/reviews").status_code == 404
    assert client.get("/api/items/nope/reviews").status_code == 400

    p = make_product()
    client.delete(f"/api/items/{p['id']}", headers=make_product.headers)
    res = client.post(f"/api/items/{p['id']}/reviews", json={"rating": 3, "comment": "x"}, headers=headers)
    assert res.status_code == 404
    # reviews of an inactive product stay listable
    assert client.get(f"/api/items/{p['id']}/reviews").status_code == 200


def test_average_rating_on_detail(client, make_product):
    p = make_product()
    for rating in (5, 4, 2):
        client.post(
            f"/api/items/{p['id']}/reviews",
            json={"rating": rating, "comment": "ok"},
            headers=signup(client),
        )
    body = client.get(f"/api/items/{p['id']}").json()
    assert body["numReviews"] == 3
    assert body["averageRating"] == 3.67
    assert len(body["reviews"]) == 3
