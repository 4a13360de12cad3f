import pytest


@pytest.fixture()
def listings(create_range, register_student, create_listing):
    create_range(start=1, end=2)
    seller = register_student("24030-CME-001")
    create_listing(seller.id, title="Engineering Mathematics", price=150, category="books", branch="CME")
    create_listing(seller.id, title="Scientific Calculator", price=450, category="electronics")
    create_listing(seller.id, title="Drafter", price=0, category="stationary", branch="ECE")
    create_listing(seller.id, title="Laptop", price=32000, category="electronics", branch="CME")
    return seller


def _titles(response):
    return [item["title"] for item in response.json()["items"]]


def test_browse_without_filters(client, listings) -> None:
    response = client.get("/api/v1/products")

    assert response.status_code == 200
    assert response.json()["total"] == 4
    assert response.json()["active_filter_count"] == 0


def test_browse_with_facets(client, listings) -> None:
    response = client.get("/api/v1/products", params={
        "category": ["electronics", "books"],
        "branch": "CME",
        "price_range": "100-500",
        "sort": "price-desc",
    })

    assert _titles(response) == ["Scientific Calculator", "Engineering Mathematics"]
    assert response.json()["active_filter_count"] == 4


def test_browse_branch_facet_ignores_case(client, listings) -> None:
    response = client.get("/api/v1/products", params={"branch": "cme", "category": "electronics"})

    assert response.status_code == 200
    assert sorted(_titles(response)) == ["Laptop", "Scientific Calculator"]
    assert response.json()["active_filter_count"] == 2


def test_browse_lists_newest_first_by_default(client, listings) -> None:
    assert _titles(client.get("/api/v1/products")) == [
        "Laptop", "Drafter", "Scientific Calculator", "Engineering Mathematics",
    ]


def test_browse_free_only_and_search(client, listings) -> None:
    assert _titles(client.get("/api/v1/products", params={"free_only": True})) == ["Drafter"]
    assert _titles(client.get("/api/v1/products", params={"search": "calc"})) == ["Scientific Calculator"]
    assert _titles(client.get("/api/v1/products", params={"sort": "price-low-high"}))[0] == "Drafter"


def test_browse_rejects_unknown_sort(client, listings) -> None:
    assert client.get("/api/v1/products", params={"sort": "random"}).status_code == 400


def test_create_get_update_delete(client, listings) -> None:
    created = client.post("/api/v1/products", json={
        "seller_id": listings.id,
        "title": "Cycle",
        "description": "Hercules, good condition",
        "price": "2500",
        "category": "others",
        "branch": "all",
        "image_urls": ["https://img.campus.edu/c.jpg"],
    })
    assert created.status_code == 201
    product = created.json()
    assert product["branch"] is None

    assert client.get(f"/api/v1/products/{product['id']}").json()["title"] == "Cycle"
    assert client.get("/api/v1/products/9999").status_code == 404

    updated = client.put(
        f"/api/v1/products/{product['id']}", params={"seller_id": listings.id}, json={"price": 2000},
    )
    assert updated.status_code == 200
    assert updated.json()["price"] == 2000

    assert client.put(
        f"/api/v1/products/{product['id']}", params={"seller_id": 999}, json={"price": 1},
    ).status_code == 404

    deleted = client.delete(f"/api/v1/products/{product['id']}", params={"seller_id": listings.id})
    assert deleted.status_code == 200
    assert deleted.json()["status"] == "inactive"
    assert "Cycle" not in _titles(client.get("/api/v1/products"))

    seller_listings = client.get(f"/api/v1/products/seller/{listings.id}").json()
    assert len(seller_listings) == 5


def test_pending_seller_gets_400(client, create_range, register_student) -> None:
    create_range(start=1, end=1)
    pending = register_student("24030-CME-001", confirm=False)

    response = client.post("/api/v1/products", json={
        "seller_id": pending.id,
        "title": "Notes",
        "description": "Semester 1",
        "price": 0,
        "category": "books",
        "image_urls": ["https://img.campus.edu/n.jpg"],
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Please confirm your email before creating a post."
