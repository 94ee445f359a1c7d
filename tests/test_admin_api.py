"""Admin API tests — the product editor over HTTP.

Pattern: test_<verb>_<noun>_<scenario>
"""

import pytest

from shopfront.schemas.product import Product


@pytest.fixture
async def existing(empty_store):
    await empty_store.save([
        Product(id=1, name="Kettle", price=900, description="Steel", categories=["Кухня"]),
        Product(id=2, name="X", price=200, categories=["Одежда"]),
    ])


@pytest.mark.asyncio
async def test_list_products_falls_back_to_seed(admin_client):
    resp = await admin_client.get("/api/admin/products")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [1, 2]


@pytest.mark.asyncio
async def test_create_product(admin_client, empty_store):
    resp = await admin_client.post(
        "/api/admin/products",
        json={"name": "Widget", "price": "50"},
    )
    assert resp.status_code == 201
    assert resp.json() == {
        "id": 1, "name": "Widget", "price": 50, "description": "", "categories": []
    }

    listed = await admin_client.get("/api/admin/products")
    assert listed.json() == [resp.json()]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"price": 5},
    {"name": "No price"},
    {"name": "x", "price": "abc"},
    {"name": "Big", "price": "9" * 5000},
])
async def test_create_product_invalid_input(admin_client, empty_store, body):
    resp = await admin_client.post("/api/admin/products", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"]


@pytest.mark.asyncio
async def test_create_batch(admin_client, existing):
    resp = await admin_client.post(
        "/api/admin/products/batch",
        json=[
            {"name": "A", "price": 10},
            {"name": "B", "price": 20, "categories": ["Sale"]},
        ],
    )
    assert resp.status_code == 201
    added = resp.json()
    assert [(p["id"], p["name"]) for p in added] == [(3, "A"), (4, "B")]
    assert added[1]["categories"] == ["Sale"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[], {"name": "A", "price": 1}])
async def test_create_batch_rejects_non_list(admin_client, empty_store, body):
    resp = await admin_client.post("/api/admin/products/batch", json=body)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_create_batch_rejects_missing_body(admin_client, empty_store):
    resp = await admin_client.post("/api/admin/products/batch")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_update_product_partial(admin_client, existing):
    resp = await admin_client.put("/api/admin/products/1", json={"price": 1000})
    assert resp.status_code == 200
    assert resp.json() == {
        "id": 1,
        "name": "Kettle",
        "price": 1000,
        "description": "Steel",
        "categories": ["Кухня"],
    }


@pytest.mark.asyncio
async def test_update_product_empty_categories_kept(admin_client, existing):
    resp = await admin_client.put(
        "/api/admin/products/1",
        json={"categories": [], "description": ""},
    )
    assert resp.status_code == 200
    assert resp.json()["categories"] == ["Кухня"]
    assert resp.json()["description"] == ""


@pytest.mark.asyncio
async def test_update_product_not_found(admin_client, existing):
    resp = await admin_client.put("/api/admin/products/99", json={"name": "Ghost"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_product_bad_price(admin_client, existing):
    resp = await admin_client.put("/api/admin/products/1", json={"price": "cheap"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_delete_product_twice(admin_client, existing):
    first = await admin_client.delete("/api/admin/products/2")
    assert first.status_code == 200
    assert first.json()["name"] == "X"

    second = await admin_client.delete("/api/admin/products/2")
    assert second.status_code == 404

    listed = await admin_client.get("/api/admin/products")
    assert [p["id"] for p in listed.json()] == [1]
