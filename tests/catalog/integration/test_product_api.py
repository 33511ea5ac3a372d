"""Integration tests for catalogue browsing via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import install


@pytest.fixture()
def client():
    return TestClient(install(FastAPI()))


def _add_product(client, name, category=None, stock=5):
    body = {
        "name": name,
        "price": 150.0,
        "images": [f"https://cdn.example.com/{name.lower().replace(' ', '-')}.jpg"],
        "available_quantity": stock,
    }
    if category is not None:
        body["category"] = category
    response = client.post("/admin/products", json=body)
    assert response.status_code == 201
    return response.json()["product_id"]


class TestProductListing:
    def test_lists_every_product(self, client):
        kurta = _add_product(client, "Cotton Kurta", category="Apparel")
        bottle = _add_product(client, "Steel Bottle", category="Kitchen", stock=0)

        response = client.get("/products")

        assert response.status_code == 200
        listed = {p["product_id"]: p for p in response.json()}
        assert set(listed) == {kurta, bottle}
        assert listed[bottle]["available_quantity"] == 0
        assert listed[kurta]["images"] == ["https://cdn.example.com/cotton-kurta.jpg"]

    def test_filter_by_category(self, client):
        _add_product(client, "Cotton Kurta", category="Apparel")
        bottle = _add_product(client, "Steel Bottle", category="Kitchen")

        response = client.get("/products", params={"category": "Kitchen"})

        assert [p["product_id"] for p in response.json()] == [bottle]

    def test_empty_catalogue(self, client):
        assert client.get("/products").json() == []
