"""Tests for the Product aggregate — catalogue details and the stock counter."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalog.product import Product


def _make_product(**overrides):
    defaults = {
        "name": "Cotton Kurta",
        "price": 100.0,
        "available_quantity": 5,
        "images": ["https://cdn.example.com/kurta-front.jpg", "https://cdn.example.com/kurta-back.jpg"],
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_create_sets_details(self):
        product = _make_product()
        assert product.name == "Cotton Kurta"
        assert product.price == 100.0
        assert product.available_quantity == 5
        assert product.created_at is not None

    def test_primary_image_is_first_image(self):
        product = _make_product()
        assert product.primary_image() == "https://cdn.example.com/kurta-front.jpg"

    def test_image_urls_are_kept_verbatim(self):
        url = "https://cdn.example.com/img?w=400&h=400"
        product = _make_product(images=[url])
        assert product.images == [url]

    def test_product_without_images_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(images=[])
        assert "images" in exc.value.messages

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1.0)

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(available_quantity=-1)


class TestProductStock:
    def test_has_stock(self):
        product = _make_product(available_quantity=2)
        assert product.has_stock(2) is True
        assert product.has_stock(3) is False

    def test_decrement_stock(self):
        product = _make_product(available_quantity=5)
        product.decrement_stock(2)
        assert product.available_quantity == 3

    def test_decrement_below_zero_is_rejected(self):
        product = _make_product(available_quantity=1)
        with pytest.raises(ValidationError):
            product.decrement_stock(2)
        assert product.available_quantity == 1

    def test_decrement_requires_positive_quantity(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.decrement_stock(0)

    def test_restock(self):
        product = _make_product(available_quantity=0)
        product.restock(3)
        assert product.available_quantity == 3

    def test_set_stock(self):
        product = _make_product(available_quantity=5)
        product.set_stock(12)
        assert product.available_quantity == 12


class TestProductDetails:
    def test_update_details_changes_only_given_fields(self):
        product = _make_product()
        product.update_details(price=150.0)
        assert product.price == 150.0
        assert product.name == "Cotton Kurta"

    def test_update_images(self):
        product = _make_product()
        product.update_details(images=["https://cdn.example.com/new.jpg"])
        assert product.primary_image() == "https://cdn.example.com/new.jpg"
