"""Tests for the AddressBook aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.customer.address_book import AddressBook, AddressType


def _details(**overrides):
    details = {
        "name": "Asha Rao",
        "mobile": "9876543210",
        "pincode": "560001",
        "locality": "MG Road",
        "address": "12, Residency Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "address_type": AddressType.HOME.value,
    }
    details.update(overrides)
    return details


class TestAddressBook:
    def test_add_address(self):
        book = AddressBook.create(customer_id="cust-001")
        address = book.add_address(**_details())
        assert book.find(address.id) == address
        assert address.as_dict()["city"] == "Bengaluru"

    def test_update_address_changes_given_fields(self):
        book = AddressBook.create(customer_id="cust-001")
        address = book.add_address(**_details())
        book.update_address(address.id, city="Mysuru", pincode=None)
        assert address.city == "Mysuru"
        assert address.pincode == "560001"

    def test_update_unknown_field_is_rejected(self):
        book = AddressBook.create(customer_id="cust-001")
        address = book.add_address(**_details())
        with pytest.raises(ValidationError):
            book.update_address(address.id, landmark="Near the park")

    def test_remove_address(self):
        book = AddressBook.create(customer_id="cust-001")
        address = book.add_address(**_details())
        book.remove_address(address.id)
        assert book.find(address.id) is None

    def test_remove_unknown_address(self):
        book = AddressBook.create(customer_id="cust-001")
        with pytest.raises(ValidationError):
            book.remove_address("addr-missing")

    def test_address_type_must_be_known(self):
        book = AddressBook.create(customer_id="cust-001")
        with pytest.raises(ValidationError):
            book.add_address(**_details(address_type="Holiday"))
