"""Application tests for saved address commands."""

import pytest
from protean import current_domain
from storefront.customer.address_book import AddressBook
from storefront.customer.addresses import AddAddress, RemoveAddress, UpdateAddress
from storefront.errors import ErrorCode, NotFoundError


def _add_address(customer_id="cust-001", **overrides):
    details = {
        "name": "Asha Rao",
        "mobile": "9876543210",
        "pincode": "560001",
        "locality": "MG Road",
        "address": "12, Residency Road",
        "city": "Bengaluru",
        "state": "Karnataka",
    }
    details.update(overrides)
    return current_domain.process(AddAddress(customer_id=customer_id, **details), asynchronous=False)


def _book(customer_id="cust-001"):
    return current_domain.repository_for(AddressBook).for_customer(customer_id)


class TestAddAddress:
    def test_first_address_creates_book(self):
        address_id = _add_address()
        address = _book().find(address_id)
        assert address.name == "Asha Rao"
        assert address.address_type == "Home"

    def test_second_address_joins_same_book(self):
        first = _add_address()
        second = _add_address(city="Chennai", state="Tamil Nadu", address_type="Work")
        book = _book()
        assert book.find(first) is not None
        assert book.find(second).address_type == "Work"


class TestUpdateAddress:
    def test_update_address(self):
        address_id = _add_address()
        current_domain.process(
            UpdateAddress(customer_id="cust-001", address_id=address_id, mobile="9000000000"),
            asynchronous=False,
        )
        address = _book().find(address_id)
        assert address.mobile == "9000000000"
        assert address.city == "Bengaluru"

    def test_cannot_update_someone_elses_address(self):
        address_id = _add_address(customer_id="cust-001")
        _add_address(customer_id="cust-002")
        with pytest.raises(NotFoundError) as exc:
            current_domain.process(
                UpdateAddress(customer_id="cust-002", address_id=address_id, city="Pune"),
                asynchronous=False,
            )
        assert exc.value.code == ErrorCode.ADDRESS_NOT_FOUND
        assert _book("cust-001").find(address_id).city == "Bengaluru"


class TestRemoveAddress:
    def test_remove_address(self):
        address_id = _add_address()
        current_domain.process(RemoveAddress(customer_id="cust-001", address_id=address_id), asynchronous=False)
        assert _book().find(address_id) is None

    def test_remove_without_book(self):
        with pytest.raises(NotFoundError):
            current_domain.process(RemoveAddress(customer_id="cust-404", address_id="addr-1"), asynchronous=False)
