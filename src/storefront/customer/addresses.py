"""Saved address management — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.customer.address_book import AddressBook, AddressType
from storefront.domain import storefront
from storefront.errors import address_not_found


@storefront.command(part_of="AddressBook")
class AddAddress:
    customer_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    mobile = String(required=True, max_length=20)
    pincode = String(required=True, max_length=10)
    locality = String(max_length=255)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    address_type = String(choices=AddressType, default=AddressType.HOME.value)


@storefront.command(part_of="AddressBook")
class UpdateAddress:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    name = String(max_length=100)
    mobile = String(max_length=20)
    pincode = String(max_length=10)
    locality = String(max_length=255)
    address = String(max_length=500)
    city = String(max_length=100)
    state = String(max_length=100)
    address_type = String(choices=AddressType)


@storefront.command(part_of="AddressBook")
class RemoveAddress:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)


_DETAIL_FIELDS = ("name", "mobile", "pincode", "locality", "address", "city", "state", "address_type")


def _book_with_address(repo, customer_id, address_id):
    book = repo.for_customer(customer_id)
    if book is None or book.find(address_id) is None:
        raise address_not_found(address_id)
    return book


@storefront.command_handler(part_of=AddressBook)
class AddressBookHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = repo.for_customer(command.customer_id)
        if book is None:
            book = AddressBook.create(customer_id=command.customer_id)

        address = book.add_address(**{field: getattr(command, field) for field in _DETAIL_FIELDS})
        repo.add(book)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = _book_with_address(repo, command.customer_id, command.address_id)
        book.update_address(command.address_id, **{field: getattr(command, field) for field in _DETAIL_FIELDS})
        repo.add(book)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = _book_with_address(repo, command.customer_id, command.address_id)
        book.remove_address(command.address_id)
        repo.add(book)
