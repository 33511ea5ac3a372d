"""Address book store."""

from protean.exceptions import ObjectNotFoundError

from storefront.customer.address_book import AddressBook
from storefront.domain import storefront


@storefront.repository(part_of=AddressBook)
class AddressBookRepository:
    def for_customer(self, customer_id):
        try:
            return self.find_by(customer_id=str(customer_id))
        except ObjectNotFoundError:
            return None

    def get_address(self, tx, customer_id, address_id):
        """Return one of the customer's saved addresses, or ``None``."""
        tx.ensure_open()
        book = self.for_customer(customer_id)
        if book is None:
            return None
        return book.find(address_id)
