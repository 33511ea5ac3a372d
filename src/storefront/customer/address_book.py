"""Address book aggregate — a customer's saved delivery addresses.

Orders never reference these records. Checkout copies the chosen address
into the order, so editing or removing a saved address later leaves every
historical order untouched.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import Index
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String

from storefront.domain import storefront


class AddressType(Enum):
    HOME = "Home"
    WORK = "Work"


_ADDRESS_FIELDS = ("name", "mobile", "pincode", "locality", "address", "city", "state", "address_type")


@storefront.entity(part_of="AddressBook")
class SavedAddress:
    name = String(required=True, max_length=100)
    mobile = String(required=True, max_length=20)
    pincode = String(required=True, max_length=10)
    locality = String(max_length=255)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    address_type = String(choices=AddressType, default=AddressType.HOME.value)

    def as_dict(self):
        return {field: getattr(self, field) for field in _ADDRESS_FIELDS}


@storefront.aggregate(indexes=[Index("customer_id", unique=True)])
class AddressBook:
    customer_id = Identifier(required=True)
    addresses = HasMany(SavedAddress)
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        return cls(customer_id=customer_id, updated_at=datetime.now(UTC))

    def find(self, address_id):
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    def add_address(self, **details):
        address = SavedAddress(**details)
        self.add_addresses(address)
        self.updated_at = datetime.now(UTC)
        return address

    def update_address(self, address_id, **changes):
        address = self.find(address_id)
        if address is None:
            raise ValidationError({"address_id": ["Address not found"]})

        for field, value in changes.items():
            if field not in _ADDRESS_FIELDS:
                raise ValidationError({field: ["Unknown address field"]})
            if value is not None:
                setattr(address, field, value)
        self.updated_at = datetime.now(UTC)

    def remove_address(self, address_id):
        address = self.find(address_id)
        if address is None:
            raise ValidationError({"address_id": ["Address not found"]})

        self.remove_addresses(address)
        self.updated_at = datetime.now(UTC)
