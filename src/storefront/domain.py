"""Storefront bounded context — carts, checkout, orders and payment confirmation.

Cart, product stock, the customer address book and the order ledger live in
one domain so that checkout and cancellation can read and write all of them
inside a single Unit of Work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
