"""Synchronous command dispatch for the HTTP layer and background callers.

Commands are processed in the caller's thread. Business-rule failures pass
through untouched as ``StorefrontError``; failures of the store itself
(a commit that could not be applied, a version conflict that outlived its
retries, an expired command) surface as ``TransactionAborted``.
"""

from protean.exceptions import CommandExpiredError, ExpectedVersionError, TransactionError
from protean.utils.globals import current_domain

from storefront.domain import logger
from storefront.errors import transaction_aborted


def dispatch(command):
    """Process ``command`` synchronously and return the handler's result."""
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        logger.warning("Concurrent update not resolved by retries", command=type(command).__name__, error=str(exc))
        raise transaction_aborted("Concurrent update conflict") from exc
    except (TransactionError, CommandExpiredError) as exc:
        logger.error("Transaction aborted", command=type(command).__name__, error=str(exc))
        raise transaction_aborted(str(exc)) from exc
