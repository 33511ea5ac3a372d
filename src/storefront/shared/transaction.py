"""Explicit transaction context for the checkout and lifecycle core.

Command handlers run inside a Protean ``UnitOfWork``. The core does not reach
for that ambient unit of work on its own: the handler captures it once as a
``TransactionContext`` and passes the value to every store call. Each store
call checks the context first, so a call made outside a live transaction, or
after the transaction's time budget is spent, fails with ``TransactionAborted``
and the whole unit of work rolls back.
"""

import time
from collections.abc import Callable

from protean.utils.globals import current_domain, current_uow

from storefront.domain import logger
from storefront.errors import transaction_aborted


class TransactionContext:
    def __init__(self, uow, timeout_seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self.uow = uow
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self.started_at = clock()

    @classmethod
    def begin(cls, timeout_seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> "TransactionContext":
        """Capture the unit of work the current handler is running in."""
        if not (current_uow and current_uow.in_progress):
            raise transaction_aborted("No transaction in progress")

        if timeout_seconds is None:
            timeout_seconds = getattr(current_domain, "CHECKOUT_TIMEOUT_SECONDS", None)

        return cls(current_uow._get_current_object(), timeout_seconds=timeout_seconds, clock=clock)

    @property
    def elapsed(self) -> float:
        return self._clock() - self.started_at

    def ensure_open(self) -> None:
        if not self.uow.in_progress:
            raise transaction_aborted("Transaction is no longer in progress")

        if self.timeout_seconds is not None and self.elapsed > float(self.timeout_seconds):
            logger.warning(
                "Transaction exceeded its time budget",
                elapsed=round(self.elapsed, 3),
                timeout_seconds=self.timeout_seconds,
            )
            raise transaction_aborted("Transaction timed out")
