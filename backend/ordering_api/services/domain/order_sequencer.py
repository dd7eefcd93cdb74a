"""
Order Sequencer - per-tenant order numbers.

Each tenant has one row in `order_sequence`. Reserving a number is an
atomic increment of that row inside the same transaction that writes the
order, so:

- Two reservations for the same tenant serialize on the row lock and
  can never observe the same value.
- Reservations for different tenants touch different rows and never wait
  for each other.
- If the order write fails, the rollback also returns the number, so a
  failed submission does not burn one.

The first order of a tenant (or a tenant whose orders predate the counter
table) seeds the row from max(order_number). Two first orders racing to
insert the row make one of them fail on the primary key; that attempt is
rolled back and retried, and the retry takes the UPDATE path.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import OrderSequenceExhaustedError
from ordering_api.models import Order, OrderSequence

logger = get_logger(__name__)

T = TypeVar("T")


class OrderSequencer:
    """
    Reserves order numbers and owns the retry loop around the order write.

    Usage:
        sequencer = OrderSequencer(db)
        order = sequencer.reserve(tenant_id, lambda number: write_order(number))
    """

    def __init__(
        self,
        db: Session,
        max_attempts: int | None = None,
        retry_delay: float | None = None,
    ):
        self._db = db
        self._max_attempts = (
            max_attempts if max_attempts is not None else settings.order_sequence_max_attempts
        )
        if self._max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._retry_delay = (
            retry_delay if retry_delay is not None else settings.order_sequence_retry_delay
        )

    def next_number(self, tenant_id: int) -> int:
        """
        Advance the tenant's counter and return the new value.

        Must run inside the caller's transaction; the value is only final
        once that transaction commits.

        Raises:
            IntegrityError: Another transaction created the counter row first.
        """
        number = self._db.scalar(
            update(OrderSequence)
            .where(OrderSequence.tenant_id == tenant_id)
            .values(last_number=OrderSequence.last_number + 1)
            .returning(OrderSequence.last_number)
        )
        if number is not None:
            return number

        # No counter yet: continue after any orders that already exist
        current_max = self._db.scalar(
            select(func.coalesce(func.max(Order.order_number), 0)).where(
                Order.tenant_id == tenant_id
            )
        )
        number = (current_max or 0) + 1
        self._db.add(OrderSequence(tenant_id=tenant_id, last_number=number))
        self._db.flush()

        logger.info("Order sequence initialized", tenant_id=tenant_id, start=number)
        return number

    def reserve(
        self,
        tenant_id: int,
        write: Callable[[int], T],
        existing: Callable[[], T | None] | None = None,
    ) -> T:
        """
        Reserve a number, run `write(number)` and commit, retrying on conflict.

        Args:
            tenant_id: Tenant whose counter is advanced.
            write: Persists the order using the reserved number. Must not commit.
            existing: Optional lookup run at the start of every attempt. If it
                returns a value, that value is returned and no number is used.

        Raises:
            OrderSequenceExhaustedError: Every attempt hit a conflict.
        """
        for attempt in range(1, self._max_attempts + 1):
            try:
                if existing is not None:
                    found = existing()
                    if found is not None:
                        return found

                number = self.next_number(tenant_id)
                result = write(number)
                safe_commit(self._db)
                return result

            except (IntegrityError, OperationalError) as e:
                self._db.rollback()
                logger.warning(
                    "Order number reservation conflict, retrying",
                    tenant_id=tenant_id,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=type(e).__name__,
                )
                if attempt < self._max_attempts and self._retry_delay > 0:
                    time.sleep(self._retry_delay * attempt)

        raise OrderSequenceExhaustedError(tenant_id, self._max_attempts)
