"""
Tests for per-tenant order numbering.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from shared.utils.exceptions import OrderSequenceExhaustedError
from ordering_api.models import Order, OrderSequence
from ordering_api.services.domain.order_sequencer import OrderSequencer


def _legacy_order(tenant_id: int, table_id: int, order_number: int) -> Order:
    return Order(
        tenant_id=tenant_id,
        table_id=table_id,
        order_number=order_number,
        customer_name="Legacy",
        total_price_cents=0,
        order_time=datetime.now(timezone.utc),
        status="Completed",
    )


class TestNextNumber:
    """Counter row creation and increment."""

    def test_first_number_is_one(self, db_session, seed_catalog):
        sequencer = OrderSequencer(db_session)

        assert sequencer.next_number(seed_catalog.tenant_id) == 1
        assert sequencer.next_number(seed_catalog.tenant_id) == 2

    def test_counter_starts_after_existing_orders(self, db_session, seed_catalog):
        """Tenants with orders but no counter row continue from max(order_number)."""
        db_session.add(_legacy_order(seed_catalog.tenant_id, seed_catalog.table_id, 41))
        db_session.commit()

        sequencer = OrderSequencer(db_session)

        assert sequencer.next_number(seed_catalog.tenant_id) == 42

    def test_tenants_have_independent_counters(self, db_session, seed_catalog, other_catalog):
        sequencer = OrderSequencer(db_session)

        assert sequencer.next_number(seed_catalog.tenant_id) == 1
        assert sequencer.next_number(seed_catalog.tenant_id) == 2
        assert sequencer.next_number(other_catalog.tenant_id) == 1


class TestReserve:
    """Reservation, commit and retry loop."""

    def test_reserve_commits_write(self, db_session, seed_catalog):
        sequencer = OrderSequencer(db_session)

        def write(number):
            db_session.add(_legacy_order(seed_catalog.tenant_id, seed_catalog.table_id, number))
            return number

        assert sequencer.reserve(seed_catalog.tenant_id, write) == 1
        assert sequencer.reserve(seed_catalog.tenant_id, write) == 2

        stored = db_session.scalar(
            select(OrderSequence.last_number).where(
                OrderSequence.tenant_id == seed_catalog.tenant_id
            )
        )
        assert stored == 2

    def test_existing_result_skips_reservation(self, db_session, seed_catalog):
        sequencer = OrderSequencer(db_session)
        calls = []

        result = sequencer.reserve(
            seed_catalog.tenant_id,
            lambda number: calls.append(number),
            existing=lambda: "replayed",
        )

        assert result == "replayed"
        assert calls == []
        assert db_session.get(OrderSequence, seed_catalog.tenant_id) is None

    def test_failed_write_returns_the_number(self, db_session, seed_catalog):
        sequencer = OrderSequencer(db_session)

        def failing_write(number):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            sequencer.reserve(seed_catalog.tenant_id, failing_write)
        db_session.rollback()

        assert sequencer.next_number(seed_catalog.tenant_id) == 1

    def test_conflict_is_retried(self, db_session, seed_catalog, monkeypatch):
        sequencer = OrderSequencer(db_session, max_attempts=3, retry_delay=0)
        original = sequencer.next_number
        attempts = []

        def flaky_next_number(tenant_id):
            attempts.append(tenant_id)
            if len(attempts) == 1:
                raise IntegrityError("INSERT INTO order_sequence", {}, Exception("duplicate key"))
            return original(tenant_id)

        monkeypatch.setattr(sequencer, "next_number", flaky_next_number)

        assert sequencer.reserve(seed_catalog.tenant_id, lambda number: number) == 1
        assert len(attempts) == 2

    def test_exhausted_retries_raise_and_write_nothing(self, db_session, seed_catalog, monkeypatch):
        sequencer = OrderSequencer(db_session, max_attempts=4, retry_delay=0)
        attempts = []

        def always_conflicts(tenant_id):
            attempts.append(tenant_id)
            raise IntegrityError("INSERT INTO order_sequence", {}, Exception("duplicate key"))

        monkeypatch.setattr(sequencer, "next_number", always_conflicts)

        with pytest.raises(OrderSequenceExhaustedError) as exc_info:
            sequencer.reserve(seed_catalog.tenant_id, lambda number: number)

        assert len(attempts) == 4
        assert exc_info.value.status_code == 500
        assert exc_info.value.attempts == 4
        assert db_session.scalar(select(func.count(Order.id))) == 0

    def test_zero_attempts_is_rejected(self, db_session):
        with pytest.raises(ValueError):
            OrderSequencer(db_session, max_attempts=0)

    def test_single_attempt_is_honoured(self, db_session, seed_catalog, monkeypatch):
        sequencer = OrderSequencer(db_session, max_attempts=1, retry_delay=0)
        attempts = []

        def always_conflicts(tenant_id):
            attempts.append(tenant_id)
            raise IntegrityError("INSERT INTO order_sequence", {}, Exception("duplicate key"))

        monkeypatch.setattr(sequencer, "next_number", always_conflicts)

        with pytest.raises(OrderSequenceExhaustedError):
            sequencer.reserve(seed_catalog.tenant_id, lambda number: number)

        assert len(attempts) == 1
