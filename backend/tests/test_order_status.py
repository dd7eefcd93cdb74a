"""
Tests for the order status lifecycle.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from shared.config.constants import OrderStatus
from shared.utils.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    ValidationError,
)
from ordering_api.models import Base, Order
from ordering_api.services.domain import (
    CartLine,
    CreateOrderCommand,
    OrderService,
    OrderStatusService,
    can_transition,
)
from ordering_api.services.domain import order_status_service
from tests.conftest import build_catalog


def _place_order(db, catalog) -> int:
    receipt = OrderService(db).create_order(
        CreateOrderCommand(
            tenant_id=catalog.tenant_id,
            table_id=catalog.table_id,
            customer_name="Ana",
            lines=[CartLine(dish_id=catalog.lemonade_id, quantity=2)],
        )
    )
    return receipt.order_id


class TestTransitionTable:
    """The allowed edges of the lifecycle."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.MAKING),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.MAKING, OrderStatus.COMPLETED),
            (OrderStatus.MAKING, OrderStatus.CANCELLED),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.COMPLETED),
            (OrderStatus.PENDING, OrderStatus.PENDING),
            (OrderStatus.MAKING, OrderStatus.PENDING),
            (OrderStatus.MAKING, OrderStatus.MAKING),
            (OrderStatus.COMPLETED, OrderStatus.PENDING),
            (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.MAKING),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)


class TestUpdateStatus:
    """Applying transitions to stored orders."""

    def test_pending_to_making_to_completed(self, db_session, seed_catalog):
        order_id = _place_order(db_session, seed_catalog)
        service = OrderStatusService(db_session)

        making = service.update_status(seed_catalog.tenant_id, order_id, "Making", user_id=7)
        done = service.update_status(seed_catalog.tenant_id, order_id, "Completed", user_id=8)

        assert (making.previous_status, making.status) == ("Pending", "Making")
        assert (done.previous_status, done.status) == ("Making", "Completed")

        order = db_session.get(Order, order_id)
        assert order.status == "Completed"
        assert order.status_updated_at is not None
        assert order.status_updated_by_id == 8

    def test_cancel_from_pending(self, db_session, seed_catalog):
        order_id = _place_order(db_session, seed_catalog)

        change = OrderStatusService(db_session).update_status(
            seed_catalog.tenant_id, order_id, "Cancelled"
        )

        assert change.status == "Cancelled"

    @pytest.mark.parametrize("terminal", ["Completed", "Cancelled"])
    def test_terminal_states_reject_every_target(self, db_session, seed_catalog, terminal):
        order_id = _place_order(db_session, seed_catalog)
        service = OrderStatusService(db_session)
        if terminal == "Completed":
            service.update_status(seed_catalog.tenant_id, order_id, "Making")
        service.update_status(seed_catalog.tenant_id, order_id, terminal)

        for target in OrderStatus.ALL:
            with pytest.raises(InvalidTransitionError):
                service.update_status(seed_catalog.tenant_id, order_id, target)

        assert db_session.get(Order, order_id).status == terminal

    def test_skipping_making_is_rejected(self, db_session, seed_catalog):
        order_id = _place_order(db_session, seed_catalog)

        with pytest.raises(InvalidTransitionError) as exc_info:
            OrderStatusService(db_session).update_status(
                seed_catalog.tenant_id, order_id, "Completed"
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert db_session.get(Order, order_id).status == "Pending"

    def test_same_status_is_rejected(self, db_session, seed_catalog):
        order_id = _place_order(db_session, seed_catalog)

        with pytest.raises(InvalidTransitionError):
            OrderStatusService(db_session).update_status(
                seed_catalog.tenant_id, order_id, "Pending"
            )

    @pytest.mark.parametrize("target", ["Ready", "pending", ""])
    def test_unknown_status_is_a_validation_error(self, db_session, seed_catalog, target):
        order_id = _place_order(db_session, seed_catalog)

        with pytest.raises(ValidationError):
            OrderStatusService(db_session).update_status(seed_catalog.tenant_id, order_id, target)

    def test_order_of_other_tenant_is_not_found(self, db_session, seed_catalog, other_catalog):
        order_id = _place_order(db_session, other_catalog)

        with pytest.raises(OrderNotFoundError):
            OrderStatusService(db_session).update_status(
                seed_catalog.tenant_id, order_id, "Making"
            )

        assert db_session.get(Order, order_id).status == "Pending"

    def test_unknown_order_is_not_found(self, db_session, seed_catalog):
        with pytest.raises(OrderNotFoundError):
            OrderStatusService(db_session).update_status(seed_catalog.tenant_id, 9999, "Making")


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'status.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    finally:
        engine.dispose()


class TestConcurrentStatusChange:
    """A transition validated against a stale status must not be applied."""

    def test_change_committed_between_read_and_write_wins(self, file_sessions, monkeypatch):
        with file_sessions() as db:
            catalog = build_catalog(db)
            order_id = _place_order(db, catalog)

        validate = order_status_service.validate_transition

        def cancel_elsewhere(current, target, **context):
            validate(current, target, **context)
            with file_sessions() as other:
                OrderStatusService(other).update_status(
                    catalog.tenant_id, order_id, OrderStatus.CANCELLED
                )

        monkeypatch.setattr(order_status_service, "validate_transition", cancel_elsewhere)

        with file_sessions() as db:
            with pytest.raises(InvalidTransitionError) as exc_info:
                OrderStatusService(db).update_status(catalog.tenant_id, order_id, OrderStatus.MAKING)

        assert exc_info.value.from_status == OrderStatus.CANCELLED
        with file_sessions() as db:
            assert db.get(Order, order_id).status == OrderStatus.CANCELLED
