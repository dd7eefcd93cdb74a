"""
Order Repository - Data access for orders.
Eager loading keeps the staff list at a fixed number of queries.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from shared.config.constants import OrderStatus
from ordering_api.models import Order, OrderDetail, OrderDetailCustomisationOption
from ordering_api.models.catalog import OptionValue
from .base import RepositoryFilters, TenantRepository, require_tenant


@dataclass
class OrderFilters(RepositoryFilters):
    """Order listing filters: an optional status."""

    status: str | None = None


class OrderRepository(TenantRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of:
    - table
    - details -> dish
    - details -> customisations -> value -> option
    """

    model = Order

    def _select(self, tenant_id: int) -> Select:
        return (
            select(Order)
            .where(Order.tenant_id == tenant_id)
            .options(joinedload(Order.table))
            .options(selectinload(Order.details).joinedload(OrderDetail.dish))
            .options(
                selectinload(Order.details)
                .selectinload(OrderDetail.customisations)
                .joinedload(OrderDetailCustomisationOption.value)
                .joinedload(OptionValue.option)
            )
            # Newest first; id breaks ties between orders created in the same instant
            .order_by(Order.order_time.desc(), Order.id.desc())
        )

    def _filter(self, query: Select, filters: RepositoryFilters) -> Select:
        status = getattr(filters, "status", None)
        if status:
            query = query.where(Order.status == status)
        return query

    def find_by_number(self, tenant_id: int, order_number: int) -> Order | None:
        """Resolve an order by its per-tenant number."""
        return self._db.scalar(
            self._scoped(tenant_id).where(Order.order_number == order_number)
        )

    def find_all_for_audit(self, tenant_id: int) -> Sequence[Order]:
        """Every order of the tenant, unpaged. Used by offline consistency checks."""
        return self._db.execute(self._scoped(tenant_id)).scalars().unique().all()

    def count_by_status(self, tenant_id: int) -> dict[str, int]:
        """Number of orders per status, with every status present."""
        rows = self._db.execute(
            select(Order.status, func.count())
            .where(Order.tenant_id == require_tenant(tenant_id))
            .group_by(Order.status)
        ).all()
        counts = {status: 0 for status in OrderStatus.ALL}
        for status, count in rows:
            counts[status] = count
        return counts


def get_order_repository(db: Session) -> OrderRepository:
    """Factory function for dependency injection."""
    return OrderRepository(db)
