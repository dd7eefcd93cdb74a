"""
Staff order endpoints: list, counters and status changes.

Every route is under /api/tenants/{tenant_id} and passes the Access Guard
before touching data.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    OrderOutput,
    OrderStatsOutput,
    OrderStatusOutput,
    UpdateOrderStatusRequest,
)
from ordering_api.services.domain import OrderQueryService, OrderStatusService
from ordering_api.services.permissions import StaffContext, require_tenant_staff


router = APIRouter(prefix="/api/tenants/{tenant_id}/orders", tags=["staff-orders"])


@router.get("", response_model=list[OrderOutput])
def list_orders(
    tenant_id: int,
    status: str | None = Query(default=None),
    limit: int | None = Query(default=None),
    db: Session = Depends(get_db),
    staff: StaffContext = Depends(require_tenant_staff),
) -> list[OrderOutput]:
    """
    List orders of the restaurant, newest first.

    Optional `status` filter (Pending, Making, Completed, Cancelled) and
    `limit` (default 50, capped at 200).
    """
    return OrderQueryService(db).list_orders(tenant_id, status=status, limit=limit)


@router.get("/stats", response_model=OrderStatsOutput)
def get_order_stats(
    tenant_id: int,
    db: Session = Depends(get_db),
    staff: StaffContext = Depends(require_tenant_staff),
) -> OrderStatsOutput:
    """Order counts per status for the staff dashboard."""
    return OrderQueryService(db).get_stats(tenant_id)


@router.put("/{order_id}/status", response_model=OrderStatusOutput)
def update_order_status(
    tenant_id: int,
    body: UpdateOrderStatusRequest,
    order_id: int = Path(..., ge=1, le=Limits.MAX_ENTITY_ID),
    db: Session = Depends(get_db),
    staff: StaffContext = Depends(require_tenant_staff),
) -> OrderStatusOutput:
    """
    Move an order along its lifecycle.

    Allowed: Pending -> Making | Cancelled, Making -> Completed | Cancelled.
    Anything else returns 409 INVALID_TRANSITION.
    """
    change = OrderStatusService(db).update_status(
        tenant_id, order_id, body.status, user_id=staff.user_id
    )
    return OrderStatusOutput(
        order_id=change.order_id,
        order_number=change.order_number,
        previous_status=change.previous_status,
        status=change.status,
        status_updated_at=change.status_updated_at,
    )
