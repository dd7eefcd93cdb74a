"""
Public ordering endpoints.

Customers order anonymously from a table; these routes are rate limited
per client IP instead of authenticated. Prices in request bodies are never
read: the schemas do not declare them.
"""

from fastapi import APIRouter, Depends, Header, Query, Request, status
from sqlalchemy.orm import Session

from shared.config.constants import Limits
from shared.config.logging import public_logger as logger
from shared.infrastructure.db import get_db
from shared.security.rate_limit import limiter, PUBLIC_ORDER_LIMIT, PUBLIC_READ_LIMIT
from shared.utils.schemas import (
    CalculatePriceRequest,
    CartLineInput,
    CreateOrderRequest,
    OrderCreatedOutput,
    OrderOutput,
    PriceQuoteOutput,
    PricedLineOutput,
)
from ordering_api.services.catalog import get_catalog_reader
from ordering_api.services.domain import (
    CartLine,
    CreateOrderCommand,
    OrderQueryService,
    OrderService,
    PriceCalculator,
)


router = APIRouter(prefix="/api/public", tags=["public"])


def _to_cart_lines(lines: list[CartLineInput]) -> list[CartLine]:
    return [
        CartLine(
            dish_id=line.dish_id,
            quantity=line.quantity,
            selected_value_ids=tuple(line.selected_value_ids),
        )
        for line in lines
    ]


@router.post("/calculate-price", response_model=PriceQuoteOutput)
@limiter.limit(PUBLIC_READ_LIMIT)
def calculate_price(
    request: Request,
    body: CalculatePriceRequest,
    db: Session = Depends(get_db),
) -> PriceQuoteOutput:
    """
    Price a cart without placing it.

    Used by the cart screen to show authoritative totals before checkout.
    """
    quote = PriceCalculator(get_catalog_reader(db)).calculate(
        body.tenant_id, _to_cart_lines(body.lines)
    )
    return PriceQuoteOutput(
        lines=[
            PricedLineOutput(
                dish_id=line.dish_id,
                dish_name=line.dish_name,
                quantity=line.quantity,
                selected_value_ids=list(line.selected_value_ids),
                unit_price_cents=line.unit_price_cents,
                line_total_cents=line.line_total_cents,
            )
            for line in quote.lines
        ],
        total_cents=quote.total_cents,
    )


@router.post("/orders", response_model=OrderCreatedOutput, status_code=status.HTTP_201_CREATED)
@limiter.limit(PUBLIC_ORDER_LIMIT)
def create_order(
    request: Request,
    body: CreateOrderRequest,
    db: Session = Depends(get_db),
    idempotency_key: str | None = Header(default=None, alias="Idempotency-Key"),
) -> OrderCreatedOutput:
    """
    Place an order at a table.

    Sending the same Idempotency-Key again returns the order created by
    the first request instead of a new one.
    """
    receipt = OrderService(db).create_order(
        CreateOrderCommand(
            tenant_id=body.tenant_id,
            table_id=body.table_id,
            customer_name=body.customer_name,
            comment=body.comment,
            lines=_to_cart_lines(body.lines),
            idempotency_key=idempotency_key,
        )
    )

    if not receipt.created:
        logger.info(
            "Idempotent order submission detected",
            tenant_id=receipt.tenant_id,
            order_id=receipt.order_id,
        )

    return OrderCreatedOutput(
        order_id=receipt.order_id,
        order_number=receipt.order_number,
        total_price_cents=receipt.total_price_cents,
        status=receipt.status,
    )


@router.get("/order-status", response_model=OrderOutput)
@limiter.limit(PUBLIC_READ_LIMIT)
def get_order_status(
    request: Request,
    tenant_id: int = Query(..., ge=1, le=Limits.MAX_ENTITY_ID),
    order_number: int = Query(..., ge=1, le=Limits.MAX_ENTITY_ID),
    db: Session = Depends(get_db),
) -> OrderOutput:
    """
    Poll one order by restaurant and order number.

    Clients poll this every few seconds after checkout; there is no push.
    """
    return OrderQueryService(db).get_by_number(tenant_id, order_number)
