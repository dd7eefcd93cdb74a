"""
Shared Pydantic schemas used across the application.

Money is always integer cents. Request models deliberately have no price
fields: anything a client sends beyond the declared fields is ignored.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

OrderStatusValue = Literal["Pending", "Making", "Completed", "Cancelled"]

EntityId = Annotated[int, Field(ge=1, le=Limits.MAX_ENTITY_ID)]


class ErrorResponse(BaseModel):
    """Body of every error response."""

    detail: str
    code: str


# =============================================================================
# Cart / Pricing Schemas
# =============================================================================


class CartLineInput(BaseModel):
    """One cart line as sent by the customer's client."""

    dish_id: EntityId
    # Range checks live in the pricing service so both endpoints share them
    quantity: int | None = None
    selected_value_ids: list[EntityId] = Field(default_factory=list)


class CalculatePriceRequest(BaseModel):
    """Request to price a cart without placing it."""

    tenant_id: EntityId
    lines: list[CartLineInput] = Field(default_factory=list)


class PricedLineOutput(BaseModel):
    """Server-side price of one cart line."""

    dish_id: int
    dish_name: str
    quantity: int
    selected_value_ids: list[int]
    unit_price_cents: int
    line_total_cents: int


class PriceQuoteOutput(BaseModel):
    """Server-side price of a whole cart."""

    lines: list[PricedLineOutput]
    total_cents: int


# =============================================================================
# Order Schemas
# =============================================================================


class CreateOrderRequest(BaseModel):
    """Request to place an order at a table."""

    tenant_id: EntityId
    table_id: EntityId
    customer_name: str | None = None
    comment: str | None = None
    lines: list[CartLineInput] = Field(default_factory=list)


class OrderCreatedOutput(BaseModel):
    """Response after placing an order."""

    order_id: int
    order_number: int
    total_price_cents: int
    status: OrderStatusValue


class OrderCustomisationOutput(BaseModel):
    """A selected option value on an order line."""

    value_id: int
    value_name: str
    option_id: int
    option_name: str
    extra_price_cents: int


class OrderLineOutput(BaseModel):
    """One line of an order with its display prices."""

    id: int
    dish_id: int
    dish_name: str
    quantity: int
    unit_price_cents: int
    line_total_cents: int
    customisations: list[OrderCustomisationOutput]


class OrderOutput(BaseModel):
    """Full order as seen by staff and by the customer polling it."""

    id: int
    tenant_id: int
    table_id: int
    table_number: str | None = None
    order_number: int
    customer_name: str
    status: OrderStatusValue
    comment: str | None = None
    total_price_cents: int
    order_time: datetime
    status_updated_at: datetime | None = None
    lines: list[OrderLineOutput]


class UpdateOrderStatusRequest(BaseModel):
    """Request to move an order to another status (staff)."""

    status: str


class OrderStatusOutput(BaseModel):
    """Response after a status change."""

    order_id: int
    order_number: int
    previous_status: OrderStatusValue
    status: OrderStatusValue
    status_updated_at: datetime


class OrderStatsOutput(BaseModel):
    """Order counters for the staff dashboard."""

    pending: int
    making: int
    completed: int
    cancelled: int
    total: int


# =============================================================================
# Public Table / Menu Schemas
# =============================================================================


class TableOutput(BaseModel):
    """Table resolved from a QR code."""

    id: int
    tenant_id: int
    table_number: str
    capacity: int


class MenuOptionValueOutput(BaseModel):
    id: int
    name: str
    extra_price_cents: int


class MenuOptionOutput(BaseModel):
    id: int
    name: str
    values: list[MenuOptionValueOutput]


class MenuDishOutput(BaseModel):
    id: int
    name: str
    description: str | None = None
    base_price_cents: int
    options: list[MenuOptionOutput]


class MenuCategoryOutput(BaseModel):
    id: int
    name: str
    dishes: list[MenuDishOutput]


class MenuRestaurantOutput(BaseModel):
    id: int
    name: str
    address: str | None = None


class MenuOutput(BaseModel):
    """Public menu of one restaurant."""

    restaurant: MenuRestaurantOutput
    categories: list[MenuCategoryOutput]
