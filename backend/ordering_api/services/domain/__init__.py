"""
Domain services for order ingestion, pricing and status.

Routers stay thin: they translate HTTP to these services and back.
"""

from .pricing_service import CartLine, PricedLine, PriceQuote, PriceCalculator, price_lines
from .order_sequencer import OrderSequencer
from .order_service import CreateOrderCommand, OrderReceipt, OrderService
from .order_status_service import OrderStatusService, StatusChange, can_transition
from .order_query_service import OrderQueryService, TotalMismatch

__all__ = [
    # Pricing
    "CartLine",
    "PricedLine",
    "PriceQuote",
    "PriceCalculator",
    "price_lines",
    # Sequencing
    "OrderSequencer",
    # Creation
    "CreateOrderCommand",
    "OrderReceipt",
    "OrderService",
    # Status
    "OrderStatusService",
    "StatusChange",
    "can_transition",
    # Queries
    "OrderQueryService",
    "TotalMismatch",
]
