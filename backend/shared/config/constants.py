"""
Centralized constants for the backend application.
Avoids magic strings and repeated constants.

Usage:
    from shared.config.constants import OrderStatus, ORDER_TRANSITIONS

    if target in ORDER_TRANSITIONS[order.status]:
        ...
"""

from typing import Final


# =============================================================================
# Staff Roles
# =============================================================================


class Roles:
    """Staff role constants (claims carried by staff tokens)."""

    ADMIN: Final[str] = "ADMIN"
    MANAGER: Final[str] = "MANAGER"
    KITCHEN: Final[str] = "KITCHEN"
    WAITER: Final[str] = "WAITER"

    ALL: Final[list[str]] = [ADMIN, MANAGER, KITCHEN, WAITER]


# Role groups for common access patterns
ALL_STAFF_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.MANAGER, Roles.KITCHEN, Roles.WAITER})


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus:
    """Order status constants."""

    PENDING: Final[str] = "Pending"
    MAKING: Final[str] = "Making"
    COMPLETED: Final[str] = "Completed"
    CANCELLED: Final[str] = "Cancelled"

    ALL: Final[list[str]] = [PENDING, MAKING, COMPLETED, CANCELLED]
    TERMINAL: Final[list[str]] = [COMPLETED, CANCELLED]


# Valid order status transitions (from -> [allowed to states])
# Pending → Making → Completed, with cancellation from either open state
ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PENDING: [OrderStatus.MAKING, OrderStatus.CANCELLED],
    OrderStatus.MAKING: [OrderStatus.COMPLETED, OrderStatus.CANCELLED],
    OrderStatus.COMPLETED: [],  # Terminal state
    OrderStatus.CANCELLED: [],  # Terminal state
}


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits per order line
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Cart limits
    MAX_ORDER_LINES: Final[int] = 100
    MAX_SELECTED_VALUES: Final[int] = 20

    # String lengths
    MAX_CUSTOMER_NAME_LENGTH: Final[int] = 100
    MAX_COMMENT_LENGTH: Final[int] = 500
    MAX_IDEMPOTENCY_KEY_LENGTH: Final[int] = 128

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200

    # Largest BIGINT primary key
    MAX_ENTITY_ID: Final[int] = 2**63 - 1


# =============================================================================
# Error Codes (stable, machine-readable)
# =============================================================================


class ErrorCode:
    """Error codes returned in the `code` field of error responses."""

    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
    UNAUTHORIZED: Final[str] = "UNAUTHORIZED"
    FORBIDDEN: Final[str] = "FORBIDDEN"
    NOT_FOUND: Final[str] = "NOT_FOUND"
    INVALID_TRANSITION: Final[str] = "INVALID_TRANSITION"
    CONFLICT: Final[str] = "CONFLICT"
    RATE_LIMITED: Final[str] = "RATE_LIMITED"
    INTERNAL_ERROR: Final[str] = "INTERNAL_ERROR"


# =============================================================================
# Error Messages (Spanish)
# =============================================================================


class ErrorMessages:
    """Standardized error messages in Spanish."""

    # Auth errors
    NOT_AUTHENTICATED: Final[str] = "No autenticado"
    INVALID_TOKEN: Final[str] = "Token inválido"
    TOKEN_EXPIRED: Final[str] = "Token expirado"
    NO_TENANT_ACCESS: Final[str] = "No tienes acceso a este restaurante"

    # Validation errors
    EMPTY_CART: Final[str] = "El pedido debe contener al menos un plato"
    CUSTOMER_NAME_REQUIRED: Final[str] = "El nombre del cliente es obligatorio"
    INVALID_QUANTITY: Final[str] = "Cantidad inválida"

    # Generic
    INTERNAL_ERROR: Final[str] = "Error interno del servidor"
    RATE_LIMITED: Final[str] = "Límite de solicitudes excedido. Intente más tarde."
