"""
HTTP errors raised by the ordering services.

Each class fixes a status code and a stable `code`; the handlers in
ordering_api.core.errors render both as {"detail", "code"}. Raising one
also logs it, with any keyword arguments as log context. Detail messages
are shown to customers and staff, so they are in Spanish.

    raise DishNotFoundError(dish_id, tenant_id=tenant_id)
    raise InvalidTransitionError("pedido", "Pending", "Completed")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.constants import ErrorCode, ErrorMessages
from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    code: str = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        code: str | None = None,
        **log_context: Any,
    ):
        if code is not None:
            self.code = code
        getattr(logger, log_level, logger.warning)(
            detail, status_code=status_code, code=self.code, **log_context
        )
        super().__init__(status_code=status_code, detail=detail, headers=headers)


# 404: lookups are tenant scoped, so another tenant's row is also "not found"


class NotFoundError(AppException):
    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        self.entity = entity
        self.entity_id = entity_id
        detail = f"{entity} no encontrado" if entity_id is None else f"{entity} con ID {entity_id} no encontrado"
        super().__init__(
            status.HTTP_404_NOT_FOUND,
            detail,
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class TenantNotFoundError(NotFoundError):
    def __init__(self, tenant_id: int | None = None, **log_context: Any):
        super().__init__("Restaurante", tenant_id, **log_context)


class TableNotFoundError(NotFoundError):
    def __init__(self, table_id: int | None = None, **log_context: Any):
        super().__init__("Mesa", table_id, **log_context)


class DishNotFoundError(NotFoundError):
    """Unknown, inactive or another tenant's dish."""

    def __init__(self, dish_id: int | None = None, **log_context: Any):
        super().__init__("Plato", dish_id, **log_context)


class OptionValueNotFoundError(NotFoundError):
    def __init__(self, value_id: int | None = None, **log_context: Any):
        super().__init__("Valor de opción", value_id, **log_context)


class OrderNotFoundError(NotFoundError):
    """Looked up by id or by per-tenant order number."""

    def __init__(self, order_ref: int | None = None, **log_context: Any):
        super().__init__("Pedido", order_ref, **log_context)


# 401 / 403


class UnauthorizedError(AppException):
    code = ErrorCode.UNAUTHORIZED

    def __init__(self, detail: str = ErrorMessages.NOT_AUTHENTICATED, **log_context: Any):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            detail,
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


class ForbiddenError(AppException):
    """`action` completes the sentence "No tienes permiso para ..."."""

    code = ErrorCode.FORBIDDEN

    def __init__(self, action: str = "realizar esta acción", **log_context: Any):
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            f"No tienes permiso para {action}",
            action=action,
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    def __init__(self, required_roles: list[str], **log_context: Any):
        super().__init__(
            f"realizar esta acción (requiere rol: {', '.join(required_roles)})",
            required_roles=required_roles,
            **log_context,
        )


# 400


class ValidationError(AppException):
    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, **log_context)


class OptionNotAllowedError(ValidationError):
    """The value exists but its option is not offered for this dish."""

    def __init__(self, dish_id: int, value_id: int, **log_context: Any):
        super().__init__(
            f"El valor de opción {value_id} no está disponible para el plato {dish_id}",
            dish_id=dish_id,
            value_id=value_id,
            **log_context,
        )


# 409


class ConflictError(AppException):
    code = ErrorCode.CONFLICT

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(status.HTTP_409_CONFLICT, detail, **log_context)


class InvalidTransitionError(ConflictError):
    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Transición inválida de '{from_status}' a '{to_status}' para {entity}",
            entity=entity,
            from_status=from_status,
            to_status=to_status,
            **log_context,
        )


# 500: storage details go to the log context, never into `detail`


class InternalError(AppException):
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, detail: str = ErrorMessages.INTERNAL_ERROR, **log_context: Any):
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    def __init__(self, operation: str, **log_context: Any):
        super().__init__(
            f"Error de base de datos durante {operation}. Por favor intente de nuevo.",
            operation=operation,
            **log_context,
        )


class OrderSequenceExhaustedError(InternalError):
    """Every attempt to reserve an order number collided with another order."""

    def __init__(self, tenant_id: int, attempts: int, **log_context: Any):
        self.tenant_id = tenant_id
        self.attempts = attempts
        super().__init__(
            "No se pudo registrar el pedido por alta concurrencia. Por favor intente de nuevo.",
            tenant_id=tenant_id,
            attempts=attempts,
            **log_context,
        )
