"""
Access Guard - decides whether a staff caller may act on a tenant's orders.

Rule: the caller holds at least one staff role and either belongs to the
tenant in the path or is a super-admin.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Path

from shared.config.constants import ALL_STAFF_ROLES, ErrorMessages, Limits
from shared.config.logging import audit_access_event
from shared.security.auth import current_user_context, require_roles
from shared.utils.exceptions import ForbiddenError


class StaffContext:
    """
    Verified staff caller.

    Usage:
        staff = StaffContext(claims)
        staff.user_id, staff.tenant_id, staff.roles, staff.is_superadmin
    """

    def __init__(self, user: dict[str, Any]):
        self._user = user
        self._roles = list(user.get("roles", []))

    @property
    def user(self) -> dict[str, Any]:
        """Get raw claims."""
        return self._user

    @property
    def user_id(self) -> int:
        sub = self._user.get("sub")
        if sub is None:
            return 0
        return int(sub) if isinstance(sub, str) else sub

    @property
    def tenant_id(self) -> int | None:
        return self._user.get("tenant_id")

    @property
    def roles(self) -> list[str]:
        return self._roles

    @property
    def is_superadmin(self) -> bool:
        return self._user.get("is_superadmin") is True

    def can_access_tenant(self, tenant_id: int) -> bool:
        return self.is_superadmin or self.tenant_id == tenant_id


class AccessGuard:
    """Checks staff claims against a tenant."""

    def __init__(self, allowed_roles: frozenset[str] = ALL_STAFF_ROLES):
        self._allowed_roles = allowed_roles

    def authorize(self, user: dict[str, Any], tenant_id: int) -> StaffContext:
        """
        Raises:
            InsufficientRoleError: No staff role in the token.
            ForbiddenError: Token belongs to another tenant and is not super-admin.
        """
        staff = StaffContext(user)

        try:
            require_roles(user, self._allowed_roles)
        except ForbiddenError:
            audit_access_event(
                "ROLE_CHECK",
                user_id=staff.user_id,
                tenant_id=tenant_id,
                success=False,
                reason="missing staff role",
                roles=staff.roles,
            )
            raise

        if not staff.can_access_tenant(tenant_id):
            audit_access_event(
                "TENANT_ACCESS",
                user_id=staff.user_id,
                tenant_id=tenant_id,
                success=False,
                reason="tenant mismatch",
                token_tenant_id=staff.tenant_id,
            )
            raise ForbiddenError(
                "acceder a los pedidos de este restaurante",
                detail_reason=ErrorMessages.NO_TENANT_ACCESS,
                user_id=staff.user_id,
                tenant_id=tenant_id,
            )

        audit_access_event(
            "TENANT_ACCESS",
            user_id=staff.user_id,
            tenant_id=tenant_id,
            success=True,
            superadmin=staff.is_superadmin,
        )
        return staff


_default_guard = AccessGuard()


def require_tenant_staff(
    tenant_id: int = Path(..., ge=1, le=Limits.MAX_ENTITY_ID),
    user: dict[str, Any] = Depends(current_user_context),
) -> StaffContext:
    """
    FastAPI dependency for /api/tenants/{tenant_id}/... staff routes.

    Usage:
        @router.get("/orders")
        def list_orders(tenant_id: int, staff: StaffContext = Depends(require_tenant_staff)):
            ...
    """
    return _default_guard.authorize(user, tenant_id)
