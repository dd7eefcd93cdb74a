"""
Permissions: staff access to tenant-scoped routes.
"""

from .guard import AccessGuard, StaffContext, require_tenant_staff

__all__ = [
    "AccessGuard",
    "StaffContext",
    "require_tenant_staff",
]
