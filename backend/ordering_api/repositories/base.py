"""
Tenant-scoped repository base.

Every read goes through `_scoped(tenant_id)`, so no query can be built
without a tenant filter.
"""

from dataclasses import dataclass
from typing import ClassVar, Generic, Sequence, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Page size shared by every listing. Out-of-range values are clamped."""

    limit: int = Limits.DEFAULT_PAGE_SIZE

    def __post_init__(self):
        self.limit = max(1, min(self.limit, Limits.MAX_PAGE_SIZE))


def require_tenant(tenant_id: int | None) -> int:
    """
    Raises:
        ValueError: tenant_id is missing or not an integer.
    """
    # bool is an int subclass; True must not pass as tenant 1
    if isinstance(tenant_id, bool) or not isinstance(tenant_id, int):
        raise ValueError("tenant_id is required for tenant-scoped queries")
    return tenant_id


class TenantRepository(Generic[ModelT]):
    """
    Subclasses set `model` and implement `_select` (with eager loading)
    and `_filter` (entity-specific criteria).
    """

    model: ClassVar[type]

    def __init__(self, db: Session):
        self._db = db

    def _select(self, tenant_id: int) -> Select:
        raise NotImplementedError

    def _filter(self, query: Select, filters: RepositoryFilters) -> Select:
        return query

    def _scoped(self, tenant_id: int | None) -> Select:
        return self._select(require_tenant(tenant_id))

    def find_all(
        self,
        tenant_id: int,
        filters: RepositoryFilters | None = None,
    ) -> Sequence[ModelT]:
        """The first page of the tenant's rows, in the order `_select` defines."""
        filters = filters or RepositoryFilters()
        query = self._filter(self._scoped(tenant_id), filters).limit(filters.limit)
        return self._db.execute(query).scalars().unique().all()
