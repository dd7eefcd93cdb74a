"""
Public catalog endpoints: the table behind a QR code and a restaurant's menu.
"""

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.security.rate_limit import limiter, PUBLIC_READ_LIMIT
from shared.utils.exceptions import TableNotFoundError, TenantNotFoundError
from shared.utils.schemas import MenuOutput, TableOutput
from ordering_api.services.catalog import get_catalog_reader


router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/tables/{table_id}", response_model=TableOutput)
@limiter.limit(PUBLIC_READ_LIMIT)
def get_table(
    request: Request,
    table_id: int = Path(..., ge=1, le=Limits.MAX_ENTITY_ID),
    db: Session = Depends(get_db),
) -> TableOutput:
    """Resolve the table encoded in a QR code, including its restaurant."""
    table = get_catalog_reader(db).find_table(table_id)
    if table is None:
        raise TableNotFoundError(table_id)
    return TableOutput(
        id=table.table_id,
        tenant_id=table.tenant_id,
        table_number=table.table_number,
        capacity=table.capacity,
    )


@router.get("/menu/{tenant_id}", response_model=MenuOutput)
@limiter.limit(PUBLIC_READ_LIMIT)
def get_menu(
    request: Request,
    tenant_id: int = Path(..., ge=1, le=Limits.MAX_ENTITY_ID),
    db: Session = Depends(get_db),
) -> MenuOutput:
    """Public menu of a restaurant with dishes, options and their prices."""
    menu = get_catalog_reader(db).get_menu(tenant_id)
    if menu is None:
        raise TenantNotFoundError(tenant_id)
    return MenuOutput.model_validate(menu)
