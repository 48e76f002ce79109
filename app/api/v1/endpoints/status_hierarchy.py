"""Status hierarchy endpoints.

Reads are open to any signed-in user; edits are Admin-only.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, require_admin
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.status_hierarchy import (
    StatusDefinitionCreate,
    StatusDefinitionOut,
    StatusDefinitionUpdate,
    StatusHierarchyReset,
)
from app.services import status_hierarchy as hierarchy
from app.services.status_graph import StatusGraphError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[StatusDefinitionOut])
async def list_statuses(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await hierarchy.get_status_hierarchy(db)
    return [StatusDefinitionOut.model_validate(row) for row in rows]


@router.post("/", response_model=StatusDefinitionOut, status_code=201)
async def create_status(
    data: StatusDefinitionCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        row = await hierarchy.add_status_definition(
            db, data.status_name, data.next_statuses, data.days_limit, data.auto_move_to
        )
    except StatusGraphError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return StatusDefinitionOut.model_validate(row)


@router.put("/{status_id}", response_model=StatusDefinitionOut)
async def update_status(
    status_id: str,
    data: StatusDefinitionUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        row = await hierarchy.update_status_definition(db, status_id, data.model_dump(exclude_unset=True))
    except StatusGraphError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if row is None:
        raise HTTPException(status_code=404, detail="Status not found")
    return StatusDefinitionOut.model_validate(row)


@router.delete("/{status_id}", response_model=MessageResponse)
async def delete_status(
    status_id: str,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await hierarchy.delete_status_definition(db, status_id)
    except StatusGraphError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Status not found")
    return {"message": "Status deleted successfully"}


@router.post("/reinitialize", response_model=StatusHierarchyReset)
async def reinitialize(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace the whole hierarchy with the default pipeline."""
    rows = await hierarchy.reinitialize_status_hierarchy(db)
    logger.warning("Status hierarchy reinitialized by %s", current_user.username)
    return StatusHierarchyReset(
        message="Status hierarchy reinitialized successfully",
        status_hierarchy=[StatusDefinitionOut.model_validate(row) for row in rows],
    )
