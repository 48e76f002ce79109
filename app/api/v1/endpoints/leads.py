"""Lead status endpoints.

- GET  /api/v1/leads/attention → Leads due for (or past) automatic status change
- GET  /api/v1/leads/{id}/available-transitions → Manual transitions for a lead
- POST /api/v1/leads/{id}/change-status → Validated manual status change
"""

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.dependencies import get_current_user, get_status_engine, require_lead_viewer, require_status_editor
from app.models.user import User
from app.schemas.lead import (
    AttentionLeadOut,
    AvailableTransitionsResponse,
    LeadOut,
    StatusChangeRequest,
    StatusChangeResponse,
)
from app.services.status_engine import InvalidTransitionError, LeadNotFoundError, StatusEngine
from app.services.stores import SqlLeadStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/attention", response_model=List[AttentionLeadOut])
async def leads_requiring_attention(
    current_user: User = Depends(require_lead_viewer),
    engine: StatusEngine = Depends(get_status_engine),
):
    """Leads within a day of their automatic transition, or already overdue."""
    items = await engine.list_leads_requiring_attention()
    return [
        AttentionLeadOut(
            **LeadOut.model_validate(item.lead).model_dump(),
            days_since_update=item.days_since_update,
            suggested_action=item.suggested_action,
        )
        for item in items
    ]


@router.get("/{lead_id}/available-transitions", response_model=AvailableTransitionsResponse)
async def available_transitions(
    lead_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    engine: StatusEngine = Depends(get_status_engine),
):
    lead = await SqlLeadStore(db).get_lead(lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")

    transitions = await engine.list_available_transitions(lead.current_status)
    logger.debug("Available transitions for %r: %s", lead.current_status, transitions)
    return AvailableTransitionsResponse(available_transitions=transitions)


@router.post("/{lead_id}/change-status", response_model=StatusChangeResponse)
async def change_status(
    lead_id: str,
    body: StatusChangeRequest = Body(default_factory=StatusChangeRequest),
    current_user: User = Depends(require_status_editor),
    engine: StatusEngine = Depends(get_status_engine),
):
    """Move a lead along the status graph."""
    if not body.new_status:
        raise HTTPException(status_code=400, detail="New status is required")

    try:
        lead = await engine.apply_manual_transition(lead_id, body.new_status, current_user.id)
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="Lead not found")
    except InvalidTransitionError as e:
        logger.info("Rejected status change for lead %s: %s", lead_id, e)
        raise HTTPException(status_code=400, detail="Invalid status transition")

    return StatusChangeResponse(message="Status updated successfully", lead=LeadOut.model_validate(lead))
