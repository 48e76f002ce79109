"""Status engine administration endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_status_engine, require_admin
from app.models.user import User
from app.schemas.status_engine import SweepResponse
from app.services.status_engine import StatusEngine

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/process-automatic", response_model=SweepResponse)
async def process_automatic(
    current_user: User = Depends(require_admin),
    engine: StatusEngine = Depends(get_status_engine),
):
    """Run the idle sweep now instead of waiting for the scheduler."""
    try:
        result = await engine.run_idle_sweep()
    except Exception:
        logger.exception("Manual status sweep failed")
        raise HTTPException(status_code=500, detail="Failed to process automatic status changes")

    if result.skipped:
        message = "Automatic status processing already in progress"
    else:
        message = "Automatic status processing completed"
    return SweepResponse(message=message, scanned=result.scanned, moved=result.moved, skipped=result.skipped)
