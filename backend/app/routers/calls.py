"""
Call record endpoints (read-only).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import MAX_PAGE_SIZE

from ..database import get_db
from ..schemas import CallBatchResponse, CallListResponse, CallResponse
from ..services import call_service

router = APIRouter(prefix="/calls", tags=["calls"])


@router.get("", response_model=CallListResponse)
def list_calls(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    status: str | None = Query(None),
    operator_id: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """List calls, newest first."""
    return call_service.list_calls(
        db, page=page, limit=limit, status_filter=status, operator_id=operator_id
    )


@router.get("/by-call-id/{call_ids}", response_model=CallBatchResponse)
def calls_by_ids(call_ids: str, db: Session = Depends(get_db)):
    """Calls for a comma-separated id list, as stored on an order."""
    return call_service.calls_by_ids(db, call_ids)


@router.get("/{call_id}", response_model=CallResponse)
def get_call(call_id: int, db: Session = Depends(get_db)):
    return CallResponse.model_validate(call_service.get_call(db, call_id))
