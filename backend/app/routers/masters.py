"""
Master endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from ..database import get_db
from ..schemas import (
    MasterCreateRequest,
    MasterListResponse,
    MasterMutationResponse,
    MasterResponse,
    MasterStatsResponse,
    MasterUpdateRequest,
    MessageResponse,
)
from ..services import master_service

router = APIRouter(prefix="/masters", tags=["masters"])


@router.get("", response_model=MasterListResponse)
def list_masters(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    city: str | None = Query(None, description="City served, or 'all'"),
    status_work: str | None = Query(None, description="Work status, or 'all'"),
    db: Session = Depends(get_db),
):
    """List masters, newest first, with their orders."""
    return master_service.list_masters(
        db, page=page, limit=limit, city=city, status_work=status_work
    )


@router.get("/{master_id}", response_model=MasterResponse)
def get_master(master_id: int, db: Session = Depends(get_db)):
    return MasterResponse.model_validate(master_service.get_master(db, master_id))


@router.get("/{master_id}/stats", response_model=MasterStatsResponse)
def get_master_stats(master_id: int, db: Session = Depends(get_db)):
    """Earnings over the master's completed orders."""
    return master_service.master_stats(db, master_id)


@router.post("", response_model=MasterMutationResponse, status_code=201)
def create_master(request: MasterCreateRequest, db: Session = Depends(get_db)):
    master = master_service.create_master(db, request)
    return MasterMutationResponse(
        message="Master created", master=MasterResponse.model_validate(master)
    )


@router.put("/{master_id}", response_model=MasterMutationResponse)
def update_master(
    master_id: int,
    request: MasterUpdateRequest,
    db: Session = Depends(get_db),
):
    master = master_service.update_master(db, master_id, request)
    return MasterMutationResponse(
        message="Master updated", master=MasterResponse.model_validate(master)
    )


@router.delete("/{master_id}", response_model=MessageResponse)
def delete_master(master_id: int, db: Session = Depends(get_db)):
    master_service.delete_master(db, master_id)
    return MessageResponse(message="Master deleted")
