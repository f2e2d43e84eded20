"""
Cash register endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from ..database import get_db
from ..schemas import (
    CashCreateRequest,
    CashListResponse,
    CashMutationResponse,
    CashOperationResponse,
    CashStatsResponse,
    CashUpdateRequest,
    MessageResponse,
)
from ..services import cash_service

router = APIRouter(prefix="/cash", tags=["cash"])


@router.get("", response_model=CashListResponse)
def list_operations(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    operation_type: str | None = Query(None, alias="type", description="приход, расход or 'all'"),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    db: Session = Depends(get_db),
):
    """List cash operations, newest first."""
    return cash_service.list_operations(
        db,
        page=page,
        limit=limit,
        operation_type=operation_type,
        date_from=date_from,
        date_to=date_to,
    )


# Declared before /{operation_id} so "stats" is not parsed as an id
@router.get("/stats", response_model=CashStatsResponse)
def get_stats(
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    db: Session = Depends(get_db),
):
    """Income, expense and net totals."""
    return cash_service.cash_stats(db, date_from=date_from, date_to=date_to)


@router.get("/{operation_id}", response_model=CashOperationResponse)
def get_operation(operation_id: int, db: Session = Depends(get_db)):
    return CashOperationResponse.model_validate(cash_service.get_operation(db, operation_id))


@router.post("", response_model=CashMutationResponse, status_code=201)
def create_operation(request: CashCreateRequest, db: Session = Depends(get_db)):
    operation = cash_service.create_operation(db, request)
    return CashMutationResponse(
        message="Cash operation created",
        operation=CashOperationResponse.model_validate(operation),
    )


@router.put("/{operation_id}", response_model=CashMutationResponse)
def update_operation(
    operation_id: int,
    request: CashUpdateRequest,
    db: Session = Depends(get_db),
):
    operation = cash_service.update_operation(db, operation_id, request)
    return CashMutationResponse(
        message="Cash operation updated",
        operation=CashOperationResponse.model_validate(operation),
    )


@router.delete("/{operation_id}", response_model=MessageResponse)
def delete_operation(operation_id: int, db: Session = Depends(get_db)):
    cash_service.delete_operation(db, operation_id)
    return MessageResponse(message="Cash operation deleted")
