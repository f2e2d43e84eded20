"""
Cash register service.
"""

from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import CASH_OPERATION_TYPES
from core.logging import get_logger
from core.models import CashOperation
from core.repositories import CashRepository

from ..schemas import (
    CashCreateRequest,
    CashListResponse,
    CashOperationResponse,
    CashStats,
    CashStatsResponse,
    CashUpdateRequest,
    Pagination,
)

logger = get_logger("cash")


def _validate(name: str | None, amount: float | None) -> None:
    if name is not None and name not in CASH_OPERATION_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Operation type must be one of: {', '.join(CASH_OPERATION_TYPES)}",
        )
    if amount is not None and amount <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Amount must be greater than zero",
        )


def list_operations(
    db: Session,
    page: int,
    limit: int,
    operation_type: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> CashListResponse:
    operations, total = CashRepository(db).list_filtered(
        operation_type=operation_type,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return CashListResponse(
        operations=[CashOperationResponse.model_validate(op) for op in operations],
        pagination=Pagination.build(page, limit, total),
    )


def get_operation(db: Session, operation_id: int) -> CashOperation:
    operation = CashRepository(db).get_by_id(operation_id)
    if not operation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Cash operation not found"
        )
    return operation


def create_operation(db: Session, payload: CashCreateRequest) -> CashOperation:
    _validate(payload.name, payload.amount)
    operation = CashRepository(db).create(**payload.model_dump())
    db.commit()
    logger.info(
        "cash_operation_created",
        operation_id=operation.id,
        type=operation.name,
        amount=operation.amount,
    )
    return operation


def update_operation(
    db: Session, operation_id: int, payload: CashUpdateRequest
) -> CashOperation:
    operation = get_operation(db, operation_id)
    data = payload.model_dump(exclude_none=True)
    _validate(data.get("name"), data.get("amount"))
    if "name_create" in data and not data["name_create"].strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Creator is required"
        )

    for key, value in data.items():
        setattr(operation, key, value)
    db.commit()
    logger.info("cash_operation_updated", operation_id=operation_id, fields=sorted(data))
    return operation


def delete_operation(db: Session, operation_id: int) -> None:
    get_operation(db, operation_id)
    CashRepository(db).delete(operation_id)
    db.commit()
    logger.info("cash_operation_deleted", operation_id=operation_id)


def cash_stats(
    db: Session, date_from: datetime | None = None, date_to: datetime | None = None
) -> CashStatsResponse:
    totals = CashRepository(db).totals(date_from=date_from, date_to=date_to)
    return CashStatsResponse(
        stats=CashStats(
            total_income=totals["income_total"],
            total_expenses=totals["expense_total"],
            net_income=totals["income_total"] - totals["expense_total"],
            income_count=totals["income_count"],
            expense_count=totals["expense_count"],
        )
    )
