"""
Call record service (read-only).
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.models import Call
from core.repositories import CallRepository

from ..schemas import CallBatchResponse, CallListResponse, CallResponse, Pagination


def list_calls(
    db: Session,
    page: int,
    limit: int,
    status_filter: str | None = None,
    operator_id: int | None = None,
) -> CallListResponse:
    calls, total = CallRepository(db).list_filtered(
        status=status_filter,
        operator_id=operator_id,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return CallListResponse(
        calls=[CallResponse.model_validate(c) for c in calls],
        pagination=Pagination.build(page, limit, total),
    )


def get_call(db: Session, call_id: int) -> Call:
    call = CallRepository(db).get_with_operator(call_id)
    if not call:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Call not found")
    return call


def parse_call_ids(raw: str) -> list[int]:
    """
    Parse a comma-separated id list as stored on orders.

    Blank and non-numeric parts are skipped.
    """
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            ids.append(int(part))
    return ids


def calls_by_ids(db: Session, raw_ids: str) -> CallBatchResponse:
    calls = CallRepository(db).list_by_ids(parse_call_ids(raw_ids))
    return CallBatchResponse(calls=[CallResponse.model_validate(c) for c in calls])
