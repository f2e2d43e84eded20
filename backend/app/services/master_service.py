"""
Master service: CRUD and earnings statistics.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import ACTIVE_ORDER_STATUSES
from core.logging import get_logger
from core.models import Master
from core.repositories import MasterRepository, OrderRepository

from ..schemas import (
    MasterBrief,
    MasterCreateRequest,
    MasterListResponse,
    MasterResponse,
    MasterStats,
    MasterStatsResponse,
    MasterUpdateRequest,
    Pagination,
)

logger = get_logger("masters")


def list_masters(
    db: Session,
    page: int,
    limit: int,
    city: str | None = None,
    status_work: str | None = None,
) -> MasterListResponse:
    masters, total = MasterRepository(db).list_filtered(
        city=city,
        status_work=status_work,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return MasterListResponse(
        masters=[MasterResponse.model_validate(m) for m in masters],
        pagination=Pagination.build(page, limit, total),
    )


def get_master(db: Session, master_id: int) -> Master:
    master = MasterRepository(db).get_with_orders(master_id)
    if not master:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Master not found")
    return master


def create_master(db: Session, payload: MasterCreateRequest) -> Master:
    cities = payload.resolved_cities()
    if not cities:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one city is required",
        )
    master = MasterRepository(db).create(
        cities=cities,
        **payload.model_dump(exclude={"cities", "city"}),
    )
    db.commit()
    logger.info("master_created", master_id=master.id)
    return get_master(db, master.id)


def update_master(db: Session, master_id: int, payload: MasterUpdateRequest) -> Master:
    get_master(db, master_id)
    data = payload.model_dump(exclude_none=True, exclude={"cities", "city"})
    cities = payload.resolved_cities()
    if cities:
        data["cities"] = cities

    MasterRepository(db).update(master_id, **data)
    db.commit()
    logger.info("master_updated", master_id=master_id, fields=sorted(data))
    return get_master(db, master_id)


def delete_master(db: Session, master_id: int) -> None:
    """Delete a master. Refused while the master has active orders."""
    get_master(db, master_id)
    active = OrderRepository(db).count_for_master(master_id, ACTIVE_ORDER_STATUSES)
    if active > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete a master with active orders",
        )
    MasterRepository(db).delete(master_id)
    db.commit()
    logger.info("master_deleted", master_id=master_id)


def master_stats(db: Session, master_id: int) -> MasterStatsResponse:
    """Totals over the master's completed orders; salary equals the clean total."""
    master = get_master(db, master_id)
    completed = MasterRepository(db).completed_orders(master_id)

    total_orders = len(completed)
    total_revenue = sum(o.result or 0 for o in completed)
    total_expenditure = sum(o.expenditure or 0 for o in completed)
    total_clean = sum(o.clean or 0 for o in completed)

    return MasterStatsResponse(
        master=MasterBrief.model_validate(master),
        stats=MasterStats(
            total_orders=total_orders,
            total_revenue=total_revenue,
            total_expenditure=total_expenditure,
            total_clean=total_clean,
            average_check=total_revenue / total_orders if total_orders else 0.0,
            salary=total_clean,
        ),
    )
