"""
Order endpoints.

Reads are served through the response cache; every write invalidates the
cached order, master and cash listings.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

from ..database import get_db
from ..schemas import (
    AssignMasterRequest,
    CloseOrderRequest,
    FilterOptionsResponse,
    OrderListResponse,
    OrderMutationResponse,
    OrderResponse,
    OrderUpdateRequest,
)
from ..services import order_service

router = APIRouter(prefix="/orders", tags=["orders"])


# =============================================================================
# Read Endpoints
# =============================================================================


@router.get("", response_model=OrderListResponse)
def list_orders(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    status: str | None = Query(None, description="Order status, or 'all'"),
    city: str | None = Query(None, description="City, or 'all'"),
    master: str | None = Query(None, description="Master name, or 'all'"),
    search: str | None = Query(None, description="Phone, address or order id"),
    db: Session = Depends(get_db),
):
    """List orders sorted by status priority."""
    return order_service.list_orders(
        db,
        page=page,
        limit=limit,
        status_filter=status,
        city=city,
        master=master,
        search=search,
    )


@router.get("/filter-options", response_model=FilterOptionsResponse)
def get_filter_options(db: Session = Depends(get_db)):
    """Distinct statuses and cities, and the names of working masters."""
    return order_service.filter_options(db)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderResponse.model_validate(order_service.get_order(db, order_id))


# =============================================================================
# Write Endpoints
# =============================================================================


@router.put("/{order_id}", response_model=OrderMutationResponse)
def update_order(
    order_id: int,
    request: OrderUpdateRequest,
    db: Session = Depends(get_db),
):
    order = order_service.update_order(db, order_id, request)
    return OrderMutationResponse(
        message="Order updated", order=OrderResponse.model_validate(order)
    )


@router.post("/{order_id}/assign-master", response_model=OrderMutationResponse)
def assign_master(
    order_id: int,
    request: AssignMasterRequest,
    db: Session = Depends(get_db),
):
    order = order_service.assign_master(db, order_id, request.master_id)
    return OrderMutationResponse(
        message="Master assigned", order=OrderResponse.model_validate(order)
    )


@router.post("/{order_id}/close", response_model=OrderMutationResponse)
def close_order(
    order_id: int,
    request: CloseOrderRequest,
    db: Session = Depends(get_db),
):
    """Mark the order done and book its result as cash income."""
    order = order_service.close_order(db, order_id, request)
    return OrderMutationResponse(
        message="Order closed", order=OrderResponse.model_validate(order)
    )
