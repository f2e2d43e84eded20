"""
Order service: listing, updates, master assignment and closing.

Closing an order (or moving it to "Готово") with a positive result books
the result as cash income.
"""

from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.constants import CASH_INCOME, FINAL_ORDER_STATUSES, STATUS_DONE, SYSTEM_CREATOR
from core.logging import get_logger
from core.models import CashOperation, Master, Order
from core.repositories import CashRepository, MasterRepository, OrderRepository

from ..schemas import (
    CloseOrderRequest,
    FilterOptionsResponse,
    OrderListResponse,
    OrderResponse,
    OrderUpdateRequest,
    Pagination,
)

logger = get_logger("orders")

# A null in these fields means "leave unchanged", not "clear"
_NULL_MEANS_UNCHANGED = ("result", "expenditure", "clean", "master_change", "master_id")


def list_orders(
    db: Session,
    page: int,
    limit: int,
    status_filter: str | None = None,
    city: str | None = None,
    master: str | None = None,
    search: str | None = None,
) -> OrderListResponse:
    orders, total = OrderRepository(db).list_filtered(
        status=status_filter,
        city=city,
        master=master,
        search=search,
        limit=limit,
        offset=(page - 1) * limit,
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        pagination=Pagination.build(page, limit, total),
    )


def filter_options(db: Session) -> FilterOptionsResponse:
    return FilterOptionsResponse(**OrderRepository(db).filter_options())


def get_order(db: Session, order_id: int) -> Order:
    order = OrderRepository(db).get_with_master(order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


def _get_master(db: Session, master_id: int) -> Master:
    master = MasterRepository(db).get_by_id(master_id)
    if not master:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Master not found")
    return master


def _book_income(db: Session, order: Order) -> CashOperation | None:
    """Record the order result as cash income if it is positive."""
    if not order.result or order.result <= 0:
        return None
    master_name = order.master.name if order.master else "Unknown master"
    operation = CashRepository(db).create(
        name=CASH_INCOME,
        amount=order.result,
        city=order.city,
        note=f"{master_name} - order total: {order.result:g}",
        name_create=SYSTEM_CREATOR,
        payment_purpose=f"Order #{order.id}",
    )
    logger.info("order_income_booked", order_id=order.id, amount=order.result)
    return operation


def update_order(db: Session, order_id: int, payload: OrderUpdateRequest) -> Order:
    """
    Apply a partial update.

    Moving the order into a final status stamps ``closing_data`` once;
    moving it into "Готово" books the result as income.
    """
    order = get_order(db, order_id)
    data = payload.model_dump(exclude_unset=True)
    for field in _NULL_MEANS_UNCHANGED:
        if field in data and data[field] is None:
            del data[field]

    if "master_id" in data:
        _get_master(db, data["master_id"])

    previous_status = order.status_order
    new_status = data.get("status_order")
    if (
        new_status in FINAL_ORDER_STATUSES
        and new_status != previous_status
        and order.closing_data is None
        and data.get("closing_data") is None
    ):
        data["closing_data"] = datetime.now(timezone.utc)

    for key, value in data.items():
        setattr(order, key, value)
    db.flush()
    db.refresh(order)

    if new_status == STATUS_DONE and previous_status != STATUS_DONE:
        _book_income(db, order)

    db.commit()
    logger.info("order_updated", order_id=order.id, fields=sorted(data))
    return order


def assign_master(db: Session, order_id: int, master_id: int) -> Order:
    master = _get_master(db, master_id)
    order = get_order(db, order_id)
    order.master_id = master.id
    db.flush()
    db.refresh(order)
    db.commit()
    logger.info("order_master_assigned", order_id=order.id, master_id=master.id)
    return order


def close_order(db: Session, order_id: int, payload: CloseOrderRequest) -> Order:
    order = get_order(db, order_id)
    order.status_order = STATUS_DONE
    order.closing_data = datetime.now(timezone.utc)
    for key, value in payload.model_dump(exclude_none=True).items():
        setattr(order, key, value)
    db.flush()
    db.refresh(order)

    _book_income(db, order)

    db.commit()
    logger.info("order_closed", order_id=order.id, result=order.result)
    return order
