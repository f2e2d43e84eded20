"""Order repository with filtering and status-priority sorting."""

from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from core.constants import (
    FILTER_ALL,
    MASTER_STATUS_WORKING,
    ORDER_STATUS_PRIORITY,
    STATUS_DONE,
    STATUS_WAITING,
    UNKNOWN_STATUS_PRIORITY,
)
from core.models import Master, Order

from .base import BaseRepository


def _is_set(value: str | None) -> bool:
    return bool(value) and value != FILTER_ALL


def _sort_key(order: Order) -> tuple:
    """
    Status priority first. Waiting orders are ordered by nearest meeting,
    every other status by newest creation date.
    """
    priority = ORDER_STATUS_PRIORITY.get(order.status_order, UNKNOWN_STATUS_PRIORITY)
    if order.status_order == STATUS_WAITING:
        return (priority, _timestamp(order.date_meeting, default=float("inf")))
    return (priority, -_timestamp(order.created_at, default=0.0))


def _timestamp(value: datetime | None, default: float) -> float:
    return value.timestamp() if value is not None else default


class OrderRepository(BaseRepository[Order]):
    """Repository for Order operations."""

    model = Order

    def get_with_master(self, order_id: int) -> Order | None:
        """Get an order with its master eagerly loaded."""
        return (
            self.session.query(Order)
            .options(joinedload(Order.master))
            .filter(Order.id == order_id)
            .first()
        )

    def list_filtered(
        self,
        status: str | None = None,
        city: str | None = None,
        master: str | None = None,
        search: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Order], int]:
        """
        List orders matching the filters.

        Sorting depends on status priority and on per-status dates, so the
        whole filtered set is sorted in memory before the page is cut.

        Returns:
            Tuple of (page of orders, total matching)
        """
        query = self.session.query(Order).options(joinedload(Order.master))

        if _is_set(status):
            query = query.filter(Order.status_order == status)
        if _is_set(city):
            query = query.filter(Order.city == city)
        if _is_set(master):
            query = query.join(Order.master).filter(Master.name == master)
        if search:
            conditions = [
                Order.phone.contains(search),
                Order.address.contains(search),
            ]
            if search.isdigit():
                conditions.append(Order.id == int(search))
            query = query.filter(or_(*conditions))

        orders = sorted(query.all(), key=_sort_key)
        return orders[offset : offset + limit], len(orders)

    def filter_options(self) -> dict[str, list[str]]:
        """Distinct statuses and cities, plus names of working masters."""
        statuses = [
            row[0]
            for row in self.session.query(Order.status_order).distinct().all()
            if row[0]
        ]
        cities = [row[0] for row in self.session.query(Order.city).distinct().all() if row[0]]
        masters = [
            row[0]
            for row in self.session.query(Master.name)
            .filter(Master.status_work == MASTER_STATUS_WORKING)
            .all()
            if row[0]
        ]
        return {"statuses": statuses, "cities": cities, "masters": masters}

    def count_for_master(self, master_id: int, statuses: frozenset[str]) -> int:
        """Count a master's orders in any of the given statuses."""
        return (
            self.session.query(Order)
            .filter(Order.master_id == master_id, Order.status_order.in_(statuses))
            .count()
        )

    def list_completed(
        self,
        city: str | None = None,
        closed_from: datetime | None = None,
        closed_before: datetime | None = None,
        require_closing_date: bool = False,
    ) -> list[Order]:
        """
        Orders closed as done, with their masters loaded.

        ``closed_before`` is exclusive. Any closing-date bound also drops
        orders that have no closing date.
        """
        query = (
            self.session.query(Order)
            .options(joinedload(Order.master))
            .filter(Order.status_order == STATUS_DONE)
        )
        if _is_set(city):
            query = query.filter(Order.city == city)
        if require_closing_date or closed_from is not None or closed_before is not None:
            query = query.filter(Order.closing_data.is_not(None))
        if closed_from is not None:
            query = query.filter(Order.closing_data >= closed_from)
        if closed_before is not None:
            query = query.filter(Order.closing_data < closed_before)
        return query.order_by(Order.id).all()
