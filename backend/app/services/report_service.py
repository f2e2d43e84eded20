"""
Report service: per-master and per-city aggregates over completed orders.
"""

import math
from collections import defaultdict
from datetime import date, datetime, time, timedelta

from sqlalchemy.orm import Session

from core.constants import CASH_INCOME, FILTER_ALL, UNKNOWN_CITY
from core.logging import get_logger
from core.repositories import CashRepository, OrderRepository

from ..schemas import CityReport, CityReportResponse, MasterReport, MasterReportResponse

logger = get_logger("reports")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _day_bounds(
    date_from: date | None, date_to: date | None
) -> tuple[datetime | None, datetime | None]:
    """Half-open datetime range covering both dates in full."""
    start = datetime.combine(date_from, time.min) if date_from else None
    end = datetime.combine(date_to + timedelta(days=1), time.min) if date_to else None
    return start, end


def masters_report(db: Session, city: str | None = None) -> MasterReportResponse:
    """
    Earnings per master over completed orders, most orders first.

    ``city`` keeps masters that serve it. Salary is the sum of the master's
    share (``master_change``); the average check is clean income per order.
    """
    orders = OrderRepository(db).list_completed()

    grouped: dict[int, list] = defaultdict(list)
    masters = {}
    for order in orders:
        master = order.master
        if master is None:
            continue
        if city and city != FILTER_ALL and city not in (master.cities or []):
            continue
        masters[master.id] = master
        grouped[master.id].append(order)

    reports = []
    for master_id, master_orders in grouped.items():
        count = len(master_orders)
        total_clean = sum(o.clean or 0 for o in master_orders)
        reports.append(
            MasterReport(
                id=master_id,
                name=masters[master_id].name,
                cities=masters[master_id].cities or [],
                orders_count=count,
                total_revenue=sum(o.result or 0 for o in master_orders),
                total_expenditure=sum(o.expenditure or 0 for o in master_orders),
                total_clean=total_clean,
                average_check=_round_half_up(total_clean / count),
                salary=sum(o.master_change or 0 for o in master_orders),
            )
        )

    reports.sort(key=lambda r: r.orders_count, reverse=True)
    logger.debug("masters_report_built", city=city, masters=len(reports), orders=len(orders))
    return MasterReportResponse(reports=reports)


def city_report(
    db: Session,
    city: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> CityReportResponse:
    """
    Totals per order city over orders closed in the period, most orders first.

    Company income is the sum of master shares. The cash balance is income
    minus expenses booked for the city in the same period.
    """
    start, end = _day_bounds(date_from, date_to)
    orders = OrderRepository(db).list_completed(
        city=city, closed_from=start, closed_before=end, require_closing_date=True
    )

    balances: dict[str, float] = defaultdict(float)
    for operation in CashRepository(db).list_created_between(start, end):
        sign = 1 if operation.name == CASH_INCOME else -1
        balances[operation.city or UNKNOWN_CITY] += sign * operation.amount

    grouped: dict[str, list] = defaultdict(list)
    for order in orders:
        grouped[order.city].append(order)

    reports = []
    for order_city, city_orders in grouped.items():
        count = len(city_orders)
        revenue = sum(o.result or 0 for o in city_orders)
        reports.append(
            CityReport(
                city=order_city,
                closed_orders=count,
                average_check=_round_half_up(revenue / count),
                total_revenue=revenue,
                company_income=sum(o.master_change or 0 for o in city_orders),
                cash_balance=balances.get(order_city, 0.0),
            )
        )

    reports.sort(key=lambda r: r.closed_orders, reverse=True)
    logger.debug("city_report_built", city=city, cities=len(reports), orders=len(orders))
    return CityReportResponse(reports=reports)
