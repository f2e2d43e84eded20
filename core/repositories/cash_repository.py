"""Cash register repository."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Query

from core.constants import CASH_EXPENSE, CASH_INCOME, FILTER_ALL
from core.models import CashOperation

from .base import BaseRepository


class CashRepository(BaseRepository[CashOperation]):
    """Repository for CashOperation operations."""

    model = CashOperation

    def _date_range(
        self, query: Query, date_from: datetime | None, date_to: datetime | None
    ) -> Query:
        if date_from is not None:
            query = query.filter(CashOperation.date_create >= date_from)
        if date_to is not None:
            query = query.filter(CashOperation.date_create <= date_to)
        return query

    def list_filtered(
        self,
        operation_type: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[CashOperation], int]:
        """
        List cash operations, newest first.

        Returns:
            Tuple of (page of operations, total matching)
        """
        query = self.session.query(CashOperation)
        if operation_type and operation_type != FILTER_ALL:
            query = query.filter(CashOperation.name == operation_type)
        query = self._date_range(query, date_from, date_to)

        total = query.count()
        operations = (
            query.order_by(CashOperation.date_create.desc(), CashOperation.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return operations, total

    def totals(
        self, date_from: datetime | None = None, date_to: datetime | None = None
    ) -> dict[str, float | int]:
        """Sum and count of income and expense operations in a date range."""
        result: dict[str, float | int] = {}
        for operation_type, label in ((CASH_INCOME, "income"), (CASH_EXPENSE, "expense")):
            query = self.session.query(
                func.coalesce(func.sum(CashOperation.amount), 0.0),
                func.count(CashOperation.id),
            ).filter(CashOperation.name == operation_type)
            total, count = self._date_range(query, date_from, date_to).one()
            result[f"{label}_total"] = float(total or 0)
            result[f"{label}_count"] = int(count or 0)
        return result

    def list_created_between(
        self, created_from: datetime | None = None, created_before: datetime | None = None
    ) -> list[CashOperation]:
        """Income and expense operations in ``[created_from, created_before)``."""
        query = self.session.query(CashOperation).filter(
            CashOperation.name.in_((CASH_INCOME, CASH_EXPENSE))
        )
        if created_from is not None:
            query = query.filter(CashOperation.date_create >= created_from)
        if created_before is not None:
            query = query.filter(CashOperation.date_create < created_before)
        return query.all()
