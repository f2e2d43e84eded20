"""Master repository."""

from sqlalchemy.orm import selectinload

from core.constants import FILTER_ALL, STATUS_DONE
from core.models import Master, Order

from .base import BaseRepository


class MasterRepository(BaseRepository[Master]):
    """Repository for Master operations."""

    model = Master

    def get_with_orders(self, master_id: int) -> Master | None:
        """Get a master with orders eagerly loaded."""
        return (
            self.session.query(Master)
            .options(selectinload(Master.orders))
            .filter(Master.id == master_id)
            .first()
        )

    def list_filtered(
        self,
        city: str | None = None,
        status_work: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Master], int]:
        """
        List masters, newest first.

        Cities are stored as a JSON array, so the city filter is applied
        after loading to stay portable between SQLite and PostgreSQL.

        Returns:
            Tuple of (page of masters, total matching)
        """
        query = self.session.query(Master).options(selectinload(Master.orders))
        if status_work and status_work != FILTER_ALL:
            query = query.filter(Master.status_work == status_work)

        masters = query.order_by(Master.created_at.desc(), Master.id.desc()).all()
        if city and city != FILTER_ALL:
            masters = [m for m in masters if city in (m.cities or [])]

        return masters[offset : offset + limit], len(masters)

    def completed_orders(self, master_id: int) -> list[Order]:
        """Orders of a master that were closed as done."""
        return (
            self.session.query(Order)
            .filter(Order.master_id == master_id, Order.status_order == STATUS_DONE)
            .all()
        )
