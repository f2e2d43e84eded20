"""Call record repository."""

from sqlalchemy.orm import joinedload

from core.models import Call

from .base import BaseRepository


class CallRepository(BaseRepository[Call]):
    """Repository for Call operations. Every query loads the operator."""

    model = Call

    def get_with_operator(self, call_id: int) -> Call | None:
        return (
            self.session.query(Call)
            .options(joinedload(Call.operator))
            .filter(Call.id == call_id)
            .first()
        )

    def list_filtered(
        self,
        status: str | None = None,
        operator_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Call], int]:
        """
        List calls, newest first.

        Returns:
            Tuple of (page of calls, total matching)
        """
        query = self.session.query(Call)
        if status:
            query = query.filter(Call.status == status)
        if operator_id is not None:
            query = query.filter(Call.operator_id == operator_id)

        total = query.count()
        calls = (
            query.options(joinedload(Call.operator))
            .order_by(Call.date_create.desc(), Call.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return calls, total

    def list_by_ids(self, call_ids: list[int]) -> list[Call]:
        """Calls with the given ids, newest first; unknown ids are skipped."""
        if not call_ids:
            return []
        return (
            self.session.query(Call)
            .options(joinedload(Call.operator))
            .filter(Call.id.in_(call_ids))
            .order_by(Call.date_create.desc(), Call.id.desc())
            .all()
        )
