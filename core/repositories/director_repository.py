"""Director repository."""

from core.models import Director

from .base import BaseRepository


class DirectorRepository(BaseRepository[Director]):
    """Repository for Director operations."""

    model = Director

    def list_newest(self) -> list[Director]:
        return (
            self.session.query(Director)
            .order_by(Director.created_at.desc(), Director.id.desc())
            .all()
        )

    def get_by_login(self, login: str) -> Director | None:
        return self.session.query(Director).filter(Director.login == login).first()
