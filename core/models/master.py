"""
Master (field technician) SQLAlchemy model.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .order import Order


class Master(Base):
    """
    Master assigned to service orders.

    Attributes:
        name: Full name
        cities: Cities the master works in
        status_work: Employment status (e.g. "работает")
        passport_doc / contract_doc: Links to uploaded documents
        tg_id / chat_id: Telegram identifiers for notifications
    """

    __tablename__ = "masters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    cities: Mapped[list[str]] = mapped_column(JSON, default=list)
    status_work: Mapped[str] = mapped_column(String(64), index=True)
    passport_doc: Mapped[str | None] = mapped_column(String(512), nullable=True)
    contract_doc: Mapped[str | None] = mapped_column(String(512), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    tg_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    chat_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    orders: Mapped[list["Order"]] = relationship("Order", back_populates="master")
