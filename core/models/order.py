"""
Service order SQLAlchemy model.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .master import Master


class Order(Base):
    """
    Client order dispatched to a master.

    Money fields (result, expenditure, clean, master_change) are filled in
    when the order is closed.
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    rk: Mapped[str | None] = mapped_column(String(128), nullable=True)
    city: Mapped[str] = mapped_column(String(128), index=True)
    avito_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str] = mapped_column(String(32), index=True)
    type_order: Mapped[str | None] = mapped_column(String(64), nullable=True)
    client_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(512), nullable=True)
    date_meeting: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    type_equipment: Mapped[str | None] = mapped_column(String(128), nullable=True)
    problem: Mapped[str | None] = mapped_column(Text, nullable=True)
    call_record: Mapped[str | None] = mapped_column(String(512), nullable=True)
    status_order: Mapped[str] = mapped_column(String(64), index=True)

    master_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("masters.id"), nullable=True, index=True
    )

    result: Mapped[float | None] = mapped_column(Float, nullable=True)
    expenditure: Mapped[float | None] = mapped_column(Float, nullable=True)
    clean: Mapped[float | None] = mapped_column(Float, nullable=True)
    master_change: Mapped[float | None] = mapped_column(Float, nullable=True)
    bso_doc: Mapped[str | None] = mapped_column(String(512), nullable=True)
    expenditure_doc: Mapped[str | None] = mapped_column(String(512), nullable=True)
    closing_data: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    master: Mapped["Master | None"] = relationship("Master", back_populates="orders")
