"""
Cash register SQLAlchemy model.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class CashOperation(Base):
    """
    Income ("приход") or expense ("расход") entry in the cash register.

    Income entries are also created automatically when an order is closed
    with a positive result.
    """

    __tablename__ = "cash"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(32), index=True)
    amount: Mapped[float] = mapped_column(Float)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    receipt_doc: Mapped[str | None] = mapped_column(String(512), nullable=True)
    name_create: Mapped[str] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    payment_purpose: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date_create: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
