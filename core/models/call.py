"""
Call center SQLAlchemy models: operators and their call records.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Operator(Base):
    __tablename__ = "operators"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)

    calls: Mapped[list["Call"]] = relationship("Call", back_populates="operator")


class Call(Base):
    """
    Incoming call taken by an operator.

    ``record_url`` points at the stored audio of the conversation.
    """

    __tablename__ = "calls"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    rk: Mapped[str | None] = mapped_column(String(128), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    avito_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_client: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    phone_ats: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    record_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    operator_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("operators.id"), nullable=True, index=True
    )
    date_create: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(timezone.utc), index=True
    )

    operator: Mapped["Operator | None"] = relationship("Operator", back_populates="calls")
