"""
Unified SQLAlchemy models for the CRM.

Single source of truth for all database models.

Usage:
    from core.models import Order, Master, CashOperation, Director, Call
"""

from .base import Base
from .call import Call, Operator
from .cash import CashOperation
from .director import Director
from .master import Master
from .order import Order

__all__ = [
    "Base",
    "Order",
    "Master",
    "CashOperation",
    "Director",
    "Operator",
    "Call",
]
