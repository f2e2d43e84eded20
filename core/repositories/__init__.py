"""
Repository pattern implementations for data access.

Repositories provide a clean abstraction over database operations.

Usage:
    from core.repositories import OrderRepository
    from core.db import db

    with db.session() as session:
        repo = OrderRepository(session)
        orders, total = repo.list_filtered(city="Москва", limit=10)
"""

from .base import BaseRepository
from .call_repository import CallRepository
from .cash_repository import CashRepository
from .director_repository import DirectorRepository
from .master_repository import MasterRepository
from .order_repository import OrderRepository

__all__ = [
    "BaseRepository",
    "OrderRepository",
    "MasterRepository",
    "CashRepository",
    "DirectorRepository",
    "CallRepository",
]
