"""
Backend services for the CRM API.
"""

from . import (
    call_service,
    cash_service,
    director_service,
    master_service,
    order_service,
    report_service,
)

__all__ = [
    "call_service",
    "cash_service",
    "director_service",
    "master_service",
    "order_service",
    "report_service",
]
