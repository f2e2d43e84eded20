"""
Report endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import CityReportResponse, MasterReportResponse
from ..services import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/masters", response_model=MasterReportResponse)
def masters_report(
    city: str | None = Query(None, description="City served, or 'all'"),
    db: Session = Depends(get_db),
):
    """Completed-order totals per master."""
    return report_service.masters_report(db, city=city)


@router.get("/city", response_model=CityReportResponse)
def city_report(
    city: str | None = Query(None, description="Order city, or 'all'"),
    date_from: date | None = Query(None, description="First closing day, inclusive"),
    date_to: date | None = Query(None, description="Last closing day, inclusive"),
    db: Session = Depends(get_db),
):
    """Completed-order totals and cash balance per city."""
    return report_service.city_report(db, city=city, date_from=date_from, date_to=date_to)
