from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.responses import Response

from .. import schemas
from ..deps import get_db
from ..pdf_renderer import render_report_pdf
from ..services import reports
from ..utils import utcnow

router = APIRouter(prefix="/reports", tags=["reports"])
dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _period(start: Optional[date], end: Optional[date]):
    # varsayılan: son 7 gün
    end = end or utcnow().date()
    start = start or end - timedelta(days=min(6, (end - date.min).days))
    return start, end


@dashboard_router.get("/stats", response_model=schemas.DashboardStats)
def dashboard_stats(db: Session = Depends(get_db)):
    return reports.dashboard_stats(db)


@router.get("/daily-income", response_model=List[schemas.DailyIncome])
def daily_income(start: Optional[date] = None, end: Optional[date] = None, db: Session = Depends(get_db)):
    start, end = _period(start, end)
    return reports.daily_income(db, start, end)


@router.get("/service-types", response_model=List[schemas.ServiceTypeCount])
def service_types(db: Session = Depends(get_db)):
    return reports.service_type_distribution(db)


@router.get("/service-times", response_model=List[schemas.ServiceTime])
def service_times(db: Session = Depends(get_db)):
    return reports.service_times(db)


@router.get("/vehicle-history/{plate}", response_model=List[schemas.VehicleHistoryPoint])
def vehicle_history(plate: str, db: Session = Depends(get_db)):
    return reports.vehicle_history(db, plate)


@router.get("/export.pdf")
def export_pdf(start: Optional[date] = None, end: Optional[date] = None, db: Session = Depends(get_db)):
    start, end = _period(start, end)
    pdf = render_report_pdf(
        start,
        end,
        reports.daily_income(db, start, end),
        reports.service_type_distribution(db),
        reports.service_times(db),
    )
    headers = {"Content-Disposition": f'attachment; filename="report_{start:%Y%m%d}_{end:%Y%m%d}.pdf"'}
    return Response(content=pdf, media_type="application/pdf", headers=headers)
