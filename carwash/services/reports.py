# carwash/services/reports.py
"""Read-only aggregations for the dashboard and the reports screen."""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import REPORT_MAX_DAYS
from ..errors import CarWashError, NotFoundError
from ..utils import norm_plate, utcnow
from . import inventory, pending


def _completed_visits(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None):
    stmt = select(models.PendingService).where(
        models.PendingService.status == models.COMPLETED,
        models.PendingService.completed_at.is_not(None),
    )
    if start is not None:
        stmt = stmt.where(models.PendingService.completed_at >= start)
    if end is not None:
        stmt = stmt.where(models.PendingService.completed_at < end)
    return list(db.scalars(stmt).all())


def _minutes(ps: models.PendingService) -> float:
    return max((ps.completed_at - ps.entry_time).total_seconds(), 0) / 60.0


def daily_income(db: Session, start: date, end: date) -> List[schemas.DailyIncome]:
    if end < start:
        raise CarWashError("end must not be before start")
    span = (end - start).days + 1
    if span > REPORT_MAX_DAYS:
        raise CarWashError(f"Report period is limited to {REPORT_MAX_DAYS} days, got {span}")
    # date.max için üst sınır yok
    until = datetime.combine(end + timedelta(days=1), datetime.min.time()) if end < date.max else None
    rows = _completed_visits(db, datetime.combine(start, datetime.min.time()), until)
    income: Dict[date, float] = defaultdict(float)
    count: Dict[date, int] = defaultdict(int)
    for ps in rows:
        day = ps.completed_at.date()
        income[day] += ps.service_type.base_price or 0
        count[day] += 1

    out = []
    for offset in range(span):
        day = start + timedelta(days=offset)
        out.append(schemas.DailyIncome(day=day, income=round(income[day], 2), services=count[day]))
    return out


def service_type_distribution(db: Session) -> List[schemas.ServiceTypeCount]:
    rows = db.execute(
        select(models.Service.id, models.Service.name, func.count(models.PendingService.id))
        .join(models.PendingService, models.PendingService.service_type_id == models.Service.id)
        .group_by(models.Service.id, models.Service.name)
        .order_by(func.count(models.PendingService.id).desc(), models.Service.name)
    ).all()
    return [schemas.ServiceTypeCount(service_type_id=r[0], name=r[1], count=r[2]) for r in rows]


def service_times(db: Session) -> List[schemas.ServiceTime]:
    buckets: Dict[int, List[float]] = defaultdict(list)
    names: Dict[int, str] = {}
    for ps in _completed_visits(db):
        buckets[ps.service_type_id].append(_minutes(ps))
        names[ps.service_type_id] = ps.service_type.name
    return [
        schemas.ServiceTime(
            service_type_id=sid,
            name=names[sid],
            avg_minutes=round(sum(mins) / len(mins), 1),
            count=len(mins),
        )
        for sid, mins in sorted(buckets.items(), key=lambda kv: names[kv[0]])
    ]


def vehicle_history(db: Session, plate: str) -> List[schemas.VehicleHistoryPoint]:
    v = db.scalar(select(models.Vehicle).where(models.Vehicle.license_plate == norm_plate(plate)))
    if v is None:
        raise NotFoundError(f"Vehicle with plate {plate} not found")
    per_day: Dict[date, int] = defaultdict(int)
    for ps in v.visits:
        per_day[ps.entry_time.date()] += 1
    return [schemas.VehicleHistoryPoint(day=d, services=n) for d, n in sorted(per_day.items())]


def dashboard_stats(db: Session, now: Optional[datetime] = None) -> schemas.DashboardStats:
    now = now or utcnow()
    today = now.date()
    open_visits = [
        ps for ps in pending.list_visits(db) if ps.status != models.COMPLETED
    ]
    active_employees = db.scalar(
        select(func.count(models.Employee.id)).where(models.Employee.status == "active")
    )
    done = _completed_visits(db)
    avg_minutes = round(sum(_minutes(ps) for ps in done) / len(done), 1) if done else 0.0
    today_income = daily_income(db, today, today)[0].income

    return schemas.DashboardStats(
        pendingVehicles=len(open_visits),
        activeEmployees=active_employees or 0,
        avgServiceTime=avg_minutes,
        dailyIncome=today_income,
        pendingServices=[pending.visit_to_out(ps) for ps in open_visits],
        lowStockItems=[schemas.InventoryItemRead.model_validate(i) for i in inventory.low_stock(db)],
    )
