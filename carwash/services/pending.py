# carwash/services/pending.py
"""
Pending Service lifecycle

Allowed moves are listed in TRANSITIONS; `completed` is terminal.
Completing a visit also mints its rating link.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy import update as sql_update
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import DEFAULT_SERVICE_HOURS
from ..crud import Repository
from ..database import atomic
from ..errors import ConflictError, InvalidTransitionError
from ..utils import norm_plate, to_naive_utc, utcnow
from . import ratings

logger = logging.getLogger(__name__)

visits = Repository(models.PendingService, "Pending service")
vehicles = Repository(models.Vehicle, "Vehicle")
catalog = Repository(models.Service, "Service")
employees = Repository(models.Employee, "Employee")

TRANSITIONS = {
    models.PENDING: {models.IN_PROGRESS, models.DELAYED, models.COMPLETED},
    models.IN_PROGRESS: {models.DELAYED, models.COMPLETED},
    models.DELAYED: {models.IN_PROGRESS, models.COMPLETED},
    models.COMPLETED: set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, set())


def estimate_completion(entry_time: datetime, estimated_hours: Optional[float]) -> datetime:
    return entry_time + timedelta(hours=estimated_hours or DEFAULT_SERVICE_HOURS)


def visit_to_out(ps: models.PendingService) -> schemas.PendingServiceRead:
    vehicle = ps.vehicle
    customer = vehicle.customer if vehicle else None
    service_type = ps.service_type
    employee = ps.employee
    return schemas.PendingServiceRead(
        id=ps.id,
        vehicle_id=ps.vehicle_id,
        service_type_id=ps.service_type_id,
        employee_id=ps.employee_id,
        entry_time=ps.entry_time,
        estimated_completion_time=ps.estimated_completion_time,
        completed_at=ps.completed_at,
        status=ps.status,
        notes=ps.notes,
        license_plate=vehicle.license_plate if vehicle else None,
        make=vehicle.make if vehicle else None,
        model=vehicle.model if vehicle else None,
        year=vehicle.year if vehicle else None,
        color=vehicle.color if vehicle else None,
        client_name=customer.name if customer else None,
        client_phone=customer.phone if customer else None,
        service_type_name=service_type.name if service_type else None,
        service_price=service_type.base_price if service_type else None,
        service_hours=service_type.estimated_hours if service_type else None,
        employee_name=employee.name if employee else None,
        employee_position=employee.position if employee else None,
    )


def _active_employee(db: Session, employee_id: int) -> models.Employee:
    emp = employees.get(db, employee_id)
    if emp.status != "active":
        raise ConflictError(f"Employee {employee_id} is inactive")
    return emp


def list_visits(db: Session, status: Optional[str] = None, q: Optional[str] = None) -> List[models.PendingService]:
    stmt = (
        select(models.PendingService)
        .join(models.PendingService.vehicle)
        .join(models.Vehicle.customer)
        .order_by(models.PendingService.entry_time.desc(), models.PendingService.id.desc())
    )
    if status:
        stmt = stmt.where(models.PendingService.status == status)
    if q and q.strip():
        conds = [func.lower(models.Customer.name).like(f"%{q.strip().lower()}%")]
        plate = norm_plate(q)
        if plate:
            conds.append(models.Vehicle.license_plate.like(f"%{plate}%"))
        stmt = stmt.where(or_(*conds))
    return list(db.scalars(stmt).all())


def create(db: Session, payload: schemas.PendingServiceCreate) -> models.PendingService:
    vehicles.get(db, payload.vehicle_id)
    service_type = catalog.get(db, payload.service_type_id)
    if payload.employee_id is not None:
        _active_employee(db, payload.employee_id)

    entry = to_naive_utc(payload.entry_time) or utcnow()
    ps = models.PendingService(
        vehicle_id=payload.vehicle_id,
        service_type_id=payload.service_type_id,
        employee_id=payload.employee_id,
        entry_time=entry,
        estimated_completion_time=estimate_completion(entry, service_type.estimated_hours),
        status=models.IN_PROGRESS if payload.employee_id is not None else models.PENDING,
        notes=payload.notes,
    )
    db.add(ps)
    db.commit()
    db.refresh(ps)
    logger.info(f"Pending service {ps.id} created for vehicle {ps.vehicle_id} ({ps.status})")
    return ps


def update(db: Session, service_id: int, payload: schemas.PendingServiceUpdate) -> models.PendingService:
    ps = visits.get(db, service_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("service_type_id") is not None and data["service_type_id"] != ps.service_type_id:
        service_type = catalog.get(db, data["service_type_id"])
        ps.service_type_id = service_type.id
        if data.get("estimated_completion_time") is None:
            ps.estimated_completion_time = estimate_completion(ps.entry_time, service_type.estimated_hours)
    if data.get("estimated_completion_time") is not None:
        ps.estimated_completion_time = to_naive_utc(data["estimated_completion_time"])
    if "notes" in data:
        ps.notes = data["notes"]

    db.commit()
    db.refresh(ps)
    return ps


def assign(db: Session, service_id: int, employee_id: int) -> models.PendingService:
    ps = visits.get(db, service_id)
    if ps.status == models.COMPLETED:
        raise InvalidTransitionError(f"Service {service_id} is already completed")
    _active_employee(db, employee_id)

    ps.employee_id = employee_id
    if ps.status == models.PENDING:
        ps.status = models.IN_PROGRESS
    db.commit()
    db.refresh(ps)
    logger.info(f"Service {service_id} assigned to employee {employee_id} ({ps.status})")
    return ps


def mark_complete(db: Session, service_id: int) -> Tuple[models.PendingService, str, str]:
    ps = visits.get(db, service_id)

    now = utcnow()
    with atomic(db):
        # tek UPDATE: eşzamanlı ikinci tamamlama 0 satır günceller
        result = db.execute(
            sql_update(models.PendingService)
            .where(
                models.PendingService.id == service_id,
                models.PendingService.status != models.COMPLETED,
            )
            .values(status=models.COMPLETED, completed_at=now)
        )
        if result.rowcount == 0:
            raise InvalidTransitionError(f"Service {service_id} is already completed")
        ps.vehicle.last_service_date = now.date()
        db.flush()
        token, url = ratings.issue_link(db, ps, now=now)
    db.refresh(ps)
    logger.info(f"Service {service_id} completed")
    return ps, token, url


def change_status(db: Session, service_id: int, status: str) -> models.PendingService:
    ps = visits.get(db, service_id)
    if ps.status == status:
        return ps
    if not can_transition(ps.status, status):
        raise InvalidTransitionError(f"Cannot move service {service_id} from {ps.status} to {status}")
    if status == models.COMPLETED:
        return mark_complete(db, service_id)[0]
    if status == models.IN_PROGRESS and ps.employee_id is None:
        raise InvalidTransitionError(f"Service {service_id} needs an employee before it can start")

    ps.status = status
    db.commit()
    db.refresh(ps)
    logger.info(f"Service {service_id} moved to {status}")
    return ps


def flag_delayed(db: Session, now: Optional[datetime] = None) -> List[models.PendingService]:
    """Mark open visits whose estimated completion already passed as delayed."""
    now = now or utcnow()
    rows = list(db.scalars(
        select(models.PendingService).where(
            models.PendingService.status.in_([models.PENDING, models.IN_PROGRESS]),
            models.PendingService.estimated_completion_time < now,
        )
    ).all())
    for ps in rows:
        ps.status = models.DELAYED
    db.commit()
    if rows:
        logger.info("Flagged %d services as delayed", len(rows))
    return rows


def delete(db: Session, service_id: int) -> None:
    visits.delete(db, service_id)
    logger.info(f"Pending service {service_id} deleted")
