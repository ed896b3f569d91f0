# carwash/routers/vehicles.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import Repository
from ..deps import get_db
from ..errors import CarWashError, DuplicateError, NotFoundError
from ..services.pending import visit_to_out
from ..services.work_orders import order_to_out
from ..utils import norm_plate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])
vehicles = Repository(models.Vehicle, "Vehicle")
customers = Repository(models.Customer, "Customer")


def vehicle_to_out(v: models.Vehicle) -> schemas.VehicleRead:
    out = schemas.VehicleRead.model_validate(v)
    out.customer_name = v.customer.name if v.customer else None
    return out


def _check_unique(db: Session, plate: str = None, vin: str = None, exclude_id: int = None):
    if plate:
        stmt = select(models.Vehicle.id).where(models.Vehicle.license_plate == plate)
        if exclude_id is not None:
            stmt = stmt.where(models.Vehicle.id != exclude_id)
        if db.scalar(stmt) is not None:
            raise DuplicateError(f"A vehicle with plate {plate} is already registered")
    if vin:
        stmt = select(models.Vehicle.id).where(models.Vehicle.vin == vin)
        if exclude_id is not None:
            stmt = stmt.where(models.Vehicle.id != exclude_id)
        if db.scalar(stmt) is not None:
            raise DuplicateError(f"A vehicle with VIN {vin} is already registered")


@router.get("", response_model=List[schemas.VehicleRead])
def list_vehicles(db: Session = Depends(get_db)):
    rows = vehicles.list(db, order_by=models.Vehicle.make)
    return [vehicle_to_out(v) for v in rows]


@router.get("/search", response_model=List[schemas.VehicleRead])
def search_vehicles(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    like = f"%{q.strip().lower()}%"
    conds = [
        func.lower(models.Vehicle.make).like(like),
        func.lower(models.Vehicle.model).like(like),
        func.lower(models.Vehicle.vin).like(like),
        func.lower(models.Customer.name).like(like),
    ]
    plate = norm_plate(q)
    if plate:
        conds.append(models.Vehicle.license_plate.like(f"%{plate}%"))
    rows = db.scalars(
        select(models.Vehicle).join(models.Vehicle.customer).where(or_(*conds)).order_by(models.Vehicle.license_plate)
    ).all()
    return [vehicle_to_out(v) for v in rows]


@router.get("/by-plate/{plate}", response_model=schemas.VehicleRead)
def get_by_plate(plate: str, db: Session = Depends(get_db)):
    v = db.scalar(select(models.Vehicle).where(models.Vehicle.license_plate == norm_plate(plate)))
    if not v:
        raise NotFoundError(f"Vehicle with plate {plate} not found")
    return vehicle_to_out(v)


@router.get("/customer/{customer_id}", response_model=List[schemas.VehicleRead])
def vehicles_by_customer(customer_id: int, db: Session = Depends(get_db)):
    customers.get(db, customer_id)
    rows = vehicles.list(db, models.Vehicle.customer_id == customer_id, order_by=models.Vehicle.license_plate)
    return [vehicle_to_out(v) for v in rows]


@router.post("", response_model=schemas.VehicleRead, status_code=201)
def create_vehicle(payload: schemas.VehicleCreate, db: Session = Depends(get_db)):
    customers.get(db, payload.customer_id)
    data = payload.model_dump()
    data["license_plate"] = norm_plate(payload.license_plate)
    if not data["license_plate"]:
        raise CarWashError("License plate must contain letters or digits")
    _check_unique(db, data["license_plate"], data.get("vin"))
    v = vehicles.create(db, **data)
    logger.info(f"Vehicle {v.id} ({v.license_plate}) registered for customer {v.customer_id}")
    return vehicle_to_out(v)


@router.get("/{vehicle_id}", response_model=schemas.VehicleRead)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    return vehicle_to_out(vehicles.get(db, vehicle_id))


@router.get("/{vehicle_id}/history", response_model=schemas.VehicleHistory)
def vehicle_history(vehicle_id: int, db: Session = Depends(get_db)):
    v = vehicles.get(db, vehicle_id)
    out = schemas.VehicleHistory(**vehicle_to_out(v).model_dump())
    out.visits = [visit_to_out(ps) for ps in sorted(v.visits, key=lambda p: p.entry_time, reverse=True)]
    out.work_orders = [order_to_out(o) for o in sorted(v.work_orders, key=lambda o: o.created_at, reverse=True)]
    return out


@router.put("/{vehicle_id}", response_model=schemas.VehicleRead)
def update_vehicle(vehicle_id: int, payload: schemas.VehicleUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    for key in ("customer_id", "license_plate"):
        if key in data and data[key] is None:
            data.pop(key)
    if "customer_id" in data:
        customers.get(db, data["customer_id"])
    if "license_plate" in data:
        data["license_plate"] = norm_plate(data["license_plate"])
        if not data["license_plate"]:
            raise CarWashError("License plate must contain letters or digits")
    _check_unique(db, data.get("license_plate"), data.get("vin"), exclude_id=vehicle_id)
    return vehicle_to_out(vehicles.update(db, vehicle_id, **data))


@router.delete("/{vehicle_id}")
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    vehicles.delete(db, vehicle_id)
    logger.info(f"Vehicle {vehicle_id} deleted")
    return {"ok": True, "deleted_id": vehicle_id}
