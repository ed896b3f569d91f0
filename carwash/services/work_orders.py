# carwash/services/work_orders.py
"""
Work orders group catalog services and inventory parts for one vehicle.

Every change to the lines of an order recomputes `total_cost` in the same
transaction; parts also move stock in and out of inventory.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import Repository
from ..database import atomic
from ..utils import to_naive_utc, utcnow
from .inventory import apply_delta

logger = logging.getLogger(__name__)

orders = Repository(models.WorkOrder, "Work order")
order_services = Repository(models.OrderService, "Order service")
order_parts = Repository(models.OrderPart, "Order part")
vehicles = Repository(models.Vehicle, "Vehicle")
catalog = Repository(models.Service, "Service")
items = Repository(models.InventoryItem, "Inventory item")


def compute_total(order: models.WorkOrder) -> float:
    services_total = sum(s.price or 0 for s in order.services)
    parts_total = sum((p.quantity or 0) * (p.price_per_unit or 0) for p in order.parts)
    return round(services_total + parts_total, 2)


def order_to_out(o: models.WorkOrder) -> schemas.WorkOrderRead:
    vehicle = o.vehicle
    return schemas.WorkOrderRead(
        id=o.id,
        vehicle_id=o.vehicle_id,
        status=o.status,
        start_date=o.start_date,
        completion_date=o.completion_date,
        total_cost=o.total_cost or 0.0,
        notes=o.notes,
        created_at=o.created_at,
        updated_at=o.updated_at,
        license_plate=vehicle.license_plate if vehicle else None,
        make=vehicle.make if vehicle else None,
        model=vehicle.model if vehicle else None,
        customer_name=vehicle.customer.name if vehicle and vehicle.customer else None,
        services=[
            schemas.OrderServiceRead(
                id=s.id, order_id=s.order_id, service_id=s.service_id,
                service_name=s.service.name if s.service else None,
                price=s.price, notes=s.notes,
            )
            for s in o.services
        ],
        parts=[
            schemas.OrderPartRead(
                id=p.id, order_id=p.order_id, item_id=p.item_id,
                item_name=p.item.name if p.item else None,
                quantity=p.quantity, price_per_unit=p.price_per_unit,
            )
            for p in o.parts
        ],
    )


def list_orders(db: Session, status: Optional[str] = None, vehicle_id: Optional[int] = None) -> List[models.WorkOrder]:
    stmt = select(models.WorkOrder).order_by(models.WorkOrder.created_at.desc(), models.WorkOrder.id.desc())
    if status:
        stmt = stmt.where(models.WorkOrder.status == status)
    if vehicle_id is not None:
        stmt = stmt.where(models.WorkOrder.vehicle_id == vehicle_id)
    return list(db.scalars(stmt).all())


def create(db: Session, payload: schemas.WorkOrderCreate) -> models.WorkOrder:
    vehicles.get(db, payload.vehicle_id)
    o = orders.create(
        db,
        vehicle_id=payload.vehicle_id,
        status=payload.status,
        start_date=to_naive_utc(payload.start_date) or utcnow(),
        notes=payload.notes,
        total_cost=0.0,
    )
    logger.info(f"Work order {o.id} opened for vehicle {o.vehicle_id}")
    return o


def update(db: Session, order_id: int, payload: schemas.WorkOrderUpdate) -> models.WorkOrder:
    data = payload.model_dump(exclude_unset=True)
    for key in ("start_date", "completion_date"):
        if key in data:
            data[key] = to_naive_utc(data[key])
    return orders.update(db, order_id, **data)


def change_status(db: Session, order_id: int, status: str) -> models.WorkOrder:
    o = orders.get(db, order_id)
    o.status = status
    if status == models.WO_COMPLETED and o.completion_date is None:
        o.completion_date = utcnow()
    db.commit()
    db.refresh(o)
    return o


def add_service(db: Session, order_id: int, payload: schemas.OrderServiceIn) -> models.WorkOrder:
    o = orders.get(db, order_id)
    service = catalog.get(db, payload.service_id)
    with atomic(db):
        o.services.append(models.OrderService(
            service_id=service.id,
            price=payload.price if payload.price is not None else service.base_price,
            notes=payload.notes,
        ))
        db.flush()
        o.total_cost = compute_total(o)
    db.refresh(o)
    return o


def remove_service(db: Session, order_service_id: int) -> models.WorkOrder:
    line = order_services.get(db, order_service_id)
    o = line.order
    with atomic(db):
        o.services.remove(line)
        db.flush()
        o.total_cost = compute_total(o)
    db.refresh(o)
    return o


def add_part(db: Session, order_id: int, payload: schemas.OrderPartIn) -> models.WorkOrder:
    o = orders.get(db, order_id)
    item = items.get(db, payload.item_id)
    price = payload.price_per_unit if payload.price_per_unit is not None else item.selling_price
    with atomic(db):
        apply_delta(db, item.id, -payload.quantity)
        o.parts.append(models.OrderPart(item_id=item.id, quantity=payload.quantity, price_per_unit=price))
        db.flush()
        o.total_cost = compute_total(o)
    db.refresh(o)
    logger.info(f"Added {payload.quantity:g} x item {item.id} to work order {order_id}")
    return o


def remove_part(db: Session, order_part_id: int) -> models.WorkOrder:
    line = order_parts.get(db, order_part_id)
    o = line.order
    with atomic(db):
        # parçalar stoğa geri döner
        apply_delta(db, line.item_id, line.quantity)
        o.parts.remove(line)
        db.flush()
        o.total_cost = compute_total(o)
    db.refresh(o)
    return o


def delete(db: Session, order_id: int) -> None:
    orders.delete(db, order_id)
