# carwash/services/inventory.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import distinct, func, or_, select, update
from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import Repository
from ..database import atomic
from ..errors import InsufficientStockError
from ..utils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

items = Repository(models.InventoryItem, "Inventory item")
usages = Repository(models.InventoryUsage, "Usage record")
visits = Repository(models.PendingService, "Pending service")
employees = Repository(models.Employee, "Employee")


def list_items(db: Session) -> List[models.InventoryItem]:
    return items.list(db, order_by=models.InventoryItem.name)


def by_category(db: Session, category: str) -> List[models.InventoryItem]:
    return items.list(
        db,
        func.lower(models.InventoryItem.category) == category.strip().lower(),
        order_by=models.InventoryItem.name,
    )


def search(db: Session, term: str) -> List[models.InventoryItem]:
    like = f"%{term.strip().lower()}%"
    return items.list(
        db,
        or_(
            func.lower(models.InventoryItem.name).like(like),
            func.lower(models.InventoryItem.description).like(like),
        ),
        order_by=models.InventoryItem.name,
    )


def categories(db: Session) -> List[str]:
    # ayrı bir kategori tablosu yok; kalemlerden türetiliyor
    return list(db.scalars(
        select(distinct(models.InventoryItem.category)).order_by(models.InventoryItem.category)
    ).all())


def low_stock(db: Session) -> List[models.InventoryItem]:
    return items.list(
        db,
        models.InventoryItem.quantity <= models.InventoryItem.reorder_level,
        order_by=models.InventoryItem.quantity.asc(),
    )


def apply_delta(db: Session, item_id: int, delta: float) -> None:
    """quantity += delta as one conditional UPDATE; never lets stock go below zero.

    Does not commit.
    """
    item = models.InventoryItem
    result = db.execute(
        update(item)
        .where(item.id == item_id, item.quantity + delta >= 0)
        .values(quantity=item.quantity + delta, updated_at=utcnow())
    )
    if result.rowcount == 0:
        current = items.get(db, item_id)
        raise InsufficientStockError(
            f"Not enough '{current.name}' in stock ({current.quantity:g} {current.unit} available)"
        )


def adjust_quantity(db: Session, item_id: int, adjustment: float) -> models.InventoryItem:
    items.get(db, item_id)
    if adjustment:
        with atomic(db):
            apply_delta(db, item_id, adjustment)
        logger.info(f"Inventory item {item_id} adjusted by {adjustment:+g}")
    item = items.get(db, item_id)
    db.refresh(item)
    return item


def record_usage(db: Session, payload: schemas.UsageCreate) -> models.InventoryUsage:
    """Append a usage row and take the same quantity off the item, atomically."""
    items.get(db, payload.item_id)
    if payload.service_id is not None:
        visits.get(db, payload.service_id)
    if payload.employee_id is not None:
        employees.get(db, payload.employee_id)

    with atomic(db):
        apply_delta(db, payload.item_id, -payload.quantity)
        usage = models.InventoryUsage(
            item_id=payload.item_id,
            service_id=payload.service_id,
            employee_id=payload.employee_id,
            quantity=payload.quantity,
            usage_date=to_naive_utc(payload.usage_date) or utcnow(),
            notes=payload.notes,
        )
        db.add(usage)
    db.refresh(usage)
    logger.info(f"Recorded usage of {payload.quantity:g} x item {payload.item_id}")
    return usage


def usage_to_out(u: models.InventoryUsage) -> schemas.UsageRead:
    service_name = None
    if u.service is not None and u.service.service_type is not None:
        service_name = u.service.service_type.name
    return schemas.UsageRead(
        id=u.id,
        item_id=u.item_id,
        service_id=u.service_id,
        employee_id=u.employee_id,
        quantity=u.quantity,
        usage_date=u.usage_date,
        notes=u.notes,
        created_at=u.created_at,
        item_name=u.item.name if u.item else None,
        employee_name=u.employee.name if u.employee else None,
        service_name=service_name,
    )


def usage_history(db: Session, item_id: int) -> List[models.InventoryUsage]:
    items.get(db, item_id)
    return list(db.scalars(
        select(models.InventoryUsage)
        .where(models.InventoryUsage.item_id == item_id)
        .order_by(models.InventoryUsage.usage_date.desc(), models.InventoryUsage.id.desc())
    ).all())


def all_usage(db: Session, limit: int = 100, since: Optional[datetime] = None) -> List[models.InventoryUsage]:
    stmt = select(models.InventoryUsage).order_by(
        models.InventoryUsage.usage_date.desc(), models.InventoryUsage.id.desc()
    )
    if since is not None:
        stmt = stmt.where(models.InventoryUsage.usage_date >= since)
    return list(db.scalars(stmt.limit(limit)).all())
