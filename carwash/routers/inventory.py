import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..deps import get_db
from ..services import inventory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=List[schemas.InventoryItemRead])
def list_items(db: Session = Depends(get_db)):
    return inventory.list_items(db)


@router.get("/low-stock", response_model=List[schemas.InventoryItemRead])
def low_stock(db: Session = Depends(get_db)):
    return inventory.low_stock(db)


@router.get("/categories", response_model=List[str])
def categories(db: Session = Depends(get_db)):
    return inventory.categories(db)


@router.get("/category/{category}", response_model=List[schemas.InventoryItemRead])
def by_category(category: str, db: Session = Depends(get_db)):
    return inventory.by_category(db, category)


@router.get("/search/{term}", response_model=List[schemas.InventoryItemRead])
def search(term: str, db: Session = Depends(get_db)):
    return inventory.search(db, term)


@router.get("/usage", response_model=List[schemas.UsageRead])
def all_usage(limit: int = Query(100, ge=1, le=1000), db: Session = Depends(get_db)):
    return [inventory.usage_to_out(u) for u in inventory.all_usage(db, limit=limit)]


@router.post("/usage", response_model=schemas.UsageRead, status_code=201)
def record_usage(payload: schemas.UsageCreate, db: Session = Depends(get_db)):
    return inventory.usage_to_out(inventory.record_usage(db, payload))


@router.post("", response_model=schemas.InventoryItemRead, status_code=201)
def create_item(payload: schemas.InventoryItemCreate, db: Session = Depends(get_db)):
    item = inventory.items.create(db, **payload.model_dump())
    logger.info(f"Inventory item {item.id} '{item.name}' created")
    return item


@router.get("/{item_id}", response_model=schemas.InventoryItemRead)
def get_item(item_id: int, db: Session = Depends(get_db)):
    return inventory.items.get(db, item_id)


@router.put("/{item_id}", response_model=schemas.InventoryItemRead)
def update_item(item_id: int, payload: schemas.InventoryItemUpdate, db: Session = Depends(get_db)):
    data = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
    return inventory.items.update(db, item_id, **data)


@router.patch("/{item_id}/quantity", response_model=schemas.InventoryItemRead)
def adjust_quantity(item_id: int, payload: schemas.QuantityAdjustIn, db: Session = Depends(get_db)):
    return inventory.adjust_quantity(db, item_id, payload.adjustment)


@router.get("/{item_id}/usage", response_model=List[schemas.UsageRead])
def usage_history(item_id: int, db: Session = Depends(get_db)):
    return [inventory.usage_to_out(u) for u in inventory.usage_history(db, item_id)]


@router.delete("/{item_id}")
def delete_item(item_id: int, db: Session = Depends(get_db)):
    inventory.items.delete(db, item_id)
    return {"ok": True, "deleted_id": item_id}
