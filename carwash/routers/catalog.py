# Servis kataloğu: sunulan hizmetler ve kategorileri
import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import Repository
from ..deps import get_db
from ..errors import DuplicateError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["services"])
services = Repository(models.Service, "Service")
categories = Repository(models.ServiceCategory, "Service category")


def service_to_out(s: models.Service) -> schemas.ServiceRead:
    out = schemas.ServiceRead.model_validate(s)
    out.category_name = s.category.name if s.category else None
    return out


@router.get("", response_model=List[schemas.ServiceRead])
def list_services(db: Session = Depends(get_db)):
    return [service_to_out(s) for s in services.list(db, order_by=models.Service.name)]


@router.get("/categories", response_model=List[schemas.CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return categories.list(db, order_by=models.ServiceCategory.name)


@router.post("/categories", response_model=schemas.CategoryRead, status_code=201)
def create_category(payload: schemas.CategoryCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    exists = db.scalar(
        select(models.ServiceCategory).where(func.lower(models.ServiceCategory.name) == name.lower())
    )
    if exists:
        raise DuplicateError(f"Category '{name}' already exists")
    return categories.create(db, name=name, description=payload.description)


@router.get("/category/{category_id}", response_model=List[schemas.ServiceRead])
def services_by_category(category_id: int, db: Session = Depends(get_db)):
    categories.get(db, category_id)
    rows = services.list(db, models.Service.category_id == category_id, order_by=models.Service.name)
    return [service_to_out(s) for s in rows]


@router.post("", response_model=schemas.ServiceRead, status_code=201)
def create_service(payload: schemas.ServiceCreate, db: Session = Depends(get_db)):
    if payload.category_id is not None:
        categories.get(db, payload.category_id)
    s = services.create(db, **payload.model_dump())
    logger.info(f"Catalog service {s.id} '{s.name}' created")
    return service_to_out(s)


@router.get("/{service_id}", response_model=schemas.ServiceRead)
def get_service(service_id: int, db: Session = Depends(get_db)):
    return service_to_out(services.get(db, service_id))


@router.put("/{service_id}", response_model=schemas.ServiceRead)
def update_service(service_id: int, payload: schemas.ServiceUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    for key in ("name", "base_price"):
        if key in data and data[key] is None:
            data.pop(key)
    if data.get("category_id") is not None:
        categories.get(db, data["category_id"])
    return service_to_out(services.update(db, service_id, **data))


@router.delete("/{service_id}")
def delete_service(service_id: int, db: Session = Depends(get_db)):
    services.delete(db, service_id)
    return {"ok": True, "deleted_id": service_id}
