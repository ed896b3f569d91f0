import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import Repository
from ..deps import get_db
from ..errors import ConflictError
from .vehicles import vehicle_to_out

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])
customers = Repository(models.Customer, "Customer")


@router.get("", response_model=List[schemas.CustomerRead])
def list_customers(db: Session = Depends(get_db)):
    return customers.list(db, order_by=models.Customer.name)


@router.get("/search", response_model=List[schemas.CustomerRead])
def search_customers(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    like = f"%{q.strip().lower()}%"
    return customers.list(
        db,
        or_(
            func.lower(models.Customer.name).like(like),
            models.Customer.phone.like(like),
            func.lower(models.Customer.email).like(like),
        ),
        order_by=models.Customer.name,
        limit=50,
    )


@router.post("", response_model=schemas.CustomerRead, status_code=201)
def create_customer(payload: schemas.CustomerCreate, db: Session = Depends(get_db)):
    obj = customers.create(db, **payload.model_dump())
    logger.info(f"Customer {obj.id} created")
    return obj


@router.get("/{customer_id}", response_model=schemas.CustomerRead)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return customers.get(db, customer_id)


@router.get("/{customer_id}/vehicles", response_model=List[schemas.VehicleRead])
def customer_vehicles(customer_id: int, db: Session = Depends(get_db)):
    c = customers.get(db, customer_id)
    return [vehicle_to_out(v) for v in c.vehicles]


@router.put("/{customer_id}", response_model=schemas.CustomerRead)
def update_customer(customer_id: int, payload: schemas.CustomerUpdate, db: Session = Depends(get_db)):
    return customers.update(db, customer_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    c = customers.get(db, customer_id)
    if c.vehicles:
        raise ConflictError(f"Customer {customer_id} still owns {len(c.vehicles)} vehicle(s)")
    customers.delete(db, customer_id)
    logger.info(f"Customer {customer_id} deleted")
    return {"ok": True, "deleted_id": customer_id}
