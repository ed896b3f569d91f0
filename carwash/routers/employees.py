import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from .. import models, schemas
from ..crud import Repository
from ..deps import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])
employees = Repository(models.Employee, "Employee")


@router.get("", response_model=List[schemas.EmployeeRead])
def list_employees(db: Session = Depends(get_db)):
    return employees.list(db, order_by=models.Employee.name)


@router.get("/active", response_model=List[schemas.EmployeeRead])
def list_active(db: Session = Depends(get_db)):
    return employees.list(db, models.Employee.status == "active", order_by=models.Employee.name)


@router.get("/search", response_model=List[schemas.EmployeeRead])
def search_employees(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    like = f"%{q.strip().lower()}%"
    E = models.Employee
    return employees.list(
        db,
        or_(
            func.lower(E.name).like(like),
            func.lower(E.position).like(like),
            func.lower(E.email).like(like),
            E.phone.like(like),
        ),
        order_by=E.name,
    )


@router.post("", response_model=schemas.EmployeeRead, status_code=201)
def create_employee(payload: schemas.EmployeeCreate, db: Session = Depends(get_db)):
    e = employees.create(db, **payload.model_dump())
    logger.info(f"Employee {e.id} created ({e.position})")
    return e


@router.get("/{employee_id}", response_model=schemas.EmployeeRead)
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    return employees.get(db, employee_id)


@router.put("/{employee_id}", response_model=schemas.EmployeeRead)
def update_employee(employee_id: int, payload: schemas.EmployeeUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    # zorunlu alanlar null ile silinmesin
    for key in ("name", "position", "hire_date", "status"):
        if key in data and data[key] is None:
            data.pop(key)
    return employees.update(db, employee_id, **data)


@router.patch("/{employee_id}/status", response_model=schemas.EmployeeRead)
def change_status(employee_id: int, payload: schemas.EmployeeStatusIn, db: Session = Depends(get_db)):
    e = employees.update(db, employee_id, status=payload.status)
    logger.info(f"Employee {employee_id} is now {e.status}")
    return e


@router.delete("/{employee_id}")
def delete_employee(employee_id: int, db: Session = Depends(get_db)):
    employees.delete(db, employee_id)
    return {"ok": True, "deleted_id": employee_id}
