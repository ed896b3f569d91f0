from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..deps import get_db
from ..services import work_orders

router = APIRouter(prefix="/work-orders", tags=["work-orders"])


@router.get("", response_model=List[schemas.WorkOrderRead])
def list_orders(db: Session = Depends(get_db)):
    return [work_orders.order_to_out(o) for o in work_orders.list_orders(db)]


@router.get("/status/{status}", response_model=List[schemas.WorkOrderRead])
def orders_by_status(status: schemas.WorkOrderStatus, db: Session = Depends(get_db)):
    return [work_orders.order_to_out(o) for o in work_orders.list_orders(db, status=status)]


@router.get("/vehicle/{vehicle_id}", response_model=List[schemas.WorkOrderRead])
def orders_by_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    work_orders.vehicles.get(db, vehicle_id)
    return [work_orders.order_to_out(o) for o in work_orders.list_orders(db, vehicle_id=vehicle_id)]


@router.post("", response_model=schemas.WorkOrderRead, status_code=201)
def create_order(payload: schemas.WorkOrderCreate, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.create(db, payload))


@router.delete("/services/{order_service_id}", response_model=schemas.WorkOrderRead)
def remove_service(order_service_id: int, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.remove_service(db, order_service_id))


@router.delete("/parts/{order_part_id}", response_model=schemas.WorkOrderRead)
def remove_part(order_part_id: int, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.remove_part(db, order_part_id))


@router.get("/{order_id}", response_model=schemas.WorkOrderRead)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.orders.get(db, order_id))


@router.put("/{order_id}", response_model=schemas.WorkOrderRead)
def update_order(order_id: int, payload: schemas.WorkOrderUpdate, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.update(db, order_id, payload))


@router.patch("/{order_id}/status", response_model=schemas.WorkOrderRead)
def change_status(order_id: int, payload: schemas.WorkOrderStatusIn, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.change_status(db, order_id, payload.status))


@router.post("/{order_id}/services", response_model=schemas.WorkOrderRead, status_code=201)
def add_service(order_id: int, payload: schemas.OrderServiceIn, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.add_service(db, order_id, payload))


@router.post("/{order_id}/parts", response_model=schemas.WorkOrderRead, status_code=201)
def add_part(order_id: int, payload: schemas.OrderPartIn, db: Session = Depends(get_db)):
    return work_orders.order_to_out(work_orders.add_part(db, order_id, payload))


@router.delete("/{order_id}")
def delete_order(order_id: int, db: Session = Depends(get_db)):
    work_orders.delete(db, order_id)
    return {"ok": True, "deleted_id": order_id}
