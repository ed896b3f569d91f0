from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..deps import get_db
from ..services import pending

router = APIRouter(prefix="/pending-services", tags=["pending-services"])


@router.get("", response_model=List[schemas.PendingServiceRead])
def list_pending(
    status: Optional[schemas.VisitStatus] = None,
    q: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return [pending.visit_to_out(ps) for ps in pending.list_visits(db, status=status, q=q)]


@router.get("/status/{status}", response_model=List[schemas.PendingServiceRead])
def list_by_status(status: schemas.VisitStatus, db: Session = Depends(get_db)):
    return [pending.visit_to_out(ps) for ps in pending.list_visits(db, status=status)]


@router.get("/search/{term}", response_model=List[schemas.PendingServiceRead])
def search_pending(term: str, db: Session = Depends(get_db)):
    return [pending.visit_to_out(ps) for ps in pending.list_visits(db, q=term)]


@router.post("/flag-delayed", response_model=List[schemas.PendingServiceRead])
def flag_delayed(db: Session = Depends(get_db)):
    return [pending.visit_to_out(ps) for ps in pending.flag_delayed(db)]


@router.post("", response_model=schemas.PendingServiceRead, status_code=201)
def create_pending(payload: schemas.PendingServiceCreate, db: Session = Depends(get_db)):
    return pending.visit_to_out(pending.create(db, payload))


@router.get("/{service_id}", response_model=schemas.PendingServiceRead)
def get_pending(service_id: int, db: Session = Depends(get_db)):
    return pending.visit_to_out(pending.visits.get(db, service_id))


@router.put("/{service_id}", response_model=schemas.PendingServiceRead)
def update_pending(service_id: int, payload: schemas.PendingServiceUpdate, db: Session = Depends(get_db)):
    return pending.visit_to_out(pending.update(db, service_id, payload))


@router.patch("/{service_id}/assign", response_model=schemas.PendingServiceRead)
def assign(service_id: int, payload: schemas.AssignIn, db: Session = Depends(get_db)):
    return pending.visit_to_out(pending.assign(db, service_id, payload.employee_id))


@router.patch("/{service_id}/complete", response_model=schemas.CompleteServiceResponse)
def complete(service_id: int, db: Session = Depends(get_db)):
    ps, token, url = pending.mark_complete(db, service_id)
    return schemas.CompleteServiceResponse(service=pending.visit_to_out(ps), ratingLink=token, ratingUrl=url)


@router.patch("/{service_id}/status", response_model=schemas.PendingServiceRead)
def change_status(service_id: int, payload: schemas.VisitStatusIn, db: Session = Depends(get_db)):
    return pending.visit_to_out(pending.change_status(db, service_id, payload.status))


@router.delete("/{service_id}")
def delete_pending(service_id: int, db: Session = Depends(get_db)):
    pending.delete(db, service_id)
    return {"ok": True, "deleted_id": service_id}
