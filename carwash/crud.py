# carwash/crud.py
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from .database import Base
from .errors import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Plain CRUD over one mapped table.

    Resources build their joins/search filters on top of `select()`.
    """

    def __init__(self, model: Type[ModelT], label: Optional[str] = None):
        self.model = model
        self.label = label or model.__name__

    def select(self):
        return select(self.model)

    def find(self, db: Session, obj_id: int) -> Optional[ModelT]:
        return db.get(self.model, obj_id)

    def get(self, db: Session, obj_id: int) -> ModelT:
        obj = db.get(self.model, obj_id)
        if obj is None:
            raise NotFoundError(f"{self.label} {obj_id} not found")
        return obj

    def list(self, db: Session, *where, order_by=None, limit: Optional[int] = None) -> List[ModelT]:
        stmt = select(self.model)
        if where:
            stmt = stmt.where(*where)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit:
            stmt = stmt.limit(limit)
        return list(db.scalars(stmt).all())

    def create(self, db: Session, commit: bool = True, **fields: Any) -> ModelT:
        obj = self.model(**fields)
        db.add(obj)
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
        return obj

    def update(self, db: Session, obj_id: int, commit: bool = True, **fields: Any) -> ModelT:
        obj = self.get(db, obj_id)
        for key, value in fields.items():
            if key == "id":
                continue
            setattr(obj, key, value)
        if commit:
            db.commit()
            db.refresh(obj)
        return obj

    def delete(self, db: Session, obj_id: int) -> None:
        obj = self.get(db, obj_id)
        db.delete(obj)
        db.commit()
