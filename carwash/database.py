# carwash/database.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    kwargs: dict = {"echo": False, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # bellek içi sqlite: tüm bağlantılar aynı veritabanını görsün
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)


if DATABASE_URL.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def _sqlite_fk_on(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


class Base(DeclarativeBase):
    pass


def create_db():
    from . import models  # noqa: F401  (tabloları metadata'ya kaydet)
    Base.metadata.create_all(engine)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or nothing.

    Used for the workflows that touch more than one row (usage record +
    quantity decrement, order part + total cost, completion + rating link).
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
