# carwash/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import func, select

from . import models
from .config import CORS_ORIGINS, LOG_LEVEL, SEED_CATALOG
from .database import SessionLocal, create_db
from .errors import register_exception_handlers
from .routers import catalog, customers, employees, inventory, pending_services, ratings, reports, vehicles, work_orders
from .utils import utcnow

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# (kategori, ad, fiyat, tahmini saat)
BASE_CATALOG = [
    ("Lavado", "Lavado Básico", 150.0, 1.0),
    ("Lavado", "Lavado Completo", 250.0, 1.5),
    ("Lavado", "Lavado Premium", 400.0, 2.0),
    ("Motor", "Lavado de Motor", 200.0, 1.0),
]


app = FastAPI(
    title="Car Wash Service API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


def seed_catalog():
    with SessionLocal() as db:
        if db.scalar(select(func.count(models.Service.id))):
            return
        cats = {}
        for cat_name, name, price, hours in BASE_CATALOG:
            if cat_name not in cats:
                cats[cat_name] = models.ServiceCategory(name=cat_name)
                db.add(cats[cat_name])
            db.add(models.Service(name=name, base_price=price, estimated_hours=hours, category=cats[cat_name]))
        db.commit()
        logger.info("Seeded %d catalog services", len(BASE_CATALOG))


@app.on_event("startup")
def on_startup():
    create_db()
    if SEED_CATALOG:
        seed_catalog()


# ========= Health / Root =========
@app.get("/", tags=["meta"])
def root():
    return {"ok": True, "service": "Car Wash Service API", "time": utcnow().isoformat()}


@app.get("/health", tags=["meta"])
def health():
    return {"status": "healthy"}


for r in (
    customers.router,
    vehicles.router,
    employees.router,
    catalog.router,
    pending_services.router,
    inventory.router,
    ratings.links_router,
    ratings.router,
    work_orders.router,
    reports.dashboard_router,
    reports.router,
):
    app.include_router(r, prefix="/api")
