from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base
from .utils import utcnow

# Visit (pending service) statuses
PENDING = "pending"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"
DELAYED = "delayed"
VISIT_STATUSES = (PENDING, IN_PROGRESS, COMPLETED, DELAYED)

# Work order statuses
WO_PENDING = "pending"
WO_IN_PROGRESS = "in_progress"
WO_COMPLETED = "completed"
WO_CANCELLED = "cancelled"
WORK_ORDER_STATUSES = (WO_PENDING, WO_IN_PROGRESS, WO_COMPLETED, WO_CANCELLED)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Customer(TimestampMixin, Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    phone: Mapped[str] = mapped_column(String(64))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    vehicles: Mapped[List[Vehicle]] = relationship(back_populates="customer")


class Vehicle(TimestampMixin, Base):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), index=True)
    make: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    license_plate: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    vin: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    last_service_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    customer: Mapped[Customer] = relationship(back_populates="vehicles")
    visits: Mapped[List[PendingService]] = relationship(back_populates="vehicle", cascade="all,delete")
    work_orders: Mapped[List[WorkOrder]] = relationship(back_populates="vehicle", cascade="all,delete")


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    position: Mapped[str] = mapped_column(String(64))
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    hire_date: Mapped[date] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), default="active")  # active | inactive


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    services: Mapped[List[Service]] = relationship(back_populates="category")


class Service(TimestampMixin, Base):
    """Catalog entry: a service the car wash offers."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    base_price: Mapped[float] = mapped_column(Float, default=0.0)
    estimated_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("service_categories.id", ondelete="SET NULL"), nullable=True
    )

    category: Mapped[Optional[ServiceCategory]] = relationship(back_populates="services")


class PendingService(TimestampMixin, Base):
    """One vehicle's visit, from check-in to completion."""

    __tablename__ = "pending_services"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id", ondelete="CASCADE"), index=True)
    service_type_id: Mapped[int] = mapped_column(ForeignKey("services.id"))
    employee_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
    entry_time: Mapped[datetime] = mapped_column(DateTime, index=True, default=utcnow)
    estimated_completion_time: Mapped[datetime] = mapped_column(DateTime)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default=PENDING, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    vehicle: Mapped[Vehicle] = relationship(back_populates="visits")
    service_type: Mapped[Service] = relationship()
    employee: Mapped[Optional[Employee]] = relationship()
    rating_links: Mapped[List[ServiceRatingLink]] = relationship(
        back_populates="service", cascade="all,delete-orphan"
    )
    rating: Mapped[Optional[ServiceRating]] = relationship(
        back_populates="service", cascade="all,delete-orphan", uselist=False
    )


class InventoryItem(TimestampMixin, Base):
    __tablename__ = "inventory"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(64), index=True)
    quantity: Mapped[float] = mapped_column(Float, default=0.0)
    unit: Mapped[str] = mapped_column(String(32), default="unit")
    cost_price: Mapped[float] = mapped_column(Float, default=0.0)
    selling_price: Mapped[float] = mapped_column(Float, default=0.0)
    reorder_level: Mapped[float] = mapped_column(Float, default=0.0)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )


class InventoryUsage(Base):
    __tablename__ = "inventory_usage"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("inventory.id", ondelete="CASCADE"), index=True)
    service_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("pending_services.id", ondelete="SET NULL"), nullable=True
    )
    employee_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
    quantity: Mapped[float] = mapped_column(Float)
    usage_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    item: Mapped[InventoryItem] = relationship()
    employee: Mapped[Optional[Employee]] = relationship()
    service: Mapped[Optional[PendingService]] = relationship()


class ServiceRatingLink(Base):
    __tablename__ = "service_rating_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    token_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    service_id: Mapped[int] = mapped_column(ForeignKey("pending_services.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    service: Mapped[PendingService] = relationship(back_populates="rating_links")


class ServiceRating(Base):
    __tablename__ = "service_ratings"

    id: Mapped[int] = mapped_column(primary_key=True)
    service_id: Mapped[int] = mapped_column(
        ForeignKey("pending_services.id", ondelete="CASCADE"), unique=True
    )
    wait_time_rating: Mapped[int] = mapped_column(Integer)
    staff_friendliness_rating: Mapped[int] = mapped_column(Integer)
    service_quality_rating: Mapped[int] = mapped_column(Integer)
    customer_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    service: Mapped[PendingService] = relationship(back_populates="rating")


class WorkOrder(TimestampMixin, Base):
    __tablename__ = "work_orders"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    vehicle_id: Mapped[int] = mapped_column(ForeignKey("vehicles.id", ondelete="CASCADE"), index=True)
    status: Mapped[str] = mapped_column(String(16), default=WO_PENDING)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completion_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    total_cost: Mapped[float] = mapped_column(Float, default=0.0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    vehicle: Mapped[Vehicle] = relationship(back_populates="work_orders")
    services: Mapped[List[OrderService]] = relationship(back_populates="order", cascade="all,delete-orphan")
    parts: Mapped[List[OrderPart]] = relationship(back_populates="order", cascade="all,delete-orphan")


class OrderService(Base):
    __tablename__ = "order_services"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("work_orders.id", ondelete="CASCADE"), index=True)
    service_id: Mapped[int] = mapped_column(ForeignKey("services.id"))
    price: Mapped[float] = mapped_column(Float, default=0.0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    order: Mapped[WorkOrder] = relationship(back_populates="services")
    service: Mapped[Service] = relationship()


class OrderPart(Base):
    __tablename__ = "order_parts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("work_orders.id", ondelete="CASCADE"), index=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("inventory.id"))
    quantity: Mapped[float] = mapped_column(Float)
    price_per_unit: Mapped[float] = mapped_column(Float, default=0.0)

    order: Mapped[WorkOrder] = relationship(back_populates="parts")
    item: Mapped[InventoryItem] = relationship()


Index("ix_pending_status_entry", PendingService.status, PendingService.entry_time)
