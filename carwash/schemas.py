from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

VisitStatus = Literal["pending", "in-progress", "completed", "delayed"]
WorkOrderStatus = Literal["pending", "in_progress", "completed", "cancelled"]
EmployeeStatus = Literal["active", "inactive"]


# ---- Customers
class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None

class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None

class CustomerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime


# ---- Vehicles
class VehicleCreate(BaseModel):
    customer_id: int
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    license_plate: str = Field(min_length=1)
    vin: Optional[str] = None
    color: Optional[str] = None

class VehicleUpdate(BaseModel):
    customer_id: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    license_plate: Optional[str] = Field(default=None, min_length=1)
    vin: Optional[str] = None
    color: Optional[str] = None

class VehicleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    license_plate: str
    vin: Optional[str] = None
    color: Optional[str] = None
    last_service_date: Optional[date] = None
    customer_name: Optional[str] = None


# ---- Employees
class EmployeeCreate(BaseModel):
    name: str = Field(min_length=1)
    position: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    hire_date: date
    status: EmployeeStatus = "active"

class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    hire_date: Optional[date] = None
    status: Optional[EmployeeStatus] = None

class EmployeeStatusIn(BaseModel):
    status: EmployeeStatus

class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    position: str
    email: Optional[str] = None
    phone: Optional[str] = None
    hire_date: date
    status: EmployeeStatus


# ---- Service catalog
class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None

class CategoryRead(CategoryCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int

class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    base_price: float = Field(ge=0)
    estimated_hours: Optional[float] = Field(default=None, gt=0)
    category_id: Optional[int] = None

class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    base_price: Optional[float] = Field(default=None, ge=0)
    estimated_hours: Optional[float] = Field(default=None, gt=0)
    category_id: Optional[int] = None

class ServiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    base_price: float
    estimated_hours: Optional[float] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None


# ---- Pending services (visits)
class PendingServiceCreate(BaseModel):
    vehicle_id: int
    service_type_id: int
    employee_id: Optional[int] = None
    notes: Optional[str] = None
    entry_time: Optional[datetime] = None

class PendingServiceUpdate(BaseModel):
    service_type_id: Optional[int] = None
    estimated_completion_time: Optional[datetime] = None
    notes: Optional[str] = None

class AssignIn(BaseModel):
    employee_id: int

class VisitStatusIn(BaseModel):
    status: VisitStatus

class PendingServiceRead(BaseModel):
    id: int
    vehicle_id: int
    service_type_id: int
    employee_id: Optional[int] = None
    entry_time: datetime
    estimated_completion_time: datetime
    completed_at: Optional[datetime] = None
    status: VisitStatus
    notes: Optional[str] = None

    # ilişkilerden gelen alanlar
    license_plate: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    service_type_name: Optional[str] = None
    service_price: Optional[float] = None
    service_hours: Optional[float] = None
    employee_name: Optional[str] = None
    employee_position: Optional[str] = None

class CompleteServiceResponse(BaseModel):
    service: PendingServiceRead
    ratingLink: Optional[str] = None
    ratingUrl: Optional[str] = None


# ---- Inventory
class InventoryItemCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    quantity: float = Field(default=0, ge=0)
    unit: str = "unit"
    cost_price: float = Field(default=0, ge=0)
    selling_price: float = Field(default=0, ge=0)
    reorder_level: float = Field(default=0, ge=0)

class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = None
    cost_price: Optional[float] = Field(default=None, ge=0)
    selling_price: Optional[float] = Field(default=None, ge=0)
    reorder_level: Optional[float] = Field(default=None, ge=0)

class InventoryItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    category: str
    quantity: float
    unit: str
    cost_price: float
    selling_price: float
    reorder_level: float
    created_at: datetime
    updated_at: datetime

class QuantityAdjustIn(BaseModel):
    adjustment: float

class UsageCreate(BaseModel):
    item_id: int
    quantity: float = Field(gt=0)
    service_id: Optional[int] = None
    employee_id: Optional[int] = None
    usage_date: Optional[datetime] = None
    notes: Optional[str] = None

class UsageRead(BaseModel):
    id: int
    item_id: int
    service_id: Optional[int] = None
    employee_id: Optional[int] = None
    quantity: float
    usage_date: datetime
    notes: Optional[str] = None
    created_at: datetime
    item_name: Optional[str] = None
    employee_name: Optional[str] = None
    service_name: Optional[str] = None


# ---- Ratings
class RatingLinkOut(BaseModel):
    token: str
    ratingUrl: str

class RatingLinkValidation(BaseModel):
    serviceId: int
    vehicleMake: Optional[str] = None
    vehicleModel: Optional[str] = None
    licensePlate: str

class RatingIn(BaseModel):
    wait_time_rating: int = Field(ge=1, le=5)
    staff_friendliness_rating: int = Field(ge=1, le=5)
    service_quality_rating: int = Field(ge=1, le=5)
    customer_comment: Optional[str] = None
    token: Optional[str] = None

class RatingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_id: int
    wait_time_rating: int
    staff_friendliness_rating: int
    service_quality_rating: int
    customer_comment: Optional[str] = None
    created_at: datetime

class RatingReport(BaseModel):
    avg_wait_time: float
    avg_staff_friendliness: float
    avg_service_quality: float
    total_ratings: int


# ---- Work orders
class WorkOrderCreate(BaseModel):
    vehicle_id: int
    status: WorkOrderStatus = "pending"
    start_date: Optional[datetime] = None
    notes: Optional[str] = None

class WorkOrderUpdate(BaseModel):
    start_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    notes: Optional[str] = None

class WorkOrderStatusIn(BaseModel):
    status: WorkOrderStatus

class OrderServiceIn(BaseModel):
    service_id: int
    price: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

class OrderPartIn(BaseModel):
    item_id: int
    quantity: float = Field(gt=0)
    price_per_unit: Optional[float] = Field(default=None, ge=0)

class OrderServiceRead(BaseModel):
    id: int
    order_id: int
    service_id: int
    service_name: Optional[str] = None
    price: float
    notes: Optional[str] = None

class OrderPartRead(BaseModel):
    id: int
    order_id: int
    item_id: int
    item_name: Optional[str] = None
    quantity: float
    price_per_unit: float

class WorkOrderRead(BaseModel):
    id: int
    vehicle_id: int
    status: WorkOrderStatus
    start_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    total_cost: float
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    license_plate: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    customer_name: Optional[str] = None
    services: List[OrderServiceRead] = []
    parts: List[OrderPartRead] = []


class VehicleHistory(VehicleRead):
    visits: List[PendingServiceRead] = []
    work_orders: List[WorkOrderRead] = []


# ---- Dashboard / reports
class DashboardStats(BaseModel):
    pendingVehicles: int
    activeEmployees: int
    avgServiceTime: float
    dailyIncome: float
    pendingServices: List[PendingServiceRead]
    lowStockItems: List[InventoryItemRead]

class DailyIncome(BaseModel):
    day: date
    income: float
    services: int

class ServiceTypeCount(BaseModel):
    service_type_id: int
    name: str
    count: int

class ServiceTime(BaseModel):
    service_type_id: int
    name: str
    avg_minutes: float
    count: int

class VehicleHistoryPoint(BaseModel):
    day: date
    services: int
