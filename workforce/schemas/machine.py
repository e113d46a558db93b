from datetime import date as date_type
from typing import Optional
from pydantic import BaseModel


class CreateMachine(BaseModel):
    name: str
    cost: float
    purchase_date: date_type
    quantity: int
    description: Optional[str] = None
    status: Optional[str] = "operational"
    last_maintenance_date: Optional[date_type] = None
    next_maintenance_date: Optional[date_type] = None
    location: Optional[str] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None
    serial_number: Optional[str] = None
    department: Optional[str] = None
    assigned_to: Optional[str] = None


class EditMachine(BaseModel):
    name: Optional[str] = None
    cost: Optional[float] = None
    purchase_date: Optional[date_type] = None
    quantity: Optional[int] = None
    description: Optional[str] = None
    status: Optional[str] = None
    last_maintenance_date: Optional[date_type] = None
    next_maintenance_date: Optional[date_type] = None
    location: Optional[str] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None
    serial_number: Optional[str] = None
    department: Optional[str] = None
    assigned_to: Optional[str] = None


class CreateMaintenanceRecord(BaseModel):
    type: str
    description: str
    cost: float
    performed_by: str
    date: Optional[date_type] = None
