from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List, Literal

UTC = timezone.utc

MachineStatus = Literal["operational", "maintenance", "out-of-service"]


class MaintenanceRecord(BaseModel):
    type: str
    description: str
    cost: float
    performed_by: str
    date: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Machine(BaseModel):
    name: str
    cost: float
    purchase_date: datetime
    quantity: int
    description: Optional[str] = None
    status: MachineStatus = "operational"
    last_maintenance_date: Optional[datetime] = None
    next_maintenance_date: Optional[datetime] = None
    location: Optional[str] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None
    serial_number: Optional[str] = None
    department: Optional[str] = None
    assigned_to: Optional[str] = None
    maintenance_history: List[MaintenanceRecord] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
