from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import Optional, Literal

UTC = timezone.utc

LeaveStatus = Literal["pending", "approved", "rejected", "cancelled"]


class Leave(BaseModel):
    employee_id: str
    employee_name: str
    department: str
    contact_number: str
    leave_type: Literal["annual", "sick", "casual", "other"] = "casual"
    from_date: datetime
    to_date: datetime
    total_days: float = Field(..., ge=0.5, le=90)
    reason: str
    status: LeaveStatus = "pending"
    applied_by: str
    applied_for: str
    remarks: Optional[str] = None
    approved_by: Optional[str] = None
    rejected_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    manager_remarks: Optional[str] = None
    attachment_url: Optional[str] = None
    emergency_contact: Optional[str] = None
    handover_to: Optional[str] = None
    handover_completed: bool = False
    handover_remarks: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AdminLeave(BaseModel):
    employee_id: str
    employee_name: str
    leave_type: Literal["annual", "sick", "personal", "maternity", "paternity", "unpaid"]
    from_date: datetime
    to_date: datetime
    total_days: int = Field(..., ge=1)
    reason: str
    applied_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    applied_by: str
    department: str = "Administration"
    contact_number: Optional[str] = None
    status: LeaveStatus = "pending"
    remarks: Optional[str] = None
    cancellation_reason: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    superadmin_remarks: Optional[str] = None
    request_type: Literal["admin-leave"] = "admin-leave"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ManagerLeave(BaseModel):
    manager_id: str
    manager_name: str
    manager_department: str
    manager_position: str = "Manager"
    manager_email: Optional[str] = ""
    manager_contact: str
    leave_type: Literal["annual", "sick", "personal", "maternity", "paternity", "unpaid", "casual"]
    from_date: datetime
    to_date: datetime
    total_days: int = Field(..., ge=1)
    reason: str
    applied_by: str
    applied_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    status: LeaveStatus = "pending"
    remarks: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    superadmin_remarks: Optional[str] = None
    cancellation_reason: Optional[str] = None
    request_type: Literal["manager-leave"] = "manager-leave"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
