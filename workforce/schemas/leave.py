from datetime import date
from pydantic import BaseModel
from typing import Optional


class CreateLeave(BaseModel):
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    department: Optional[str] = None
    contact_number: Optional[str] = None
    leave_type: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    reason: Optional[str] = None
    applied_by: Optional[str] = None
    applied_for: Optional[str] = None
    attachment_url: Optional[str] = None
    emergency_contact: Optional[str] = None
    handover_to: Optional[str] = None
    handover_remarks: Optional[str] = None


class LeaveStatusUpdate(BaseModel):
    status: str
    approved_by: Optional[str] = None
    rejected_by: Optional[str] = None
    manager_remarks: Optional[str] = None
    remarks: Optional[str] = None


class CancelLeave(BaseModel):
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None


class CreateAdminLeave(BaseModel):
    leave_type: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    reason: Optional[str] = None
    applied_by: Optional[str] = None
    employee_name: Optional[str] = None
    contact_number: Optional[str] = None
    department: Optional[str] = None


class CreateManagerLeave(BaseModel):
    manager_id: Optional[str] = None
    manager_name: Optional[str] = None
    manager_department: Optional[str] = None
    manager_position: Optional[str] = None
    manager_email: Optional[str] = None
    manager_contact: Optional[str] = None
    leave_type: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    reason: Optional[str] = None
    applied_by: Optional[str] = None


class SuperadminDecision(BaseModel):
    status: Optional[str] = None
    superadmin_remarks: Optional[str] = None
    approved_by: Optional[str] = None
    rejected_by: Optional[str] = None
