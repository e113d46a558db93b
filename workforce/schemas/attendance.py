from typing import Optional
from pydantic import BaseModel

from workforce.models.attendance import AttendanceStatus


class CheckIn(BaseModel):
    employee_id: str
    employee_name: str
    department: Optional[str] = None
    supervisor_id: Optional[str] = None


class EmployeeAction(BaseModel):
    employee_id: str


class ManualAttendance(BaseModel):
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    date: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    department: Optional[str] = None
    supervisor_id: Optional[str] = None
    status: Optional[AttendanceStatus] = "present"
    break_time: Optional[float] = 0
    total_hours: Optional[float] = None
    remarks: Optional[str] = None


class EditAttendance(BaseModel):
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    break_time: Optional[float] = None
    total_hours: Optional[float] = None
    status: Optional[AttendanceStatus] = None
    department: Optional[str] = None
    supervisor_id: Optional[str] = None
    remarks: Optional[str] = None
