from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, Literal

UTC = timezone.utc

AttendanceStatus = Literal["present", "absent", "half-day", "leave", "late"]


class Attendance(BaseModel):
    employee_id: str
    employee_name: str
    department: Optional[str] = None
    supervisor_id: Optional[str] = None
    date: str  # YYYY-MM-DD, one record per employee per day
    check_in_time: Optional[str] = None  # HH:MM
    check_out_time: Optional[str] = None
    break_start_time: Optional[str] = None
    break_end_time: Optional[str] = None
    break_time: float = 0  # minutes
    total_hours: float = 0
    status: AttendanceStatus = "present"
    is_checked_in: bool = False
    is_on_break: bool = False
    remarks: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
