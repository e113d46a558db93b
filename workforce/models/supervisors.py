from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List

UTC = timezone.utc


class Supervisor(BaseModel):
    name: str
    email: str
    phone: str
    password: str
    department: Optional[str] = None
    site: Optional[str] = None
    employees: int = 0
    tasks: int = 0
    assigned_projects: List[str] = Field(default_factory=list)
    reports_to: Optional[str] = None
    is_active: bool = True
    join_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
