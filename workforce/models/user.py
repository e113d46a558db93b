from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, Literal

UTC = timezone.utc

Role = Literal["superadmin", "admin", "manager", "supervisor", "employee"]


class User(BaseModel):
    username: str
    email: str
    password: str
    role: Role = "employee"
    first_name: str
    last_name: Optional[str] = ""
    name: str
    department: Optional[str] = None
    site: str = "Mumbai Office"
    phone: Optional[str] = None
    join_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
