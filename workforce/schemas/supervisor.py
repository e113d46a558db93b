from typing import Optional, List
from pydantic import BaseModel


class CreateSupervisor(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    department: Optional[str] = None
    site: Optional[str] = None
    reports_to: Optional[str] = None


class EditSupervisor(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    site: Optional[str] = None
    reports_to: Optional[str] = None
    employees: Optional[int] = None
    tasks: Optional[int] = None
    assigned_projects: Optional[List[str]] = None
    is_active: Optional[bool] = None
