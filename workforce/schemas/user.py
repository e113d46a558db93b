from datetime import date
from typing import Optional
from pydantic import BaseModel, EmailStr


class CreateUser(BaseModel):
    username: Optional[str] = None
    email: EmailStr
    password: str
    role: str = "employee"
    first_name: str
    last_name: Optional[str] = ""
    department: Optional[str] = None
    site: Optional[str] = None
    phone: Optional[str] = None
    join_date: Optional[date] = None


class EditUser(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    department: Optional[str] = None
    site: Optional[str] = None
    phone: Optional[str] = None
    join_date: Optional[date] = None


class RoleUpdate(BaseModel):
    role: str
