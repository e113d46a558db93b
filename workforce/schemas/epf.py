from typing import Optional
from pydantic import BaseModel, ConfigDict


class CreateEPFForm(BaseModel):
    model_config = ConfigDict(extra="allow")

    employee_id: Optional[str] = None
    member_name: Optional[str] = None
    aadhar_number: Optional[str] = None


class EPFStatusUpdate(BaseModel):
    status: Optional[str] = None
