from typing import Optional, List
from pydantic import BaseModel, Field


class WorkQueryStatusUpdate(BaseModel):
    status: str
    superadmin_response: Optional[str] = None


class CreateComment(BaseModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    comment: Optional[str] = None


class AssignWorkQuery(BaseModel):
    user_id: str
    name: str
    role: str


class RemoveFiles(BaseModel):
    public_ids: List[str] = Field(default_factory=list)
