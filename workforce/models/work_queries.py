from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List, Literal

UTC = timezone.utc

QueryPriority = Literal["low", "medium", "high", "critical"]
QueryStatus = Literal["pending", "in-progress", "resolved", "rejected"]


class ProofFile(BaseModel):
    name: str
    type: Literal["image", "video", "document", "other"]
    url: str
    public_id: str
    size: str
    format: Optional[str] = None
    bytes: Optional[int] = None
    upload_date: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Participant(BaseModel):
    user_id: str
    name: str
    role: str = "supervisor"


class Comment(BaseModel):
    user_id: str
    name: str
    comment: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class WorkQuery(BaseModel):
    query_id: str
    title: str
    description: str
    type: Literal["service", "task"] = "service"
    service_id: Optional[str] = None
    service_title: Optional[str] = None
    service_type: Optional[str] = None
    service_staff_id: Optional[str] = None
    service_staff_name: Optional[str] = None
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    priority: QueryPriority = "medium"
    status: QueryStatus = "pending"
    category: str
    proof_files: List[ProofFile] = Field(default_factory=list)
    reported_by: Participant
    assigned_to: Optional[Participant] = None
    supervisor_id: str
    supervisor_name: str
    superadmin_response: Optional[str] = None
    response_date: Optional[datetime] = None
    comments: List[Comment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
