from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone
from typing import Optional, Literal

UTC = timezone.utc

EPFStatus = Literal["draft", "submitted", "approved", "rejected"]


class EPFForm(BaseModel):
    # the form carries many optional declaration fields; they are stored as sent
    model_config = ConfigDict(extra="allow")

    employee: str  # employees collection _id
    employee_id: str
    member_name: str
    aadhar_number: str
    status: EPFStatus = "draft"
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
