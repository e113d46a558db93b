from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List, Literal

UTC = timezone.utc


class InvoiceItem(BaseModel):
    description: str
    quantity: Optional[float] = None
    rate: Optional[float] = None
    amount: Optional[float] = None


class Invoice(BaseModel):
    id: str
    invoice_number: Optional[str] = None
    voucher_no: Optional[str] = None
    client: str
    client_email: Optional[str] = None
    date: datetime
    due_date: Optional[datetime] = None
    invoice_type: Literal["perform", "tax"]
    items: List[InvoiceItem]
    subtotal: float = 0
    tax: float = 0
    amount: float
    status: Literal["pending", "paid", "overdue"] = "pending"
    site: Optional[str] = None
    service_type: Optional[str] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    management_fees_percent: Optional[float] = None
    management_fees_amount: Optional[float] = None
    sac_code: Optional[str] = None
    service_location: Optional[str] = None
    service_period_from: Optional[datetime] = None
    service_period_to: Optional[datetime] = None
    round_up: Optional[float] = None
    base_amount: Optional[float] = None
    payment_method: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
