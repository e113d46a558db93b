from datetime import date as date_type
from typing import Optional, List
from pydantic import BaseModel, Field


class InvoiceItemInput(BaseModel):
    description: str
    quantity: Optional[float] = None
    rate: Optional[float] = None
    amount: Optional[float] = None


class CreateInvoice(BaseModel):
    id: Optional[str] = None
    invoice_number: Optional[str] = None
    voucher_no: Optional[str] = None
    client: Optional[str] = None
    client_email: Optional[str] = None
    date: Optional[date_type] = None
    due_date: Optional[date_type] = None
    invoice_type: Optional[str] = None
    items: List[InvoiceItemInput] = Field(default_factory=list)
    tax: Optional[float] = None
    amount: Optional[float] = None
    status: Optional[str] = "pending"
    site: Optional[str] = None
    service_type: Optional[str] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    management_fees_percent: Optional[float] = None
    management_fees_amount: Optional[float] = None
    sac_code: Optional[str] = None
    service_location: Optional[str] = None
    service_period_from: Optional[date_type] = None
    service_period_to: Optional[date_type] = None
    round_up: Optional[float] = None
    base_amount: Optional[float] = None
    payment_method: Optional[str] = None


class EditInvoice(BaseModel):
    invoice_number: Optional[str] = None
    voucher_no: Optional[str] = None
    client: Optional[str] = None
    client_email: Optional[str] = None
    date: Optional[date_type] = None
    due_date: Optional[date_type] = None
    items: Optional[List[InvoiceItemInput]] = None
    tax: Optional[float] = None
    amount: Optional[float] = None
    status: Optional[str] = None
    site: Optional[str] = None
    service_type: Optional[str] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    management_fees_percent: Optional[float] = None
    management_fees_amount: Optional[float] = None
    sac_code: Optional[str] = None
    service_location: Optional[str] = None
    round_up: Optional[float] = None
    base_amount: Optional[float] = None
    payment_method: Optional[str] = None
