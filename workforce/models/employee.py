from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, Literal

UTC = timezone.utc


class Employee(BaseModel):
    employee_id: str
    name: str
    email: str
    phone: str
    aadhar_number: str
    pan_number: Optional[str] = None
    esic_number: Optional[str] = None
    uan_number: Optional[str] = None

    date_of_birth: Optional[datetime] = None
    date_of_joining: datetime = Field(default_factory=lambda: datetime.now(UTC))
    date_of_exit: Optional[datetime] = None
    blood_group: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None

    permanent_address: Optional[str] = None
    permanent_pincode: Optional[str] = None
    local_address: Optional[str] = None
    local_pincode: Optional[str] = None

    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    branch_name: Optional[str] = None

    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    spouse_name: Optional[str] = None
    number_of_children: int = 0

    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relation: Optional[str] = None
    nominee_name: Optional[str] = None
    nominee_relation: Optional[str] = None

    department: str
    position: str
    site_name: Optional[str] = None
    salary: float = 0
    status: Literal["active", "inactive", "left"] = "active"
    role: str = "employee"

    pant_size: Optional[str] = None
    shirt_size: Optional[str] = None
    cap_size: Optional[str] = None
    id_card_issued: bool = False
    westcoat_issued: bool = False
    apron_issued: bool = False

    # cloudinary assets
    photo: Optional[str] = None
    photo_public_id: Optional[str] = None
    employee_signature: Optional[str] = None
    employee_signature_public_id: Optional[str] = None
    authorized_signature: Optional[str] = None
    authorized_signature_public_id: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
