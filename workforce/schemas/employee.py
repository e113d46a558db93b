from pydantic import BaseModel
from typing import Optional
from datetime import date


class CreateEmployee(BaseModel):
    name: str
    email: str
    phone: str
    aadhar_number: str
    pan_number: Optional[str] = None
    esic_number: Optional[str] = None
    uan_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining: Optional[date] = None
    date_of_exit: Optional[date] = None
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
    number_of_children: Optional[int] = 0
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relation: Optional[str] = None
    nominee_name: Optional[str] = None
    nominee_relation: Optional[str] = None
    department: str
    position: str
    site_name: Optional[str] = None
    salary: Optional[float] = 0
    pant_size: Optional[str] = None
    shirt_size: Optional[str] = None
    cap_size: Optional[str] = None
    id_card_issued: Optional[bool] = False
    westcoat_issued: Optional[bool] = False
    apron_issued: Optional[bool] = False


class EditEmployee(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    aadhar_number: Optional[str] = None
    pan_number: Optional[str] = None
    esic_number: Optional[str] = None
    uan_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining: Optional[date] = None
    date_of_exit: Optional[date] = None
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
    number_of_children: Optional[int] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relation: Optional[str] = None
    nominee_name: Optional[str] = None
    nominee_relation: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    site_name: Optional[str] = None
    salary: Optional[float] = None
    status: Optional[str] = None
    pant_size: Optional[str] = None
    shirt_size: Optional[str] = None
    cap_size: Optional[str] = None
    id_card_issued: Optional[bool] = None
    westcoat_issued: Optional[bool] = None
    apron_issued: Optional[bool] = None
