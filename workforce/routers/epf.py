import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, HTTPException, status, Query
from pymongo import ReturnDocument

from workforce.db import epf_forms_collection, employees_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.epf_forms import EPFForm
from workforce.schemas.epf import CreateEPFForm, EPFStatusUpdate
from workforce.utils.query_utils import to_object_id, serialize_document, serialize_documents, is_filter_value

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

EPF_STATUSES = ("draft", "submitted", "approved", "rejected")
EMPLOYEE_SUMMARY_FIELDS = {"name": 1, "employee_id": 1, "email": 1, "phone": 1}
EMPLOYEE_DETAIL_FIELDS = {**EMPLOYEE_SUMMARY_FIELDS, "department": 1, "position": 1}


async def attach_employees(forms: List[dict], projection: dict) -> List[dict]:
    """Replace each form's ``employee`` reference with the employee's summary."""
    employee_ids = [ObjectId(form["employee"]) for form in forms if ObjectId.is_valid(form.get("employee", ""))]
    employees = await employees_collection.find({"_id": {"$in": employee_ids}}, projection).to_list(length=None)
    by_id = {str(employee["_id"]): serialize_document(employee) for employee in employees}

    for form in forms:
        form["employee"] = by_id.get(form.get("employee"), form.get("employee"))
    return forms


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_epf_form(form_request: CreateEPFForm):
    if not (form_request.employee_id and form_request.member_name and form_request.aadhar_number):
        raise HTTPException(status_code=400, detail="Employee ID, Member Name, and Aadhar Number are required")

    employee = await employees_collection.find_one({"employee_id": form_request.employee_id})
    if not employee:
        raise get_unknown_entity_exception("Employee")

    if await epf_forms_collection.find_one({"employee_id": employee["employee_id"]}):
        raise HTTPException(status_code=400, detail="EPF Form already exists for this employee")

    form_data = form_request.model_dump()
    # status changes go through the status endpoint
    for reserved in ("status", "employee", "submitted_at", "approved_at"):
        form_data.pop(reserved, None)
    form = EPFForm(**form_data, employee=str(employee["_id"]))
    form_data = form.model_dump()
    result = await epf_forms_collection.insert_one(form_data)
    form_data["_id"] = result.inserted_id

    logger.info("EPF form created for employee %s", employee["employee_id"])

    return {"success": True, "message": "EPF Form created successfully", "data": serialize_document(form_data)}


@router.get("/")
async def get_epf_forms(
    employee_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
):
    query = {}
    if employee_id:
        query["employee_id"] = employee_id
    if is_filter_value(status):
        query["status"] = status

    forms = await epf_forms_collection.find(query).sort("created_at", -1).to_list(length=None)
    forms = await attach_employees(serialize_documents(forms), EMPLOYEE_SUMMARY_FIELDS)
    return {"success": True, "data": forms}


@router.get("/{form_id}")
async def get_epf_form(form_id: str):
    form = await epf_forms_collection.find_one({"_id": to_object_id(form_id, "EPF form")})
    if not form:
        raise get_unknown_entity_exception("EPF Form")

    forms = await attach_employees([serialize_document(form)], EMPLOYEE_DETAIL_FIELDS)
    return {"success": True, "data": forms[0]}


@router.put("/{form_id}/status")
async def update_epf_form_status(form_id: str, status_update: EPFStatusUpdate):
    if status_update.status not in EPF_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    now = datetime.now(UTC)
    update = {"status": status_update.status, "updated_at": now}
    if status_update.status == "submitted":
        update["submitted_at"] = now
    elif status_update.status == "approved":
        update["approved_at"] = now

    form = await epf_forms_collection.find_one_and_update(
        {"_id": to_object_id(form_id, "EPF form")},
        {"$set": update},
        return_document=ReturnDocument.AFTER
    )
    if not form:
        raise get_unknown_entity_exception("EPF Form")

    return {"success": True, "message": "EPF Form status updated successfully", "data": serialize_document(form)}
