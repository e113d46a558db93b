import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Query, File, UploadFile
from pymongo import ReturnDocument

from workforce.db import employees_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.employee import Employee
from workforce.schemas.employee import CreateEmployee, EditEmployee
from workforce.utils.cloudinary_utils import read_employee_image, upload_employee_image, delete_asset, discard_assets
from workforce.utils.employee_utils import generate_employee_id, employee_lookup
from workforce.utils.query_utils import (
    to_datetime, serialize_document, serialize_documents, is_filter_value, regex_filter,
    sort_spec, pagination, skip_for
)

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

DATE_FIELDS = ("date_of_birth", "date_of_joining", "date_of_exit")
EMPLOYEE_STATUSES = ("active", "inactive", "left")

# form field -> cloudinary folder
DOCUMENT_FOLDERS = {
    "photo": "employee-photos",
    "employee_signature": "employee-signatures",
    "authorized_signature": "authorized-signatures",
}


def with_datetimes(data: dict) -> dict:
    for field in DATE_FIELDS:
        if data.get(field) is not None:
            data[field] = to_datetime(data[field])
    return data


async def get_employee_or_404(identifier: str) -> dict:
    employee = await employees_collection.find_one(employee_lookup(identifier))
    if not employee:
        raise get_unknown_entity_exception("Employee")
    return employee


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_employee(employee_request: CreateEmployee):
    """
    Register a new employee.

    Email and Aadhar number must be unique; the ``SKEMP`` employee id is
    generated from the highest id on record.
    """
    duplicate = await employees_collection.find_one({
        "$or": [
            {"email": employee_request.email.lower()},
            {"aadhar_number": employee_request.aadhar_number},
        ]
    })
    if duplicate:
        raise HTTPException(status_code=400, detail="Employee with this email or Aadhar number already exists")

    employee_data = with_datetimes(employee_request.model_dump(exclude_none=True))
    employee_data["email"] = employee_request.email.lower()

    employee = Employee(
        **employee_data,
        employee_id=await generate_employee_id(),
        status="active",
        role="employee",
    )
    employee_data = employee.model_dump()
    result = await employees_collection.insert_one(employee_data)
    employee_data["_id"] = result.inserted_id

    logger.info("Employee %s created", employee.employee_id)

    return {"success": True, "message": "Employee created successfully", "data": serialize_document(employee_data)}


@router.get("/")
async def get_employees(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=500),
    search: Optional[str] = Query(None, description="Search by name, employee ID, email or phone"),
    department: Optional[str] = Query(None),
    site_name: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
):
    query = {}
    if search:
        pattern = regex_filter(search)
        query["$or"] = [
            {"name": pattern},
            {"employee_id": pattern},
            {"email": pattern},
            {"phone": pattern},
        ]
    if is_filter_value(department):
        query["department"] = department
    if is_filter_value(site_name):
        query["site_name"] = site_name
    if is_filter_value(status):
        query["status"] = status

    cursor = employees_collection.find(query).sort(sort_spec(sort_by, sort_order))
    employees = await cursor.skip(skip_for(page, limit)).limit(limit).to_list(length=limit)
    total = await employees_collection.count_documents(query)

    return {"success": True, "data": serialize_documents(employees), "pagination": pagination(page, limit, total)}


@router.get("/departments")
async def get_departments():
    departments = await employees_collection.distinct("department")
    return {"success": True, "data": sorted(department for department in departments if department)}


@router.get("/{employee_id}")
async def get_employee(employee_id: str):
    return {"success": True, "data": serialize_document(await get_employee_or_404(employee_id))}


@router.put("/{employee_id}")
async def update_employee(employee_id: str, employee_update: EditEmployee):
    employee = await get_employee_or_404(employee_id)
    changes = with_datetimes(employee_update.model_dump(exclude_unset=True))

    if "status" in changes and changes["status"] not in EMPLOYEE_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Allowed: {', '.join(EMPLOYEE_STATUSES)}")

    if changes.get("email"):
        changes["email"] = changes["email"].lower()
    if changes.get("email") or changes.get("aadhar_number"):
        clashes = [{field: changes[field]} for field in ("email", "aadhar_number") if changes.get(field)]
        duplicate = await employees_collection.find_one({"$or": clashes, "_id": {"$ne": employee["_id"]}})
        if duplicate:
            raise HTTPException(status_code=400, detail="Employee with this email or Aadhar number already exists")

    changes["updated_at"] = datetime.now(UTC)
    employee = await employees_collection.find_one_and_update(
        {"_id": employee["_id"]},
        {"$set": changes},
        return_document=ReturnDocument.AFTER
    )

    return {"success": True, "message": "Employee updated successfully", "data": serialize_document(employee)}


@router.post("/{employee_id}/documents")
async def upload_employee_documents(
    employee_id: str,
    photo: Optional[UploadFile] = File(None),
    employee_signature: Optional[UploadFile] = File(None),
    authorized_signature: Optional[UploadFile] = File(None),
):
    """
    Upload the employee photo and signatures, replacing any previously stored asset.

    Every file is checked before anything is uploaded, and the old assets are
    destroyed only once the new ones are saved on the employee.
    """
    employee = await get_employee_or_404(employee_id)
    uploads = {"photo": photo, "employee_signature": employee_signature, "authorized_signature": authorized_signature}
    uploads = {field: file for field, file in uploads.items() if file is not None}
    if not uploads:
        raise HTTPException(status_code=400, detail="No files were uploaded")

    contents = {field: await read_employee_image(file) for field, file in uploads.items()}

    changes = {}
    try:
        for field, content in contents.items():
            url, public_id = await upload_employee_image(content, DOCUMENT_FOLDERS[field])
            changes[field] = url
            changes[f"{field}_public_id"] = public_id

        changes["updated_at"] = datetime.now(UTC)
        updated = await employees_collection.find_one_and_update(
            {"_id": employee["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER
        )
        if not updated:
            raise get_unknown_entity_exception("Employee")
    except Exception:
        await discard_assets([(changes[f"{field}_public_id"], "image") for field in uploads if field in changes])
        raise

    replaced = [employee.get(f"{field}_public_id") for field in uploads]
    await discard_assets([(public_id, "image") for public_id in replaced if public_id])

    logger.info("Uploaded %s for employee %s", ", ".join(uploads), updated["employee_id"])

    return {"success": True, "message": "Documents uploaded successfully", "data": serialize_document(updated)}


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str):
    employee = await get_employee_or_404(employee_id)

    for field in DOCUMENT_FOLDERS:
        public_id = employee.get(f"{field}_public_id")
        if public_id:
            await delete_asset(public_id)

    await employees_collection.delete_one({"_id": employee["_id"]})
    logger.info("Employee %s deleted", employee["employee_id"])

    return {"success": True, "message": "Employee deleted successfully"}
