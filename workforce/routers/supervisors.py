import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Query
from pymongo import ReturnDocument

from workforce.db import supervisors_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.supervisors import Supervisor
from workforce.schemas.supervisor import CreateSupervisor, EditSupervisor
from workforce.utils.app_utils import hash_password
from workforce.utils.query_utils import (
    to_object_id, serialize_document, serialize_documents, is_filter_value, regex_filter
)

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

# never returned to clients
HIDDEN_FIELDS = {"password": 0}


@router.get("/")
async def get_all_supervisors(
    department: Optional[str] = Query(None),
    site: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
):
    query = {}
    if is_filter_value(department):
        query["department"] = department
    if is_filter_value(site):
        query["site"] = site
    if is_active is not None:
        query["is_active"] = is_active

    supervisors = await supervisors_collection.find(query, HIDDEN_FIELDS).sort("created_at", -1).to_list(length=None)
    return {"success": True, "data": serialize_documents(supervisors), "count": len(supervisors)}


@router.get("/stats")
async def get_supervisor_stats():
    total = await supervisors_collection.count_documents({})
    active = await supervisors_collection.count_documents({"is_active": True})
    return {"success": True, "data": {"total": total, "active": active, "inactive": total - active}}


@router.get("/search")
async def search_supervisors(q: Optional[str] = Query(None)):
    if not q:
        raise HTTPException(status_code=400, detail="Search query is required")

    pattern = regex_filter(q)
    supervisors = await supervisors_collection.find({
        "$or": [
            {"name": pattern},
            {"email": pattern},
            {"phone": pattern},
            {"department": pattern},
            {"site": pattern},
        ]
    }, HIDDEN_FIELDS).to_list(length=None)

    return {"success": True, "data": serialize_documents(supervisors), "count": len(supervisors)}


@router.get("/{supervisor_id}")
async def get_supervisor(supervisor_id: str):
    supervisor = await supervisors_collection.find_one({"_id": to_object_id(supervisor_id, "supervisor")}, HIDDEN_FIELDS)
    if not supervisor:
        raise get_unknown_entity_exception("Supervisor")
    return {"success": True, "data": serialize_document(supervisor)}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_supervisor(supervisor_request: CreateSupervisor):
    if not all((supervisor_request.name, supervisor_request.email,
                supervisor_request.phone, supervisor_request.password)):
        raise HTTPException(status_code=400, detail="Name, email, phone and password are required")

    email = supervisor_request.email.lower()
    if await supervisors_collection.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="Supervisor with this email already exists")

    supervisor = Supervisor(
        **supervisor_request.model_dump(exclude={"email", "password"}),
        email=email,
        password=hash_password(supervisor_request.password),
    )
    supervisor_data = supervisor.model_dump()
    result = await supervisors_collection.insert_one(supervisor_data)
    supervisor_data["_id"] = result.inserted_id

    logger.info("Supervisor %s created", email)

    return {"success": True, "message": "Supervisor created successfully", "data": serialize_document(supervisor_data)}


@router.put("/{supervisor_id}")
async def update_supervisor(supervisor_id: str, supervisor_update: EditSupervisor):
    object_id = to_object_id(supervisor_id, "supervisor")
    changes = supervisor_update.model_dump(exclude_unset=True)

    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        duplicate = await supervisors_collection.find_one({"email": changes["email"], "_id": {"$ne": object_id}})
        if duplicate:
            raise HTTPException(status_code=400, detail="Supervisor with this email already exists")

    changes["updated_at"] = datetime.now(UTC)
    supervisor = await supervisors_collection.find_one_and_update(
        {"_id": object_id},
        {"$set": changes},
        projection=HIDDEN_FIELDS,
        return_document=ReturnDocument.AFTER
    )
    if not supervisor:
        raise get_unknown_entity_exception("Supervisor")

    return {"success": True, "message": "Supervisor updated successfully", "data": serialize_document(supervisor)}


@router.delete("/{supervisor_id}")
async def delete_supervisor(supervisor_id: str):
    result = await supervisors_collection.delete_one({"_id": to_object_id(supervisor_id, "supervisor")})
    if result.deleted_count == 0:
        raise get_unknown_entity_exception("Supervisor")
    return {"success": True, "message": "Supervisor deleted successfully"}


@router.patch("/{supervisor_id}/toggle-status")
async def toggle_supervisor_status(supervisor_id: str):
    object_id = to_object_id(supervisor_id, "supervisor")
    supervisor = await supervisors_collection.find_one({"_id": object_id})
    if not supervisor:
        raise get_unknown_entity_exception("Supervisor")

    supervisor = await supervisors_collection.find_one_and_update(
        {"_id": object_id},
        {"$set": {"is_active": not supervisor.get("is_active", True), "updated_at": datetime.now(UTC)}},
        projection=HIDDEN_FIELDS,
        return_document=ReturnDocument.AFTER
    )

    state = "activated" if supervisor["is_active"] else "deactivated"
    return {"success": True, "message": f"Supervisor {state} successfully", "data": serialize_document(supervisor)}
