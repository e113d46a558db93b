import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Depends, Query, Form, File, UploadFile
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from workforce.db import work_queries_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.work_queries import WorkQuery, Participant, Comment
from workforce.schemas.work_query import WorkQueryStatusUpdate, CreateComment, AssignWorkQuery, RemoveFiles
from workforce.utils.app_utils import require_roles
from workforce.utils.cloudinary_utils import (
    upload_proof_files, delete_proof_files, discard_proof_files, MAX_WORK_QUERY_FILES
)
from workforce.utils.query_utils import (
    to_object_id, serialize_document, serialize_documents, is_filter_value, regex_filter,
    pagination, skip_for
)

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

QUERY_STATUSES = ("pending", "in-progress", "resolved", "rejected")
QUERY_TYPES = ("service", "task")
QUERY_PRIORITIES = ("low", "medium", "high", "critical")
QUERY_ID_ATTEMPTS = 5

CATEGORIES = [
    {"value": "service-quality", "label": "Service Quality"},
    {"value": "staff-behavior", "label": "Staff Behavior"},
    {"value": "equipment-issue", "label": "Equipment Issue"},
    {"value": "safety", "label": "Safety Concern"},
    {"value": "cleanliness", "label": "Cleanliness"},
    {"value": "timing", "label": "Timing Issue"},
    {"value": "other", "label": "Other"},
]
SERVICE_TYPES = [
    {"value": "cleaning", "label": "Cleaning"},
    {"value": "waste-management", "label": "Waste Management"},
    {"value": "parking-management", "label": "Parking Management"},
    {"value": "security", "label": "Security"},
    {"value": "maintenance", "label": "Maintenance"},
]


def label(value: str) -> str:
    return value.replace("-", " ").title()


async def generate_query_id(now: Optional[datetime] = None) -> str:
    """Next id in the daily sequence, e.g. ``WQ-20240131-0007``, after the highest one issued today."""
    now = now or datetime.now(UTC)
    prefix = f"WQ-{now:%Y%m%d}-"
    latest = await work_queries_collection.find(
        {"query_id": {"$regex": f"^{prefix}"}}, {"query_id": 1}
    ).sort("query_id", -1).limit(1).to_list(length=1)
    sequence = int(latest[0]["query_id"][len(prefix):]) if latest else 0
    return f"{prefix}{sequence + 1:04d}"


async def get_work_query_or_404(query_id: str) -> dict:
    work_query = await work_queries_collection.find_one({"_id": to_object_id(query_id, "work query")})
    if not work_query:
        raise get_unknown_entity_exception("Work query")
    return work_query


async def update_work_query(object_id, update: dict) -> dict:
    update.setdefault("$set", {})["updated_at"] = datetime.now(UTC)
    return await work_queries_collection.find_one_and_update(
        {"_id": object_id}, update, return_document=ReturnDocument.AFTER
    )


async def insert_work_query(**fields) -> dict:
    """Insert a new work query, taking the next query id when a concurrent insert claimed it first."""
    for _ in range(QUERY_ID_ATTEMPTS):
        query_data = WorkQuery(query_id=await generate_query_id(), **fields).model_dump()
        try:
            result = await work_queries_collection.insert_one(query_data)
        except DuplicateKeyError:
            logger.warning("Query id %s already taken, retrying", query_data["query_id"])
            continue
        query_data["_id"] = result.inserted_id
        return query_data

    raise HTTPException(status_code=409, detail="Could not allocate a work query id, please retry")


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_work_query(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    supervisor_id: Optional[str] = Form(None),
    supervisor_name: Optional[str] = Form(None),
    type: str = Form("service"),
    priority: str = Form("medium"),
    service_id: Optional[str] = Form(None),
    service_title: Optional[str] = Form(None),
    service_type: Optional[str] = Form(None),
    service_staff_id: Optional[str] = Form(None),
    service_staff_name: Optional[str] = Form(None),
    employee_id: Optional[str] = Form(None),
    employee_name: Optional[str] = Form(None),
    proof_files: Optional[List[UploadFile]] = File(None),
):
    """
    Raise a work query with optional proof files.

    Every file is validated before any is uploaded to Cloudinary. Uploaded
    files are destroyed again when the record cannot be written.
    """
    if not all((title, description, category, supervisor_id, supervisor_name)):
        raise HTTPException(status_code=400, detail="Missing required fields")

    if priority not in QUERY_PRIORITIES:
        raise HTTPException(status_code=400, detail="Invalid priority")
    if type not in QUERY_TYPES:
        raise HTTPException(status_code=400, detail="Invalid type")

    uploaded_files = await upload_proof_files(proof_files or [])
    try:
        query_data = await insert_work_query(
            title=title,
            description=description,
            type=type,
            service_id=service_id,
            service_title=service_title,
            service_type=service_type,
            service_staff_id=service_staff_id,
            service_staff_name=service_staff_name,
            employee_id=employee_id,
            employee_name=employee_name,
            priority=priority,
            category=category,
            proof_files=uploaded_files,
            reported_by=Participant(user_id=supervisor_id, name=supervisor_name, role="supervisor"),
            supervisor_id=supervisor_id,
            supervisor_name=supervisor_name,
        )
    except Exception:
        await discard_proof_files(uploaded_files)
        raise

    logger.info("Work query %s raised by supervisor %s", query_data["query_id"], supervisor_id)

    return {"success": True, "message": "Work query created successfully", "data": serialize_document(query_data)}


@router.get("/")
async def get_work_queries(
    supervisor_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    query = {}
    if supervisor_id:
        query["supervisor_id"] = supervisor_id
    for field, value in (("status", status), ("priority", priority), ("category", category), ("type", type)):
        if is_filter_value(value):
            query[field] = value
    if search:
        pattern = regex_filter(search)
        query["$or"] = [
            {"title": pattern},
            {"description": pattern},
            {"query_id": pattern},
            {"employee_name": pattern},
            {"service_title": pattern},
        ]

    cursor = work_queries_collection.find(query).sort("created_at", -1)
    work_queries = await cursor.skip(skip_for(page, limit)).limit(limit).to_list(length=limit)
    total = await work_queries_collection.count_documents(query)

    return {"success": True, "data": serialize_documents(work_queries), "pagination": pagination(page, limit, total)}


@router.get("/statistics")
async def get_work_query_statistics(supervisor_id: Optional[str] = Query(None)):
    match = {"supervisor_id": supervisor_id} if supervisor_id else {}

    total = await work_queries_collection.count_documents(match)
    by_status = await work_queries_collection.aggregate([
        {"$match": match},
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
    ]).to_list(length=None)
    by_priority = await work_queries_collection.aggregate([
        {"$match": match},
        {"$group": {"_id": "$priority", "count": {"$sum": 1}}},
    ]).to_list(length=None)

    status_counts = {item["_id"]: item["count"] for item in by_status}
    priority_counts = {item["_id"]: item["count"] for item in by_priority}

    return {
        "success": True,
        "data": {
            "total": total,
            "status_counts": {query_status: status_counts.get(query_status, 0) for query_status in QUERY_STATUSES},
            "priority_counts": {
                query_priority: priority_counts.get(query_priority, 0) for query_priority in QUERY_PRIORITIES
            },
        },
    }


@router.get("/recent")
async def get_recent_work_queries(
    limit: int = Query(5, ge=1, le=50),
    supervisor_id: Optional[str] = Query(None),
):
    query = {"supervisor_id": supervisor_id} if supervisor_id else {}
    work_queries = await work_queries_collection.find(query).sort("created_at", -1).limit(limit).to_list(length=limit)
    return {"success": True, "data": serialize_documents(work_queries)}


@router.get("/categories")
async def get_categories():
    return {"success": True, "data": CATEGORIES}


@router.get("/priorities")
async def get_priorities():
    return {"success": True, "data": [{"value": value, "label": label(value)} for value in QUERY_PRIORITIES]}


@router.get("/statuses")
async def get_statuses():
    return {"success": True, "data": [{"value": value, "label": label(value)} for value in QUERY_STATUSES]}


@router.get("/service-types")
async def get_service_types():
    return {"success": True, "data": SERVICE_TYPES}


@router.get("/query/{query_id}")
async def get_work_query_by_query_id(query_id: str):
    work_query = await work_queries_collection.find_one({"query_id": query_id})
    if not work_query:
        raise get_unknown_entity_exception("Work query")
    return {"success": True, "data": serialize_document(work_query)}


@router.get("/{work_query_id}")
async def get_work_query(work_query_id: str):
    return {"success": True, "data": serialize_document(await get_work_query_or_404(work_query_id))}


@router.patch("/{work_query_id}/status")
async def update_work_query_status(
    work_query_id: str,
    status_update: WorkQueryStatusUpdate,
    user_and_type: tuple = Depends(require_roles("superadmin", "admin")),
):
    if status_update.status not in QUERY_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    work_query = await get_work_query_or_404(work_query_id)
    changes = {"status": status_update.status}
    if status_update.superadmin_response:
        changes["superadmin_response"] = status_update.superadmin_response
        changes["response_date"] = datetime.now(UTC)

    work_query = await update_work_query(work_query["_id"], {"$set": changes})
    return {"success": True, "message": "Work query status updated", "data": serialize_document(work_query)}


@router.post("/{work_query_id}/comments")
async def add_comment(work_query_id: str, comment_request: CreateComment):
    if not (comment_request.user_id and comment_request.name and comment_request.comment):
        raise HTTPException(status_code=400, detail="User ID, name and comment are required")

    work_query = await get_work_query_or_404(work_query_id)
    comment = Comment(**comment_request.model_dump()).model_dump()

    work_query = await update_work_query(work_query["_id"], {"$push": {"comments": comment}})
    return {"success": True, "message": "Comment added", "data": serialize_document(work_query)}


@router.patch("/{work_query_id}/assign")
async def assign_work_query(
    work_query_id: str,
    assignment: AssignWorkQuery,
    user_and_type: tuple = Depends(require_roles("superadmin", "admin")),
):
    work_query = await get_work_query_or_404(work_query_id)
    assigned_to = Participant(**assignment.model_dump()).model_dump()

    work_query = await update_work_query(work_query["_id"], {"$set": {"assigned_to": assigned_to}})
    return {"success": True, "message": f"Work query assigned to {assignment.name}", "data": serialize_document(work_query)}


@router.post("/{work_query_id}/files")
async def add_files_to_work_query(work_query_id: str, proof_files: List[UploadFile] = File(...)):
    work_query = await get_work_query_or_404(work_query_id)

    existing = len(work_query.get("proof_files", []))
    if existing + len(proof_files) > MAX_WORK_QUERY_FILES:
        raise HTTPException(
            status_code=400,
            detail=f"Too many files. A work query can hold at most {MAX_WORK_QUERY_FILES} files ({existing} already attached)."
        )

    uploaded_files = await upload_proof_files(proof_files)
    work_query = await update_work_query(work_query["_id"], {"$push": {"proof_files": {"$each": uploaded_files}}})
    if not work_query:
        await discard_proof_files(uploaded_files)
        raise get_unknown_entity_exception("Work query")

    return {"success": True, "message": f"{len(uploaded_files)} file(s) added", "data": serialize_document(work_query)}


@router.delete("/{work_query_id}/files")
async def remove_files_from_work_query(work_query_id: str, removal: RemoveFiles):
    if not removal.public_ids:
        raise HTTPException(status_code=400, detail="No files specified for removal")

    work_query = await get_work_query_or_404(work_query_id)
    to_remove = [
        proof_file for proof_file in work_query.get("proof_files", [])
        if proof_file["public_id"] in removal.public_ids
    ]
    await delete_proof_files(to_remove)

    work_query = await update_work_query(
        work_query["_id"], {"$pull": {"proof_files": {"public_id": {"$in": removal.public_ids}}}}
    )
    return {"success": True, "message": f"{len(to_remove)} file(s) removed", "data": serialize_document(work_query)}


@router.delete("/{work_query_id}")
async def delete_work_query(work_query_id: str):
    work_query = await get_work_query_or_404(work_query_id)
    await delete_proof_files(work_query.get("proof_files", []))
    await work_queries_collection.delete_one({"_id": work_query["_id"]})

    logger.info("Work query %s deleted", work_query.get("query_id"))

    return {"success": True, "message": "Work query deleted successfully"}
