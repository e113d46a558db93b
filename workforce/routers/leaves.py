import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Depends, Query
from pymongo import ReturnDocument

from workforce.db import leaves_collection, admin_leaves_collection, manager_leaves_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.leaves import Leave
from workforce.schemas.leave import CreateLeave, LeaveStatusUpdate, CancelLeave
from workforce.utils.app_utils import require_roles
from workforce.utils.leave_utils import (
    validate_leave_window, ranges_overlap, cancellation_update, get_status_stats,
    get_total_days, with_employee_fields, DECISION_STATUSES
)
from workforce.utils.query_utils import (
    to_object_id, to_datetime, serialize_document, serialize_documents, is_filter_value,
    regex_filter, sort_spec, pagination, skip_for, LEAVE_STATUSES
)

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

LEAVE_TYPES = ("annual", "sick", "casual", "other")
MAX_LEAVE_DAYS = 90


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_for_leave(leave_request: CreateLeave):
    """
    Apply for leave on behalf of an employee or supervisor.

    Rejects requests that overlap an existing pending or approved leave of
    the same employee, and requests longer than 90 days.
    """
    required = (
        leave_request.employee_id, leave_request.employee_name, leave_request.department,
        leave_request.contact_number, leave_request.leave_type, leave_request.from_date,
        leave_request.to_date, leave_request.reason, leave_request.applied_by
    )
    if not all(required):
        raise HTTPException(status_code=400, detail="Missing required fields")

    if leave_request.leave_type not in LEAVE_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid leave type. Allowed: {', '.join(LEAVE_TYPES)}")

    total_days = validate_leave_window(leave_request.from_date, leave_request.to_date)
    if total_days > MAX_LEAVE_DAYS:
        raise HTTPException(status_code=400, detail=f"Leave cannot exceed {MAX_LEAVE_DAYS} days")

    active_leaves = leaves_collection.find({
        "employee_id": leave_request.employee_id,
        "status": {"$in": ["pending", "approved"]},
    })
    async for existing in active_leaves:
        if ranges_overlap(existing["from_date"], existing["to_date"], leave_request.from_date, leave_request.to_date):
            raise HTTPException(
                status_code=400,
                detail="Leave request overlaps with an existing pending or approved leave"
            )

    leave = Leave(
        **leave_request.model_dump(exclude={"from_date", "to_date", "applied_for"}),
        from_date=to_datetime(leave_request.from_date),
        to_date=to_datetime(leave_request.to_date),
        total_days=total_days,
        applied_for=leave_request.applied_for or leave_request.employee_id,
    )
    leave_data = leave.model_dump()
    result = await leaves_collection.insert_one(leave_data)
    leave_data["_id"] = result.inserted_id

    logger.info("Leave %s applied for employee %s", result.inserted_id, leave.employee_id)

    return {
        "success": True,
        "message": "Leave application submitted successfully",
        "data": serialize_document(leave_data),
    }


@router.get("/")
async def get_all_leaves(
    department: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    employee_id: Optional[str] = Query(None),
):
    query = {}
    if is_filter_value(department):
        query["department"] = department
    if is_filter_value(status):
        query["status"] = status
    if employee_id:
        query["employee_id"] = employee_id

    leaves = await leaves_collection.find(query).sort("created_at", -1).to_list(length=None)
    return {"success": True, "data": serialize_documents(leaves), "count": len(leaves)}


@router.get("/employee/{employee_id}")
async def get_employee_leaves(employee_id: str):
    leaves = await leaves_collection.find({"employee_id": employee_id}).sort("from_date", -1).to_list(length=None)
    return {"success": True, "data": serialize_documents(leaves), "count": len(leaves)}


@router.get("/stats")
async def get_leave_stats(department: Optional[str] = Query(None)):
    query = {}
    if is_filter_value(department):
        query["department"] = department

    stats = await get_status_stats(leaves_collection, query)
    stats["total_days"] = await get_total_days(leaves_collection, query)
    return {"success": True, "data": stats}


@router.get("/departments")
async def get_leave_departments():
    departments = await leaves_collection.distinct("department")
    return {"success": True, "data": sorted(department for department in departments if department)}


@router.get("/admin/all")
async def get_all_leaves_for_admin(
    status: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    employee_name: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    user_and_type: tuple = Depends(require_roles("superadmin", "admin")),
):
    query = {}
    if is_filter_value(status):
        query["status"] = status
    if is_filter_value(department):
        query["department"] = department
    if employee_name:
        query["employee_name"] = regex_filter(employee_name)

    cursor = leaves_collection.find(query).sort(sort_spec(sort_by, sort_order))
    leaves = await cursor.skip(skip_for(page, limit)).limit(limit).to_list(length=limit)
    total = await leaves_collection.count_documents(query)

    return {
        "success": True,
        "leaves": serialize_documents(leaves),
        "stats": await get_status_stats(leaves_collection, query),
        "pagination": pagination(page, limit, total),
    }


@router.get("/admin/manager-admin")
async def get_manager_and_admin_leaves(
    status: Optional[str] = Query(None),
    manager_name: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=2, le=500),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    user_and_type: tuple = Depends(require_roles("superadmin")),
):
    """
    Manager-tier and admin-tier leaves in a single listing.

    Each source contributes at most ``limit // 2`` rows per page; the stats
    add both sources together.
    """
    manager_query = {"request_type": "manager-leave"}
    admin_query = {"request_type": "admin-leave"}

    if is_filter_value(status):
        manager_query["status"] = status
        admin_query["status"] = status
    if manager_name:
        manager_query["manager_name"] = regex_filter(manager_name)
        admin_query["employee_name"] = regex_filter(manager_name)
    if is_filter_value(department):
        manager_query["manager_department"] = department
        admin_query["department"] = department

    half = limit // 2
    skip = skip_for(page, limit)
    sort = sort_spec(sort_by, sort_order)

    manager_leaves = await manager_leaves_collection.find(manager_query).sort(sort).skip(skip).limit(half).to_list(length=half)
    admin_leaves = await admin_leaves_collection.find(admin_query).sort(sort).skip(skip).limit(half).to_list(length=half)

    combined = []
    for leave in serialize_documents(manager_leaves):
        leave = with_employee_fields(leave)
        leave["is_manager_leave"] = True
        combined.append(leave)
    for leave in serialize_documents(admin_leaves):
        leave["is_manager_leave"] = False
        combined.append(leave)

    manager_stats = await get_status_stats(manager_leaves_collection, manager_query)
    admin_stats = await get_status_stats(admin_leaves_collection, admin_query)
    stats = {key: manager_stats[key] + admin_stats[key] for key in ("total", *LEAVE_STATUSES)}

    return {
        "success": True,
        "leaves": combined,
        "stats": stats,
        "pagination": pagination(page, limit, stats["total"]),
    }


@router.put("/{leave_id}/status")
async def update_leave_status(
    leave_id: str,
    status_update: LeaveStatusUpdate,
    user_and_type: tuple = Depends(require_roles("superadmin", "admin", "manager", "supervisor")),
):
    if status_update.status not in DECISION_STATUSES:
        raise HTTPException(status_code=400, detail='Invalid status. Only "approved" or "rejected" allowed')

    object_id = to_object_id(leave_id, "leave")
    leave = await leaves_collection.find_one({"_id": object_id})
    if not leave:
        raise get_unknown_entity_exception("Leave request")

    if leave.get("status") != "pending":
        raise HTTPException(status_code=400, detail=f"Leave request has already been {leave.get('status')}")

    now = datetime.now(UTC)
    update = {"status": status_update.status, "updated_at": now}
    if status_update.manager_remarks is not None:
        update["manager_remarks"] = status_update.manager_remarks
    if status_update.remarks is not None:
        update["remarks"] = status_update.remarks

    if status_update.status == "approved":
        update.update({"approved_by": status_update.approved_by or "System", "approved_at": now})
    else:
        update.update({"rejected_by": status_update.rejected_by or "System", "rejected_at": now})

    leave = await leaves_collection.find_one_and_update(
        {"_id": object_id, "status": "pending"},
        {"$set": update},
        return_document=ReturnDocument.AFTER
    )
    if not leave:
        raise HTTPException(status_code=400, detail="Leave request has already been processed")

    logger.info("Leave %s %s", leave_id, status_update.status)

    return {
        "success": True,
        "message": f"Leave request {status_update.status} successfully",
        "data": serialize_document(leave),
    }


@router.put("/{leave_id}/cancel")
async def cancel_leave(leave_id: str, cancel_request: CancelLeave):
    object_id = to_object_id(leave_id, "leave")
    leave = await leaves_collection.find_one({"_id": object_id})
    if not leave:
        raise get_unknown_entity_exception("Leave request")

    update = cancellation_update(leave, cancel_request.cancellation_reason, None)
    leave = await leaves_collection.find_one_and_update(
        {"_id": object_id, "status": "pending"},
        {"$set": update},
        return_document=ReturnDocument.AFTER
    )
    if not leave:
        raise HTTPException(status_code=400, detail="Only pending leave requests can be cancelled")

    return {
        "success": True,
        "message": "Leave request cancelled successfully",
        "data": serialize_document(leave),
    }
