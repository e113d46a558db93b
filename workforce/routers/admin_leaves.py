import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Depends, Query
from pymongo import ReturnDocument

from workforce.db import admin_leaves_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.leaves import AdminLeave
from workforce.schemas.leave import CreateAdminLeave, CancelLeave, SuperadminDecision
from workforce.utils.app_utils import require_roles
from workforce.utils.leave_utils import (
    validate_leave_window, generate_admin_employee_id, superadmin_decision_update,
    cancellation_update, decide_pending_leave, get_status_stats, get_total_days
)
from workforce.utils.query_utils import (
    to_object_id, to_datetime, serialize_document, serialize_documents, is_filter_value,
    regex_filter, date_range_filter, sort_spec, pagination, skip_for
)

logger = logging.getLogger(__name__)

router = APIRouter()


def build_admin_leave_filter(
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    employee_name: Optional[str] = None,
    department: Optional[str] = None,
    applied_by: Optional[str] = None,
    applied_by_exact: bool = True,
) -> dict:
    query = {"request_type": "admin-leave"}

    if applied_by:
        query["applied_by"] = applied_by if applied_by_exact else regex_filter(applied_by)
    if is_filter_value(status):
        query["status"] = status
    if is_filter_value(department):
        query["department"] = department
    if employee_name:
        query["employee_name"] = regex_filter(employee_name)

    applied_date = date_range_filter(start_date, end_date)
    if applied_date:
        query["applied_date"] = applied_date

    return query


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_admin_leave(leave_request: CreateAdminLeave):
    """
    Submit an admin leave request for superadmin approval.

    The requester gets a generated ``ADMIN-<year><nnn>`` employee id and the
    request starts as ``pending``.
    """
    required = (
        leave_request.leave_type, leave_request.from_date, leave_request.to_date,
        leave_request.reason, leave_request.applied_by, leave_request.employee_name
    )
    if not all(required):
        raise HTTPException(status_code=400, detail="Missing required fields")

    total_days = validate_leave_window(leave_request.from_date, leave_request.to_date)

    leave = AdminLeave(
        employee_id=generate_admin_employee_id(),
        employee_name=leave_request.employee_name,
        leave_type=leave_request.leave_type,
        from_date=to_datetime(leave_request.from_date),
        to_date=to_datetime(leave_request.to_date),
        total_days=total_days,
        reason=leave_request.reason,
        applied_by=leave_request.applied_by,
        department=leave_request.department or "Administration",
        contact_number=leave_request.contact_number,
    )
    leave_data = leave.model_dump()
    result = await admin_leaves_collection.insert_one(leave_data)
    leave_data["_id"] = result.inserted_id

    logger.info("Admin leave %s submitted by %s", result.inserted_id, leave.applied_by)

    return {
        "success": True,
        "message": "Admin leave request submitted successfully. Waiting for superadmin approval.",
        "leave": serialize_document(leave_data),
    }


@router.get("/")
async def get_admin_leaves(
    user_id: Optional[str] = Query(None, description="Only leaves applied by this user"),
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    employee_name: Optional[str] = Query(None),
):
    query = build_admin_leave_filter(
        status=status, start_date=start_date, end_date=end_date,
        employee_name=employee_name, applied_by=user_id
    )
    leaves = await admin_leaves_collection.find(query).sort("applied_date", -1).to_list(length=None)

    return {"success": True, "leaves": serialize_documents(leaves), "count": len(leaves)}


@router.get("/stats")
async def get_admin_leave_stats(user_id: Optional[str] = Query(None)):
    query = build_admin_leave_filter(applied_by=user_id)
    stats = await get_status_stats(admin_leaves_collection, query)
    stats["total_days"] = await get_total_days(admin_leaves_collection, query)

    return {"success": True, "stats": stats}


@router.get("/superadmin/all")
async def get_all_admin_leaves_for_superadmin(
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    employee_name: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    applied_by: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    sort_by: str = Query("applied_date"),
    sort_order: str = Query("desc"),
    user_and_type: tuple = Depends(require_roles("superadmin")),
):
    """
    Every admin leave with filters, pagination and sort for the superadmin console.

    Also returns the status stats for the current filter and the option lists
    (``departments``, ``applied_by_list``) the console uses to build its filters.
    """
    query = build_admin_leave_filter(
        status=status, start_date=start_date, end_date=end_date, employee_name=employee_name,
        department=department, applied_by=applied_by, applied_by_exact=False
    )

    cursor = admin_leaves_collection.find(query).sort(sort_spec(sort_by, sort_order))
    leaves = await cursor.skip(skip_for(page, limit)).limit(limit).to_list(length=limit)
    total = await admin_leaves_collection.count_documents(query)

    departments = await admin_leaves_collection.distinct("department")
    applied_by_list = await admin_leaves_collection.distinct("applied_by")

    return {
        "success": True,
        "leaves": serialize_documents(leaves),
        "stats": await get_status_stats(admin_leaves_collection, query),
        "filters": {
            "departments": ["all", *departments],
            "applied_by_list": ["all", *applied_by_list],
        },
        "pagination": pagination(page, limit, total),
    }


@router.put("/superadmin/{leave_id}/status")
async def update_admin_leave_status(
    leave_id: str,
    decision: SuperadminDecision,
    user_and_type: tuple = Depends(require_roles("superadmin")),
):
    update = superadmin_decision_update(
        decision.status, decision.approved_by, decision.rejected_by, decision.superadmin_remarks
    )

    leave = await decide_pending_leave(admin_leaves_collection, to_object_id(leave_id, "leave"), update)

    logger.info("Admin leave %s %s by superadmin", leave_id, decision.status)

    return {
        "success": True,
        "message": f"Admin leave request {decision.status} by superadmin",
        "leave": serialize_document(leave),
    }


@router.put("/{leave_id}/cancel")
async def cancel_admin_leave(leave_id: str, cancel_request: CancelLeave):
    object_id = to_object_id(leave_id, "leave")
    leave = await admin_leaves_collection.find_one({"_id": object_id})
    if not leave:
        raise get_unknown_entity_exception("Leave request")

    update = cancellation_update(leave, cancel_request.cancellation_reason, cancel_request.cancelled_by)
    leave = await admin_leaves_collection.find_one_and_update(
        {"_id": object_id, "status": "pending"},
        {"$set": update},
        return_document=ReturnDocument.AFTER
    )
    if not leave:
        raise HTTPException(status_code=400, detail="Only pending leave requests can be cancelled")

    return {
        "success": True,
        "message": "Leave request cancelled successfully",
        "leave": serialize_document(leave),
    }
