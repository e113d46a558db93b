import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Depends, Query
from pymongo import ReturnDocument

from workforce.db import manager_leaves_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.leaves import ManagerLeave
from workforce.schemas.leave import CreateManagerLeave, CancelLeave, SuperadminDecision
from workforce.utils.app_utils import require_roles
from workforce.utils.leave_utils import (
    validate_leave_window, superadmin_decision_update, cancellation_update,
    decide_pending_leave, get_status_stats, get_total_days, with_employee_fields
)
from workforce.utils.query_utils import (
    to_object_id, to_datetime, serialize_document, serialize_documents, is_filter_value,
    regex_filter, date_range_filter, sort_spec, pagination, skip_for
)

logger = logging.getLogger(__name__)

router = APIRouter()


def build_manager_leave_filter(
    manager_id: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    manager_name: Optional[str] = None,
    manager_department: Optional[str] = None,
) -> dict:
    query = {"request_type": "manager-leave"}

    if manager_id:
        query["manager_id"] = manager_id
    if is_filter_value(status):
        query["status"] = status
    if is_filter_value(manager_department):
        query["manager_department"] = manager_department
    if manager_name:
        query["manager_name"] = regex_filter(manager_name)

    applied_date = date_range_filter(start_date, end_date)
    if applied_date:
        query["applied_date"] = applied_date

    return query


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_manager_leave(leave_request: CreateManagerLeave):
    required = (
        leave_request.manager_id, leave_request.manager_name, leave_request.manager_department,
        leave_request.manager_contact, leave_request.leave_type, leave_request.from_date,
        leave_request.to_date, leave_request.reason, leave_request.applied_by
    )
    if not all(required):
        raise HTTPException(status_code=400, detail="All required fields are missing")

    total_days = validate_leave_window(leave_request.from_date, leave_request.to_date)

    leave = ManagerLeave(
        manager_id=leave_request.manager_id,
        manager_name=leave_request.manager_name,
        manager_department=leave_request.manager_department,
        manager_position=leave_request.manager_position or "Manager",
        manager_email=leave_request.manager_email or "",
        manager_contact=leave_request.manager_contact,
        leave_type=leave_request.leave_type,
        from_date=to_datetime(leave_request.from_date),
        to_date=to_datetime(leave_request.to_date),
        total_days=total_days,
        reason=leave_request.reason,
        applied_by=leave_request.applied_by,
    )
    leave_data = leave.model_dump()
    result = await manager_leaves_collection.insert_one(leave_data)
    leave_data["_id"] = result.inserted_id

    logger.info("Manager leave %s submitted for %s", result.inserted_id, leave.manager_id)

    return {
        "success": True,
        "message": "Manager leave request submitted successfully. Waiting for superadmin approval.",
        "leave": serialize_document(leave_data),
    }


@router.get("/")
async def get_manager_leaves(
    manager_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
):
    """A manager's own leave requests, newest application first."""
    if not manager_id:
        raise HTTPException(status_code=400, detail="Manager ID is required")

    query = build_manager_leave_filter(
        manager_id=manager_id, status=status, start_date=start_date, end_date=end_date
    )
    leaves = await manager_leaves_collection.find(query).sort("applied_date", -1).to_list(length=None)

    return {"success": True, "leaves": serialize_documents(leaves), "count": len(leaves)}


@router.get("/stats")
async def get_manager_leave_stats(manager_id: Optional[str] = Query(None)):
    query = build_manager_leave_filter(manager_id=manager_id)
    stats = await get_status_stats(manager_leaves_collection, query)
    stats["total_days"] = await get_total_days(manager_leaves_collection, query)

    return {"success": True, "stats": stats}


@router.get("/superadmin/all")
async def get_all_manager_leaves_for_superadmin(
    status: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    manager_name: Optional[str] = Query(None),
    manager_department: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    sort_by: str = Query("applied_date"),
    sort_order: str = Query("desc"),
    user_and_type: tuple = Depends(require_roles("superadmin")),
):
    query = build_manager_leave_filter(
        status=status, start_date=start_date, end_date=end_date,
        manager_name=manager_name, manager_department=manager_department
    )

    cursor = manager_leaves_collection.find(query).sort(sort_spec(sort_by, sort_order))
    leaves = await cursor.skip(skip_for(page, limit)).limit(limit).to_list(length=limit)
    total = await manager_leaves_collection.count_documents(query)
    departments = await manager_leaves_collection.distinct("manager_department")

    return {
        "success": True,
        "leaves": [with_employee_fields(leave) for leave in serialize_documents(leaves)],
        "stats": await get_status_stats(manager_leaves_collection, query),
        "filters": {"departments": ["all", *departments]},
        "pagination": pagination(page, limit, total),
    }


@router.put("/superadmin/{leave_id}/status")
async def update_manager_leave_status(
    leave_id: str,
    decision: SuperadminDecision,
    user_and_type: tuple = Depends(require_roles("superadmin")),
):
    update = superadmin_decision_update(
        decision.status, decision.approved_by, decision.rejected_by, decision.superadmin_remarks
    )

    leave = await decide_pending_leave(manager_leaves_collection, to_object_id(leave_id, "leave"), update)

    logger.info("Manager leave %s %s by superadmin", leave_id, decision.status)

    return {
        "success": True,
        "message": f"Manager leave request {decision.status} by superadmin",
        "leave": serialize_document(leave),
    }


@router.put("/{leave_id}/cancel")
async def cancel_manager_leave(leave_id: str, cancel_request: CancelLeave):
    object_id = to_object_id(leave_id, "leave")
    leave = await manager_leaves_collection.find_one({"_id": object_id})
    if not leave:
        raise get_unknown_entity_exception("Leave request")

    update = cancellation_update(leave, cancel_request.cancellation_reason, cancel_request.cancelled_by)
    leave = await manager_leaves_collection.find_one_and_update(
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
