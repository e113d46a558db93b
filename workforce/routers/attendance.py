import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Query
from pymongo import ReturnDocument
from pytz import UTC

from workforce.db import attendance_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.attendance import Attendance
from workforce.schemas.attendance import CheckIn, EmployeeAction, ManualAttendance, EditAttendance
from workforce.utils.attendance_utils import (
    today_string, current_time_string, minutes_between, calculate_total_hours,
    week_window, weekly_summary
)
from workforce.utils.query_utils import (
    to_object_id, serialize_document, serialize_documents, is_filter_value, pagination, skip_for
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_today_record(employee_id: str) -> dict:
    attendance = await attendance_collection.find_one({"employee_id": employee_id, "date": today_string()})
    if not attendance:
        raise HTTPException(status_code=404, detail="No attendance record found")
    return attendance


async def save_changes(attendance_id, changes: dict) -> dict:
    changes["updated_at"] = datetime.now(UTC)
    return await attendance_collection.find_one_and_update(
        {"_id": attendance_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER
    )


@router.post("/checkin")
async def check_in(check_in_request: CheckIn):
    today = today_string()
    existing = await attendance_collection.find_one({"employee_id": check_in_request.employee_id, "date": today})
    if existing:
        raise HTTPException(status_code=400, detail="Already checked in today")

    attendance = Attendance(
        **check_in_request.model_dump(),
        date=today,
        check_in_time=current_time_string(),
        status="present",
        is_checked_in=True,
    )
    attendance_data = attendance.model_dump()
    result = await attendance_collection.insert_one(attendance_data)
    attendance_data["_id"] = result.inserted_id

    logger.info("Employee %s checked in at %s", attendance.employee_id, attendance.check_in_time)

    return {"success": True, "message": "Checked in successfully", "data": serialize_document(attendance_data)}


@router.post("/checkout")
async def check_out(action: EmployeeAction):
    attendance = await attendance_collection.find_one({"employee_id": action.employee_id, "date": today_string()})
    if not attendance:
        raise HTTPException(status_code=404, detail="No check-in record found for today")

    if attendance.get("check_out_time"):
        raise HTTPException(status_code=400, detail="Already checked out today")

    check_out_time = current_time_string()
    changes = {"check_out_time": check_out_time, "is_checked_in": False}
    break_time = attendance.get("break_time") or 0

    # checking out ends an open break
    if attendance.get("is_on_break"):
        break_time += minutes_between(attendance["break_start_time"], check_out_time)
        changes.update(break_end_time=check_out_time, break_time=break_time, is_on_break=False)

    changes["total_hours"] = calculate_total_hours(attendance["check_in_time"], check_out_time, break_time)
    attendance = await save_changes(attendance["_id"], changes)

    return {"success": True, "message": "Checked out successfully", "data": serialize_document(attendance)}


@router.post("/breakin")
async def break_in(action: EmployeeAction):
    attendance = await get_today_record(action.employee_id)
    if attendance.get("is_on_break"):
        raise HTTPException(status_code=400, detail="Already on break")

    attendance = await save_changes(attendance["_id"], {
        "break_start_time": current_time_string(),
        "is_on_break": True,
    })

    return {"success": True, "message": "Break started", "data": serialize_document(attendance)}


@router.post("/breakout")
async def break_out(action: EmployeeAction):
    attendance = await get_today_record(action.employee_id)
    if not attendance.get("is_on_break"):
        raise HTTPException(status_code=400, detail="Not currently on break")

    break_end_time = current_time_string()
    break_duration = minutes_between(attendance["break_start_time"], break_end_time)
    attendance = await save_changes(attendance["_id"], {
        "break_end_time": break_end_time,
        "break_time": (attendance.get("break_time") or 0) + break_duration,
        "is_on_break": False,
    })

    return {
        "success": True,
        "message": "Break ended",
        "break_duration": f"{break_duration:.0f} minutes",
        "data": serialize_document(attendance),
    }


@router.get("/status/{employee_id}")
async def get_today_status(employee_id: str):
    attendance = await attendance_collection.find_one({"employee_id": employee_id, "date": today_string()})
    if not attendance:
        return {"success": True, "data": None, "message": "No attendance record for today"}

    return {"success": True, "data": serialize_document(attendance)}


@router.get("/history")
async def get_attendance_history(
    employee_id: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
):
    query = {}
    if employee_id:
        query["employee_id"] = employee_id
    if start_date and end_date:
        # dates are stored as YYYY-MM-DD strings so they compare lexically
        query["date"] = {"$gte": start_date.isoformat(), "$lte": end_date.isoformat()}

    records = await attendance_collection.find(query).sort("date", -1).limit(100).to_list(length=100)
    return {"success": True, "data": serialize_documents(records), "count": len(records)}


@router.get("/team")
async def get_team_attendance(
    supervisor_id: Optional[str] = Query(None),
    date: Optional[date] = Query(None),
):
    day = date.isoformat() if date else today_string()
    query = {"date": day}
    if supervisor_id:
        query["supervisor_id"] = supervisor_id

    records = await attendance_collection.find(query).sort("check_in_time", 1).to_list(length=None)
    return {"success": True, "data": serialize_documents(records), "count": len(records), "date": day}


@router.get("/weekly-summary")
async def get_weekly_summary(
    employee_id: Optional[str] = Query(None),
    week_start: Optional[date] = Query(None),
):
    start, end = week_window(week_start)
    query = {"date": {"$gte": start, "$lte": end}}
    if employee_id:
        query["employee_id"] = employee_id

    records = await attendance_collection.find(query).sort("date", 1).to_list(length=None)

    return {
        "success": True,
        "data": {
            "week_start": start,
            "week_end": end,
            "attendance": serialize_documents(records),
            "summary": weekly_summary(records),
        },
    }


@router.get("/")
async def get_all_attendance(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    date: Optional[date] = Query(None),
    department: Optional[str] = Query(None),
):
    query = {}
    if date:
        query["date"] = date.isoformat()
    if is_filter_value(department):
        query["department"] = department

    cursor = attendance_collection.find(query).sort([("date", -1), ("check_in_time", 1)])
    records = await cursor.skip(skip_for(page, limit)).limit(limit).to_list(length=limit)
    total = await attendance_collection.count_documents(query)

    return {"success": True, "data": serialize_documents(records), "pagination": pagination(page, limit, total)}


@router.put("/{attendance_id}")
async def update_attendance(attendance_id: str, attendance_update: EditAttendance):
    object_id = to_object_id(attendance_id, "attendance")
    attendance = await attendance_collection.find_one({"_id": object_id})
    if not attendance:
        raise get_unknown_entity_exception("Attendance record")

    changes = attendance_update.model_dump(exclude_unset=True)
    check_in_time = changes.get("check_in_time", attendance.get("check_in_time"))
    check_out_time = changes.get("check_out_time", attendance.get("check_out_time"))
    if "total_hours" not in changes and check_in_time and check_out_time and (
            "check_in_time" in changes or "check_out_time" in changes or "break_time" in changes):
        changes["total_hours"] = calculate_total_hours(
            check_in_time, check_out_time, changes.get("break_time", attendance.get("break_time", 0))
        )

    attendance = await save_changes(object_id, changes)
    return {"success": True, "message": "Attendance updated successfully", "data": serialize_document(attendance)}


@router.post("/manual", status_code=status.HTTP_201_CREATED)
async def manual_attendance(attendance_request: ManualAttendance):
    for field in ("employee_id", "employee_name", "date", "check_in_time"):
        if not getattr(attendance_request, field):
            raise HTTPException(status_code=400, detail=f"{field} is required")

    existing = await attendance_collection.find_one(
        {"employee_id": attendance_request.employee_id, "date": attendance_request.date}
    )
    if existing:
        raise HTTPException(status_code=400, detail="Attendance record already exists for this date")

    attendance_data = attendance_request.model_dump(exclude_none=True)
    if attendance_request.check_out_time and attendance_request.total_hours is None:
        attendance_data["total_hours"] = calculate_total_hours(
            attendance_request.check_in_time, attendance_request.check_out_time, attendance_request.break_time or 0
        )

    attendance = Attendance(**attendance_data)
    attendance_data = attendance.model_dump()
    result = await attendance_collection.insert_one(attendance_data)
    attendance_data["_id"] = result.inserted_id

    return {
        "success": True,
        "message": "Manual attendance recorded successfully",
        "data": serialize_document(attendance_data),
    }
