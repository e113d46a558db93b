import math
import random
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from pymongo import ReturnDocument

from workforce.exceptions import get_unknown_entity_exception
from workforce.utils.query_utils import to_datetime, format_status_stats, status_count_pipeline

UTC = timezone.utc

DECISION_STATUSES = ("approved", "rejected")


def calculate_total_days(from_date, to_date) -> int:
    """Inclusive number of calendar days covered by a leave."""
    start = to_datetime(from_date)
    end = to_datetime(to_date)
    days = (end - start).total_seconds() / 86400
    return math.ceil(days) + 1


def validate_leave_window(from_date, to_date) -> int:
    total_days = calculate_total_days(from_date, to_date)
    if total_days < 1:
        raise HTTPException(status_code=400, detail="Invalid date range")
    return total_days


def generate_admin_employee_id(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(UTC)
    return f"ADMIN-{now.year}{random.randint(0, 999):03d}"


def ranges_overlap(first_from, first_to, second_from, second_to) -> bool:
    return to_datetime(first_from) <= to_datetime(second_to) and to_datetime(first_to) >= to_datetime(second_from)


def superadmin_decision_update(status: str, approved_by: Optional[str], rejected_by: Optional[str],
                               superadmin_remarks: Optional[str]) -> dict:
    """
    Build the ``$set`` document for a superadmin approval or rejection.

    Only ``approved`` and ``rejected`` are accepted, and each needs the name of
    the superadmin taking the decision.
    """
    if status not in DECISION_STATUSES:
        raise HTTPException(status_code=400, detail='Invalid status. Only "approved" or "rejected" allowed')

    if status == "approved" and not approved_by:
        raise HTTPException(status_code=400, detail="Superadmin name is required for approval")

    if status == "rejected" and not rejected_by:
        raise HTTPException(status_code=400, detail="Superadmin name is required for rejection")

    now = datetime.now(UTC)
    update = {"status": status, "superadmin_remarks": superadmin_remarks, "updated_at": now}
    if status == "approved":
        update.update({"approved_by": approved_by, "approved_at": now})
    else:
        update.update({"rejected_by": rejected_by, "rejected_at": now})
    return update


def cancellation_update(leave: dict, cancellation_reason: Optional[str], cancelled_by: Optional[str]) -> dict:
    if leave.get("status") != "pending":
        raise HTTPException(status_code=400, detail="Only pending leave requests can be cancelled")

    update = {"status": "cancelled", "updated_at": datetime.now(UTC)}
    if cancellation_reason:
        update["cancellation_reason"] = cancellation_reason
    if cancelled_by:
        update["applied_by"] = cancelled_by
    return update


async def get_status_stats(collection, match: dict) -> dict:
    total = await collection.count_documents(match)
    grouped = await collection.aggregate(status_count_pipeline(match)).to_list(length=None)
    return format_status_stats(grouped, total)


async def get_total_days(collection, match: dict) -> float:
    pipeline = [
        {"$match": match},
        {"$group": {"_id": None, "total_days": {"$sum": "$total_days"}}},
    ]
    result = await collection.aggregate(pipeline).to_list(length=1)
    return result[0]["total_days"] if result else 0


def with_employee_fields(manager_leave: dict) -> dict:
    """Expose a manager leave under the field names the employee-tier views read."""
    manager_leave["employee_id"] = manager_leave.get("manager_id")
    manager_leave["employee_name"] = manager_leave.get("manager_name")
    manager_leave["department"] = manager_leave.get("manager_department")
    manager_leave["contact_number"] = manager_leave.get("manager_contact")
    return manager_leave


async def decide_pending_leave(collection, object_id, update: dict) -> dict:
    """Apply a superadmin decision, only while the leave is still pending."""
    leave = await collection.find_one({"_id": object_id})
    if not leave:
        raise get_unknown_entity_exception("Leave request")

    if leave.get("status") != "pending":
        raise HTTPException(status_code=400, detail=f"Leave request has already been {leave.get('status')}")

    leave = await collection.find_one_and_update(
        {"_id": object_id, "status": "pending"},
        {"$set": update},
        return_document=ReturnDocument.AFTER
    )
    if not leave:
        raise HTTPException(status_code=400, detail="Leave request has already been processed")
    return leave
