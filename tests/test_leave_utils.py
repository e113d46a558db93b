from datetime import date, datetime, timezone

import pytest
from bson import ObjectId
from fastapi import HTTPException

from workforce.routers.admin_leaves import build_admin_leave_filter
from workforce.routers.manager_leaves import build_manager_leave_filter
from workforce.utils.leave_utils import (
    calculate_total_days, validate_leave_window, generate_admin_employee_id, ranges_overlap,
    superadmin_decision_update, cancellation_update, with_employee_fields
)
from workforce.utils.query_utils import (
    serialize_document, is_filter_value, regex_filter, pagination, skip_for, format_status_stats,
    to_object_id
)


def test_total_days_is_inclusive():
    assert calculate_total_days(date(2024, 5, 1), date(2024, 5, 1)) == 1
    assert calculate_total_days(date(2024, 5, 1), date(2024, 5, 3)) == 3
    assert calculate_total_days(date(2024, 2, 28), date(2024, 3, 1)) == 3


def test_reversed_window_is_rejected():
    with pytest.raises(HTTPException) as exc:
        validate_leave_window(date(2024, 5, 3), date(2024, 5, 1))
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid date range"


def test_admin_employee_id_format():
    employee_id = generate_admin_employee_id(datetime(2025, 7, 1, tzinfo=timezone.utc))
    assert employee_id.startswith("ADMIN-2025")
    assert len(employee_id) == len("ADMIN-2025") + 3


def test_ranges_overlap_handles_naive_and_aware_values():
    stored_from = datetime(2024, 5, 1)
    stored_to = datetime(2024, 5, 5)
    assert ranges_overlap(stored_from, stored_to, date(2024, 5, 5), date(2024, 5, 8))
    assert not ranges_overlap(stored_from, stored_to, date(2024, 5, 6), date(2024, 5, 8))


def test_superadmin_approval_needs_a_name():
    with pytest.raises(HTTPException) as exc:
        superadmin_decision_update("approved", None, None, None)
    assert exc.value.detail == "Superadmin name is required for approval"

    with pytest.raises(HTTPException) as exc:
        superadmin_decision_update("rejected", "Root", None, None)
    assert exc.value.detail == "Superadmin name is required for rejection"


def test_superadmin_decision_only_accepts_final_states():
    with pytest.raises(HTTPException) as exc:
        superadmin_decision_update("cancelled", "Root", "Root", None)
    assert exc.value.status_code == 400


def test_superadmin_rejection_update():
    update = superadmin_decision_update("rejected", None, "Root", "Peak season")
    assert update["status"] == "rejected"
    assert update["rejected_by"] == "Root"
    assert update["superadmin_remarks"] == "Peak season"
    assert "rejected_at" in update
    assert "approved_by" not in update


def test_cancellation_only_from_pending():
    update = cancellation_update({"status": "pending"}, "Plans changed", "admin-2")
    assert update["status"] == "cancelled"
    assert update["cancellation_reason"] == "Plans changed"
    assert update["applied_by"] == "admin-2"

    with pytest.raises(HTTPException):
        cancellation_update({"status": "approved"}, None, None)


def test_manager_leave_gets_employee_fields():
    leave = with_employee_fields({
        "manager_id": "MGR-1", "manager_name": "Kavita", "manager_department": "Ops", "manager_contact": "999"
    })
    assert leave["employee_id"] == "MGR-1"
    assert leave["employee_name"] == "Kavita"
    assert leave["department"] == "Ops"
    assert leave["contact_number"] == "999"


def test_all_means_no_filter():
    assert not is_filter_value(None)
    assert not is_filter_value("")
    assert not is_filter_value("all")
    assert is_filter_value("pending")


def test_regex_filter_escapes_input():
    assert regex_filter("a.b") == {"$regex": r"a\.b", "$options": "i"}


def test_pagination_envelope():
    assert pagination(2, 10, 25) == {"page": 2, "limit": 10, "total": 25, "pages": 3}
    assert pagination(1, 10, 0)["pages"] == 0
    assert skip_for(3, 20) == 40


def test_status_stats_fill_missing_statuses():
    stats = format_status_stats([{"_id": "pending", "count": 2}, {"_id": "approved", "count": 1}], 3)
    assert stats == {"total": 3, "pending": 2, "approved": 1, "rejected": 0, "cancelled": 0}


def test_serialize_document_mirrors_id_and_hides_password():
    object_id = ObjectId()
    document = serialize_document({"_id": object_id, "name": "Asha", "password": "hash"})
    assert document == {"_id": str(object_id), "id": str(object_id), "name": "Asha"}


def test_invalid_object_id_is_a_bad_request():
    with pytest.raises(HTTPException) as exc:
        to_object_id("not-an-id", "leave")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid leave ID"


def test_admin_leave_filter():
    query = build_admin_leave_filter(
        status="all", department="Administration", employee_name="asha",
        applied_by="admin", applied_by_exact=False,
        start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
    )
    assert query["request_type"] == "admin-leave"
    assert "status" not in query
    assert query["department"] == "Administration"
    assert query["applied_by"] == {"$regex": "admin", "$options": "i"}
    assert query["applied_date"]["$gte"] == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert query["applied_date"]["$lte"].date() == date(2024, 1, 31)


def test_manager_leave_filter_ignores_half_open_date_range():
    query = build_manager_leave_filter(manager_id="MGR-1", status="approved", start_date=date(2024, 1, 1))
    assert query == {"request_type": "manager-leave", "manager_id": "MGR-1", "status": "approved"}
