from datetime import date

from bson import ObjectId

from workforce.routers import attendance
from workforce.utils.attendance_utils import calculate_total_hours, week_window, weekly_summary, minutes_between

CHECK_IN = {"employee_id": "SKEMP0001", "employee_name": "Ravi Kumar", "department": "Housekeeping"}


def manual_record(**overrides):
    record = {
        "employee_id": "SKEMP0001",
        "employee_name": "Ravi Kumar",
        "date": "2024-03-04",
        "check_in_time": "09:00",
        "check_out_time": "17:30",
        "break_time": 30,
    }
    record.update(overrides)
    return record


def test_total_hours_subtracts_breaks():
    assert calculate_total_hours("09:00", "17:30") == 8.5
    assert calculate_total_hours("09:00", "17:30", 30) == 8.0
    assert minutes_between("10:15", "10:45") == 30


def test_week_window_runs_sunday_to_saturday():
    assert week_window(date(2024, 3, 3)) == ("2024-03-03", "2024-03-09")
    assert week_window(date(2024, 3, 6)) == ("2024-03-03", "2024-03-09")
    assert week_window(date(2024, 3, 9)) == ("2024-03-03", "2024-03-09")


def test_weekly_summary_counts_statuses():
    summary = weekly_summary([
        {"status": "present", "total_hours": 8},
        {"status": "half-day", "total_hours": 4},
        {"status": "absent"},
        {"status": "leave"},
    ])
    assert summary == {
        "total_days": 7,
        "present_days": 1,
        "absent_days": 1,
        "half_days": 1,
        "leave_days": 1,
        "total_hours": 12.0,
        "average_hours": 6.0,
    }
    assert weekly_summary([])["average_hours"] == 0


def test_check_in_once_per_day(client):
    response = client.post("/api/attendance/checkin", json=CHECK_IN)
    assert response.status_code == 200
    record = response.json()["data"]
    assert record["is_checked_in"] is True
    assert record["status"] == "present"

    response = client.post("/api/attendance/checkin", json=CHECK_IN)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Already checked in today"}


def test_break_and_check_out_flow(client):
    client.post("/api/attendance/checkin", json=CHECK_IN)
    action = {"employee_id": CHECK_IN["employee_id"]}

    response = client.post("/api/attendance/breakout", json=action)
    assert response.status_code == 400
    assert response.json()["message"] == "Not currently on break"

    response = client.post("/api/attendance/breakin", json=action)
    assert response.json()["data"]["is_on_break"] is True
    assert client.post("/api/attendance/breakin", json=action).json()["message"] == "Already on break"

    response = client.post("/api/attendance/breakout", json=action)
    assert response.status_code == 200
    assert response.json()["break_duration"].endswith(" minutes")
    assert response.json()["data"]["is_on_break"] is False

    response = client.post("/api/attendance/checkout", json=action)
    assert response.status_code == 200
    record = response.json()["data"]
    assert record["is_checked_in"] is False
    assert record["check_out_time"]

    response = client.post("/api/attendance/checkout", json=action)
    assert response.status_code == 400
    assert response.json()["message"] == "Already checked out today"


def test_check_out_without_check_in(client):
    response = client.post("/api/attendance/checkout", json={"employee_id": "SKEMP0404"})
    assert response.status_code == 404
    assert response.json()["message"] == "No check-in record found for today"


def test_today_status_without_record(client):
    response = client.get("/api/attendance/status/SKEMP0404")
    assert response.status_code == 200
    assert response.json()["data"] is None


def test_manual_attendance_computes_hours(client):
    response = client.post("/api/attendance/manual", json=manual_record())
    assert response.status_code == 201
    assert response.json()["data"]["total_hours"] == 8.0

    response = client.post("/api/attendance/manual", json=manual_record())
    assert response.status_code == 400
    assert response.json()["message"] == "Attendance record already exists for this date"


def test_manual_attendance_requires_check_in(client):
    response = client.post("/api/attendance/manual", json=manual_record(check_in_time=None))
    assert response.status_code == 400
    assert response.json()["message"] == "check_in_time is required"


def test_history_and_weekly_summary(client):
    client.post("/api/attendance/manual", json=manual_record())
    client.post("/api/attendance/manual", json=manual_record(date="2024-04-01"))

    response = client.get("/api/attendance/history", params={
        "employee_id": "SKEMP0001", "start_date": "2024-03-01", "end_date": "2024-03-31"
    })
    assert response.json()["count"] == 1

    response = client.get("/api/attendance/weekly-summary", params={
        "employee_id": "SKEMP0001", "week_start": "2024-03-06"
    })
    data = response.json()["data"]
    assert data["week_start"] == "2024-03-03"
    assert data["week_end"] == "2024-03-09"
    assert data["summary"]["present_days"] == 1
    assert data["summary"]["total_hours"] == 8.0


def test_list_is_paginated(client):
    for day in ("2024-03-04", "2024-03-05", "2024-03-06"):
        client.post("/api/attendance/manual", json=manual_record(date=day))

    response = client.get("/api/attendance/", params={"page": 2, "limit": 2})
    body = response.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


def test_editing_times_recomputes_hours(client):
    record = client.post("/api/attendance/manual", json=manual_record()).json()["data"]

    response = client.put(f"/api/attendance/{record['_id']}", json={"check_out_time": "18:00"})
    assert response.status_code == 200
    assert response.json()["data"]["total_hours"] == 8.5


def test_edit_rejects_bad_and_unknown_ids(client):
    response = client.put("/api/attendance/not-an-id", json={"status": "absent"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid attendance ID"

    response = client.put(f"/api/attendance/{ObjectId()}", json={"status": "absent"})
    assert response.status_code == 404
    assert response.json()["message"] == "Attendance record not found"


def test_check_out_closes_an_open_break(client, monkeypatch):
    times = iter(["09:00", "12:00", "12:45"])
    monkeypatch.setattr(attendance, "current_time_string", lambda: next(times))
    action = {"employee_id": CHECK_IN["employee_id"]}

    client.post("/api/attendance/checkin", json=CHECK_IN)
    client.post("/api/attendance/breakin", json=action)

    response = client.post("/api/attendance/checkout", json=action)
    assert response.status_code == 200
    record = response.json()["data"]
    assert record["is_on_break"] is False
    assert record["break_end_time"] == "12:45"
    assert record["break_time"] == 45
    assert record["total_hours"] == 3.0


def test_edit_rejects_unknown_status(client):
    record = client.post("/api/attendance/manual", json=manual_record()).json()["data"]

    response = client.put(f"/api/attendance/{record['_id']}", json={"status": "vacation"})
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"

    response = client.put(f"/api/attendance/{record['_id']}", json={"status": "half-day"})
    assert response.json()["data"]["status"] == "half-day"


def test_manual_attendance_rejects_unknown_status(client):
    response = client.post("/api/attendance/manual", json=manual_record(status="holiday"))
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
