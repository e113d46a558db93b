MANAGER_LEAVE = {
    "manager_id": "MGR-1",
    "manager_name": "Kavita Iyer",
    "manager_department": "Operations",
    "manager_contact": "9800000000",
    "leave_type": "casual",
    "from_date": "2024-07-10",
    "to_date": "2024-07-11",
    "reason": "Personal work",
    "applied_by": "MGR-1",
}

ADMIN_LEAVE = {
    "leave_type": "annual",
    "from_date": "2024-05-01",
    "to_date": "2024-05-03",
    "reason": "Family trip",
    "applied_by": "admin-1",
    "employee_name": "Asha Rao",
}


def leave_request(**overrides):
    leave = {
        "employee_id": "SKEMP0001",
        "employee_name": "Ravi Kumar",
        "department": "Housekeeping",
        "contact_number": "9812345678",
        "leave_type": "sick",
        "from_date": "2024-05-01",
        "to_date": "2024-05-03",
        "reason": "Fever",
        "applied_by": "SUP-1",
    }
    leave.update(overrides)
    return leave


def apply(client, **overrides):
    response = client.post("/api/leaves/apply", json=leave_request(**overrides))
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_apply_defaults_applied_for(client):
    leave = apply(client)
    assert leave["status"] == "pending"
    assert leave["total_days"] == 3
    assert leave["applied_for"] == "SKEMP0001"


def test_apply_validations(client):
    response = client.post("/api/leaves/apply", json=leave_request(contact_number=None))
    assert response.json() == {"success": False, "message": "Missing required fields"}

    response = client.post("/api/leaves/apply", json=leave_request(leave_type="sabbatical"))
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid leave type")

    response = client.post("/api/leaves/apply", json=leave_request(from_date="2024-01-01", to_date="2024-04-30"))
    assert response.status_code == 400
    assert response.json()["message"] == "Leave cannot exceed 90 days"


def test_overlapping_leave_is_rejected(client):
    apply(client)

    response = client.post("/api/leaves/apply", json=leave_request(from_date="2024-05-03", to_date="2024-05-04"))
    assert response.status_code == 400
    assert response.json()["message"] == "Leave request overlaps with an existing pending or approved leave"

    # adjacent range and another employee are both fine
    apply(client, from_date="2024-05-04", to_date="2024-05-05")
    apply(client, employee_id="SKEMP0002")


def test_cancelled_leave_frees_the_dates(client):
    leave = apply(client)
    response = client.put(f"/api/leaves/{leave['_id']}/cancel", json={"cancellation_reason": "Recovered"})
    assert response.json()["data"]["status"] == "cancelled"

    apply(client)


def test_status_update_only_once(client):
    leave = apply(client)
    url = f"/api/leaves/{leave['_id']}/status"

    response = client.put(url, json={"status": "approved", "manager_remarks": "Get well soon"})
    assert response.status_code == 200
    approved = response.json()["data"]
    assert approved["approved_by"] == "System"
    assert approved["manager_remarks"] == "Get well soon"

    response = client.put(url, json={"status": "rejected"})
    assert response.status_code == 400
    assert response.json()["message"] == "Leave request has already been approved"


def test_status_update_rejects_other_statuses(client):
    leave = apply(client)
    response = client.put(f"/api/leaves/{leave['_id']}/status", json={"status": "cancelled"})
    assert response.status_code == 400


def test_employees_cannot_decide_leaves(client, login_as):
    leave = apply(client)
    login_as("employee")
    response = client.put(f"/api/leaves/{leave['_id']}/status", json={"status": "approved"})
    assert response.status_code == 403


def test_listing_filters_and_stats(client):
    apply(client)
    apply(client, employee_id="SKEMP0002", department="Security")
    second = apply(client, employee_id="SKEMP0003", department="Security")
    client.put(f"/api/leaves/{second['_id']}/status", json={"status": "rejected", "rejected_by": "Kavita"})

    assert client.get("/api/leaves/", params={"status": "all"}).json()["count"] == 3
    assert client.get("/api/leaves/", params={"department": "Security"}).json()["count"] == 2
    assert client.get("/api/leaves/", params={"status": "rejected"}).json()["count"] == 1
    assert client.get("/api/leaves/departments").json()["data"] == ["Housekeeping", "Security"]

    stats = client.get("/api/leaves/stats").json()["data"]
    assert stats["total"] == 3
    assert stats["pending"] == 2
    assert stats["rejected"] == 1
    assert stats["total_days"] == 9


def test_employee_history_newest_first(client):
    apply(client, from_date="2024-01-10", to_date="2024-01-10")
    apply(client, from_date="2024-03-10", to_date="2024-03-10")

    leaves = client.get("/api/leaves/employee/SKEMP0001").json()["data"]
    assert [leave["total_days"] for leave in leaves] == [1, 1]
    assert leaves[0]["from_date"] > leaves[1]["from_date"]


def test_admin_listing_needs_admin(client, login_as):
    apply(client)
    assert client.get("/api/leaves/admin/all").json()["stats"]["total"] == 1

    login_as("manager")
    assert client.get("/api/leaves/admin/all").status_code == 403


def test_manager_and_admin_leaves_merge(client):
    client.post("/api/manager-leaves/apply", json=MANAGER_LEAVE)
    client.post("/api/admin-leaves/apply", json=ADMIN_LEAVE)

    body = client.get("/api/leaves/admin/manager-admin", params={"limit": 10}).json()
    assert len(body["leaves"]) == 2
    assert body["stats"]["total"] == 2
    assert body["stats"]["pending"] == 2

    by_source = {leave["is_manager_leave"]: leave for leave in body["leaves"]}
    assert by_source[True]["employee_name"] == "Kavita Iyer"
    assert by_source[False]["employee_name"] == "Asha Rao"
