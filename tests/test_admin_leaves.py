from bson import ObjectId


def admin_leave(**overrides):
    leave = {
        "leave_type": "annual",
        "from_date": "2024-05-01",
        "to_date": "2024-05-03",
        "reason": "Family trip",
        "applied_by": "admin-1",
        "employee_name": "Asha Rao",
    }
    leave.update(overrides)
    return leave


def apply(client, **overrides):
    response = client.post("/api/admin-leaves/apply", json=admin_leave(**overrides))
    assert response.status_code == 201
    return response.json()["leave"]


def test_apply_creates_pending_leave(client):
    leave = apply(client)
    assert leave["status"] == "pending"
    assert leave["total_days"] == 3
    assert leave["department"] == "Administration"
    assert leave["request_type"] == "admin-leave"
    assert leave["employee_id"].startswith("ADMIN-")


def test_apply_requires_fields(client):
    response = client.post("/api/admin-leaves/apply", json=admin_leave(reason=None))
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required fields"}


def test_apply_rejects_reversed_dates(client):
    response = client.post("/api/admin-leaves/apply", json=admin_leave(from_date="2024-05-03", to_date="2024-05-01"))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid date range"


def test_apply_rejects_unknown_leave_type(client):
    response = client.post("/api/admin-leaves/apply", json=admin_leave(leave_type="vacation"))
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_list_and_stats_by_applicant(client):
    apply(client)
    apply(client, from_date="2024-06-01", to_date="2024-06-01")
    apply(client, applied_by="admin-2")

    response = client.get("/api/admin-leaves/", params={"user_id": "admin-1"})
    assert response.json()["count"] == 2

    response = client.get("/api/admin-leaves/stats", params={"user_id": "admin-1"})
    stats = response.json()["stats"]
    assert stats["total"] == 2
    assert stats["pending"] == 2
    assert stats["total_days"] == 4


def test_cancel_only_pending(client):
    leave = apply(client)
    url = f"/api/admin-leaves/{leave['_id']}/cancel"

    response = client.put(url, json={"cancellation_reason": "Plans changed", "cancelled_by": "admin-2"})
    assert response.status_code == 200
    cancelled = response.json()["leave"]
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancellation_reason"] == "Plans changed"
    assert cancelled["applied_by"] == "admin-2"

    response = client.put(url, json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Only pending leave requests can be cancelled"


def test_cancel_unknown_leave(client):
    response = client.put(f"/api/admin-leaves/{ObjectId()}/cancel", json={})
    assert response.status_code == 404
    assert response.json()["message"] == "Leave request not found"


def test_superadmin_decision(client):
    leave = apply(client)
    url = f"/api/admin-leaves/superadmin/{leave['_id']}/status"

    response = client.put(url, json={"status": "approved"})
    assert response.status_code == 400
    assert response.json()["message"] == "Superadmin name is required for approval"

    response = client.put(url, json={"status": "approved", "approved_by": "Root", "superadmin_remarks": "Enjoy"})
    assert response.status_code == 200
    approved = response.json()["leave"]
    assert approved["status"] == "approved"
    assert approved["approved_by"] == "Root"
    assert approved["approved_at"]


def test_superadmin_listing_with_filters_and_pages(client):
    apply(client)
    apply(client, department="Finance")
    apply(client, applied_by="admin-2")

    response = client.get("/api/admin-leaves/superadmin/all", params={"page": 2, "limit": 2})
    body = response.json()
    assert len(body["leaves"]) == 1
    assert body["pagination"]["pages"] == 2
    assert body["stats"]["total"] == 3
    assert sorted(body["filters"]["departments"]) == ["Administration", "Finance", "all"]
    assert body["filters"]["applied_by_list"][0] == "all"

    response = client.get("/api/admin-leaves/superadmin/all", params={"department": "Finance"})
    assert len(response.json()["leaves"]) == 1

    response = client.get("/api/admin-leaves/superadmin/all", params={"applied_by": "ADMIN-2"})
    assert len(response.json()["leaves"]) == 1


def test_superadmin_endpoints_need_superadmin(client, login_as):
    leave = apply(client)
    login_as("admin")

    response = client.get("/api/admin-leaves/superadmin/all")
    assert response.status_code == 403
    assert response.json()["message"] == "You are not authorized to perform this function"

    response = client.put(
        f"/api/admin-leaves/superadmin/{leave['_id']}/status", json={"status": "rejected", "rejected_by": "Me"}
    )
    assert response.status_code == 403


def test_superadmin_decision_only_on_pending_leaves(client):
    leave = apply(client)
    client.put(f"/api/admin-leaves/{leave['_id']}/cancel", json={})

    response = client.put(
        f"/api/admin-leaves/superadmin/{leave['_id']}/status", json={"status": "approved", "approved_by": "Root"}
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Leave request has already been cancelled"

    other = apply(client)
    url = f"/api/admin-leaves/superadmin/{other['_id']}/status"
    assert client.put(url, json={"status": "approved", "approved_by": "Root"}).status_code == 200

    response = client.put(url, json={"status": "rejected", "rejected_by": "Root"})
    assert response.status_code == 400
    assert response.json()["message"] == "Leave request has already been approved"

    response = client.get("/api/admin-leaves/", params={"user_id": "admin-1", "status": "approved"})
    assert response.json()["count"] == 1


def test_superadmin_decision_on_unknown_leave(client):
    response = client.put(
        f"/api/admin-leaves/superadmin/{ObjectId()}/status", json={"status": "approved", "approved_by": "Root"}
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Leave request not found"
