from bson import ObjectId

EMPLOYEE = {
    "name": "Ravi Kumar",
    "email": "ravi@example.com",
    "phone": "9812345678",
    "aadhar_number": "123412341234",
    "department": "Housekeeping",
    "position": "Cleaner",
}


def epf_form(**overrides):
    data = {
        "employee_id": "SKEMP0001",
        "member_name": "Ravi Kumar",
        "aadhar_number": "123412341234",
        "father_name": "Suresh Kumar",
        "previous_employment": False,
    }
    data.update(overrides)
    return data


def create(client):
    client.post("/api/employees/", json=EMPLOYEE)
    response = client.post("/api/epf/", json=epf_form())
    assert response.status_code == 201
    return response.json()["data"]


def test_create_links_employee_and_keeps_declaration_fields(client):
    form = create(client)
    employee = client.get("/api/employees/SKEMP0001").json()["data"]

    assert form["employee"] == employee["_id"]
    assert form["status"] == "draft"
    assert form["father_name"] == "Suresh Kumar"
    assert form["previous_employment"] is False


def test_status_cannot_be_set_on_create(client):
    client.post("/api/employees/", json=EMPLOYEE)
    form = client.post("/api/epf/", json=epf_form(status="approved")).json()["data"]
    assert form["status"] == "draft"


def test_create_validations(client):
    response = client.post("/api/epf/", json=epf_form(aadhar_number=None))
    assert response.status_code == 400
    assert response.json()["message"] == "Employee ID, Member Name, and Aadhar Number are required"

    response = client.post("/api/epf/", json=epf_form())
    assert response.status_code == 404
    assert response.json()["message"] == "Employee not found"

    create(client)
    response = client.post("/api/epf/", json=epf_form())
    assert response.status_code == 400
    assert response.json()["message"] == "EPF Form already exists for this employee"


def test_listing_embeds_employee_summary(client):
    form = create(client)

    forms = client.get("/api/epf/").json()["data"]
    assert forms[0]["employee"]["name"] == "Ravi Kumar"
    assert "department" not in forms[0]["employee"]

    detail = client.get(f"/api/epf/{form['_id']}").json()["data"]
    assert detail["employee"]["department"] == "Housekeeping"

    assert client.get("/api/epf/", params={"status": "submitted"}).json()["data"] == []


def test_status_transitions_stamp_dates(client):
    form = create(client)
    url = f"/api/epf/{form['_id']}/status"

    assert client.put(url, json={"status": "archived"}).status_code == 400

    submitted = client.put(url, json={"status": "submitted"}).json()["data"]
    assert submitted["submitted_at"]
    assert submitted["approved_at"] is None

    approved = client.put(url, json={"status": "approved"}).json()["data"]
    assert approved["approved_at"]


def test_unknown_form(client):
    response = client.get(f"/api/epf/{ObjectId()}")
    assert response.status_code == 404
    assert response.json()["message"] == "EPF Form not found"
