from bson import ObjectId


def supervisor(**overrides):
    data = {
        "name": "Meena Shah",
        "email": "Meena@Example.com",
        "phone": "9870000000",
        "password": "changeme",
        "department": "Housekeeping",
        "site": "Andheri",
    }
    data.update(overrides)
    return data


def create(client, **overrides):
    response = client.post("/api/supervisors/", json=supervisor(**overrides))
    assert response.status_code == 201
    return response.json()["data"]


def test_create_never_returns_password(client):
    created = create(client)
    assert created["email"] == "meena@example.com"
    assert created["is_active"] is True
    assert "password" not in created

    listed = client.get("/api/supervisors/").json()["data"]
    assert "password" not in listed[0]
    assert "password" not in client.get(f"/api/supervisors/{created['_id']}").json()["data"]


def test_create_validations(client):
    response = client.post("/api/supervisors/", json=supervisor(password=None))
    assert response.status_code == 400
    assert response.json()["message"] == "Name, email, phone and password are required"

    create(client)
    response = client.post("/api/supervisors/", json=supervisor(email="MEENA@example.com"))
    assert response.status_code == 400
    assert response.json()["message"] == "Supervisor with this email already exists"


def test_filters_search_and_stats(client):
    create(client)
    other = create(client, name="Arjun Rao", email="arjun@example.com", department="Security", site="Powai")
    client.patch(f"/api/supervisors/{other['_id']}/toggle-status")

    assert client.get("/api/supervisors/", params={"department": "Security"}).json()["count"] == 1
    assert client.get("/api/supervisors/", params={"is_active": "true"}).json()["count"] == 1
    assert client.get("/api/supervisors/", params={"site": "all"}).json()["count"] == 2

    assert client.get("/api/supervisors/search", params={"q": "powai"}).json()["count"] == 1
    assert client.get("/api/supervisors/search").status_code == 400

    assert client.get("/api/supervisors/stats").json()["data"] == {"total": 2, "active": 1, "inactive": 1}


def test_update_toggle_and_delete(client):
    created = create(client)
    create(client, email="arjun@example.com")
    url = f"/api/supervisors/{created['_id']}"

    response = client.put(url, json={"site": "Powai", "assigned_projects": ["Tower A"]})
    assert response.json()["data"]["site"] == "Powai"
    assert "password" not in response.json()["data"]

    assert client.put(url, json={"email": "ARJUN@example.com"}).status_code == 400

    response = client.patch(f"{url}/toggle-status")
    assert response.json()["message"] == "Supervisor deactivated successfully"
    assert response.json()["data"]["is_active"] is False

    assert client.delete(url).status_code == 200
    assert client.get(url).status_code == 404
    assert client.delete(f"/api/supervisors/{ObjectId()}").status_code == 404
