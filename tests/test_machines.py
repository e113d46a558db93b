from bson import ObjectId


def machine(**overrides):
    data = {
        "name": "Floor Scrubber",
        "cost": 25000,
        "purchase_date": "2024-01-10",
        "quantity": 2,
        "serial_number": "SN-1001",
        "location": "Andheri",
    }
    data.update(overrides)
    return data


def create(client, **overrides):
    response = client.post("/api/machines/", json=machine(**overrides))
    assert response.status_code == 201
    return response.json()["data"]


def test_create_machine(client):
    created = create(client)
    assert created["status"] == "operational"
    assert created["maintenance_history"] == []


def test_serial_numbers_are_unique(client):
    create(client)
    response = client.post("/api/machines/", json=machine(name="Other"))
    assert response.status_code == 400
    assert response.json()["message"] == "A machine with this serial number already exists"


def test_machines_without_serial_do_not_clash(client):
    first = create(client, serial_number=None)
    create(client, serial_number="")
    assert "serial_number" not in first


def test_stats(client):
    create(client)
    create(client, serial_number=None, cost=1000, quantity=1, status="maintenance")

    stats = client.get("/api/machines/stats").json()["data"]
    assert stats == {
        "total_machines": 2,
        "total_machine_value": 51000,
        "operational_machines": 1,
        "maintenance_machines": 1,
        "out_of_service_machines": 0,
    }


def test_maintenance_record(client):
    created = create(client)
    response = client.post(f"/api/machines/{created['_id']}/maintenance", json={
        "type": "service", "description": "Brush replacement", "cost": 1200,
        "performed_by": "Vendor", "date": "2024-06-01",
    })
    assert response.status_code == 200
    updated = response.json()["data"]
    assert len(updated["maintenance_history"]) == 1
    assert updated["last_maintenance_date"].startswith("2024-06-01")


def test_update_validations(client):
    created = create(client)
    create(client, serial_number="SN-2002")
    url = f"/api/machines/{created['_id']}"

    assert client.put(url, json={"status": "broken"}).status_code == 400
    assert client.put(url, json={"serial_number": "SN-2002"}).status_code == 400

    response = client.put(url, json={"status": "out-of-service", "serial_number": "SN-1001"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "out-of-service"


def test_get_and_delete(client):
    created = create(client)
    url = f"/api/machines/{created['_id']}"

    assert client.get(url).json()["data"]["name"] == "Floor Scrubber"
    assert client.delete(url).status_code == 200
    response = client.get(url)
    assert response.status_code == 404
    assert response.json()["message"] == "Machine not found"
    assert client.get("/api/machines/").json()["total"] == 0


def test_unknown_and_invalid_machine_ids(client):
    assert client.delete(f"/api/machines/{ObjectId()}").status_code == 404
    response = client.get("/api/machines/xyz")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid machine ID"
