from __future__ import annotations

import pytest

from hr_portal.main import create_app


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(
        {"STORE_BACKEND": "memory", "AUTO_INIT_DB": False, "AUTO_SEED_DB": False, "AUTO_RECORD_WORKFLOWS": True}
    )


@pytest.fixture()
def client(app):
    return app.test_client()


def _login(client, email, password="secret123"):
    res = client.post("/accounts/authenticate", json={"email": email, "password": password})
    assert res.status_code == 200, res.get_json()
    return res.get_json()


def _bootstrap(client):
    """Admin (first registration), one department, one user with an employee record."""
    client.post(
        "/accounts/register",
        json={"firstName": "Ada", "lastName": "Admin", "email": "admin@example.com", "password": "secret123"},
    )
    _login(client, "admin@example.com")
    dept_id = client.post("/departments", json={"name": "Engineering"}).get_json()["id"]
    user_id = client.post(
        "/accounts",
        json={
            "firstName": "Alice",
            "lastName": "Nguyen",
            "email": "alice@example.com",
            "password": "secret123",
            "confirmPassword": "secret123",
        },
    ).get_json()["id"]
    employee_id = client.post(
        "/employees",
        json={"accountId": user_id, "departmentId": dept_id, "position": "Developer", "hireDate": "2024-01-15"},
    ).get_json()["id"]
    client.post("/accounts/logout")
    return dept_id, user_id, employee_id


def test_requires_session(client):
    res = client.get("/requests")
    assert res.status_code == 401


def test_register_verify_and_login(client):
    first = client.post(
        "/accounts/register",
        json={"firstName": "Ada", "lastName": "Admin", "email": "admin@example.com", "password": "secret123"},
    )
    assert first.status_code == 201
    assert "verificationToken" not in first.get_json()

    second = client.post(
        "/accounts/register",
        json={"firstName": "Bo", "lastName": "Li", "email": "bo@example.com", "password": "secret123"},
    ).get_json()
    assert client.post("/accounts/authenticate", json={"email": "bo@example.com", "password": "secret123"}).status_code == 401

    assert client.post("/accounts/verify-email", json={"token": second["verificationToken"]}).status_code == 200
    me = _login(client, "bo@example.com")
    assert me["role"] == "User"
    assert client.post("/accounts/email-exists", json={"email": "bo@example.com"}).get_json() == {"exists": True}


def test_duplicate_registration_conflicts(client):
    payload = {"firstName": "Ada", "lastName": "Admin", "email": "admin@example.com", "password": "secret123"}
    client.post("/accounts/register", json=payload)
    res = client.post("/accounts/register", json=payload)
    assert res.status_code == 409
    assert res.get_json()["code"] == "CONFLICT"


def test_request_roundtrip_and_access(client):
    dept_id, user_id, employee_id = _bootstrap(client)
    _login(client, "alice@example.com")

    res = client.post(
        "/requests",
        json={
            "employeeId": employee_id,
            "type": "Equipment",
            "items": [{"name": "Laptop", "quantity": 2}, {"name": "Mouse", "quantity": 1}],
        },
    )
    assert res.status_code == 201
    request_id = res.get_json()["id"]

    body = client.get(f"/requests/{request_id}").get_json()
    assert body["status"] == "Pending"
    assert body["requestLeave"] is None
    assert [(i["name"], i["quantity"]) for i in body["requestItems"]] == [("Laptop", 2), ("Mouse", 1)]

    flows = client.get(f"/workflows/employee/{employee_id}").get_json()
    assert [w["details"] for w in flows] == [
        "Setting up workstation",
        "Alice Nguyen requested 2 Laptops, and 1 Mouse",
    ]

    assert client.get("/accounts").status_code == 403
    assert client.delete(f"/departments/{dept_id}").status_code == 403

    client.post("/accounts/logout")
    _login(client, "admin@example.com")
    approved = client.put(f"/requests/{request_id}", json={"status": "Approved"})
    assert approved.get_json()["request"]["status"] == "Approved"

    client.post("/accounts/logout")
    _login(client, "alice@example.com")
    res = client.put(f"/requests/{request_id}", json={"items": [{"name": "Laptop", "quantity": 9}]})
    assert res.status_code == 403


def test_validation_and_not_found_errors(client):
    _, _, employee_id = _bootstrap(client)
    _login(client, "admin@example.com")

    res = client.post(
        "/requests", json={"employeeId": employee_id, "type": "Leave", "startDate": "2025-07-05", "endDate": "2025-07-01"}
    )
    assert res.status_code == 400
    assert res.get_json()["code"] == "VALIDATION_ERROR"

    assert client.get("/requests/404").status_code == 404
    assert client.get("/departments/404").status_code == 404


def test_department_delete_blocked_and_transfer(client):
    dept_id, _, employee_id = _bootstrap(client)
    _login(client, "admin@example.com")

    res = client.delete(f"/departments/{dept_id}")
    assert res.status_code == 409
    assert client.get("/departments").get_json()[0]["employeeCount"] == 1

    finance_id = client.post("/departments", json={"name": "Finance"}).get_json()["id"]
    assert client.post(f"/employees/{employee_id}/transfer", json={"departmentId": finance_id}).status_code == 200
    assert client.post(f"/employees/{employee_id}/transfer", json={"departmentId": finance_id}).status_code == 409
    assert client.get(f"/employees/{employee_id}").get_json()["department"]["name"] == "Finance"

    assert client.delete(f"/departments/{dept_id}").status_code == 200


def test_malformed_fields_are_client_errors(client):
    dept_id, _, employee_id = _bootstrap(client)

    res = client.post("/accounts/authenticate", json={"email": ["admin@example.com"], "password": "secret123"})
    assert res.status_code == 400

    _login(client, "admin@example.com")
    assert client.put(f"/departments/{dept_id}", json={"name": 123}).status_code == 400
    assert client.put(f"/departments/{dept_id}", json={"description": 5}).status_code == 400
    res = client.post(
        "/requests",
        json={"employeeId": employee_id, "type": "Leave", "startDate": "2025-07-01junk", "endDate": "2025-07-05"},
    )
    assert res.status_code == 400


def test_owner_cannot_approve_own_request(client):
    _, _, employee_id = _bootstrap(client)
    _login(client, "alice@example.com")
    request_id = client.post(
        "/requests", json={"employeeId": employee_id, "type": "Equipment", "items": [{"name": "Laptop", "quantity": 1}]}
    ).get_json()["id"]

    assert client.put(f"/requests/{request_id}", json={"status": "Approved"}).status_code == 403
    assert client.get(f"/requests/{request_id}").get_json()["status"] == "Pending"
