from __future__ import annotations


def test_login_sets_session(client):
    resp = client.post("/auth/login", json={"email": "user1@example.com", "password": "secret"})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["employeeId"] == "EMP001"
    me = client.get("/auth/me").get_json()["data"]
    assert me["name"] == "Alice Smith"
    assert me["role"] == "employee"


def test_login_accepts_form_data(client):
    resp = client.post("/auth/login", data={"email": "user9@example.com", "password": "secret"})

    assert resp.status_code == 200
    assert client.get("/dashboard/manager").status_code == 200


def test_bad_credentials(client):
    resp = client.post("/auth/login", json={"email": "user1@example.com", "password": "wrong"})

    assert resp.status_code == 401
    assert resp.get_json()["error"]["code"] == "Unauthenticated"


def test_logout_clears_session(employee_client):
    assert employee_client.post("/auth/logout").status_code == 200

    assert employee_client.get("/auth/me").status_code == 401


def test_health_and_unknown_route(client):
    assert client.get("/health").get_json() == {"data": {"status": "ok"}, "error": None}

    missing = client.get("/nope")
    assert missing.status_code == 404
    assert missing.get_json()["error"]["code"] == "NotFound"


def test_process_time_header(client):
    assert "X-Process-Time" in client.get("/health").headers
