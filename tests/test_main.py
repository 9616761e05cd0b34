"""
Tests for the application shell: root, health, envelopes and middleware headers.
"""


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_request_headers_are_stamped(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
    assert float(response.headers["X-Process-Time"]) >= 0


def test_error_envelope(client):
    response = client.get("/api/auth/session")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Unauthorized"
    assert body["message"]
    assert "errors" not in body


def test_schema_errors_become_validation_error(admin_client):
    response = admin_client.put("/api/admin/users/1", json={"is_active": "not-a-bool"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["errors"][0]["field"] == "is_active"
