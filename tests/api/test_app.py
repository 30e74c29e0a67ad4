from __future__ import annotations

import pytest

from bunk_buzz.core.exceptions import ConfigurationError


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "Bunk Buzz API is running", "environment": "testing"}


def test_api_index(client):
    body = client.get("/api").get_json()

    assert body["message"] == "Bunk Buzz API v1.0"
    assert body["documentation"]["bunkPredictor"] == "/api/bunk-predictor"


def test_unknown_route(client):
    res = client.get("/api/nope")

    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Route /api/nope not found"}


def test_wrong_method(client):
    res = client.patch("/api/subjects")

    assert res.status_code == 405
    assert res.get_json()["success"] is False


def test_unexpected_error_is_hidden(app, client):
    @app.route("/boom")
    def boom():
        raise RuntimeError("db password is hunter2")

    res = client.get("/boom")

    assert res.status_code == 500
    assert res.get_json() == {"success": False, "message": "Internal server error"}


def test_missing_required_settings(monkeypatch, container):
    from bunk_buzz.config import testing
    from bunk_buzz.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(testing, "REQUIRED_SETTINGS", ("JWT_ACCESS_SECRET",), raising=False)
    monkeypatch.setattr(testing, "JWT_ACCESS_SECRET", "")

    with pytest.raises(ConfigurationError, match="JWT_ACCESS_SECRET"):
        create_app(container)


# ---- auth ----


def test_protected_route_without_token(client):
    res = client.get("/api/subjects")

    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Not authorized, no token provided"}


def test_protected_route_with_garbage_token(client):
    res = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert res.status_code == 401


def test_unverified_user_is_limited_to_auth_routes(client, users, tokens):
    user = users.add(email="new@example.com", email_verified=False)
    headers = {"Authorization": f"Bearer {tokens.issue_pair(user).access_token}"}

    assert client.get("/api/auth/me", headers=headers).status_code == 200
    res = client.get("/api/subjects", headers=headers)
    assert res.status_code == 403
    assert "verify your email" in res.get_json()["message"]


def test_signup_then_verify_then_me(client, pending, mailer):
    res = client.post(
        "/api/auth/signup",
        json={"name": "Ravi", "email": "Ravi@Example.com", "college": "BITS", "password": "Secret1"},
    )
    assert res.status_code == 201
    body = res.get_json()
    assert body["data"]["email"] == "ravi@example.com"
    assert body["message"].startswith("Verification email sent")

    token = mailer.verification[-1][2]
    res = client.post("/api/auth/verify-email", json={"token": token})
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["user"]["emailVerified"] is True
    assert "passwordHash" not in data["user"]
    assert "refreshToken" not in data["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.get_json()["data"]["user"]["email"] == "ravi@example.com"


def test_signup_validation_errors(client):
    res = client.post("/api/auth/signup", json={"name": "Ravi", "email": "bad", "college": "BITS", "password": "Secret1"})

    assert res.status_code == 400
    body = res.get_json()
    assert body["success"] is False
    assert body["errors"] == [{"field": "email", "message": "Please provide a valid email"}]


def test_login_refresh_logout(client, student):
    res = client.post("/api/auth/login", json={"email": student.email, "password": "Secret1"})
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["user"]["id"] == student.user_id

    refreshed = client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
    assert refreshed.status_code == 200
    new_refresh = refreshed.get_json()["data"]["refreshToken"]

    headers = {"Authorization": f"Bearer {data['accessToken']}"}
    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.post("/api/auth/refresh", json={"refreshToken": new_refresh}).status_code == 401


def test_login_bad_password(client, student):
    res = client.post("/api/auth/login", json={"email": student.email, "password": "Wrong1"})

    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid email or password"


def test_google_login(client):
    res = client.post("/api/auth/google", json={"token": "id-token"})

    assert res.status_code == 200
    assert res.get_json()["data"]["user"]["authProvider"] == "google"


# ---- profile ----


def test_profile_update_and_password(client, auth_headers):
    res = client.put("/api/profile", json={"college": "NIT", "overallMinimumAttendance": 80}, headers=auth_headers)
    assert res.status_code == 200
    assert res.get_json()["data"]["user"]["college"] == "NIT"

    res = client.put(
        "/api/profile/password",
        json={"currentPassword": "Secret1", "newPassword": "Better2"},
        headers=auth_headers,
    )
    assert res.status_code == 200


def test_deactivated_account_loses_access(client, auth_headers):
    assert client.delete("/api/profile", headers=auth_headers).status_code == 200

    assert client.get("/api/profile", headers=auth_headers).status_code == 401
