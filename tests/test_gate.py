"""
Tests for the edge authorization gate, both the decision function and the middleware.
"""
from datetime import timedelta

import pytest
from jose import jwt

from medportal.core import gate
from medportal.core.security import create_session_token


def token_for(role, user_id="1"):
    return create_session_token({"user_id": user_id, "role": role, "email": "someone@example.com"})


class TestEvaluate:
    @pytest.mark.parametrize("path", ["/", "/about", "/api/admin/users", "/administrator", "/doctors"])
    def test_unscoped_paths_pass(self, path):
        assert gate.evaluate(path, None).allowed
        assert gate.evaluate(path, "garbage").allowed

    @pytest.mark.parametrize("path", ["/admin", "/admin/users", "/doctor/profile", "/patient"])
    def test_scoped_path_without_cookie_redirects_to_login(self, path):
        decision = gate.evaluate(path, None)
        assert decision.redirect_to == "/login"
        assert decision.clear_cookie is False

    @pytest.mark.parametrize("path", ["/login", "/signup"])
    def test_auth_pages_open_to_anonymous_visitors(self, path):
        assert gate.evaluate(path, None).allowed

    def test_corrupt_token_clears_cookie(self):
        decision = gate.evaluate("/patient", "not-a-jwt")
        assert decision.redirect_to == "/login"
        assert decision.clear_cookie is True

    def test_token_without_known_role_clears_cookie(self):
        decision = gate.evaluate("/admin", token_for("SUPERUSER"))
        assert decision == gate.GateDecision(redirect_to="/login", clear_cookie=True)

    @pytest.mark.parametrize("role,home", [("ADMIN", "/admin"), ("DOCTOR", "/doctor"), ("PATIENT", "/patient")])
    def test_signed_in_user_leaves_auth_pages(self, role, home):
        assert gate.evaluate("/login", token_for(role)).redirect_to == home
        assert gate.evaluate("/signup", token_for(role)).redirect_to == home

    def test_wrong_area_redirects_to_own_home(self):
        assert gate.evaluate("/admin/users", token_for("PATIENT")).redirect_to == "/patient"
        assert gate.evaluate("/patient", token_for("DOCTOR")).redirect_to == "/doctor"

    def test_own_area_passes(self):
        assert gate.evaluate("/doctor/profile", token_for("DOCTOR")).allowed

    def test_signature_is_not_checked(self):
        forged = jwt.encode({"user_id": "1", "role": "ADMIN"}, "some-other-key", algorithm="HS256")
        assert gate.evaluate("/admin", forged).allowed

    def test_expiry_is_not_checked(self):
        expired = create_session_token(
            {"user_id": "1", "role": "PATIENT", "email": "p@example.com"},
            expires_delta=timedelta(seconds=-60),
        )
        assert gate.evaluate("/patient", expired).allowed


class TestMiddleware:
    def test_redirect_uses_307(self, client):
        response = client.get("/admin", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    def test_corrupt_cookie_is_deleted(self, client):
        client.cookies.set("auth_token", "corrupt")
        response = client.get("/doctor/profile", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/login"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("auth_token=")
        assert "Max-Age=0" in set_cookie

    def test_role_redirect(self, client):
        client.cookies.set("auth_token", token_for("PATIENT"))
        response = client.get("/login", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/patient"

    def test_allowed_request_reaches_the_app(self, client):
        client.cookies.set("auth_token", token_for("ADMIN"))
        # No page is mounted at /admin; passing the gate means a plain 404
        response = client.get("/admin", follow_redirects=False)
        assert response.status_code == 404

    def test_api_routes_are_not_gated(self, client):
        response = client.get("/api/admin/users", follow_redirects=False)
        assert response.status_code == 401

    def test_forged_cookie_reaches_page_but_not_data(self, client):
        forged = jwt.encode({"user_id": "1", "role": "ADMIN", "email": "x@example.com"}, "wrong", algorithm="HS256")
        client.cookies.set("auth_token", forged)
        assert client.get("/admin", follow_redirects=False).status_code == 404
        assert client.get("/api/admin/users").status_code == 401
