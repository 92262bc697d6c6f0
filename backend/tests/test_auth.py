"""
Authentication and authorization tests.

Verifies:
- Unauthenticated requests return 401
- Employees sign up pending and cannot log in until approved
- Logout revokes the session
- Role checks return 403
"""

from datetime import timedelta

import pytest

from fieldops.models import SessionToken
from fieldops.services import auth_service, session_service
from fieldops.services.auth_service import APPROVAL_PENDING_MESSAGE
from fieldops.validation import AuthenticationError, AuthorizationError, ConflictError, ValidationError


SIGNUP = {
    "name": "Zara",
    "email": "Zara@Example.com",
    "city": "Lahore",
    "employeeCnic": "35202-1234567-1",
    "location": "Gulberg",
    "password": "Password123!",
    "confirmPassword": "Password123!",
}


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("POST", "/api/auth/logout"),
            ("GET", "/api/admin/users"),
            ("GET", "/api/admin/stats"),
            ("GET", "/api/cities"),
            ("GET", "/api/journey-plans"),
            ("GET", "/api/journey-plans/my/active"),
            ("POST", "/api/sales"),
            ("GET", "/api/sales/highlights"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_unknown_token(self, client, db_session):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid token"


class TestRoleChecks:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/admin/users"),
            ("POST", "/api/journey-plans"),
            ("GET", "/api/sales"),
            ("GET", "/api/journey-plans/my"),
        ],
    )
    def test_employee_forbidden(self, client, employee_headers, method, path):
        resp = getattr(client, method.lower())(path, headers=employee_headers)
        assert resp.status_code == 403

    def test_supervisor_cannot_record_sales(self, client, supervisor_headers):
        resp = client.post("/api/sales", json={}, headers=supervisor_headers)
        assert resp.status_code == 403


# =============================================================================
# SIGNUP / APPROVAL / LOGIN
# =============================================================================


class TestSignupFlow:

    def test_signup_approve_login_logout(self, client, admin_headers):
        resp = client.post("/api/auth/signup", json=SIGNUP)
        assert resp.status_code == 201
        user_id = resp.get_json()["result"]["id"]

        credentials = {"email": "zara@example.com", "password": "Password123!"}
        resp = client.post("/api/auth/login", json=credentials)
        assert resp.status_code == 403
        assert resp.get_json()["message"] == APPROVAL_PENDING_MESSAGE

        pending = client.get("/api/admin/users?status=pending", headers=admin_headers).get_json()["result"]
        assert [u["id"] for u in pending] == [user_id]

        resp = client.post(f"/api/admin/users/{user_id}/approve", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["result"]["isApproved"] is True

        resp = client.post("/api/auth/login", json=credentials)
        assert resp.status_code == 200
        token = resp.get_json()["result"]["token"]
        headers = {"Authorization": f"Bearer {token}"}

        me = client.get("/api/auth/me", headers=headers).get_json()["result"]
        assert me["email"] == "zara@example.com"
        assert me["role"] == "employee"

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_duplicate_email(self, client, db_session):
        assert client.post("/api/auth/signup", json=SIGNUP).status_code == 201
        resp = client.post("/api/auth/signup", json=SIGNUP)
        assert resp.status_code == 409

    def test_password_mismatch(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.signup_employee({**SIGNUP, "confirmPassword": "Different123!"})

    def test_weak_password(self, db_session):
        with pytest.raises(auth_service.PasswordValidationError):
            auth_service.signup_employee({**SIGNUP, "password": "weak", "confirmPassword": "weak"})

    def test_missing_field(self, client, db_session):
        resp = client.post("/api/auth/signup", json={**SIGNUP, "city": ""})
        assert resp.status_code == 400


class TestLogin:

    def test_wrong_password(self, client, employee):
        resp = client.post("/api/auth/login", json={"email": employee.email, "password": "Wrong123!"})
        assert resp.status_code == 401

    def test_admin_alias_rejects_other_roles(self, client, employee):
        resp = client.post("/api/auth/admin/login", json={"email": employee.email, "password": "Password123!"})
        assert resp.status_code == 403

    def test_admin_alias(self, client, admin):
        resp = client.post("/api/auth/admin/login", json={"email": "ADMIN@example.com", "password": "Password123!"})
        assert resp.status_code == 200
        assert resp.get_json()["result"]["user"]["role"] == "admin"

    def test_missing_credentials(self, db_session):
        with pytest.raises(ValidationError):
            auth_service.authenticate("", "")

    def test_unknown_email(self, db_session):
        with pytest.raises(AuthenticationError):
            auth_service.authenticate("nobody@example.com", "Password123!")

    def test_only_employees_need_approval(self, db_session, supervisor):
        with pytest.raises(ValidationError):
            auth_service.approve_user(supervisor.id)


class TestSessions:

    def test_idle_session_expires(self, db_session, employee):
        session, token = session_service.create_session(employee)
        session.last_used_at = session.last_used_at - timedelta(hours=25)
        db_session.commit()

        assert session_service.validate_session(token) is None
        stored = db_session.query(SessionToken).filter_by(id=session.id).one()
        assert stored.is_revoked is True
        assert stored.revoked_reason == "Idle timeout"

    def test_absolute_expiry(self, db_session, employee):
        session, token = session_service.create_session(employee)
        session.expires_at = session.created_at - timedelta(seconds=1)
        db_session.commit()

        assert session_service.validate_session(token) is None

    def test_revoke_unknown_token(self, db_session):
        assert session_service.revoke_session("missing") is False


class TestAdminOperations:

    def test_create_supervisor(self, client, admin_headers):
        payload = {
            "name": "Sam",
            "email": "sam@example.com",
            "cnicNumber": "35202-7654321-1",
            "city": "Lahore",
            "password": "Password123!",
            "confirmPassword": "Password123!",
        }
        resp = client.post("/api/admin/supervisors", json=payload, headers=admin_headers)
        assert resp.status_code == 201
        result = resp.get_json()["result"]
        assert result["role"] == "supervisor"
        assert result["isApproved"] is True

        resp = client.post("/api/admin/supervisors", json=payload, headers=admin_headers)
        assert resp.status_code == 409

    def test_stats(self, client, admin_headers, employee, supervisor, locations, products):
        stats = client.get("/api/admin/stats", headers=admin_headers).get_json()["result"]
        assert stats == {
            "pending": 0,
            "employees": 1,
            "supervisors": 1,
            "cities": 1,
            "locations": 3,
            "products": 3,
        }

    def test_seed_admin_is_idempotent(self, db_session):
        assert auth_service.ensure_seed_admin() is not None
        assert auth_service.ensure_seed_admin() is None

    def test_service_errors(self, db_session):
        with pytest.raises(ConflictError):
            auth_service.signup_employee(SIGNUP)
            auth_service.signup_employee(SIGNUP)
        with pytest.raises(AuthorizationError):
            auth_service.authenticate(SIGNUP["email"], SIGNUP["password"])
