# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- Employees sign up and wait for admin approval
- Login returns an opaque bearer token for the Authorization header
- Logout revokes the presented token
"""

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth
from ..models import ROLE_ADMIN
from ..responses import ok, fail, error_response
from ..services import auth_service, session_service
from ..validation import FieldOpsError


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _login(role: str | None):
    data = request.get_json(silent=True) or {}
    user = auth_service.authenticate(data.get("email"), data.get("password"), role=role)
    _, token = session_service.create_session(user)
    current_app.logger.info("User %s logged in", user.id)
    return ok({"token": token, "user": user.to_public_dict()}, "Login successful")


@auth_bp.post("/signup")
def signup_route():
    """Employee self sign-up. The account stays pending until approved."""
    try:
        data = request.get_json(silent=True) or {}
        user = auth_service.signup_employee(data)
        return ok(user.to_public_dict(), "Signup successful. Waiting for admin approval.", 201)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Signup failed")
        return fail("Internal server error", 500)


@auth_bp.post("/login")
def login_route():
    """
    Authenticate and create a session token.

    Unapproved employees are refused with 403.
    """
    try:
        return _login(None)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Login failed")
        return fail("Internal server error", 500)


@auth_bp.post("/admin/login")
def admin_login_route():
    """Login restricted to admin accounts."""
    try:
        return _login(ROLE_ADMIN)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Admin login failed")
        return fail("Internal server error", 500)


@auth_bp.post("/logout")
@require_auth
def logout_route():
    try:
        session_service.revoke_session(g.token, reason="Logout")
        return ok(None, "Logged out")
    except Exception:
        current_app.logger.exception("Logout failed")
        return fail("Internal server error", 500)


@auth_bp.get("/me")
@require_auth
def me_route():
    try:
        return ok(g.current_user.to_public_dict())
    except Exception:
        current_app.logger.exception("Failed to load current user")
        return fail("Internal server error", 500)
