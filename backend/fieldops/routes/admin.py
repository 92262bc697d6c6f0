# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

from flask import Blueprint, request, current_app

from ..decorators import require_auth, require_role
from ..models import ROLE_ADMIN
from ..responses import ok, fail, error_response
from ..services import auth_service
from ..validation import FieldOpsError


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/users")
@require_auth
@require_role(ROLE_ADMIN)
def list_users_route():
    """
    List users.

    Query params: status=pending for employees awaiting approval.
    """
    try:
        users = auth_service.list_users(request.args.get("status"))
        return ok([user.to_dict() for user in users])
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to list users")
        return fail("Internal server error", 500)


@admin_bp.get("/stats")
@require_auth
@require_role(ROLE_ADMIN)
def stats_route():
    try:
        return ok(auth_service.dashboard_stats())
    except Exception:
        current_app.logger.exception("Failed to build dashboard stats")
        return fail("Internal server error", 500)


@admin_bp.post("/users/<int:user_id>/approve")
@require_auth
@require_role(ROLE_ADMIN)
def approve_user_route(user_id: int):
    try:
        user = auth_service.approve_user(user_id)
        return ok(user.to_dict(), "User approved")
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to approve user %s", user_id)
        return fail("Internal server error", 500)


@admin_bp.post("/supervisors")
@require_auth
@require_role(ROLE_ADMIN)
def create_supervisor_route():
    try:
        data = request.get_json(silent=True) or {}
        user = auth_service.create_supervisor(data)
        return ok(user.to_dict(), "Supervisor created", 201)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to create supervisor")
        return fail("Internal server error", 500)
