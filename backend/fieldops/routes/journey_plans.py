# Overview: Flask API routes for journey plans; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_role
from ..models import ROLE_ADMIN, ROLE_SUPERVISOR
from ..responses import ok, fail, error_response
from ..services import journey_plan_service
from ..validation import FieldOpsError


journey_plans_bp = Blueprint("journey_plans", __name__, url_prefix="/api/journey-plans")


# ================= ADMIN =================

@journey_plans_bp.get("/")
@require_auth
@require_role(ROLE_ADMIN)
def list_plans_route():
    """
    List plans, most recently updated first.

    Query params: supervisorId, limit
    """
    try:
        plans = journey_plan_service.list_plans(
            supervisor_id=request.args.get("supervisorId"),
            limit=request.args.get("limit"),
        )
        return ok([plan.to_dict() for plan in plans])
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to list journey plans")
        return fail("Internal server error", 500)


@journey_plans_bp.post("/")
@require_auth
@require_role(ROLE_ADMIN)
def upsert_plan_route():
    """
    Create or replace the plan of a supervisor (one plan per supervisor).
    """
    try:
        data = request.get_json(silent=True) or {}
        supervisor_id = data.get("supervisorId")
        if supervisor_id is None:
            supervisor_id = data.get("supervisor_id", data.get("supervisor"))

        plan = journey_plan_service.upsert_plan(
            supervisor_id=supervisor_id,
            period_type=data.get("periodType"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            days=data.get("days"),
            locations_snapshot=data.get("locationsSnapshot"),
            copied_from=data.get("copiedFrom"),
        )
        return ok(plan.to_dict(), "Plan saved")

    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to save journey plan")
        return fail("Internal server error", 500)


@journey_plans_bp.delete("/<int:plan_id>")
@require_auth
@require_role(ROLE_ADMIN)
def delete_plan_route(plan_id: int):
    try:
        removed = journey_plan_service.delete_plan(plan_id)
        return ok(removed, "Plan deleted")
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to delete journey plan %s", plan_id)
        return fail("Internal server error", 500)


# ================= SUPERVISOR =================

@journey_plans_bp.get("/my")
@require_auth
@require_role(ROLE_SUPERVISOR)
def my_plans_route():
    try:
        plans = journey_plan_service.list_plans(
            supervisor_id=g.current_user.id,
            limit=request.args.get("limit"),
        )
        return ok([plan.to_dict() for plan in plans])
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to list own journey plans")
        return fail("Internal server error", 500)


@journey_plans_bp.get("/my/active")
@require_auth
@require_role(ROLE_SUPERVISOR)
def my_active_plan_route():
    """
    The caller's plan covering ?date=YYYY-MM-DD (default today).
    """
    try:
        active = journey_plan_service.get_active_plan(g.current_user.id, request.args.get("date"))
        if active is None:
            return ok(None, "No plan for this date")
        return ok(active)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to resolve active journey plan")
        return fail("Internal server error", 500)


# ================= ADMIN OR OWNER =================

@journey_plans_bp.get("/<int:plan_id>")
@require_auth
def get_plan_route(plan_id: int):
    try:
        plan = journey_plan_service.get_plan_for_viewer(plan_id, g.current_user)
        return ok(plan.to_dict())
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to load journey plan %s", plan_id)
        return fail("Internal server error", 500)
