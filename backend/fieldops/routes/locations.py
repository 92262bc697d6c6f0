# Overview: Flask API routes for locations (marts); parses input and returns JSON responses.

from flask import Blueprint, request, current_app

from ..decorators import require_auth, require_role
from ..models import ROLE_ADMIN
from ..responses import ok, fail, error_response
from ..services import reference_service
from ..validation import FieldOpsError


locations_bp = Blueprint("locations", __name__, url_prefix="/api/locations")


@locations_bp.get("/")
def list_locations_route():
    """
    List locations.

    Query params: cityId, city (name, case-insensitive)
    """
    try:
        locations = reference_service.list_locations(
            city_id=request.args.get("cityId"),
            city_name=request.args.get("city"),
        )
        return ok([location.to_dict() for location in locations])
    except Exception:
        current_app.logger.exception("Failed to list locations")
        return fail("Internal server error", 500)


@locations_bp.get("/<int:location_id>")
def get_location_route(location_id: int):
    try:
        location = reference_service.get_location(location_id)
        if not location:
            return fail("Location not found", 404)
        return ok(location.to_dict())
    except Exception:
        current_app.logger.exception("Failed to load location %s", location_id)
        return fail("Internal server error", 500)


@locations_bp.post("/")
@require_auth
@require_role(ROLE_ADMIN)
def create_location_route():
    try:
        data = request.get_json(silent=True) or {}
        location = reference_service.create_location(data)
        return ok(location.to_dict(), "Location added", 201)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to create location")
        return fail("Internal server error", 500)


@locations_bp.put("/<int:location_id>")
@require_auth
@require_role(ROLE_ADMIN)
def update_location_route(location_id: int):
    try:
        data = request.get_json(silent=True) or {}
        location = reference_service.update_location(location_id, data)
        return ok(location.to_dict(), "Location updated")
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to update location %s", location_id)
        return fail("Internal server error", 500)


@locations_bp.delete("/<int:location_id>")
@require_auth
@require_role(ROLE_ADMIN)
def delete_location_route(location_id: int):
    try:
        removed = reference_service.delete_location(location_id)
        return ok(removed, "Location deleted")
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to delete location %s", location_id)
        return fail("Internal server error", 500)
