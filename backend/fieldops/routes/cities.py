# Overview: Flask API routes for cities; parses input and returns JSON responses.

from flask import Blueprint, request, current_app

from ..decorators import require_auth, require_role
from ..models import ROLE_ADMIN
from ..responses import ok, fail, error_response
from ..services import reference_service
from ..validation import FieldOpsError


cities_bp = Blueprint("cities", __name__, url_prefix="/api/cities")


@cities_bp.get("/")
@require_auth
def list_cities_route():
    try:
        return ok([city.to_dict() for city in reference_service.list_cities()])
    except Exception:
        current_app.logger.exception("Failed to list cities")
        return fail("Internal server error", 500)


@cities_bp.post("/")
@require_auth
@require_role(ROLE_ADMIN)
def create_city_route():
    try:
        data = request.get_json(silent=True) or {}
        city = reference_service.create_city(data.get("name"))
        return ok(city.to_dict(), "City added", 201)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to create city")
        return fail("Internal server error", 500)
