# Overview: Flask API routes for products; parses input and returns JSON responses.

from flask import Blueprint, request, current_app

from ..decorators import require_auth, require_role
from ..models import ROLE_ADMIN
from ..responses import ok, fail, error_response
from ..services import reference_service
from ..validation import FieldOpsError


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("/")
def list_products_route():
    try:
        return ok([product.to_dict() for product in reference_service.list_products()])
    except Exception:
        current_app.logger.exception("Failed to list products")
        return fail("Internal server error", 500)


@products_bp.post("/")
@require_auth
@require_role(ROLE_ADMIN)
def create_product_route():
    try:
        data = request.get_json(silent=True) or {}
        product = reference_service.create_product(data)
        return ok(product.to_dict(), "Product added", 201)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return fail("Internal server error", 500)
