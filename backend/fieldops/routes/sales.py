# Overview: Flask API routes for sales; parses input and returns JSON responses.

from datetime import date

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_role
from ..models import ROLE_ADMIN, ROLE_EMPLOYEE
from ..responses import ok, fail, error_response
from ..services import sales_service, reporting_service
from ..services.reporting_service import GroupKey
from ..services.sales_service import SaleFilter, parse_range_bound
from ..time_utils import to_ymd
from ..validation import FieldOpsError, ValidationError


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _range_args() -> tuple[str | None, str | None]:
    return (
        parse_range_bound(request.args.get("from"), "from"),
        parse_range_bound(request.args.get("to"), "to"),
    )


# ================= EMPLOYEE =================

@sales_bp.post("/")
@require_auth
@require_role(ROLE_EMPLOYEE)
def record_sale_route():
    """
    Record a sale for the calling employee.

    Body: productId, locationId, quantity, saleDate (optional, default today)
    """
    try:
        data = request.get_json(silent=True) or {}
        sale = sales_service.record_sale(
            employee_id=g.current_user.id,
            product_id=data.get("productId"),
            location_id=data.get("locationId"),
            quantity=data.get("quantity"),
            sale_date=data.get("saleDate"),
        )
        return ok(sale.to_dict(), "Sale recorded", 201)

    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return fail("Internal server error", 500)


@sales_bp.get("/my")
@require_auth
@require_role(ROLE_EMPLOYEE)
def my_sales_route():
    """
    The caller's own sales, newest first.

    Query params: from, to, limit
    """
    try:
        date_from, date_to = _range_args()
        filters = SaleFilter(employee_id=g.current_user.id, date_from=date_from, date_to=date_to)
        sales = sales_service.query_sales(filters, limit=request.args.get("limit"), mine=True)
        return ok([sale.to_dict() for sale in sales])
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to list own sales")
        return fail("Internal server error", 500)


@sales_bp.get("/my/summary")
@require_auth
@require_role(ROLE_EMPLOYEE)
def my_summary_route():
    try:
        date_from, date_to = _range_args()
        summary = sales_service.employee_summary(g.current_user.id, date_from=date_from, date_to=date_to)
        return ok(summary)
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to build own sales summary")
        return fail("Internal server error", 500)


# ================= ADMIN =================

@sales_bp.get("/")
@require_auth
@require_role(ROLE_ADMIN)
def list_sales_route():
    """
    Query sales, newest first.

    Query params: employeeId, locationId, productId, from, to, limit
    """
    try:
        filters = SaleFilter.from_args(request.args)
        sales = sales_service.query_sales(filters, limit=request.args.get("limit"))
        return ok([sale.to_dict() for sale in sales])
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to query sales")
        return fail("Internal server error", 500)


@sales_bp.get("/summary/employees")
@require_auth
@require_role(ROLE_ADMIN)
def employee_rollup_route():
    try:
        date_from, date_to = _range_args()
        return ok(reporting_service.rollup(GroupKey.EMPLOYEE, date_from=date_from, date_to=date_to))
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to build employee rollup")
        return fail("Internal server error", 500)


@sales_bp.get("/summary/locations")
@require_auth
@require_role(ROLE_ADMIN)
def location_rollup_route():
    try:
        date_from, date_to = _range_args()
        return ok(reporting_service.rollup(GroupKey.LOCATION, date_from=date_from, date_to=date_to))
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to build location rollup")
        return fail("Internal server error", 500)


@sales_bp.get("/highlights")
@require_auth
@require_role(ROLE_ADMIN)
def highlights_route():
    """
    Top employee and top mart for the current week and month.

    Query params: date (optional reference day, default today)
    """
    try:
        raw = request.args.get("date")
        day = None
        if raw:
            ymd = to_ymd(raw)
            if not ymd:
                raise ValidationError("Invalid date")
            day = date.fromisoformat(ymd)
        return ok(reporting_service.highlights(day))
    except FieldOpsError as exc:
        return error_response(exc)
    except Exception:
        current_app.logger.exception("Failed to build sales highlights")
        return fail("Internal server error", 500)
