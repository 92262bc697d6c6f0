"""
Sale records: append-only visit sales with frozen snapshots.

Each record copies the employee name, location label and product
name/weight at recording time. total_weight is computed once and never
re-derived, so rollups over history do not move when reference data does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from flask import current_app
from sqlalchemy import false, func

from ..extensions import db
from ..models import SaleRecord
from ..validation import ValidationError, NotFoundError, AuthorizationError, parse_positive_number, clamp_limit
from ..time_utils import utcnow, today, to_ymd
from .auth_service import get_user
from .concurrency import begin_exclusive, run_with_retry
from .reference_service import get_product, get_location


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaleFilter:
    """Equality filters plus an inclusive sale_date range; None means unfiltered."""
    employee_id: Any = None
    location_id: Any = None
    product_id: Any = None
    date_from: str | None = None
    date_to: str | None = None

    @classmethod
    def from_args(cls, args, **overrides) -> "SaleFilter":
        """Build from query-string style args (employeeId, locationId, productId, from, to)."""
        values = {
            "employee_id": args.get("employeeId") or None,
            "location_id": args.get("locationId") or None,
            "product_id": args.get("productId") or None,
            "date_from": parse_range_bound(args.get("from"), "from"),
            "date_to": parse_range_bound(args.get("to"), "to"),
        }
        values.update(overrides)
        return cls(**values)


def parse_range_bound(value: Any, field: str) -> str | None:
    """Canonicalize an optional range bound; blank means no bound."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ymd = to_ymd(value)
    if not ymd:
        raise ValidationError(f"Invalid {field} date")
    return ymd


def _filter_int(query, column, value):
    try:
        return query.filter(column == int(str(value).strip()))
    except ValueError:
        # ids are integers; anything else matches nothing
        return query.filter(false())


def apply_filter(query, filters: SaleFilter):
    """Apply a SaleFilter to any query selecting from SaleRecord."""
    if filters.employee_id is not None:
        query = _filter_int(query, SaleRecord.employee_id, filters.employee_id)
    if filters.location_id is not None:
        query = _filter_int(query, SaleRecord.location_id, filters.location_id)
    if filters.product_id is not None:
        query = query.filter(SaleRecord.product_id == str(filters.product_id))
    if filters.date_from:
        query = query.filter(SaleRecord.sale_date >= filters.date_from)
    if filters.date_to:
        query = query.filter(SaleRecord.sale_date <= filters.date_to)
    return query


def compute_total_weight(quantity: float, unit_weight: float | None) -> float:
    """quantity × per-unit weight; the quantity alone when the product has no weight."""
    if unit_weight is None:
        return quantity
    return quantity * unit_weight


def record_sale(
    *,
    employee_id: int,
    product_id: Any,
    location_id: Any,
    quantity: Any,
    sale_date: Any = None,
) -> SaleRecord:
    """
    Record one sale for the calling employee.

    quantity must be a finite number > 0; sale_date defaults to today.
    Unknown product or location ids are NotFoundError.
    """
    if product_id in (None, "") or location_id in (None, "") or quantity is None:
        raise ValidationError("productId, locationId, quantity are required")

    qty = parse_positive_number(quantity, "quantity")

    ymd = to_ymd(sale_date if sale_date not in (None, "") else today())
    if not ymd:
        raise ValidationError("Invalid saleDate")

    def _op():
        begin_exclusive()
        employee = get_user(employee_id)
        if not employee:
            raise AuthorizationError("Invalid token")

        product = get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        location = get_location(location_id)
        if not location:
            raise NotFoundError("Location not found")

        unit_weight = product.weight
        sale = SaleRecord(
            employee_id=employee.id,
            employee_name=employee.name,
            location_id=location.id,
            location_name=location.sale_label,
            product_id=str(product.id),
            product_name=product.name,
            product_weight=unit_weight,
            quantity=qty,
            total_weight=compute_total_weight(qty, unit_weight),
            sale_date=ymd,
            created_at=utcnow(),
        )
        db.session.add(sale)
        db.session.commit()
        return sale

    sale = run_with_retry(_op)
    logger.info(
        "Sale %s recorded: employee=%s location=%s product=%s qty=%s weight=%s date=%s",
        sale.id, sale.employee_id, sale.location_id, sale.product_id,
        sale.quantity, sale.total_weight, sale.sale_date,
    )
    return sale


def query_sales(filters: SaleFilter, *, limit: Any = None, mine: bool = False) -> list[SaleRecord]:
    """
    Filtered sales, most recently created first.

    `mine` selects the employee-facing caps instead of the admin ones.
    """
    config = current_app.config
    if mine:
        cap = clamp_limit(limit, config["MY_SALES_DEFAULT_LIMIT"], config["MY_SALES_MAX_LIMIT"])
    else:
        cap = clamp_limit(limit, config["SALES_LIST_DEFAULT_LIMIT"], config["SALES_LIST_MAX_LIMIT"])

    query = apply_filter(db.session.query(SaleRecord), filters)
    return query.order_by(SaleRecord.created_at.desc(), SaleRecord.id.desc()).limit(cap).all()


def employee_summary(employee_id: int, *, date_from: str | None = None, date_to: str | None = None) -> dict:
    """Totals over one employee's own sales in the range."""
    filters = SaleFilter(employee_id=employee_id, date_from=date_from, date_to=date_to)
    row = apply_filter(
        db.session.query(
            func.coalesce(func.sum(SaleRecord.quantity), 0).label("total_quantity"),
            func.coalesce(func.sum(SaleRecord.total_weight), 0).label("total_weight"),
        ),
        filters,
    ).one()

    return {
        "employeeId": employee_id,
        "totalQuantity": float(row.total_quantity or 0),
        "totalWeight": float(row.total_weight or 0),
    }
