# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

from __future__ import annotations

import calendar
from datetime import date, timedelta
from enum import Enum

from sqlalchemy import func

from ..extensions import db
from ..models import SaleRecord
from .sales_service import SaleFilter, apply_filter
from ..time_utils import today as local_today


class GroupKey(str, Enum):
    """What a rollup groups sales by."""
    EMPLOYEE = "employee"
    LOCATION = "location"

    @property
    def id_column(self):
        return SaleRecord.employee_id if self is GroupKey.EMPLOYEE else SaleRecord.location_id

    @property
    def name_column(self):
        return SaleRecord.employee_name if self is GroupKey.EMPLOYEE else SaleRecord.location_name

    @property
    def id_field(self) -> str:
        return "employeeId" if self is GroupKey.EMPLOYEE else "locationId"

    @property
    def name_field(self) -> str:
        return "employeeName" if self is GroupKey.EMPLOYEE else "locationName"


def rollup(group_key: GroupKey, *, date_from: str | None = None, date_to: str | None = None) -> list[dict]:
    """
    Per-group totals over sales whose sale_date is in [date_from, date_to].

    Ordered by totalWeight descending. Equal weights keep first-encounter
    order: the group whose earliest sale was recorded first comes first.
    Every member of a group shares the id, so any member's name is
    representative.
    """
    key_col = group_key.id_column
    total_weight = func.coalesce(func.sum(SaleRecord.total_weight), 0)
    first_seen = func.min(SaleRecord.id)

    query = db.session.query(
        key_col.label("key"),
        func.max(group_key.name_column).label("name"),
        func.coalesce(func.sum(SaleRecord.quantity), 0).label("total_quantity"),
        total_weight.label("total_weight"),
        first_seen.label("first_seen"),
    )
    query = apply_filter(query, SaleFilter(date_from=date_from, date_to=date_to))

    rows = query.group_by(key_col).order_by(total_weight.desc(), first_seen.asc()).all()
    return [
        {
            group_key.id_field: row.key,
            group_key.name_field: row.name,
            "totalQuantity": float(row.total_quantity or 0),
            "totalWeight": float(row.total_weight or 0),
        }
        for row in rows
    ]


def top_group(group_key: GroupKey, date_from: str, date_to: str) -> dict | None:
    rows = rollup(group_key, date_from=date_from, date_to=date_to)
    return rows[0] if rows else None


def week_bounds(day: date) -> tuple[date, date]:
    """Monday..Sunday of the week containing `day`."""
    weekday = day.isoweekday()  # Monday=1 .. Sunday=7
    if weekday == 7:
        monday = day - timedelta(days=6)
    else:
        monday = day - timedelta(days=weekday - 1)
    return monday, monday + timedelta(days=6)


def month_bounds(day: date) -> tuple[date, date]:
    """First..last day of the month containing `day`."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def highlights(today: date | None = None) -> dict:
    """
    Top employee and top mart by totalWeight for this week and this month.

    A window without sales yields None for its slot.
    """
    day = today or local_today()
    week_start, week_end = week_bounds(day)
    month_start, month_end = month_bounds(day)

    week_from, week_to = week_start.isoformat(), week_end.isoformat()
    month_from, month_to = month_start.isoformat(), month_end.isoformat()

    return {
        "today": day.isoformat(),
        "weekFrom": week_from,
        "weekTo": week_to,
        "monthFrom": month_from,
        "monthTo": month_to,
        "topEmployeeThisWeek": top_group(GroupKey.EMPLOYEE, week_from, week_to),
        "topEmployeeThisMonth": top_group(GroupKey.EMPLOYEE, month_from, month_to),
        "topMartThisWeek": top_group(GroupKey.LOCATION, week_from, week_to),
        "topMartThisMonth": top_group(GroupKey.LOCATION, month_from, month_to),
    }
