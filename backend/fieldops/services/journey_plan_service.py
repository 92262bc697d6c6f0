# Overview: Service-layer operations for journey plans; encapsulates business logic and database work.

"""
Journey plans: per-supervisor visit schedules.

A plan maps calendar days to the locations a supervisor must visit.
Submissions are normalized so that logically identical input always
produces identical stored state, and each supervisor owns at most one
plan: resubmitting replaces it in place.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..models import JourneyPlan, User, PERIOD_TYPES, PERIOD_WEEKLY, ROLE_SUPERVISOR
from ..validation import ValidationError, NotFoundError, AuthorizationError, clamp_limit
from ..time_utils import utcnow, today, to_ymd, is_between_inclusive
from .concurrency import begin_exclusive, lock_for_update, run_with_retry
from .reference_service import get_locations_by_ids


logger = logging.getLogger(__name__)


def normalize_days_map(raw: Any) -> dict[str, list[str]]:
    """
    Canonicalize a raw day map.

    Keys that are not parseable dates are dropped. Each value list is
    coerced to strings, blanks are dropped, duplicates removed and the
    result sorted. Keys that canonicalize to the same day are merged.
    """
    if not isinstance(raw, Mapping):
        return {}

    merged: dict[str, set[str]] = {}
    for key, value in raw.items():
        day = to_ymd(key)
        if not day:
            continue

        ids = merged.setdefault(day, set())
        if isinstance(value, (list, tuple)):
            for item in value:
                if item is None or item is False:
                    continue
                ref = str(item).strip()
                if ref:
                    ids.add(ref)

    return {day: sorted(merged[day]) for day in sorted(merged)}


def selected_days_count(days: Mapping[str, list]) -> int:
    """Number of days with at least one assigned location."""
    return sum(1 for ids in days.values() if isinstance(ids, list) and ids)


def _normalize_snapshot(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(key): value for key, value in raw.items()}


def _complete_snapshot(days: dict[str, list[str]], supplied: dict[str, Any]) -> dict[str, Any]:
    """
    Fill snapshot entries for assigned locations the caller did not cover,
    copying the live location's display attributes. Supplied entries win.
    """
    referenced = {ref for ids in days.values() for ref in ids}
    missing = sorted(ref for ref in referenced if not supplied.get(ref))
    snapshot = dict(supplied)
    for ref, location in get_locations_by_ids(missing).items():
        snapshot[ref] = location.to_snapshot()
    return {ref: snapshot[ref] for ref in sorted(snapshot)}


def _resolve_supervisor(supervisor_id: Any) -> User:
    try:
        user_id = int(str(supervisor_id).strip())
    except (TypeError, ValueError):
        raise NotFoundError("Supervisor not found")

    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("Supervisor not found")
    if user.role != ROLE_SUPERVISOR:
        raise ValidationError("User is not a supervisor")
    return user


def upsert_plan(
    *,
    supervisor_id: Any,
    period_type: Any = None,
    start_date: Any,
    end_date: Any,
    days: Any,
    locations_snapshot: Any = None,
    copied_from: Any = None,
) -> JourneyPlan:
    """
    Create or replace the supervisor's plan.

    Validation runs in order and stops at the first failure:
    supervisor id present, period type weekly|monthly, both dates valid,
    end >= start, at least one day with a location, supervisor exists
    with the supervisor role. Nothing is written unless all pass.

    An existing plan keeps its id and created_at; every other field is
    overwritten and updated_at refreshed. copied_from survives when not
    re-supplied.
    """
    if supervisor_id is None or str(supervisor_id).strip() == "":
        raise ValidationError("supervisorId is required")

    period = str(period_type or PERIOD_WEEKLY).strip().lower()
    if period not in PERIOD_TYPES:
        raise ValidationError("periodType must be weekly or monthly")

    start = to_ymd(start_date)
    end = to_ymd(end_date)
    if not start or not end:
        raise ValidationError("Invalid startDate/endDate")
    if end < start:
        raise ValidationError("endDate must be >= startDate")

    days_map = normalize_days_map(days)
    planned = selected_days_count(days_map)
    if planned == 0:
        raise ValidationError("Select at least one location in at least one day")

    supplied_snapshot = _normalize_snapshot(locations_snapshot)
    provenance = str(copied_from).strip() if copied_from not in (None, "") else None

    def _op():
        begin_exclusive()
        supervisor = _resolve_supervisor(supervisor_id)
        snapshot = _complete_snapshot(days_map, supplied_snapshot)
        now = utcnow()

        plan = lock_for_update(
            db.session.query(JourneyPlan).filter_by(supervisor_id=supervisor.id)
        ).first()
        created = plan is None
        if created:
            plan = JourneyPlan(supervisor_id=supervisor.id, created_at=now)
            db.session.add(plan)

        plan.period_type = period
        plan.start_date = start
        plan.end_date = end
        plan.days = days_map
        plan.locations_snapshot = snapshot
        plan.days_count = len(days_map)
        plan.selected_days_count = planned
        if provenance is not None:
            plan.copied_from = provenance
        plan.updated_at = now

        db.session.commit()
        return plan, created

    # IntegrityError: a concurrent first submission for the same supervisor
    # won the insert; retrying re-reads and takes the update path.
    plan, created = run_with_retry(
        _op,
        retry_on=(OperationalError, StaleDataError, IntegrityError),
    )

    logger.info(
        "Journey plan %s %s for supervisor %s (%s..%s, %d/%d days)",
        plan.id,
        "created" if created else "replaced",
        plan.supervisor_id,
        plan.start_date,
        plan.end_date,
        plan.selected_days_count,
        plan.days_count,
    )
    return plan


def _newest_first():
    return (
        JourneyPlan.updated_at.desc(),
        JourneyPlan.id.desc(),
    )


def list_plans(*, supervisor_id: Any = None, limit: Any = None) -> list[JourneyPlan]:
    """Plans, most recently updated first, optionally for one supervisor."""
    config = current_app.config
    cap = clamp_limit(limit, config["PLAN_LIST_DEFAULT_LIMIT"], config["PLAN_LIST_MAX_LIMIT"])

    query = db.session.query(JourneyPlan)
    if supervisor_id is not None and str(supervisor_id).strip() != "":
        try:
            query = query.filter(JourneyPlan.supervisor_id == int(str(supervisor_id).strip()))
        except ValueError:
            return []
    return query.order_by(*_newest_first()).limit(cap).all()


def get_active_plan(supervisor_id: int, day: Any = None) -> dict | None:
    """
    The supervisor's plan covering `day` (default today), with that day's
    locations resolved through the plan's own snapshot.

    The interval test is inclusive at both ends. If several plans match,
    the most recently updated wins. Returns None when nothing covers the day.
    """
    target = to_ymd(day if day not in (None, "") else today())
    if not target:
        raise ValidationError("Invalid date")

    plans = db.session.query(JourneyPlan).filter(
        JourneyPlan.supervisor_id == supervisor_id,
    ).order_by(*_newest_first()).all()

    matching = [p for p in plans if is_between_inclusive(target, p.start_date, p.end_date)]
    if not matching:
        return None

    plan = matching[0]
    location_ids = plan.location_ids_for(target)
    snapshot = plan.locations_snapshot or {}
    locations = [snapshot.get(str(ref)) for ref in location_ids]

    return {
        "plan": plan.to_dict(),
        "date": target,
        "locationIds": location_ids,
        "locations": [loc for loc in locations if loc],
    }


def get_plan_for_viewer(plan_id: int, viewer: User) -> JourneyPlan:
    """
    Admins see any plan; supervisors only their own.

    Non-admin callers get the same AuthorizationError whether the plan is
    missing or belongs to someone else.
    """
    plan = db.session.get(JourneyPlan, plan_id)

    if viewer.is_admin:
        if not plan:
            raise NotFoundError("Plan not found")
        return plan

    if not plan or plan.supervisor_id != viewer.id:
        raise AuthorizationError("Forbidden")
    return plan


def delete_plan(plan_id: int) -> dict:
    def _op():
        begin_exclusive()
        plan = db.session.get(JourneyPlan, plan_id)
        if not plan:
            raise NotFoundError("Plan not found")
        removed = plan.to_dict()
        db.session.delete(plan)
        db.session.commit()
        return removed

    removed = run_with_retry(_op)
    logger.info("Journey plan %s deleted (supervisor %s)", removed["id"], removed["supervisorId"])
    return removed
