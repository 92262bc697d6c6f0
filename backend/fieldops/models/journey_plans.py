from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


PERIOD_WEEKLY = "weekly"
PERIOD_MONTHLY = "monthly"
PERIOD_TYPES = (PERIOD_WEEKLY, PERIOD_MONTHLY)


class JourneyPlan(db.Model):
    """
    Visit schedule for one supervisor.

    One live plan per supervisor: resubmitting replaces the existing row
    in place (same id). `days` maps canonical dates to sorted location
    references; `locations_snapshot` freezes the display attributes of
    those locations as they were at save time.
    """
    __tablename__ = "journey_plans"
    __table_args__ = (
        db.UniqueConstraint("supervisor_id", name="uq_journey_plans_supervisor"),
        db.Index("ix_journey_plans_updated_at", "updated_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    supervisor_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Descriptive only; not checked against the date span
    period_type = db.Column(db.String(16), nullable=False, default=PERIOD_WEEKLY)

    # Canonical YYYY-MM-DD strings; compared as strings
    start_date = db.Column(db.String(10), nullable=False)
    end_date = db.Column(db.String(10), nullable=False)

    days = db.Column(db.JSON, nullable=False, default=dict)
    locations_snapshot = db.Column(db.JSON, nullable=False, default=dict)

    days_count = db.Column(db.Integer, nullable=False, default=0)
    selected_days_count = db.Column(db.Integer, nullable=False, default=0)

    copied_from = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False)

    supervisor = db.relationship("User", backref=db.backref("journey_plans", lazy=True))

    def location_ids_for(self, day: str) -> list[str]:
        ids = (self.days or {}).get(day)
        return list(ids) if isinstance(ids, list) else []

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "supervisorId": self.supervisor_id,
            "periodType": self.period_type,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "days": self.days or {},
            "locationsSnapshot": self.locations_snapshot or {},
            "daysCount": self.days_count,
            "selectedDaysCount": self.selected_days_count,
            "copiedFrom": self.copied_from,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
