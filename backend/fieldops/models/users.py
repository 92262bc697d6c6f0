from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


ROLE_ADMIN = "admin"
ROLE_SUPERVISOR = "supervisor"
ROLE_EMPLOYEE = "employee"
ROLES = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_EMPLOYEE)


class User(db.Model):
    """
    Admins, supervisors and field employees.

    Employees sign themselves up and stay unapproved until an admin
    approves them; supervisors are created by admins already approved.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_role", "role"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    role = db.Column(db.String(16), nullable=False, default=ROLE_EMPLOYEE)
    name = db.Column(db.String(255), nullable=False)

    # Stored lower-cased
    email = db.Column(db.String(255), nullable=False, unique=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    city = db.Column(db.String(120), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    employee_cnic = db.Column(db.String(32), nullable=True)
    cnic_number = db.Column(db.String(32), nullable=True)

    is_approved = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "name": self.name,
            "email": self.email,
            "city": self.city,
            "location": self.location,
            "employeeCnic": self.employee_cnic,
            "cnicNumber": self.cnic_number,
            "isApproved": self.is_approved,
            "createdAt": to_utc_z(self.created_at),
        }


class SessionToken(db.Model):
    """
    Bearer-token sessions. Only the SHA-256 hash of the token is stored.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token_hash = db.Column(db.String(64), nullable=False, unique=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    revoked_reason = db.Column(db.String(120), nullable=True)

    user = db.relationship("User", backref=db.backref("sessions", lazy=True, cascade="all, delete-orphan"))
