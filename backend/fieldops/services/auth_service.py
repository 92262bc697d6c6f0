# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication and user administration.

Employees sign up themselves and wait for admin approval; supervisors are
created by admins; one admin is seeded at bootstrap. Passwords are hashed
with bcrypt (rounds from BCRYPT_ROUNDS).
"""

import logging
import re

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User, City, Location, Product, ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_EMPLOYEE
from ..validation import ValidationError, ConflictError, NotFoundError, AuthenticationError, AuthorizationError
from .concurrency import begin_exclusive, run_with_retry


logger = logging.getLogger(__name__)

APPROVAL_PENDING_MESSAGE = "Admin approval is needed asked your manager to approve your account"


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>_\-+=?/\\\[\]~`;]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """Validate strength, then hash with bcrypt."""
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() is timing-safe. Malformed hashes verify as False.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def _normalize_email(email) -> str:
    return str(email or "").strip().lower()


def get_user(user_id) -> User | None:
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def get_user_by_email(email) -> User | None:
    return db.session.query(User).filter_by(email=_normalize_email(email)).first()


def authenticate(email, password, *, role: str | None = None) -> User:
    """
    Check credentials and return the user.

    `role` restricts the login to one role (the admin panel alias).
    Unapproved employees are refused.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = get_user_by_email(email)
    if not user:
        raise AuthenticationError("Invalid email or password")

    if role and user.role != role:
        raise AuthorizationError("Access denied")

    if not verify_password(str(password), user.password_hash):
        raise AuthenticationError("Invalid email or password")

    if user.role == ROLE_EMPLOYEE and not user.is_approved:
        raise AuthorizationError(APPROVAL_PENDING_MESSAGE)

    return user


def signup_employee(payload: dict) -> User:
    """Self sign-up; creates an unapproved employee."""
    fields = ["name", "email", "city", "employeeCnic", "location", "password", "confirmPassword"]
    if any(not payload.get(f) for f in fields):
        raise ValidationError("All fields are required")
    if payload["password"] != payload["confirmPassword"]:
        raise ValidationError("Passwords do not match")

    password_hash = hash_password(str(payload["password"]))
    email = _normalize_email(payload["email"])

    def _op():
        begin_exclusive()
        if get_user_by_email(email):
            raise ConflictError("Email already exists")

        user = User(
            role=ROLE_EMPLOYEE,
            name=str(payload["name"]).strip(),
            email=email,
            city=str(payload["city"]).strip(),
            employee_cnic=str(payload["employeeCnic"]).strip(),
            location=str(payload["location"]).strip(),
            is_approved=False,
            password_hash=password_hash,
        )
        db.session.add(user)
        db.session.commit()
        return user

    user = run_with_retry(_op)
    logger.info("Employee %s signed up (pending approval)", user.id)
    return user


def create_supervisor(payload: dict) -> User:
    """Admin-created supervisor; approved from the start."""
    fields = ["name", "email", "cnicNumber", "city", "password", "confirmPassword"]
    if any(not payload.get(f) for f in fields):
        raise ValidationError("All fields are required")
    if payload["password"] != payload["confirmPassword"]:
        raise ValidationError("Passwords do not match")

    password_hash = hash_password(str(payload["password"]))
    email = _normalize_email(payload["email"])

    def _op():
        begin_exclusive()
        if get_user_by_email(email):
            raise ConflictError("Email already exists")

        user = User(
            role=ROLE_SUPERVISOR,
            name=str(payload["name"]).strip(),
            email=email,
            cnic_number=str(payload["cnicNumber"]).strip(),
            city=str(payload["city"]).strip(),
            is_approved=True,
            password_hash=password_hash,
        )
        db.session.add(user)
        db.session.commit()
        return user

    user = run_with_retry(_op)
    logger.info("Supervisor %s created", user.id)
    return user


def approve_user(user_id: int) -> User:
    """Approve a pending employee. Only employees require approval."""
    def _op():
        begin_exclusive()
        user = get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role != ROLE_EMPLOYEE:
            raise ValidationError("Only employees require approval")

        user.is_approved = True
        db.session.commit()
        return user

    user = run_with_retry(_op)
    logger.info("Employee %s approved", user.id)
    return user


def list_users(status: str | None = None) -> list[User]:
    query = db.session.query(User)
    if status == "pending":
        query = query.filter(User.role == ROLE_EMPLOYEE, User.is_approved.is_(False))
    return query.order_by(User.id.asc()).all()


def dashboard_stats() -> dict:
    def _count_role(role: str) -> int:
        return db.session.query(User).filter_by(role=role).count()

    pending = db.session.query(User).filter(
        User.role == ROLE_EMPLOYEE,
        User.is_approved.is_(False),
    ).count()

    return {
        "pending": pending,
        "employees": _count_role(ROLE_EMPLOYEE),
        "supervisors": _count_role(ROLE_SUPERVISOR),
        "cities": db.session.query(City).count(),
        "locations": db.session.query(Location).count(),
        "products": db.session.query(Product).count(),
    }


def ensure_seed_admin() -> User | None:
    """
    Create the configured admin when no admin exists yet.

    Returns the new admin, or None when one already existed.
    """
    if db.session.query(User).filter_by(role=ROLE_ADMIN).first():
        return None

    config = current_app.config
    password_hash = hash_password(config["ADMIN_PASSWORD"])

    def _op():
        begin_exclusive()
        if db.session.query(User).filter_by(role=ROLE_ADMIN).first():
            db.session.rollback()
            return None

        admin = User(
            role=ROLE_ADMIN,
            name=config["ADMIN_NAME"],
            email=_normalize_email(config["ADMIN_EMAIL"]),
            password_hash=password_hash,
            is_approved=True,
        )
        db.session.add(admin)
        db.session.commit()
        return admin

    admin = run_with_retry(_op)
    if admin:
        logger.info("Seeded admin user %s", admin.email)
    return admin
