# Overview: Request decorators for API routes (authentication and role checks).

from functools import wraps
from flask import request, g

from .responses import fail
from .services import session_service


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def require_auth(f):
    """
    Require a valid bearer token.

    Sets g.current_user (the authenticated User) and g.token.
    Returns 401 when the header is missing or the session is invalid,
    expired, or revoked.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return fail("Unauthorized", 401)

        user = session_service.validate_session(token)
        if not user:
            return fail("Invalid token", 401)

        g.current_user = user
        g.token = token
        return f(*args, **kwargs)

    return decorated_function


def require_role(role: str):
    """
    Require the authenticated user to hold exactly `role`.

    Must be stacked under @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not hasattr(g, "current_user"):
                return fail("Unauthorized", 401)
            if g.current_user.role != role:
                return fail("Forbidden", 403)
            return f(*args, **kwargs)

        return decorated_function
    return decorator
