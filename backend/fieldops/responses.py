# Overview: JSON envelope shared by every route: {isSuccess, message, result}.

from flask import current_app, jsonify

from .validation import FieldOpsError


def ok(result=None, message: str = "OK", status: int = 200):
    return jsonify({"isSuccess": True, "message": message, "result": result}), status


def fail(message: str, status: int = 400, **extra):
    body = {"isSuccess": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def error_response(exc: FieldOpsError):
    """Render a service error; store failures are logged with their cause."""
    if exc.status_code >= 500:
        current_app.logger.error("Store failure: %s", exc.message, exc_info=exc)
    extra = {"details": exc.details} if exc.details else {}
    return fail(exc.message, exc.status_code, **extra)
