from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidTransition,
    PeriodNotFound,
    StoreUnavailable,
    SubmissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)


def json_error(message: str, status: int, **extra):
    payload = {"error": message}
    payload.update(extra)
    return jsonify(payload), status


def error_response(e: DomainError):
    if isinstance(e, SubmissionDenied):
        return json_error(str(e), 409, denial=e.denial.to_dict())
    if isinstance(e, InvalidTransition):
        return json_error(str(e), 409, current_status=e.current_status.value, action=e.action)
    if isinstance(e, PeriodNotFound):
        return json_error(str(e), 404)
    if isinstance(e, AuthorizationError):
        return json_error(str(e), 403)
    if isinstance(e, ValidationError):
        return json_error(str(e), 400)
    if isinstance(e, StoreUnavailable):
        logger.error("Store unavailable: %s", e)
        return json_error("The timesheet store is unavailable, try again later", 503)
    return json_error(str(e), 400)


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    raw = session.get("role", Role.USER.value)
    try:
        return Role(raw)
    except ValueError as e:
        raise AuthorizationError(f"Unknown role: {raw!r}") from e


def login_required(view):
    """The session is filled by the external login collaborator (user_id, role)."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error("Authentication required", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return json_error("Authentication required", 401)
            if session.get("role") not in {r.value for r in roles}:
                return json_error("Forbidden", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
