"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps

from flask import jsonify, session

from ..auth.model import SessionPrincipal
from ..auth.service import principal_from_claims
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotifyGuardError,
    TransactionError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def current_principal() -> SessionPrincipal:
    """Principal stored in the Flask session by the identity provider integration."""

    return principal_from_claims(
        user_id=session.get("user_id"),
        email=session.get("email"),
        permissions=session.get("permissions") or (),
        employee_id=session.get("employee_id"),
        is_superuser=bool(session.get("is_superuser", False)),
        display_name=session.get("name") or "",
    )


def parse_date_arg(value: str | None, field_name: str = "Date") -> date:
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def error_body(message: str, status: int, **extra):
    body = {"ok": False, "error": message}
    body.update(extra)
    return jsonify(body), status


def json_errors(view):
    """Translate domain errors into JSON responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except AuthenticationError as e:
            return error_body(str(e), 401)
        except NotifyGuardError as e:
            violations = [
                {"kind": v.kind.value, "employee_id": v.employee_id, "employee_name": v.employee_name}
                for v in e.violations
            ]
            return error_body(str(e), 400, violations=violations)
        except ValidationError as e:
            return error_body(str(e), 400)
        except AuthorizationError as e:
            return error_body(str(e), 403)
        except TransactionError as e:
            return error_body(str(e), 503)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return error_body("Internal error, please try again", 500)

    return wrapper
