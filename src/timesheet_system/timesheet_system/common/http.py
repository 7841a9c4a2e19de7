from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session
from werkzeug.exceptions import HTTPException

from ..core.enums import parse_role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Principal

logger = logging.getLogger(__name__)


def error_response(message: str, status: int, reason=None):
    return jsonify({"error": message, "reason": reason.value if reason else None}), status


def current_principal() -> Principal:
    return Principal(
        id=int(session["user_id"]),
        role=parse_role(session.get("role")),
        organization_id=int(session["organization_id"]),
    )


def api_view(view):
    """Session check plus domain error translation for JSON endpoints."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "organization_id" not in session:
            return error_response("Unauthorized", 401)
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return error_response(str(e), 400)
        except AuthorizationError as e:
            logger.info("denied %s for user %s: %s", view.__name__, session.get("user_id"), e)
            return error_response(str(e), 403, e.reason)
        except NotFoundError as e:
            return error_response(str(e), 404)
        except HTTPException:
            raise
        except Exception:
            logger.exception("unhandled error in %s", view.__name__)
            return error_response("Internal server error", 500)

    return wrapper
