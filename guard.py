# Access guard: resolves the bearer token to a caller identity
import logging
from dataclasses import dataclass
from functools import wraps

from flask import g, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from errors import Unauthorized
from extensions import jwt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: int
    is_admin: bool = False


def current_identity():
    """Decode the verified token claims into an Identity."""
    try:
        user_id = int(get_jwt_identity())
    except (TypeError, ValueError):
        raise Unauthorized("Not authorized, invalid token subject")
    return Identity(user_id=user_id, is_admin=bool(get_jwt().get("is_admin", False)))


def auth_required(f):
    """Reject unauthenticated requests and pass `identity` to the view."""
    @wraps(f)
    def decorated(*args, **kwargs):
        verify_jwt_in_request()
        g.identity = current_identity()
        return f(*args, identity=g.identity, **kwargs)
    return decorated


def _unauthorized(message):
    logger.warning("Rejected token on %s %s: %s", request.method, request.path, message)
    return jsonify({"message": message}), 401


@jwt.unauthorized_loader
def missing_token_callback(reason):
    return _unauthorized("Not authorized, no token")


@jwt.invalid_token_loader
def invalid_token_callback(reason):
    return _unauthorized(f"Not authorized, token failed: {reason}")


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return _unauthorized("Not authorized, token expired")
