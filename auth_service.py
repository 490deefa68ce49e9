"""Registration, login and token issuing."""
import logging

from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import Conflict, InvalidOperation, ServerError, Unauthorized
from extensions import bcrypt
from forms import missing_fields, validate_email, validate_password
from models import db, User

logger = logging.getLogger(__name__)


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode('utf-8')


def check_password(user, password):
    return bcrypt.check_password_hash(user.password_hash, password)


def issue_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={"is_admin": bool(user.is_admin)},
    )


def auth_payload(user, token=None):
    """Public profile fields plus a session token."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "isAdmin": bool(user.is_admin),
        "token": token or issue_token(user),
    }


def register_user(username, email, password):
    data = {"username": username, "email": email, "password": password}
    missing = missing_fields(data, ['username', 'email', 'password'])
    if missing:
        raise InvalidOperation(f"Missing required fields: {', '.join(missing)}")
    if not validate_email(email):
        raise InvalidOperation("Invalid email format")
    if not validate_password(password):
        raise InvalidOperation("Password does not meet requirements")

    email = email.strip().lower()
    username = str(username).strip()

    if User.query.filter_by(email=email).first():
        raise Conflict("User already exists")
    if User.query.filter_by(username=username).first():
        raise Conflict("Username already taken")

    user = User(username=username, email=email, password_hash=hash_password(password))
    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("User already exists")
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error registering user %s", email)
        raise ServerError("Server error while registering user", details=str(e))

    logger.info("Registered user %s (%s)", user.id, user.username)
    return auth_payload(user)


def login_user(email, password):
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise InvalidOperation("Email and password required")

    user = User.query.filter_by(email=email.strip().lower()).first()
    if user is None or not check_password(user, password):
        logger.warning("Failed login for %s", email)
        raise Unauthorized("Invalid credentials")

    logger.info("User %s logged in", user.id)
    return auth_payload(user)
