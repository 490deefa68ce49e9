# Input validation helpers shared by the services
import re

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 3


def validate_email(email):
    return isinstance(email, str) and EMAIL_PATTERN.match(email.strip()) is not None


def validate_password(password):
    return isinstance(password, str) and len(password.strip()) >= MIN_PASSWORD_LENGTH


def missing_fields(data, fields):
    """Return the names in `fields` that are absent or blank in `data`."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing
