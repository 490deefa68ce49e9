"""Error types raised by the services and rendered as JSON by the app."""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        body = {"message": self.message}
        if self.details:
            body["error"] = self.details
        return body


class Conflict(ApiError):
    """Uniqueness or duplicate violation."""
    status_code = 400


class InvalidOperation(ApiError):
    """Self-follow, malformed request and similar."""
    status_code = 400


class Unauthorized(ApiError):
    status_code = 401


class Forbidden(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


class RejectedFileType(ApiError):
    status_code = 400


class FileTooLarge(ApiError):
    status_code = 413


class ServerError(ApiError):
    """Unexpected store failure; `details` carries the underlying message."""
    status_code = 500
