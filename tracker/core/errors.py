"""Error hierarchy for the tracker.

Every domain error derives from :class:`TrackerError` and carries the HTTP
status it maps to, so the request boundary can turn any of them into a
``{"error": ...}`` JSON body with a single handler::

    try:
        ...
    except TrackerError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
"""


class TrackerError(Exception):
    """Base exception for all tracker errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(TrackerError):
    """Missing or malformed fields, weak password, malformed progress document."""

    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(TrackerError):
    """Login failed. Never says whether the account or the password was wrong."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthorized(TrackerError):
    """Bearer token missing, malformed, expired or not for this account."""

    status_code = 401
    default_message = "Unauthorized"


class NotFound(TrackerError):
    status_code = 404
    default_message = "Not found"


class Conflict(TrackerError):
    """Username or email already registered."""

    status_code = 409
    default_message = "Already exists"
