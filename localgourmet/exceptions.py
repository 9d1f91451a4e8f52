"""
Typed failures raised by the storage, aggregation and ownership layers.

Each class carries the HTTP status the REST layer maps it to; the handlers
in main.py never expose storage internals to the client.
"""


class LocalGourmetError(Exception):
    """Base exception for LocalGourmet."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LocalGourmetError):
    """Malformed or inconsistent input."""

    status_code = 400
    default_message = "Invalid request data"


class MissingIdentity(LocalGourmetError):
    """An owner-gated operation was called without an owner token."""

    status_code = 400
    default_message = "User cookie required"


class NotFound(LocalGourmetError):
    """Entity does not exist."""

    status_code = 404
    default_message = "Not found"


class NotFoundOrUnauthorized(LocalGourmetError):
    """
    Entity does not exist OR belongs to another owner token.
    The two cases are deliberately indistinguishable.
    """

    status_code = 404
    default_message = "Not found or unauthorized"


class Conflict(LocalGourmetError):
    """Duplicate restaurant, menu item or review."""

    status_code = 400
    default_message = "Duplicate entry"


class StorageFailure(LocalGourmetError):
    """Backend unavailable or failed mid-operation."""

    status_code = 500
    default_message = "Storage unavailable"
