"""Error taxonomy shared by services and the HTTP layer."""


class HearthError(Exception):
    """Base exception for the Hearth backend."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(HearthError):
    """Bad or missing input, reported against a single field."""

    status_code = 400
    public_message = "Validation failed"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.detail = message


class AuthenticationError(HearthError):
    """The caller could not be identified."""

    status_code = 401
    public_message = "Authentication required"


class AuthorizationError(HearthError):
    """The caller is known but not permitted to perform the operation."""

    status_code = 403
    public_message = "Not authorized to access this resource"


class NotFoundError(HearthError):
    """An identifier did not resolve to a record."""

    status_code = 404
    public_message = "Resource not found"


class ConflictError(HearthError):
    """The request collides with existing state."""

    status_code = 400
    public_message = "Request conflicts with existing state"


class InvalidTransitionError(ConflictError):
    """An inquiry transition is not allowed from its current status."""


class DependencyError(HearthError):
    """Storage or another backing service failed."""

    status_code = 500
    public_message = "Internal server error"
