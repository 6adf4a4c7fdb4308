"""API error classes.

Every error carries a machine-readable code, a human-readable message and
an HTTP status, so the Admin Status API can report the failure kind.

Fatal errors (validation, conflict, primary persistence) are raised.
Failures confined to self-healing task reconciliation or best-effort
notifications are never raised; they are logged and reported in results.
"""


class APIError(Exception):
    """Base class for API errors.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Required field missing or malformed (400).

    E.g., hiring a candidate that has no email address.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Accepts custom code for specific conflict types (e.g. "EMAIL_IN_USE").
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class InvalidStateError(APIError):
    """Business rule violation (422).

    Use when the request is well-formed but the entity is in the wrong
    state, e.g. signing a task that is not a signature task.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            code="INVALID_STATE",
            message=message,
            status_code=422,
        )


class PersistenceError(APIError):
    """Write to a primary entity failed (500).

    Raised when the candidate profile itself cannot be saved. Task
    reconciliation write failures are not reported through this class.
    """

    def __init__(self, message: str = "Failed to save changes") -> None:
        super().__init__(
            code="PERSISTENCE_ERROR",
            message=message,
            status_code=500,
        )


class InternalError(APIError):
    """Unexpected server error (500).

    Use for unhandled exceptions. Never expose stack traces to clients.
    """

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
        )
