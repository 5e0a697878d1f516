"""
Failure classification for storefront operations.

Every failure the client can observe falls into one of these kinds:
- Validation: rejected locally, before any request is issued
- Conflict: a local precheck found an existing entry
- Not authenticated: no user in the session, nothing can be loaded
- Unauthorized: the server answered 401/403 (session expired or wrong role)
- Operation failed: any other non-success response or a transport error
- Invalid payload: the server answered, but not with the records we expect

The API client raises these. Sync controllers catch them at their operation
boundary and turn them into notifications, redirects and rollback.
No failure is fatal to the process.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Caught before the network
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_AUTHENTICATED = "not_authenticated"

    # Reported by the server
    UNAUTHORIZED = "unauthorized"
    OPERATION_FAILED = "operation_failed"

    # Server answered with something we cannot parse
    INVALID_PAYLOAD = "invalid_payload"


AUTH_STATUS_CODES = frozenset({401, 403})


class StoreError(Exception):
    """
    Base class for known, explainable storefront failures.

    Subclass this for errors where the client knows what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)


class ValidationFailedError(StoreError):
    """Raised when user input fails local validation.

    Carries per-field messages so they can be shown inline.
    """

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(
            kind=FailureKind.VALIDATION,
            message="Please correct the highlighted fields.",
            detail=f"Invalid fields: {fields}",
        )


class ConflictError(StoreError):
    """Raised when a duplicate-key precheck finds an existing entry."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.CONFLICT, message=message, detail=detail)


class NotAuthenticatedError(StoreError):
    """Raised when an operation needs a logged-in user and there is none."""

    def __init__(self, message: str = "You need to log in first."):
        super().__init__(kind=FailureKind.NOT_AUTHENTICATED, message=message)


class AuthorizationError(StoreError):
    """Raised on a 401/403 answer. Treated as a session-expiry signal."""

    def __init__(self, status_code: int, detail: str | None = None):
        super().__init__(
            kind=FailureKind.UNAUTHORIZED,
            message="Authentication required",
            detail=detail,
            status_code=status_code,
        )


class OperationFailedError(StoreError):
    """Raised on a non-success answer or when the request never completed."""

    def __init__(
        self,
        message: str = "Operation failed",
        detail: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            kind=FailureKind.OPERATION_FAILED,
            message=message,
            detail=detail,
            status_code=status_code,
        )


class PayloadError(StoreError):
    """Raised when a response body does not parse into the expected records."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.INVALID_PAYLOAD, message=message, detail=detail)
