"""
core/errors.py -- Application exception taxonomy.

Every failure a request can hit is one of these classes. Each carries the
HTTP status and the machine-readable error code it renders as; api/main.py
registers a single handler for DirectoryError that builds the standard
ErrorResponse envelope. Stores and auth components raise these directly so
route handlers stay free of status-code bookkeeping.

    DirectoryError            500 internal_error (base)
    ├── ValidationError       400 validation_error
    ├── AuthenticationError   401 unauthorized
    ├── AuthorizationError    403 forbidden
    ├── NotFoundError         404 not_found
    ├── ConflictError         409 conflict
    └── InternalError         500 internal_error

Nothing here is retried server-side. Retry is a client decision.

Layer rule: core/ is the kernel -- no imports from api/, auth/, or directory/.
"""

from __future__ import annotations


class DirectoryError(Exception):
    """Base class for errors that map onto an HTTP error response.

    message is safe to return to the client. Anything sensitive belongs in
    the log line written by the raiser, never in the message.
    """

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred.", *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationError(DirectoryError):
    status_code = 400
    code = "validation_error"


class AuthenticationError(DirectoryError):
    """Missing or malformed header, unknown/expired/revoked session, bad
    signature, wrong algorithm, or bad credentials."""

    status_code = 401
    code = "unauthorized"


class AuthorizationError(DirectoryError):
    """Role not in the allowed set, or caller does not own the resource."""

    status_code = 403
    code = "forbidden"


class NotFoundError(DirectoryError):
    status_code = 404
    code = "not_found"


class ConflictError(DirectoryError):
    status_code = 409
    code = "conflict"


class InternalError(DirectoryError):
    """Hashing, signing, or persistence failure."""

    status_code = 500
    code = "internal_error"
