"""
Domain error taxonomy.

Services raise these; ``app.main`` renders them as ``{"detail": ...}`` with the
matching status code.
"""


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    """Malformed input, rejected before any write."""

    status_code = 400
    default_detail = "Validation failed"


class NotFoundError(AppError):
    """Referenced row is absent or not owned by the caller."""

    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    """Unique value already taken (e-mail, CPF)."""

    status_code = 409
    default_detail = "Already exists"


class AuthError(AppError):
    """Token missing, invalid or expired. Always reported the same way."""

    status_code = 401
    default_detail = "Invalid or missing credentials"

    def __init__(self, detail: str = None):
        # The cause is never exposed to the caller
        super().__init__(self.default_detail)


class StorageError(AppError):
    """Backend failure while reading or writing."""

    status_code = 500
    default_detail = "Database error"
