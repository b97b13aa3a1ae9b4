# pastebox/errors.py
# Application error hierarchy
# Each error carries the code and status the HTTP layer renders

from datetime import datetime


class AppError(Exception):
    """Base application error with structured response."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class StoreUnavailable(AppError):
    """Backing store call failed, timed out, or is not configured.

    The message is always generic; the underlying cause is chained
    with ``raise ... from`` and only ever logged.
    """
    def __init__(self, message: str = "Storage is temporarily unavailable", details: dict = None):
        super().__init__(
            message=message,
            error_code="STORE_UNAVAILABLE",
            status_code=503,
            details=details
        )


class OperationTimeout(StoreUnavailable):
    """Caller deadline elapsed before the operation finished."""
    def __init__(self, operation: str, timeout: float):
        super().__init__(
            message=f"Operation '{operation}' did not finish within {timeout:g}s",
            details={"operation": operation, "timeout": timeout}
        )
        self.error_code = "OPERATION_TIMEOUT"
        self.status_code = 504


class ValidationError(AppError):
    """Request validation failed."""
    def __init__(self, message: str = "Validation failed", details: dict = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class NotFoundError(AppError):
    """Paste absent (never existed or already expired)."""
    def __init__(self, message: str = "Paste not found", details: dict = None):
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details
        )


class ForbiddenError(AppError):
    """Caller is not allowed to see or change the paste."""
    def __init__(self, message: str = "Forbidden", details: dict = None):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            status_code=403,
            details=details
        )


class UnauthorizedError(AppError):
    """No authenticated user id was presented."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            status_code=401,
        )


class RateLimitError(AppError):
    """Paste creation quota exceeded."""
    def __init__(self, remaining: int, reset_at: datetime, retry_after: int):
        super().__init__(
            message=f"Rate limit exceeded. Retry after {retry_after} seconds.",
            error_code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            details={
                "remaining": remaining,
                "reset_at": reset_at.isoformat(),
                "retry_after": retry_after,
            }
        )
        self.remaining = remaining
        self.reset_at = reset_at
        self.retry_after = retry_after
