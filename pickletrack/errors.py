"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when input fails validation, e.g. a negative payment amount."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class NotFoundError(AppError):
    """Raised when a tournament, division or league is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class StatusTransitionError(AppError):
    """Raised when a manual status change is not allowed."""

    def __init__(self, message="Status transition not allowed."):
        """Initialize the error."""
        super().__init__(message, 409)
