# services/usage-service/src/apps/core/services/exceptions.py
"""
Usage Service Exceptions

Custom exceptions for hour-package usage operations.
"""

from typing import Optional, Dict, Any


class UsageServiceError(Exception):
    """Base exception for usage service errors."""

    def __init__(
        self,
        message: str,
        code: str = "USAGE_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class UserNotFoundError(UsageServiceError):
    """Raised when the target user does not exist."""

    def __init__(self, user_id: str = None, message: str = None):
        super().__init__(
            message=message or f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": str(user_id) if user_id else None}
        )


class UsageValidationError(UsageServiceError):
    """Raised when request data is invalid."""

    def __init__(
        self,
        message: str,
        field: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code="USAGE_VALIDATION_ERROR",
            details=error_details
        )


class UsagePermissionError(UsageServiceError):
    """Raised when the caller may not act on the target user."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message=message, code="USAGE_PERMISSION_DENIED")


class LedgerStorageError(UsageServiceError):
    """Raised when invoices or flights cannot be read."""

    def __init__(self, source: str, message: str = None):
        super().__init__(
            message=message or f"Failed to fetch {source}",
            code="LEDGER_STORAGE_ERROR",
            details={"source": source}
        )
