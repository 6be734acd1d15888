"""
Custom exception classes for the application
"""
from typing import Optional, Dict, Any


class JobBoardException(Exception):
    """Base exception for the job board"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(JobBoardException):
    """Missing or wrong API key"""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=401, details=details)


class NotFoundError(JobBoardException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ValidationError(JobBoardException):
    """Validation errors"""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class SourceUnavailableError(JobBoardException):
    """External job source could not be fetched"""

    def __init__(self, message: str = "Job source unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=502, details=details)
